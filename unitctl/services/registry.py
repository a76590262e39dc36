"""
Shared, lock protected unit snapshots.

A registry holds the units of one scope as an immutable tuple. Readers take
the read lock only long enough to look at the current tuple; writers swap
the tuple, or one unit in it, under the write lock. No lock is ever held
across an `await`.

Every write bumps a generation counter. A refresh only installs its
enumeration if the generation is unchanged since it started; otherwise a
newer refresh or a unit operation landed in between and the enumeration is
dropped.
"""
import logging
from collections.abc import Iterator
from typing import Any, Final

from unitctl.errors import UnitNotFoundError
from unitctl.services.catalog import UnitCatalog
from unitctl.services.control import ControlClient
from unitctl.settings import Settings
from unitctl.systemd.models import Unit
from unitctl.systemd.types import RegistryState, Scope, UnitState, UnitType
from unitctl.utils import ReadWriteLock

MUTABLE_FIELDS: Final[frozenset[str]] = frozenset({'state', 'active'})


class SharedRegistry:
    """The unit snapshot of one scope, shared between readers and writers.
    """

    def __init__(
        self,
        scope: Scope,
        catalog: UnitCatalog,
        control: ControlClient,
    ) -> None:
        """Initialize an empty registry.

        Args:
            scope: Scope whose units this registry holds
            catalog: Enumerates the units on refresh
            control: Performs unit operations
        """
        self._logger = logging.getLogger(__name__)

        self._scope = scope
        self._catalog = catalog
        self._control = control
        self._lock = ReadWriteLock()
        self._units: tuple[Unit, ...] = ()
        self._state = RegistryState.UNINITIALIZED
        self._generation = 0

    @property
    def scope(self) -> Scope:
        return self._scope

    @property
    def state(self) -> RegistryState:
        with self._lock.read():
            return self._state

    async def refresh(self) -> tuple[Unit, ...]:
        """Replace the snapshot with a fresh enumeration.

        The previous snapshot and state are kept if enumeration fails. If
        another refresh or a unit operation finished while this one was
        enumerating, the result is discarded and the current snapshot is
        returned.

        Raises:
            TransportError: If enumeration fails
            ParseError: If a reply cannot be decoded
        """
        with self._lock.read():
            generation = self._generation

        units = await self._catalog.enumerate(self._scope)

        with self._lock.write():
            stale = self._generation != generation
            if stale:
                current = self._units
            else:
                self._units = units
                self._generation += 1
                self._state = RegistryState.POPULATED

        if stale:
            self._logger.info(
                'Discarded a stale enumeration of the %s registry',
                self._scope,
            )
            return current

        self._logger.info(
            'Loaded %d units into the %s registry',
            len(units),
            self._scope,
        )
        return units

    def units(self) -> tuple[Unit, ...]:
        """The current snapshot, in catalog order.
        """
        with self._lock.read():
            return self._units

    def __iter__(self) -> Iterator[Unit]:
        return iter(self.units())

    def __len__(self) -> int:
        return len(self.units())

    def get(self, name: str) -> Unit:
        """Look a unit up by name.

        Raises:
            UnitNotFoundError: If no unit has that name
        """
        with self._lock.read():
            return self._units[self._position(name)]

    def at(self, index: int) -> Unit:
        """Look a unit up by its position in the current snapshot.

        Raises:
            UnitNotFoundError: If the index is out of range
        """
        with self._lock.read():
            if not 0 <= index < len(self._units):
                raise UnitNotFoundError(index)
            return self._units[index]

    def index_of(self, name: str) -> int:
        """Position of a unit in the current snapshot.

        Raises:
            UnitNotFoundError: If no unit has that name
        """
        with self._lock.read():
            return self._position(name)

    def togglable(self, unit_type: UnitType) -> tuple[Unit, ...]:
        """Units of `unit_type` a user may enable or disable.
        """
        units = self.units()
        return self._catalog.togglable(units, unit_type)

    def replace(self, name: str, **fields: Any) -> Unit:
        """Swap one unit for a copy with updated `state` and/or `active`.

        Raises:
            UnitNotFoundError: If no unit has that name
            ValueError: If a field other than `state` or `active` is given
        """
        unknown = set(fields) - MUTABLE_FIELDS
        if unknown:
            raise ValueError(
                f'Cannot change unit fields: {", ".join(sorted(unknown))}'
            )

        with self._lock.write():
            position = self._position(name)
            unit = self._units[position].model_copy(update=fields)
            self._units = (
                *self._units[:position],
                unit,
                *self._units[position + 1:],
            )
            self._generation += 1
            self._state = RegistryState.PENDING_MUTATION

        self._logger.debug('Replaced %s with %s', name, fields)
        return unit

    async def enable(self, name: str) -> bool:
        """Enable a unit and mark it enabled.

        Returns:
            True if the unit was already enabled
        """
        already = await self._control.enable(self.get(name))
        self._apply(name, state=UnitState.ENABLED)
        return already

    async def disable(self, name: str) -> bool:
        """Disable a unit and mark it disabled.

        Returns:
            True if the unit was already disabled
        """
        already = await self._control.disable(self.get(name))
        self._apply(name, state=UnitState.DISABLED)
        return already

    async def start(self, name: str) -> str:
        """Start a unit and mark it active.
        """
        job = await self._control.start(self.get(name))
        self._apply(name, active=True)
        return job

    async def stop(self, name: str) -> str:
        """Stop a unit and mark it inactive.
        """
        job = await self._control.stop(self.get(name))
        self._apply(name, active=False)
        return job

    def _apply(self, name: str, **fields: Any) -> None:
        # A refresh may have dropped the unit while the call was in flight.
        try:
            self.replace(name, **fields)
        except UnitNotFoundError:
            self._logger.warning(
                '%s disappeared from the %s registry during an update',
                name,
                self._scope,
            )

    def _position(self, name: str) -> int:
        # Caller holds the lock.
        for position, unit in enumerate(self._units):
            if unit.name == name:
                return position
        raise UnitNotFoundError(name)


class RegistryPair:
    """The independent system and user registries.
    """

    def __init__(self, system: SharedRegistry, user: SharedRegistry) -> None:
        self.system = system
        self.user = user

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        catalog: UnitCatalog | None = None,
        control: ControlClient | None = None,
    ) -> 'RegistryPair':
        """Build both registries on a shared catalog and control client.
        """
        settings = settings or Settings()
        catalog = catalog or UnitCatalog(settings)
        control = control or ControlClient(settings)

        return cls(
            system=SharedRegistry(Scope.SYSTEM, catalog, control),
            user=SharedRegistry(Scope.USER, catalog, control),
        )

    def __getitem__(self, scope: Scope) -> SharedRegistry:
        if Scope(scope) is Scope.SYSTEM:
            return self.system
        return self.user

    def __iter__(self) -> Iterator[SharedRegistry]:
        yield self.system
        yield self.user
