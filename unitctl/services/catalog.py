import logging
from collections.abc import Iterable, MutableMapping

from unitctl.dbus import SystemdManager
from unitctl.settings import Settings, TogglePolicy
from unitctl.systemctl import ProcessRunner, Systemctl
from unitctl.systemd.models import Unit, UnitFileEntry
from unitctl.systemd.parsers import (
    parse_is_active,
    parse_list_unit_files,
    parse_unit_files_reply,
)
from unitctl.systemd.types import EnumerationSource, Scope, UnitType


def filter_togglable(
    units: Iterable[Unit],
    unit_type: UnitType,
    policy: TogglePolicy | None = None,
) -> tuple[Unit, ...]:
    """Select the units a user may enable or disable.

    Keeps units of `unit_type` whose state is enabled or disabled, drops
    templates and anything the policy excludes by path. Order is preserved.
    """
    if policy is None:
        policy = TogglePolicy()

    return tuple(
        unit for unit in units
        if unit.type is unit_type
        and unit.state.is_togglable
        and not unit.is_template
        and not policy.excludes(unit.type, unit.path)
    )


class UnitCatalog:
    """Enumerates and classifies the unit files of a systemd instance.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        managers: MutableMapping[Scope, SystemdManager] | None = None,
        systemctl: Systemctl | None = None,
    ) -> None:
        """Initialize the catalog.

        Args:
            settings: Runtime configuration
            managers: D-Bus managers per scope, created on demand if missing
            systemctl: Command line transport
        """
        self._logger = logging.getLogger(__name__)

        self._settings = settings or Settings()
        self._managers = {} if managers is None else managers
        self._systemctl = systemctl or Systemctl(
            ProcessRunner(self._settings.process_timeout),
        )

    def _manager(self, scope: Scope) -> SystemdManager:
        if scope not in self._managers:
            self._managers[scope] = SystemdManager.for_scope(
                scope,
                self._settings.dbus_timeout,
            )
        return self._managers[scope]

    async def _list_entries(self, scope: Scope) -> list[UnitFileEntry]:
        if self._settings.enumeration_source is EnumerationSource.SYSTEMCTL:
            output = await self._systemctl.list_unit_files(scope)
            return parse_list_unit_files(output)

        reply = await self._manager(scope).list_unit_files()
        return parse_unit_files_reply(reply)

    async def enumerate(self, scope: Scope) -> tuple[Unit, ...]:
        """List every unit file of `scope` with its runtime status.

        Returns:
            Units sorted by case-folded name, then name, then path

        Raises:
            TransportError: If listing or the active pass fails
            ParseError: If a reply or an entry cannot be decoded
        """
        entries = await self._list_entries(scope)

        units: list[Unit] = []
        seen: set[str] = set()
        for entry in entries:
            unit = Unit.from_entry(entry, scope)
            if unit.name in seen:
                self._logger.debug(
                    'Skipping duplicate unit file %s',
                    entry.path,
                )
                continue
            seen.add(unit.name)
            units.append(unit)

        if units:
            output = await self._systemctl.is_active(
                [unit.name for unit in units],
                scope,
            )
            flags = parse_is_active(output, len(units))
            units = [
                unit.model_copy(update={'active': active})
                for unit, active in zip(units, flags, strict=True)
            ]

        self._logger.debug('Enumerated %d %s units', len(units), scope)
        return tuple(sorted(units, key=lambda u: u.sort_key))

    def togglable(
        self,
        units: Iterable[Unit],
        unit_type: UnitType,
        policy: TogglePolicy | None = None,
    ) -> tuple[Unit, ...]:
        """`filter_togglable` with the configured policy as default.
        """
        return filter_togglable(
            units,
            unit_type,
            self._settings.toggle_policy if policy is None else policy,
        )
