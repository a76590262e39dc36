import logging
from collections.abc import Callable, MutableMapping

from unitctl.dbus import SystemdManager
from unitctl.errors import TransportError, UnitctlError
from unitctl.settings import Settings
from unitctl.systemctl import ProcessRunner, Systemctl
from unitctl.systemd.models import Unit, UnitFile
from unitctl.systemd.parsers import (
    is_already_disabled,
    is_already_enabled,
    parse_dependencies,
    parse_properties,
    parse_status_active,
    parse_unit_cat,
)
from unitctl.systemd.types import Scope

PropertyVisitor = Callable[[int, str, str], None]


class ControlClient:
    """Issues state changing and state querying operations for single units.

    Mutations go over D-Bus and raise on failure. Read paths run the command
    line tools and degrade to a placeholder, logging a warning, when the
    command fails.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        managers: MutableMapping[Scope, SystemdManager] | None = None,
        systemctl: Systemctl | None = None,
    ) -> None:
        """Initialize the control client.

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

    async def enable(self, unit: Unit) -> bool:
        """Enable a unit file.

        Returns:
            True if the unit was already enabled

        Raises:
            TransportError: If the call fails
            MalformedReplyError: If the reply has an unexpected shape
        """
        reply = await self._manager(unit.scope).enable_unit_files(
            [unit.name],
            runtime=False,
            force=True,
        )
        already = is_already_enabled(reply)
        self._logger.info(
            'Enabled %s%s',
            unit.name,
            ' (already enabled)' if already else '',
        )
        return already

    async def disable(self, unit: Unit) -> bool:
        """Disable a unit file.

        Returns:
            True if the unit was already disabled

        Raises:
            TransportError: If the call fails
            MalformedReplyError: If the reply has an unexpected shape
        """
        changes = await self._manager(unit.scope).disable_unit_files(
            [unit.name],
            runtime=False,
        )
        already = is_already_disabled(changes)
        self._logger.info(
            'Disabled %s%s',
            unit.name,
            ' (already disabled)' if already else '',
        )
        return already

    async def start(self, unit: Unit) -> str:
        """Queue a start job for a unit.

        Returns:
            The job object path

        Raises:
            TransportError: If the call fails
        """
        job = await self._manager(unit.scope).start_unit(
            unit.name,
            self._settings.job_mode,
        )
        self._logger.info('Started %s (job %s)', unit.name, job)
        return job

    async def stop(self, unit: Unit) -> str:
        """Queue a stop job for a unit.

        Returns:
            The job object path

        Raises:
            TransportError: If the call fails
        """
        job = await self._manager(unit.scope).stop_unit(
            unit.name,
            self._settings.job_mode,
        )
        self._logger.info('Stopped %s (job %s)', unit.name, job)
        return job

    async def journal(self, unit: Unit) -> str:
        """Journal of the current boot for a unit, newest entries first.

        Returns the configured placeholder if the journal cannot be read.
        """
        try:
            return await self._systemctl.journal(unit.name, unit.scope)
        except TransportError as e:
            self._logger.warning(
                'Could not read journal of %s: %s',
                unit.name,
                e,
            )
            return self._settings.journal_placeholder

    async def dependencies(self, unit: Unit) -> str:
        """Dependencies of a unit, one per line.

        Returns the unit name if they cannot be listed.
        """
        try:
            output = await self._systemctl.list_dependencies(
                unit.name,
                unit.scope,
            )
        except TransportError as e:
            self._logger.warning(
                'Could not list dependencies of %s: %s',
                unit.name,
                e,
            )
            return unit.name

        return parse_dependencies(output)

    async def properties(self, unit: Unit, visit: PropertyVisitor) -> bool:
        """Feed the non-empty properties of a unit to `visit`, sorted by key.

        Args:
            unit: Unit to inspect
            visit: Called as `visit(index, key, value)` with a zero-based
                index

        Returns:
            False if the properties could not be read
        """
        try:
            output = await self._systemctl.show(unit.name, unit.scope)
        except TransportError as e:
            self._logger.warning(
                'Could not read properties of %s: %s',
                unit.name,
                e,
            )
            return False

        for index, prop in enumerate(parse_properties(output)):
            visit(index, prop.key, prop.value)

        return True

    async def is_active(self, unit: Unit) -> bool:
        """Runtime status of a single unit. Any failure counts as inactive.
        """
        try:
            output = await self._systemctl.status(unit.name, unit.scope)
        except UnitctlError as e:
            self._logger.warning(
                'Could not read status of %s: %s',
                unit.name,
                e,
            )
            return False

        return parse_status_active(output)

    async def unit_file(self, unit: Unit) -> UnitFile | None:
        """Contents of the unit file, or None if systemd has none to show.
        """
        try:
            output = await self._systemctl.cat(unit.name, unit.scope)
        except TransportError as e:
            self._logger.warning(
                'Could not read unit file of %s: %s',
                unit.name,
                e,
            )
            return None

        return parse_unit_cat(output)
