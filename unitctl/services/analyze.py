import logging

from unitctl.errors import TransportError
from unitctl.systemctl import Systemctl
from unitctl.systemd.models import BlameEntry, BootTimes
from unitctl.systemd.parsers import parse_blame, parse_boot_times
from unitctl.systemd.types import Scope


class BootAnalyzer:
    """Reads boot performance figures from `systemd-analyze`.
    """

    def __init__(self, systemctl: Systemctl | None = None) -> None:
        self._logger = logging.getLogger(__name__)
        self._systemctl = systemctl or Systemctl()

    async def blame(self, scope: Scope) -> list[BlameEntry] | None:
        """Startup time per unit, cheapest first.

        Returns:
            Entries in ascending order of time, or None if the output could
            not be read or decoded
        """
        try:
            output = await self._systemctl.analyze('blame', scope)
        except TransportError as e:
            self._logger.warning('Could not run systemd-analyze blame: %s', e)
            return None

        entries = parse_blame(output)
        if entries is None:
            self._logger.warning('Unexpected systemd-analyze blame output')
        return entries

    async def times(self, scope: Scope) -> BootTimes:
        """Kernel, userspace and total boot time. `N/A` where unknown.
        """
        try:
            output = await self._systemctl.analyze('time', scope)
        except TransportError as e:
            self._logger.warning('Could not run systemd-analyze time: %s', e)
            return BootTimes()

        return parse_boot_times(output)
