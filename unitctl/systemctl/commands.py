import logging
from collections.abc import Sequence
from typing import Final

from unitctl.systemctl.process import ProcessResult, ProcessRunner
from unitctl.systemd.types import Scope

SYSTEMCTL: Final[str] = 'systemctl'
JOURNALCTL: Final[str] = 'journalctl'
SYSTEMD_ANALYZE: Final[str] = 'systemd-analyze'

LISTED_STATES: Final[str] = 'enabled,disabled,masked'


class Systemctl:
    """Builds and runs the systemd command line tools for one call at a time.

    The scope decides the `--user` flag; it is consulted once per command.
    Commands whose exit status is meaningful raise ProcessError on failure.
    `is-active` and `status` report inactive units through a non-zero
    status, so their output is returned regardless.
    """

    def __init__(self, runner: ProcessRunner | None = None) -> None:
        self._logger = logging.getLogger(__name__)
        self._runner = runner or ProcessRunner()

    async def _systemctl(
        self,
        command: str,
        scope: Scope,
        *args: str,
        options: Sequence[str] = (),
        check: bool = True,
    ) -> ProcessResult:
        argv = (SYSTEMCTL, command, *options, *scope.systemctl_flags, *args)
        return await self._runner.run(argv, check=check)

    async def list_unit_files(self, scope: Scope) -> str:
        """`systemctl list-unit-files [--user] --state enabled,disabled,masked`
        """
        result = await self._systemctl(
            'list-unit-files',
            scope,
            '--state',
            LISTED_STATES,
        )
        return result.stdout

    async def is_active(self, names: Sequence[str], scope: Scope) -> str:
        """`systemctl is-active [--user] <names...>`, one line per name in
        argument order.
        """
        result = await self._systemctl(
            'is-active',
            scope,
            *names,
            check=False,
        )
        return result.stdout

    async def status(self, name: str, scope: Scope) -> str:
        """`systemctl status [--user] <name>`
        """
        result = await self._systemctl('status', scope, name, check=False)
        return result.stdout

    async def list_dependencies(self, name: str, scope: Scope) -> str:
        """`systemctl list-dependencies [--user] <name>`
        """
        result = await self._systemctl('list-dependencies', scope, name)
        return result.stdout

    async def show(self, name: str, scope: Scope) -> str:
        """`systemctl show --no-pager [--user] <name>`
        """
        result = await self._systemctl(
            'show',
            scope,
            name,
            options=('--no-pager',),
        )
        return result.stdout

    async def cat(self, name: str, scope: Scope) -> str:
        """`systemctl cat [--user] <name>`
        """
        result = await self._systemctl('cat', scope, name)
        return result.stdout

    async def journal(self, name: str, scope: Scope) -> str:
        """`journalctl [--user] -b -r -u <name>`: current boot, newest first.
        """
        argv = (JOURNALCTL, *scope.systemctl_flags, '-b', '-r', '-u', name)
        result = await self._runner.run(argv, check=True)
        return result.stdout

    async def analyze(self, command: str, scope: Scope) -> str:
        """`systemd-analyze [--user] <command>`
        """
        argv = (SYSTEMD_ANALYZE, *scope.systemctl_flags, command)
        result = await self._runner.run(argv, check=True)
        return result.stdout
