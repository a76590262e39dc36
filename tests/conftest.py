from collections.abc import Sequence
from typing import Any

import pytest

from unitctl.errors import ProcessError
from unitctl.services import ControlClient, RegistryPair, UnitCatalog
from unitctl.settings import Settings
from unitctl.systemctl import ProcessResult, Systemctl
from unitctl.systemd.models import Unit, UnitFileEntry
from unitctl.systemd.types import JobMode, Scope, UnitState


class FakeRunner:
    """ProcessRunner stand-in that answers from registered responses.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, ...]] = []
        self._responses: list[tuple[str, str | None, Any]] = []

    def on(
        self,
        program: str,
        word: str | None = None,
        stdout: str = '',
        stderr: str = '',
        returncode: int = 0,
        error: Exception | None = None,
    ) -> None:
        """Answer calls of `program` whose argv contains `word`.

        Later registrations take precedence.
        """
        response = error if error is not None else (stdout, stderr, returncode)
        self._responses.insert(0, (program, word, response))

    def calls_of(self, word: str) -> list[tuple[str, ...]]:
        return [argv for argv in self.calls if word in argv]

    async def run(
        self,
        argv: Sequence[str],
        check: bool = False,
        timeout: float | None = None,
    ) -> ProcessResult:
        argv = tuple(argv)
        self.calls.append(argv)

        for program, word, response in self._responses:
            if argv[0] != program or (word is not None and word not in argv):
                continue
            if isinstance(response, Exception):
                raise response

            stdout, stderr, returncode = response
            if check and returncode:
                raise ProcessError(argv, stderr or 'failed', returncode)
            return ProcessResult(
                argv=argv,
                returncode=returncode,
                stdout=stdout,
                stderr=stderr,
            )

        raise ProcessError(argv, 'no response registered', 127)


class FakeManager:
    """SystemdManager stand-in that records calls.
    """

    def __init__(self, unit_files: list[list[str]] | None = None) -> None:
        self.unit_files = unit_files or []
        self.enable_reply: Any = [False, [['symlink', '/etc/x', '/usr/x']]]
        self.disable_reply: Any = [['unlink', '/etc/x', '']]
        self.errors: dict[str, Exception] = {}
        self.calls: list[tuple[Any, ...]] = []

    def _record(self, method: str, *args: Any) -> None:
        self.calls.append((method, *args))
        if method in self.errors:
            raise self.errors[method]

    async def list_unit_files(self) -> list[list[str]]:
        self._record('list_unit_files')
        return [list(item) for item in self.unit_files]

    async def enable_unit_files(
        self,
        unit_files: list[str],
        runtime: bool = False,
        force: bool = True,
    ) -> Any:
        self._record('enable_unit_files', unit_files, runtime, force)
        return self.enable_reply

    async def disable_unit_files(
        self,
        unit_files: list[str],
        runtime: bool = False,
    ) -> Any:
        self._record('disable_unit_files', unit_files, runtime)
        return self.disable_reply

    async def start_unit(self, unit_name: str, mode: JobMode) -> str:
        self._record('start_unit', unit_name, mode)
        return '/org/freedesktop/systemd1/job/1'

    async def stop_unit(self, unit_name: str, mode: JobMode) -> str:
        self._record('stop_unit', unit_name, mode)
        return '/org/freedesktop/systemd1/job/2'


def make_unit(
    name: str,
    path: str = '',
    scope: Scope = Scope.SYSTEM,
    **fields: Any,
) -> Unit:
    entry = UnitFileEntry(path=path or name, state=UnitState.ENABLED)
    unit = Unit.from_entry(entry, scope)
    return unit.model_copy(update=fields) if fields else unit


SYSTEM_UNIT_FILES = [
    ['/usr/lib/systemd/system/sshd.service', 'enabled'],
    ['/usr/lib/systemd/system/sshd@.service', 'static'],
    ['/usr/lib/systemd/system/cups.socket', 'disabled'],
    ['/etc/systemd/system/backup.service', 'disabled'],
    ['/usr/lib/systemd/system/Avahi-daemon.service', 'masked'],
]


def is_active_output(*states: str) -> str:
    return ''.join(f'{state}\n' for state in states)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def systemctl(runner: FakeRunner) -> Systemctl:
    return Systemctl(runner)  # type: ignore[arg-type]


@pytest.fixture
def system_manager() -> FakeManager:
    return FakeManager(SYSTEM_UNIT_FILES)


@pytest.fixture
def user_manager() -> FakeManager:
    return FakeManager([['/usr/lib/systemd/user/pipewire.service', 'enabled']])


@pytest.fixture
def managers(
    system_manager: FakeManager,
    user_manager: FakeManager,
) -> dict[Scope, Any]:
    return {Scope.SYSTEM: system_manager, Scope.USER: user_manager}


@pytest.fixture
def catalog(
    settings: Settings,
    managers: dict[Scope, Any],
    systemctl: Systemctl,
) -> UnitCatalog:
    return UnitCatalog(settings, managers, systemctl)


@pytest.fixture
def control(
    settings: Settings,
    managers: dict[Scope, Any],
    systemctl: Systemctl,
) -> ControlClient:
    return ControlClient(settings, managers, systemctl)


@pytest.fixture
def registries(
    settings: Settings,
    catalog: UnitCatalog,
    control: ControlClient,
) -> RegistryPair:
    return RegistryPair.from_settings(settings, catalog, control)
