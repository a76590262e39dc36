import pytest
from click.testing import CliRunner

from conftest import FakeManager, FakeRunner, is_active_output
from unitctl.cli import CliContext, cli
from unitctl.errors import DBusReplyError
from unitctl.services import BootAnalyzer, ControlClient, RegistryPair
from unitctl.systemctl import Systemctl


@pytest.fixture
def cli_context(
    runner: FakeRunner,
    systemctl: Systemctl,
    registries: RegistryPair,
    control: ControlClient,
) -> CliContext:
    runner.on('systemctl', 'is-active', returncode=3, stdout=is_active_output(
        'active', 'inactive', 'active', 'inactive', 'inactive',
    ))
    runner.on('systemctl', '--user', stdout='active\n')
    return CliContext(registries, control, BootAnalyzer(systemctl))


@pytest.fixture
def invoke(cli_context: CliContext):
    def _invoke(*args: str):
        return CliRunner().invoke(cli, list(args), obj=cli_context)
    return _invoke


def test_list(invoke) -> None:
    result = invoke('list')

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].split() == ['UNIT', 'TYPE', 'STATE', 'ACTIVE']
    assert [line.split()[0] for line in lines[2:]] == [
        'Avahi-daemon.service',
        'backup.service',
        'cups.socket',
        'sshd.service',
        'sshd@.service',
    ]
    assert lines[5].split() == ['sshd.service', 'service', 'enabled', 'yes']


def test_list_togglable_services(invoke) -> None:
    result = invoke('list', '--type', 'service', '--togglable')

    assert result.exit_code == 0, result.output
    assert [line.split()[0] for line in result.output.splitlines()[2:]] == [
        'backup.service',
        'sshd.service',
    ]


def test_list_by_type(invoke) -> None:
    result = invoke('list', '--type', 'timer')

    assert result.exit_code == 0
    assert result.output.strip() == 'No units found.'


def test_list_togglable_needs_type(invoke) -> None:
    result = invoke('list', '--togglable')

    assert result.exit_code == 2


def test_list_user(invoke) -> None:
    result = invoke('list', '--user')

    assert result.exit_code == 0, result.output
    assert 'pipewire.service' in result.output
    assert 'sshd.service' not in result.output


def test_enable_already_enabled(
    system_manager: FakeManager,
    invoke,
) -> None:
    system_manager.enable_reply = [True, []]

    result = invoke('enable', 'sshd.service')

    assert result.exit_code == 0, result.output
    assert result.output.strip() == 'sshd.service is already enabled.'


def test_disable(invoke) -> None:
    result = invoke('disable', 'sshd.service')

    assert result.exit_code == 0, result.output
    assert result.output.strip() == 'Disabled sshd.service.'


def test_start_and_stop(system_manager: FakeManager, invoke) -> None:
    assert invoke('start', 'backup.service').output.strip() == \
        'Started backup.service (/org/freedesktop/systemd1/job/1).'
    assert invoke('stop', 'backup.service').output.strip() == \
        'Stopped backup.service (/org/freedesktop/systemd1/job/2).'
    assert [call[0] for call in system_manager.calls] == [
        'list_unit_files',
        'start_unit',
        'stop_unit',
    ]


def test_unknown_unit(invoke) -> None:
    result = invoke('start', 'missing.service')

    assert result.exit_code == 1
    assert "Error: Unit not found: 'missing.service'" in result.output


def test_transport_error(system_manager: FakeManager, invoke) -> None:
    system_manager.errors['list_unit_files'] = DBusReplyError(
        'ListUnitFiles',
        'org.freedesktop.DBus.Error.AccessDenied: denied',
    )

    result = invoke('list')

    assert result.exit_code == 1
    assert 'Error: ListUnitFiles failed' in result.output


def test_journal(runner: FakeRunner, invoke) -> None:
    runner.on('journalctl', stdout='Jan 01 host sshd[1]: ready\n')

    result = invoke('journal', 'sshd.service')

    assert result.exit_code == 0
    assert result.output == 'Jan 01 host sshd[1]: ready\n'


def test_deps(runner: FakeRunner, invoke) -> None:
    runner.on('systemctl', 'list-dependencies', stdout=(
        'sshd.service\n'
        '● └─system.slice\n'
    ))

    result = invoke('deps', 'sshd.service')

    assert result.output == 'system.slice\n'


def test_show(runner: FakeRunner, invoke) -> None:
    runner.on('systemctl', 'show', stdout='Type=simple\nId=sshd.service\n')

    result = invoke('show', 'sshd.service')

    assert result.exit_code == 0
    assert result.output == 'Id=sshd.service\nType=simple\n'


def test_show_failure(runner: FakeRunner, invoke) -> None:
    runner.on('systemctl', 'show', returncode=1)

    result = invoke('show', 'sshd.service')

    assert result.exit_code == 1
    assert 'Error: could not read properties of sshd.service' in result.output


def test_cat(runner: FakeRunner, invoke) -> None:
    runner.on('systemctl', 'cat', stdout=(
        '# /usr/lib/systemd/system/sshd.service\n'
        '[Unit]\n'
        'Description=OpenSSH Daemon\n'
    ))

    result = invoke('cat', 'sshd.service')

    assert result.exit_code == 0
    assert result.output.splitlines() == [
        '# /usr/lib/systemd/system/sshd.service',
        '# OpenSSH Daemon',
        '[Unit]',
        'Description=OpenSSH Daemon',
    ]


def test_blame(runner: FakeRunner, invoke) -> None:
    runner.on('systemd-analyze', 'blame', stdout=(
        '2.001s slow.service\n'
        '500ms medium.service\n'
        '1ms fast.service\n'
    ))

    result = invoke('blame', '--limit', '2')

    assert result.exit_code == 0
    assert [line.split() for line in result.output.splitlines()] == [
        ['2001ms', 'slow.service'],
        ['500ms', 'medium.service'],
    ]


def test_boot_time(runner: FakeRunner, invoke) -> None:
    runner.on('systemd-analyze', 'time', stdout=(
        'Startup finished in 1.5s (kernel) + 3.5s (userspace) = 5.0s\n'
    ))

    result = invoke('boot-time')

    assert result.output.splitlines() == [
        'Kernel:    1.5s',
        'Userspace: 3.5s',
        'Total:     5.0s',
    ]


def test_invalid_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv('UNITCTL_JOB_MODE', 'sometimes')

    result = CliRunner().invoke(cli, ['list'])

    assert result.exit_code == 1
    assert 'Error: invalid configuration' in result.output
