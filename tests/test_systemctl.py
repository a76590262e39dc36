import pytest

from conftest import FakeRunner
from unitctl.errors import ProcessError
from unitctl.systemctl import Systemctl
from unitctl.systemd.types import Scope


@pytest.mark.parametrize('scope, flags', [
    (Scope.SYSTEM, ()),
    (Scope.USER, ('--user',)),
])
async def test_argv_per_scope(
    runner: FakeRunner,
    systemctl: Systemctl,
    scope: Scope,
    flags: tuple[str, ...],
) -> None:
    runner.on('systemctl')
    runner.on('journalctl')
    runner.on('systemd-analyze')

    await systemctl.list_unit_files(scope)
    await systemctl.is_active(['a.service', 'b.socket'], scope)
    await systemctl.status('a.service', scope)
    await systemctl.list_dependencies('a.service', scope)
    await systemctl.show('a.service', scope)
    await systemctl.cat('a.service', scope)
    await systemctl.journal('a.service', scope)
    await systemctl.analyze('blame', scope)

    assert runner.calls == [
        ('systemctl', 'list-unit-files', *flags,
         '--state', 'enabled,disabled,masked'),
        ('systemctl', 'is-active', *flags, 'a.service', 'b.socket'),
        ('systemctl', 'status', *flags, 'a.service'),
        ('systemctl', 'list-dependencies', *flags, 'a.service'),
        ('systemctl', 'show', '--no-pager', *flags, 'a.service'),
        ('systemctl', 'cat', *flags, 'a.service'),
        ('journalctl', *flags, '-b', '-r', '-u', 'a.service'),
        ('systemd-analyze', *flags, 'blame'),
    ]


async def test_inactive_status_is_not_an_error(
    runner: FakeRunner,
    systemctl: Systemctl,
) -> None:
    runner.on('systemctl', 'is-active', stdout='inactive\n', returncode=3)
    runner.on('systemctl', 'status', stdout='x\ny\nActive: inactive\n',
              returncode=3)

    assert await systemctl.is_active(['a.service'], Scope.SYSTEM) == \
        'inactive\n'
    assert await systemctl.status('a.service', Scope.SYSTEM) == \
        'x\ny\nActive: inactive\n'


@pytest.mark.parametrize('word', ['show', 'list-dependencies', 'cat'])
async def test_failures_raise(
    runner: FakeRunner,
    systemctl: Systemctl,
    word: str,
) -> None:
    runner.on('systemctl', word, stderr='Unit x.service not found.',
              returncode=1)
    method = {
        'show': systemctl.show,
        'list-dependencies': systemctl.list_dependencies,
        'cat': systemctl.cat,
    }[word]

    with pytest.raises(ProcessError):
        await method('x.service', Scope.SYSTEM)


async def test_journal_failure_raises(
    runner: FakeRunner,
    systemctl: Systemctl,
) -> None:
    runner.on('journalctl', returncode=1, stderr='No journal files')

    with pytest.raises(ProcessError):
        await systemctl.journal('x.service', Scope.USER)
