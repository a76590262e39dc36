import pytest
from pydantic import ValidationError

from unitctl.settings import (
    DEFAULT_JOURNAL_PLACEHOLDER,
    Settings,
    TogglePolicy,
)
from unitctl.systemd.types import EnumerationSource, JobMode, UnitType


def test_defaults() -> None:
    settings = Settings()

    assert settings.dbus_timeout == 30.0
    assert settings.process_timeout == 30.0
    assert settings.job_mode is JobMode.FAIL
    assert settings.enumeration_source is EnumerationSource.DBUS
    assert settings.toggle_policy == TogglePolicy()
    assert settings.journal_placeholder == DEFAULT_JOURNAL_PLACEHOLDER


def test_from_env() -> None:
    settings = Settings.from_env({
        'UNITCTL_DBUS_TIMEOUT': '4',
        'UNITCTL_PROCESS_TIMEOUT': '2.5',
        'UNITCTL_JOB_MODE': 'replace',
        'UNITCTL_SOURCE': 'systemctl',
        'UNITCTL_EXCLUDED_PREFIXES': '/etc/::/run/',
        'UNRELATED': 'x',
    })

    assert settings.dbus_timeout == 4.0
    assert settings.process_timeout == 2.5
    assert settings.job_mode is JobMode.REPLACE
    assert settings.enumeration_source is EnumerationSource.SYSTEMCTL
    assert settings.toggle_policy.excluded_path_prefixes == ('/etc/', '/run/')


def test_from_env_empty() -> None:
    assert Settings.from_env({}) == Settings()


@pytest.mark.parametrize('environ', [
    {'UNITCTL_DBUS_TIMEOUT': '0'},
    {'UNITCTL_PROCESS_TIMEOUT': 'soon'},
    {'UNITCTL_JOB_MODE': 'sometimes'},
    {'UNITCTL_SOURCE': 'carrier-pigeon'},
    {'UNITCTL_EXCLUDED_PREFIXES': 'etc/'},
])
def test_from_env_invalid(environ: dict[str, str]) -> None:
    with pytest.raises(ValidationError):
        Settings.from_env(environ)


class TestTogglePolicy:

    def test_default_excludes_nothing(self) -> None:
        policy = TogglePolicy()

        assert not policy.excludes(UnitType.SERVICE, '/etc/systemd/x.service')

    def test_excludes_prefix_for_policy_types_only(self) -> None:
        policy = TogglePolicy(excluded_path_prefixes=('/etc/',))

        assert policy.excludes(UnitType.SERVICE, '/etc/systemd/x.service')
        assert not policy.excludes(UnitType.SERVICE, '/usr/lib/x.service')
        assert not policy.excludes(UnitType.TIMER, '/etc/systemd/x.timer')

    def test_custom_policy_types(self) -> None:
        policy = TogglePolicy(
            excluded_path_prefixes=('/etc/',),
            path_policy_types=frozenset({UnitType.TIMER}),
        )

        assert policy.excludes(UnitType.TIMER, '/etc/systemd/x.timer')
        assert not policy.excludes(UnitType.SERVICE, '/etc/systemd/x.service')
