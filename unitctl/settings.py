import os
from collections.abc import Mapping
from typing import Any, Final, Self

from pydantic import Field, field_validator

from unitctl.systemd.types import EnumerationSource, JobMode, UnitType
from unitctl.utils import BaseModel

ENV_PREFIX: Final[str] = 'UNITCTL_'

DEFAULT_JOURNAL_PLACEHOLDER: Final[str] = 'Could not read the journal.'


class TogglePolicy(BaseModel):
    """Which units are offered for enable/disable.

    Args:
        excluded_path_prefixes: Unit file path prefixes that are never
            togglable, e.g. `/etc/` to hide locally created units
        path_policy_types: Unit types the path exclusion applies to
    """

    excluded_path_prefixes: tuple[str, ...] = Field(())
    path_policy_types: frozenset[UnitType] = Field(
        frozenset({UnitType.SERVICE}),
    )

    @field_validator('excluded_path_prefixes')
    @classmethod
    def validate_excluded_path_prefixes(
        cls,
        v: tuple[str, ...],
    ) -> tuple[str, ...]:
        for prefix in v:
            if not prefix.startswith('/'):
                raise ValueError(
                    f'Excluded path prefix must be absolute: {prefix!r}'
                )
        return v

    def excludes(self, unit_type: UnitType, path: str) -> bool:
        """Whether a unit of `unit_type` at `path` is hidden by this policy.
        """
        if unit_type not in self.path_policy_types:
            return False
        return any(path.startswith(p) for p in self.excluded_path_prefixes)


class Settings(BaseModel):
    """Runtime configuration for the catalog, control client and transports.

    Args:
        dbus_timeout: Seconds to wait for a D-Bus reply
        process_timeout: Seconds to wait for a systemctl/journalctl process
        job_mode: Job mode passed to StartUnit/StopUnit
        enumeration_source: Where unit files are listed from
        toggle_policy: Filter applied when offering units for enable/disable
        journal_placeholder: Text returned when the journal cannot be read
    """

    dbus_timeout: float = Field(30.0, gt=0)
    process_timeout: float = Field(30.0, gt=0)
    job_mode: JobMode = Field(JobMode.FAIL)
    enumeration_source: EnumerationSource = Field(EnumerationSource.DBUS)
    toggle_policy: TogglePolicy = Field(default_factory=TogglePolicy)
    journal_placeholder: str = Field(DEFAULT_JOURNAL_PLACEHOLDER)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Self:
        """Build settings from `UNITCTL_*` environment variables.

        Unset variables keep their defaults. `UNITCTL_EXCLUDED_PREFIXES` is a
        colon separated list of path prefixes.

        Raises:
            ValidationError: If a variable holds an invalid value
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        for name, field in (
            ('DBUS_TIMEOUT', 'dbus_timeout'),
            ('PROCESS_TIMEOUT', 'process_timeout'),
            ('JOB_MODE', 'job_mode'),
            ('SOURCE', 'enumeration_source'),
        ):
            value = environ.get(f'{ENV_PREFIX}{name}')
            if value:
                values[field] = value

        prefixes = environ.get(f'{ENV_PREFIX}EXCLUDED_PREFIXES')
        if prefixes:
            values['toggle_policy'] = TogglePolicy(
                excluded_path_prefixes=tuple(
                    p for p in prefixes.split(':') if p
                ),
            )

        return cls(**values)
