from pathlib import PurePosixPath
from typing import Self

from pydantic import Field, field_validator

from unitctl.systemd.classifiers import classify_unit_type, is_template_unit
from unitctl.systemd.types import Scope, UnitState, UnitType
from unitctl.utils import BaseModel


class UnitFileEntry(BaseModel):
    """One decoded ListUnitFiles entry.

    Args:
        path: Unit file path, or a bare unit name
        state: Unit file state
    """

    path: str = Field(..., min_length=1)
    state: UnitState = Field(...)


class Unit(BaseModel):
    """A systemd unit known to the catalog.

    Args:
        name: Unit file base name including the suffix
        path: Absolute unit file path, empty when only the name is known
        type: Unit kind, derived from the path at creation time
        state: Unit file (enablement) state
        active: Whether the unit is currently running
        scope: System or user instance the unit belongs to
    """

    name: str = Field(..., min_length=1)
    path: str = Field('')
    type: UnitType = Field(...)
    state: UnitState = Field(...)
    active: bool = Field(False)
    scope: Scope = Field(Scope.SYSTEM)

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        if v and not v.startswith('/'):
            raise ValueError('Unit path must be absolute or empty')
        return v

    @classmethod
    def from_entry(
        cls,
        entry: UnitFileEntry,
        scope: Scope,
        active: bool = False,
    ) -> Self:
        """Build a unit from a decoded unit file entry.

        Raises:
            UnrecognizedExtensionError: If the entry has no known extension
        """
        unit_type = classify_unit_type(entry.path)
        is_path = entry.path.startswith('/')

        return cls(
            name=PurePosixPath(entry.path).name,
            path=entry.path if is_path else '',
            type=unit_type,
            state=entry.state,
            active=active,
            scope=scope,
        )

    @property
    def is_template(self) -> bool:
        return is_template_unit(self.name) or \
            (bool(self.path) and is_template_unit(self.path))

    @property
    def sort_key(self) -> tuple[str, str, str]:
        return (self.name.casefold(), self.name, self.path)


class UnitFile(BaseModel):
    """Unit file as printed by `systemctl cat`.

    Args:
        path: Path from the leading comment line
        contents: File contents without the leading comment line
    """

    path: str = Field(...)
    contents: str = Field('')


class UnitProperty(BaseModel):
    """A single `systemctl show` property.

    Args:
        key: Property name
        value: Property value, never empty
    """

    key: str = Field(..., min_length=1)
    value: str = Field(..., min_length=1)


class BlameEntry(BaseModel):
    """Startup cost of a single unit from `systemd-analyze blame`.

    Args:
        time: Time spent starting the unit, in milliseconds
        unit: Unit name
    """

    time: int = Field(..., ge=0)
    unit: str = Field(..., min_length=1)


class BootTimes(BaseModel):
    """Boot phase durations from `systemd-analyze time`.

    Args:
        kernel: Time spent in the kernel
        userspace: Time spent in userspace
        total: Total boot time
    """

    kernel: str = Field('N/A')
    userspace: str = Field('N/A')
    total: str = Field('N/A')
