from unitctl.systemd.classifiers import (
    classify_unit_state,
    classify_unit_type,
    is_template_unit,
)
from unitctl.systemd.models import (
    BlameEntry,
    BootTimes,
    Unit,
    UnitFile,
    UnitFileEntry,
    UnitProperty,
)
from unitctl.systemd.types import (
    EnumerationSource,
    JobMode,
    RegistryState,
    Scope,
    UnitState,
    UnitType,
)

__all__ = [
    'BlameEntry',
    'BootTimes',
    'EnumerationSource',
    'JobMode',
    'RegistryState',
    'Scope',
    'Unit',
    'UnitFile',
    'UnitFileEntry',
    'UnitProperty',
    'UnitState',
    'UnitType',
    'classify_unit_state',
    'classify_unit_type',
    'is_template_unit',
]
