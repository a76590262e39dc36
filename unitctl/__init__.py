from unitctl.errors import (
    ParseError,
    TransportError,
    UnitctlError,
    UnitNotFoundError,
)
from unitctl.services import (
    BootAnalyzer,
    ControlClient,
    RegistryPair,
    SharedRegistry,
    UnitCatalog,
)
from unitctl.settings import Settings, TogglePolicy
from unitctl.systemd import Scope, Unit, UnitState, UnitType

__version__ = '0.1.0'

__all__ = [
    'BootAnalyzer',
    'ControlClient',
    'ParseError',
    'RegistryPair',
    'Scope',
    'Settings',
    'SharedRegistry',
    'TogglePolicy',
    'TransportError',
    'Unit',
    'UnitCatalog',
    'UnitNotFoundError',
    'UnitState',
    'UnitType',
    'UnitctlError',
]
