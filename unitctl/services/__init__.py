from unitctl.services.analyze import BootAnalyzer
from unitctl.services.catalog import UnitCatalog, filter_togglable
from unitctl.services.control import ControlClient, PropertyVisitor
from unitctl.services.registry import RegistryPair, SharedRegistry

__all__ = [
    'BootAnalyzer',
    'ControlClient',
    'PropertyVisitor',
    'RegistryPair',
    'SharedRegistry',
    'UnitCatalog',
    'filter_togglable',
]
