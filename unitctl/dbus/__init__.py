from unitctl.dbus.connection import DBusConnectionManager
from unitctl.dbus.manager import SystemdManager

__all__ = [
    'DBusConnectionManager',
    'SystemdManager',
]
