from enum import StrEnum
from typing import Final


class SystemdDBusConstants(StrEnum):
    """Systemd D-Bus service constants.
    """

    SERVICE_NAME = 'org.freedesktop.systemd1'
    OBJECT_PATH = '/org/freedesktop/systemd1'
    MANAGER_INTERFACE = 'org.freedesktop.systemd1.Manager'


class ManagerMethods(StrEnum):
    """Manager methods unitctl calls, by their D-Bus member name.
    """

    LIST_UNIT_FILES = 'ListUnitFiles'
    ENABLE_UNIT_FILES = 'EnableUnitFiles'
    DISABLE_UNIT_FILES = 'DisableUnitFiles'
    START_UNIT = 'StartUnit'
    STOP_UNIT = 'StopUnit'


class ConnectionConfig:
    """Configuration constants for D-Bus calls.
    """

    DEFAULT_TIMEOUT: Final[float] = 30.0
