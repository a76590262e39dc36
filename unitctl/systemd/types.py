from enum import StrEnum
from typing import Final


class UnitType(StrEnum):
    """Systemd unit kinds, keyed by unit file extension.
    """

    AUTOMOUNT = 'automount'
    BUSNAME = 'busname'
    MOUNT = 'mount'
    PATH = 'path'
    SCOPE = 'scope'
    SERVICE = 'service'
    SLICE = 'slice'
    SOCKET = 'socket'
    SWAP = 'swap'
    TARGET = 'target'
    TIMER = 'timer'


class UnitState(StrEnum):
    """Systemd unit file (enablement) states.
    """

    ENABLED = 'enabled'
    DISABLED = 'disabled'
    MASKED = 'masked'
    STATIC = 'static'
    INDIRECT = 'indirect'
    LINKED = 'linked'
    BAD = 'bad'
    GENERATED = 'generated'
    TRANSIENT = 'transient'
    ALIAS = 'alias'

    @property
    def is_togglable(self) -> bool:
        """Whether a user may flip this state with enable/disable.
        """
        return self in (UnitState.ENABLED, UnitState.DISABLED)


# Lead character of a state token -> state.
STATE_LEAD_CHARACTERS: Final[dict[str, UnitState]] = {
    's': UnitState.STATIC,
    'd': UnitState.DISABLED,
    'e': UnitState.ENABLED,
    'i': UnitState.INDIRECT,
    'l': UnitState.LINKED,
    'm': UnitState.MASKED,
    'b': UnitState.BAD,
    'g': UnitState.GENERATED,
    't': UnitState.TRANSIENT,
    'a': UnitState.ALIAS,
}


class Scope(StrEnum):
    """Which systemd instance a unit belongs to.
    """

    SYSTEM = 'system'
    USER = 'user'

    @property
    def systemctl_flags(self) -> tuple[str, ...]:
        """Extra command line flags for systemctl/journalctl/systemd-analyze.
        """
        if self is Scope.SYSTEM:
            return ()
        return ('--user',)


class JobMode(StrEnum):
    """Job modes accepted by StartUnit/StopUnit.
    """

    REPLACE = 'replace'
    FAIL = 'fail'
    ISOLATE = 'isolate'
    IGNORE_DEPENDENCIES = 'ignore-dependencies'
    IGNORE_REQUIREMENTS = 'ignore-requirements'


class EnumerationSource(StrEnum):
    """Where the unit catalog reads the list of unit files from.
    """

    DBUS = 'dbus'
    SYSTEMCTL = 'systemctl'


class RegistryState(StrEnum):
    """Lifecycle of a shared registry.

    `PENDING_MUTATION` marks a snapshot holding unit fields changed by an
    operation since the last enumeration. The next refresh returns it to
    `POPULATED`.
    """

    UNINITIALIZED = 'uninitialized'
    POPULATED = 'populated'
    PENDING_MUTATION = 'populated-with-pending-mutation'
