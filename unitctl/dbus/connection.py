import asyncio
import logging
import threading
from typing import ClassVar, Self

from dbus_next.aio.message_bus import MessageBus
from dbus_next.constants import BusType
from dbus_next.errors import AuthError, DBusError, InvalidAddressError

from unitctl.dbus.constants import ConnectionConfig
from unitctl.errors import DBusConnectionError
from unitctl.systemd.types import Scope

SCOPE_BUS_TYPES: dict[Scope, BusType] = {
    Scope.SYSTEM: BusType.SYSTEM,
    Scope.USER: BusType.SESSION,
}


class DBusConnectionManager:
    """Owns the message bus connection for one scope.

    There is at most one manager per scope: the system scope talks to the
    system bus, the user scope to the session bus.
    """

    _instances: ClassVar[dict[Scope, 'DBusConnectionManager']] = {}
    _instances_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        scope: Scope = Scope.SYSTEM,
        timeout: float = ConnectionConfig.DEFAULT_TIMEOUT,
    ):
        """
        Initializes the DBusConnectionManager.

        Args:
            scope: Which systemd instance (and therefore bus) to connect to.
            timeout: Seconds to wait for the bus handshake.
        """
        self._logger = logging.getLogger(__name__)

        self._scope = scope
        self._timeout = timeout
        self._bus: MessageBus | None = None
        self._connection_lock = asyncio.Lock()

    @property
    def scope(self) -> Scope:
        return self._scope

    @classmethod
    def get_instance(
        cls,
        scope: Scope = Scope.SYSTEM,
        timeout: float = ConnectionConfig.DEFAULT_TIMEOUT,
    ) -> Self:
        """Returns the shared manager for `scope`, creating it on first use.

        `timeout` only applies when the manager is created.
        """
        if scope not in cls._instances:
            with cls._instances_lock:
                if scope not in cls._instances:
                    cls._instances[scope] = cls(scope, timeout)
        return cls._instances[scope]  # type: ignore[return-value]

    @classmethod
    async def disconnect_all(cls) -> None:
        """Disconnects every shared manager.
        """
        for manager in list(cls._instances.values()):
            await manager.disconnect()

    def _is_already_connected(self) -> bool:
        """Check if already connected to D-Bus.
        """
        return self._bus is not None and self._bus.connected

    async def connect(self) -> None:
        """Connects to the bus for this scope. Does not retry.

        Raises:
            DBusConnectionError: If the bus cannot be reached in time.
        """
        async with self._connection_lock:
            if self._is_already_connected():
                self._logger.debug('Already connected to D-Bus.')
                return

            bus_type = SCOPE_BUS_TYPES[self._scope]
            bus_name = bus_type.name.lower()
            self._logger.info('Connecting to the %s bus.', bus_name)
            try:
                self._bus = await asyncio.wait_for(
                    MessageBus(bus_type=bus_type).connect(),
                    timeout=self._timeout,
                )
            except TimeoutError:
                self._bus = None
                self._logger.error(
                    'Timed out connecting to the %s bus after %.1fs.',
                    bus_name,
                    self._timeout,
                )
                raise DBusConnectionError(
                    f'Timed out connecting to the {bus_name} bus'
                ) from None
            except (DBusError, AuthError, InvalidAddressError, OSError) as e:
                self._bus = None
                self._logger.error(
                    'Failed to connect to the %s bus: %s',
                    bus_name,
                    e,
                )
                raise DBusConnectionError(
                    f'Failed to connect to the {bus_name} bus: {e}'
                ) from e

            self._logger.info('Connected to the %s bus.', bus_name)

    async def disconnect(self) -> None:
        """Disconnects from the D-Bus if connected.
        """
        async with self._connection_lock:
            if self._bus:
                self._logger.info('Disconnecting from D-Bus.')
                self._bus.disconnect()
                self._bus = None

    async def get_bus(self) -> MessageBus:
        """Returns the MessageBus object, connecting first if necessary.

        Raises:
            DBusConnectionError: If a connection cannot be established.
        """
        if not self._is_already_connected():
            await self.connect()

        if not self._bus:
            raise DBusConnectionError(
                'Failed to get a valid D-Bus connection.'
            )

        return self._bus
