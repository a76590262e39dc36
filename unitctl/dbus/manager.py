import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Self

from dbus_next.errors import (
    DBusError,
    InterfaceNotFoundError,
    InvalidIntrospectionError,
    InvalidSignatureError,
    SignatureBodyMismatchError,
)

from unitctl.dbus.connection import DBusConnectionManager
from unitctl.dbus.constants import (
    ConnectionConfig,
    ManagerMethods,
    SystemdDBusConstants,
)
from unitctl.errors import DBusReplyError, DBusTimeoutError, MethodCallError
from unitctl.systemd.types import JobMode, Scope

_CALL_CONSTRUCTION_ERRORS = (
    InvalidSignatureError,
    SignatureBodyMismatchError,
    TypeError,
    ValueError,
)


class SystemdManager:
    """Calls the systemd manager interface of one bus.

    Every call is bounded by `timeout` and never retried. Failures map onto
    the unitctl transport errors:

    - bus unreachable: DBusConnectionError (from the connection manager)
    - proxy or argument construction: MethodCallError
    - error reply: DBusReplyError
    - no reply in time: DBusTimeoutError
    """

    def __init__(
        self,
        dbus_manager: DBusConnectionManager | None = None,
        timeout: float = ConnectionConfig.DEFAULT_TIMEOUT,
    ):
        """Initialize the SystemdManager.

        Args:
            dbus_manager: The D-Bus connection manager.
            timeout: Seconds to wait for each reply.
        """
        self._logger = logging.getLogger(__name__)

        self._dbus_manager = dbus_manager or \
            DBusConnectionManager.get_instance()
        self._timeout = timeout
        self._manager_proxy = None
        self._proxy_bus = None

    @classmethod
    def for_scope(
        cls,
        scope: Scope,
        timeout: float = ConnectionConfig.DEFAULT_TIMEOUT,
    ) -> Self:
        """Build a manager on the shared connection for `scope`.
        """
        return cls(DBusConnectionManager.get_instance(scope, timeout), timeout)

    async def _ensure_manager_proxy(self) -> Any:
        """Ensure the systemd manager D-Bus proxy is initialized.
        """
        bus = await self._dbus_manager.get_bus()
        if self._manager_proxy is not None and self._proxy_bus is bus:
            return self._manager_proxy

        try:
            introspection = await asyncio.wait_for(
                bus.introspect(
                    SystemdDBusConstants.SERVICE_NAME,
                    SystemdDBusConstants.OBJECT_PATH,
                ),
                timeout=self._timeout,
            )
            proxy_object = bus.get_proxy_object(
                SystemdDBusConstants.SERVICE_NAME,
                SystemdDBusConstants.OBJECT_PATH,
                introspection,
            )
            self._manager_proxy = proxy_object.get_interface(
                SystemdDBusConstants.MANAGER_INTERFACE
            )
            self._proxy_bus = bus
        except TimeoutError:
            self._logger.error('Timed out introspecting the systemd manager.')
            raise DBusTimeoutError('Introspect', self._timeout) from None
        except (
            DBusError,
            InterfaceNotFoundError,
            InvalidIntrospectionError,
        ) as e:
            self._logger.error(
                'Failed to create systemd manager proxy: %s',
                e,
            )
            raise MethodCallError(
                f'Failed to create systemd manager proxy: {e}'
            ) from e

        return self._manager_proxy

    async def _call(
        self,
        method: ManagerMethods,
        invoke: Callable[[Any], Awaitable[Any]],
    ) -> Any:
        """Issue one manager method call through the proxy.
        """
        proxy = await self._ensure_manager_proxy()
        self._logger.debug('Calling %s.', method)

        try:
            return await asyncio.wait_for(invoke(proxy), timeout=self._timeout)
        except TimeoutError:
            self._logger.error(
                '%s got no reply within %.1fs.',
                method,
                self._timeout,
            )
            raise DBusTimeoutError(method, self._timeout) from None
        except DBusError as e:
            self._logger.error('%s failed: %s', method, e.text)
            raise DBusReplyError(method, f'{e.type}: {e.text}') from e
        except _CALL_CONSTRUCTION_ERRORS as e:
            self._logger.error('Could not build %s call: %s', method, e)
            raise MethodCallError(f'Could not build {method} call: {e}') from e

    async def list_unit_files(self) -> list[list[str]]:
        """List all systemd unit files.

        Returns:
            `[path, state]` pairs as returned by systemd
        """
        return await self._call(
            ManagerMethods.LIST_UNIT_FILES,
            lambda proxy: proxy.call_list_unit_files(),
        )

    async def enable_unit_files(
        self,
        unit_files: list[str],
        runtime: bool = False,
        force: bool = True,
    ) -> list[Any]:
        """Enable unit files.

        Args:
            unit_files: List of unit file names to enable
            runtime: Whether to enable for runtime only
            force: Whether to replace conflicting symlinks

        Returns:
            `[carries_install_info, changes]`
        """
        return await self._call(
            ManagerMethods.ENABLE_UNIT_FILES,
            lambda proxy: proxy.call_enable_unit_files(
                unit_files,
                runtime,
                force,
            ),
        )

    async def disable_unit_files(
        self,
        unit_files: list[str],
        runtime: bool = False,
    ) -> list[list[str]]:
        """Disable unit files.

        Args:
            unit_files: List of unit file names to disable
            runtime: Whether to disable for runtime only

        Returns:
            List of `[type, file, destination]` changes
        """
        return await self._call(
            ManagerMethods.DISABLE_UNIT_FILES,
            lambda proxy: proxy.call_disable_unit_files(unit_files, runtime),
        )

    async def start_unit(
        self,
        unit_name: str,
        mode: JobMode = JobMode.FAIL,
    ) -> str:
        """Start a unit by name.

        Returns:
            The job object path
        """
        return await self._call(
            ManagerMethods.START_UNIT,
            lambda proxy: proxy.call_start_unit(unit_name, str(mode)),
        )

    async def stop_unit(
        self,
        unit_name: str,
        mode: JobMode = JobMode.FAIL,
    ) -> str:
        """Stop a unit by name.

        Returns:
            The job object path
        """
        return await self._call(
            ManagerMethods.STOP_UNIT,
            lambda proxy: proxy.call_stop_unit(unit_name, str(mode)),
        )
