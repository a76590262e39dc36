import asyncio
from collections.abc import Callable, Coroutine
from functools import wraps
from typing import Any

import click
from pydantic import ValidationError

from unitctl.dbus import DBusConnectionManager
from unitctl.errors import UnitctlError
from unitctl.services import (
    BootAnalyzer,
    ControlClient,
    RegistryPair,
    SharedRegistry,
    UnitCatalog,
)
from unitctl.settings import Settings
from unitctl.systemctl import ProcessRunner, Systemctl
from unitctl.systemd.models import Unit
from unitctl.systemd.types import RegistryState, Scope


class CliContext:
    """Core objects shared by the commands of one invocation.
    """

    def __init__(
        self,
        registries: RegistryPair,
        control: ControlClient,
        analyzer: BootAnalyzer,
    ) -> None:
        self.registries = registries
        self.control = control
        self.analyzer = analyzer

    @classmethod
    def from_settings(cls, settings: Settings) -> 'CliContext':
        systemctl = Systemctl(ProcessRunner(settings.process_timeout))
        catalog = UnitCatalog(settings, systemctl=systemctl)
        control = ControlClient(settings, systemctl=systemctl)

        return cls(
            registries=RegistryPair.from_settings(settings, catalog, control),
            control=control,
            analyzer=BootAnalyzer(systemctl),
        )

    async def registry(self, scope: Scope) -> SharedRegistry:
        """The registry of `scope`, populated on first use.
        """
        registry = self.registries[scope]
        if registry.state is RegistryState.UNINITIALIZED:
            await registry.refresh()
        return registry

    async def unit(self, name: str, scope: Scope) -> Unit:
        """Resolve a unit by name.

        Raises:
            UnitNotFoundError: If `scope` has no such unit
        """
        registry = await self.registry(scope)
        return registry.get(name)


pass_context = click.make_pass_decorator(CliContext)


def _to_scope(ctx: click.Context, param: click.Parameter, user: bool) -> Scope:
    return Scope.USER if user else Scope.SYSTEM


def scope_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the `--user` flag, passed on as a `scope` argument.
    """
    return click.option(
        '--user',
        'scope',
        is_flag=True,
        callback=_to_scope,
        help='Talk to the user service manager.',
    )(func)


def run_async(
    func: Callable[..., Coroutine[Any, Any, None]],
) -> Callable[..., None]:
    """Run an async command body, reporting unitctl errors as `Error: ...`.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        async def _run() -> None:
            try:
                await func(*args, **kwargs)
            finally:
                await DBusConnectionManager.disconnect_all()

        try:
            asyncio.run(_run())
        except UnitctlError as e:
            raise click.ClickException(str(e)) from e

    return wrapper


def load_context(ctx: click.Context) -> CliContext:
    """Create the CLI context from the environment unless one was given.
    """
    if ctx.obj is None:
        try:
            ctx.obj = CliContext.from_settings(Settings.from_env())
        except ValidationError as e:
            raise click.ClickException(f'invalid configuration: {e}') from e
    return ctx.obj
