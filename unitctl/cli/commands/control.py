import click

from unitctl.cli.context import (
    CliContext,
    pass_context,
    run_async,
    scope_option,
)
from unitctl.systemd.types import Scope


@click.command('enable')
@click.argument('name')
@scope_option
@pass_context
@run_async
async def enable_unit(cli_ctx: CliContext, name: str, scope: Scope) -> None:
    """Enable a unit file.
    """
    registry = await cli_ctx.registry(scope)
    if await registry.enable(name):
        click.echo(f'{name} is already enabled.')
    else:
        click.echo(f'Enabled {name}.')


@click.command('disable')
@click.argument('name')
@scope_option
@pass_context
@run_async
async def disable_unit(cli_ctx: CliContext, name: str, scope: Scope) -> None:
    """Disable a unit file.
    """
    registry = await cli_ctx.registry(scope)
    if await registry.disable(name):
        click.echo(f'{name} is already disabled.')
    else:
        click.echo(f'Disabled {name}.')


@click.command('start')
@click.argument('name')
@scope_option
@pass_context
@run_async
async def start_unit(cli_ctx: CliContext, name: str, scope: Scope) -> None:
    """Start a unit.
    """
    registry = await cli_ctx.registry(scope)
    job = await registry.start(name)
    click.echo(f'Started {name} ({job}).')


@click.command('stop')
@click.argument('name')
@scope_option
@pass_context
@run_async
async def stop_unit(cli_ctx: CliContext, name: str, scope: Scope) -> None:
    """Stop a unit.
    """
    registry = await cli_ctx.registry(scope)
    job = await registry.stop(name)
    click.echo(f'Stopped {name} ({job}).')
