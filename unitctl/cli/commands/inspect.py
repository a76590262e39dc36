import click

from unitctl.cli.context import (
    CliContext,
    pass_context,
    run_async,
    scope_option,
)
from unitctl.systemd.parsers import unit_description
from unitctl.systemd.types import Scope


@click.command('journal')
@click.argument('name')
@scope_option
@pass_context
@run_async
async def show_journal(cli_ctx: CliContext, name: str, scope: Scope) -> None:
    """Show the journal of the current boot, newest first.
    """
    unit = await cli_ctx.unit(name, scope)
    click.echo(await cli_ctx.control.journal(unit), nl=False)


@click.command('deps')
@click.argument('name')
@scope_option
@pass_context
@run_async
async def show_dependencies(
    cli_ctx: CliContext,
    name: str,
    scope: Scope,
) -> None:
    """List the dependencies of a unit.
    """
    unit = await cli_ctx.unit(name, scope)
    click.echo(await cli_ctx.control.dependencies(unit), nl=False)


@click.command('show')
@click.argument('name')
@scope_option
@pass_context
@run_async
async def show_properties(
    cli_ctx: CliContext,
    name: str,
    scope: Scope,
) -> None:
    """Show the non-empty properties of a unit.
    """
    unit = await cli_ctx.unit(name, scope)

    def _echo(index: int, key: str, value: str) -> None:
        click.echo(f'{key}={value}')

    if not await cli_ctx.control.properties(unit, _echo):
        raise click.ClickException(f'could not read properties of {name}')


@click.command('cat')
@click.argument('name')
@scope_option
@pass_context
@run_async
async def show_unit_file(cli_ctx: CliContext, name: str, scope: Scope) -> None:
    """Show the unit file of a unit.
    """
    unit = await cli_ctx.unit(name, scope)
    unit_file = await cli_ctx.control.unit_file(unit)

    if unit_file is None:
        raise click.ClickException(f'no unit file for {name}')

    click.echo(f'# {unit_file.path}')
    description = unit_description(unit_file.contents)
    if description:
        click.echo(f'# {description}')
    click.echo(unit_file.contents)
