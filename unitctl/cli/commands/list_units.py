import click

from unitctl.cli.context import (
    CliContext,
    pass_context,
    run_async,
    scope_option,
)
from unitctl.systemd.models import Unit
from unitctl.systemd.types import Scope, UnitType


def format_units_table(units: tuple[Unit, ...]) -> str:
    """Format units into a simple table.
    """
    if not units:
        return 'No units found.'

    name_width = max(len('UNIT'), max(len(u.name) for u in units))
    type_width = max(len('TYPE'), max(len(u.type.value) for u in units))
    state_width = max(len('STATE'), max(len(u.state.value) for u in units))

    header = (
        f'{"UNIT":<{name_width}} '
        f'{"TYPE":<{type_width}} '
        f'{"STATE":<{state_width}} '
        f'ACTIVE'
    )

    lines = [header, '-' * len(header)]

    for unit in units:
        lines.append(
            f'{unit.name:<{name_width}} '
            f'{unit.type.value:<{type_width}} '
            f'{unit.state.value:<{state_width}} '
            f'{"yes" if unit.active else "no"}'
        )

    return '\n'.join(lines)


@click.command('list')
@click.option(
    '--type',
    'unit_type',
    type=click.Choice([t.value for t in UnitType]),
    help='Only show units of this type.',
)
@click.option(
    '--togglable',
    is_flag=True,
    help='Only show units that can be enabled or disabled.',
)
@scope_option
@pass_context
@run_async
async def list_units(
    cli_ctx: CliContext,
    unit_type: str | None,
    togglable: bool,
    scope: Scope,
) -> None:
    """List unit files with their state and runtime status.
    """
    if togglable and unit_type is None:
        raise click.UsageError('--togglable requires --type')

    registry = await cli_ctx.registry(scope)

    if togglable:
        units = registry.togglable(UnitType(unit_type))
    elif unit_type is not None:
        units = tuple(u for u in registry if u.type == unit_type)
    else:
        units = registry.units()

    click.echo(format_units_table(units))
