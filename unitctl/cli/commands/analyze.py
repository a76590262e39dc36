import click

from unitctl.cli.context import (
    CliContext,
    pass_context,
    run_async,
    scope_option,
)
from unitctl.systemd.types import Scope


@click.command('blame')
@click.option(
    '--limit',
    type=click.IntRange(min=1),
    help='Only show the slowest N units.',
)
@scope_option
@pass_context
@run_async
async def blame(cli_ctx: CliContext, limit: int | None, scope: Scope) -> None:
    """Show how long each unit took to start, slowest first.
    """
    entries = await cli_ctx.analyzer.blame(scope)
    if entries is None:
        raise click.ClickException('could not read systemd-analyze blame')

    slowest = list(reversed(entries))
    if limit is not None:
        slowest = slowest[:limit]

    for entry in slowest:
        click.echo(f'{entry.time:>10}ms {entry.unit}')


@click.command('boot-time')
@scope_option
@pass_context
@run_async
async def boot_time(cli_ctx: CliContext, scope: Scope) -> None:
    """Show kernel, userspace and total boot time.
    """
    times = await cli_ctx.analyzer.times(scope)
    click.echo(f'Kernel:    {times.kernel}')
    click.echo(f'Userspace: {times.userspace}')
    click.echo(f'Total:     {times.total}')
