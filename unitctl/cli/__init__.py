import click

from unitctl.cli.commands.analyze import blame, boot_time
from unitctl.cli.commands.control import (
    disable_unit,
    enable_unit,
    start_unit,
    stop_unit,
)
from unitctl.cli.commands.inspect import (
    show_dependencies,
    show_journal,
    show_properties,
    show_unit_file,
)
from unitctl.cli.commands.list_units import list_units
from unitctl.cli.context import CliContext, load_context


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """unitctl - Inspect and control systemd units.
    """
    load_context(ctx)


for command in (
    list_units,
    enable_unit,
    disable_unit,
    start_unit,
    stop_unit,
    show_journal,
    show_dependencies,
    show_properties,
    show_unit_file,
    blame,
    boot_time,
):
    cli.add_command(command)


def run_cli() -> None:
    """Run the CLI interface.
    """
    cli()


__all__ = [
    'CliContext',
    'cli',
    'run_cli',
]
