import click
from rich.console import Console
from rich.table import Table

from binkit.cli.core import exit_on_error
from binkit.cli.output import machine_output
from binkit.core.context import BinkitContext
from binkit.core.queries import installed_index


@click.command("list")
@click.option("--long", "-l", "long_format", is_flag=True, help="Show installed filenames.")
@click.pass_obj
def list_cmd(ctx: BinkitContext, long_format: bool) -> None:
    """List installed packages."""
    with exit_on_error(ctx):
        index = installed_index(ctx)

    if not long_format:
        for identifier in index.identifiers():
            machine_output(identifier)
        return

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("package", style="cyan", no_wrap=True)
    table.add_column("binary", no_wrap=True)
    for identifier, filename in sorted(index.root.items()):
        table.add_row(identifier, str(ctx.layout.bin_root / filename))

    Console().print(table)
