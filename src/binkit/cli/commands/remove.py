import click

from binkit.cli.core import exit_on_error
from binkit.core.context import BinkitContext
from binkit.core.removal import remove_packages


@click.command("remove")
@click.argument("identifiers", metavar="ID...", nargs=-1, required=True)
@click.pass_obj
def remove_cmd(ctx: BinkitContext, identifiers: tuple[str, ...]) -> None:
    """Uninstall packages, deleting their binaries and sources."""
    with exit_on_error(ctx):
        remove_packages(ctx, list(identifiers))
