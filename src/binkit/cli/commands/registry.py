"""Commands that read the package registry."""

import click

from binkit.cli.core import exit_on_error
from binkit.cli.output import machine_output
from binkit.core.context import BinkitContext
from binkit.core.queries import list_available, list_versions, update_registry


@click.command("update")
@click.pass_obj
def update_cmd(ctx: BinkitContext) -> None:
    """Update the local copy of the package registry."""
    with exit_on_error(ctx):
        update_registry(ctx)
    ctx.feedback.success("Index updated")


@click.command("versions")
@click.argument("identifier", metavar="ID")
@click.pass_obj
def versions_cmd(ctx: BinkitContext, identifier: str) -> None:
    """List the versions a package can be installed at."""
    with exit_on_error(ctx):
        labels = list_versions(ctx, identifier)
    for label in labels:
        machine_output(label)


@click.group("index")
def index_group() -> None:
    """Inspect the package registry."""


@index_group.command("list")
@click.pass_obj
def index_list(ctx: BinkitContext) -> None:
    """List every package in the registry."""
    with exit_on_error(ctx):
        identifiers = list_available(ctx)
    for identifier in identifiers:
        machine_output(identifier)
