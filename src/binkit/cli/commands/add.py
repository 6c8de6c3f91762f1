import click

from binkit.cli.core import exit_on_error
from binkit.core.context import BinkitContext
from binkit.core.install import PackageRequest, add_packages, parse_package_spec


def _parse_specs(specs: tuple[str, ...]) -> list[PackageRequest]:
    requests: list[PackageRequest] = []
    for spec in specs:
        try:
            requests.append(parse_package_spec(spec))
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="SPEC") from e
    return requests


@click.command("add")
@click.argument("specs", metavar="SPEC...", nargs=-1, required=True)
@click.pass_obj
def add_cmd(ctx: BinkitContext, specs: tuple[str, ...]) -> None:
    """Build and install packages.

    Each SPEC is a package id, optionally followed by @version
    (e.g. "ripgrep@1.0.0"). Without a version the "latest" label is used.
    Packages are installed in order; the first failure stops the rest.
    """
    requests = _parse_specs(specs)
    with exit_on_error(ctx):
        add_packages(ctx, requests)
