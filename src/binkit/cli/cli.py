import logging

import click

from binkit.cli.commands.add import add_cmd
from binkit.cli.commands.config import config_group
from binkit.cli.commands.list_cmd import list_cmd
from binkit.cli.commands.registry import index_group, update_cmd, versions_cmd
from binkit.cli.commands.remove import remove_cmd
from binkit.cli.output import user_output
from binkit.core.context import BinkitContext, create_context
from binkit.core.errors import BinkitError
from binkit.core.experiments import experiment_names, parse_experiments

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="binkit")
@click.option("--debug", is_flag=True, help="Show debug logging.")
@click.option("--quiet", "-q", is_flag=True, help="Only show warnings and errors.")
@click.option(
    "--experiment",
    "-e",
    "experiments",
    multiple=True,
    type=click.Choice(experiment_names()),
    help="Enable an experiment for this invocation (repeatable).",
)
@click.pass_context
def cli(click_ctx: click.Context, debug: bool, quiet: bool, experiments: tuple[str, ...]) -> None:
    """Install command-line tools by building them from source."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if click_ctx.obj is None:
        try:
            click_ctx.obj = create_context(
                experiments=parse_experiments(experiments), quiet=quiet
            )
        except BinkitError as e:
            user_output(click.style("Error: ", fg="red") + str(e))
            raise SystemExit(1) from e

    ctx: BinkitContext = click_ctx.obj
    if ctx.experiments:
        enabled = ", ".join(sorted(e.value for e in ctx.experiments))
        ctx.feedback.warning(
            f"You have experiments ({click.style(enabled, fg='blue')}) enabled. "
            "These are experimental and may not work as expected."
        )


cli.add_command(add_cmd)
cli.add_command(remove_cmd)
cli.add_command(update_cmd)
cli.add_command(versions_cmd)
cli.add_command(list_cmd)
cli.add_command(index_group)
cli.add_command(config_group)


def main() -> None:
    """CLI entry point used by the `binkit` console script."""
    cli()
