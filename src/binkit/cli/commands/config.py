import click

from binkit.cli.core import exit_on_error
from binkit.cli.output import machine_output
from binkit.core.context import BinkitContext
from binkit.core.global_config import CONFIG_KEYS, with_config_value


@click.group("config")
def config_group() -> None:
    """Manage binkit configuration."""


@config_group.command("list")
@click.pass_obj
def config_list(ctx: BinkitContext) -> None:
    """Print a list of configuration keys and values."""
    machine_output(click.style("Global configuration:", bold=True))
    if not ctx.config_store.exists():
        machine_output(f"  (no file at {ctx.config_store.path()} - using defaults)")
    for key in CONFIG_KEYS:
        machine_output(f"  {key}={ctx.config.display_value(key)}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@click.pass_obj
def config_get(ctx: BinkitContext, key: str) -> None:
    """Print the value of a given configuration key."""
    if key not in CONFIG_KEYS:
        ctx.feedback.error(f"Invalid key: {key}")
        raise SystemExit(1)
    machine_output(ctx.config.display_value(key))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@click.pass_obj
def config_set(ctx: BinkitContext, key: str, value: str) -> None:
    """Update configuration with a value for the given key.

    Experiments are given as a comma-separated list.
    """
    with exit_on_error(ctx):
        new_config = with_config_value(ctx.config, key, value, ctx.config_store.path())
        ctx.config_store.save(new_config)
    ctx.feedback.success(f"Set {key}={new_config.display_value(key)}")
