"""Output routing for CLI commands.

- user_output: progress and diagnostics for humans, written to stderr
- machine_output: listings meant for pipes and scripts, written to stdout
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", nl: bool = True) -> None:
    click.echo(message, nl=nl)
