"""Shared helpers for CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

from binkit.core.context import BinkitContext
from binkit.core.errors import BinkitError


@contextmanager
def exit_on_error(ctx: BinkitContext) -> Iterator[None]:
    """Report a BinkitError raised in the block and exit with status 1.

    Batch commands run inside a single block, so the first failure also ends
    the rest of the batch.
    """
    try:
        yield
    except BinkitError as e:
        ctx.feedback.error(str(e))
        raise SystemExit(1) from e
