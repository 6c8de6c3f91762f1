"""Removal pipeline: forget the package, then delete what it left on disk."""

import logging
import shutil
from collections.abc import Sequence

import click

from binkit.core.context import BinkitContext
from binkit.core.errors import FilesystemFailure, PackageNotFound
from binkit.core.manifest import validate_identifier

logger = logging.getLogger(__name__)


def remove_package(ctx: BinkitContext, identifier: str) -> None:
    """Uninstall one package.

    The index entry is removed and persisted first, then the binary, the working
    copy and (with the target cache) the cache entry are deleted. A missing
    working copy or cache entry counts as already clean.

    Raises:
        InvalidPackageIdentifier: If the identifier is not a plain file name
        NoBinaryIndex: If nothing was ever installed
        PackageNotFound: If the identifier is not installed
        FilesystemFailure: If a file or directory cannot be deleted
    """
    validate_identifier(identifier)
    ctx.feedback.info(f"Removing package {click.style(identifier, bold=True)}")
    layout = ctx.layout

    store = ctx.binary_index
    index = store.load()
    filename = index.filename_for(identifier)
    if filename is None:
        raise PackageNotFound(identifier)

    ctx.feedback.info("Removing from binary index")
    store.save(index.without_entry(identifier))

    binary = layout.bin_root / filename
    if binary.exists():
        try:
            binary.unlink()
        except OSError as e:
            raise FilesystemFailure("delete binary", binary, str(e)) from e
    else:
        ctx.feedback.warning(f"Binary {binary} was already missing")

    working_copy = layout.working_copy(identifier)
    if working_copy.exists():
        logger.debug("Deleting working copy %s", working_copy)
        try:
            shutil.rmtree(working_copy)
        except OSError as e:
            raise FilesystemFailure("delete working copy", working_copy, str(e)) from e

    ctx.build_strategy.purge(identifier)
    ctx.feedback.success(f"Removed {identifier}")


def remove_packages(ctx: BinkitContext, identifiers: Sequence[str]) -> None:
    """Uninstall packages strictly in order, stopping at the first failure."""
    for identifier in identifiers:
        remove_package(ctx, identifier)
