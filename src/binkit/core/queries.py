"""Read-only operations over the registry and the binary index."""

from binkit.core.binary_index import BinaryIndex
from binkit.core.context import BinkitContext
from binkit.core.versions import VersionLabels, versions


def update_registry(ctx: BinkitContext) -> None:
    """Bring the registry mirror up to date with the remote."""
    ctx.feedback.info("Updating index")
    ctx.registry.refresh()


def list_versions(ctx: BinkitContext, identifier: str) -> VersionLabels:
    return versions(ctx.registry.resolve(identifier))


def list_available(ctx: BinkitContext) -> list[str]:
    return ctx.registry.list_identifiers()


def installed_index(ctx: BinkitContext) -> BinaryIndex:
    """Load the binary index; raises NoBinaryIndex if nothing was ever installed."""
    return ctx.binary_index.load()


def list_installed(ctx: BinkitContext) -> list[str]:
    return installed_index(ctx).identifiers()
