"""Install pipeline: resolve, sync, build, relocate, record.

Each package moves through Resolving -> Syncing -> Building -> Installing ->
Installed. A failure at any stage propagates immediately; nothing already done
is rolled back. A failed build leaves the freshly synced working copy on disk,
and the binary index is only written once the binary is in place.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

import click

from binkit.core.artifact import locate, relocate_artifact
from binkit.core.context import BinkitContext
from binkit.core.errors import InvalidPackageIdentifier
from binkit.core.manifest import LATEST_LABEL, validate_identifier
from binkit.core.source_sync import sync
from binkit.core.versions import resolve_branch

logger = logging.getLogger(__name__)


class InstallStage(Enum):
    RESOLVING = "resolving"
    SYNCING = "syncing"
    BUILDING = "building"
    INSTALLING = "installing"
    INSTALLED = "installed"


@dataclass(frozen=True)
class PackageRequest:
    """A package identifier and the version label requested for it."""

    identifier: str
    version: str = LATEST_LABEL

    def __str__(self) -> str:
        return f"{self.identifier}@{self.version}"


@dataclass(frozen=True)
class InstalledPackage:
    """Outcome of a successful install.

    Attributes:
        identifier: Package identifier
        version: Version label that was requested
        branch: Branch the label resolved to
        filename: Binary filename inside the bin directory
    """

    identifier: str
    version: str
    branch: str
    filename: str


def parse_package_spec(spec: str) -> PackageRequest:
    """Split "id" or "id@version" into a request; the version defaults to "latest".

    Examples:
        >>> parse_package_spec("ripgrep")
        PackageRequest(identifier='ripgrep', version='latest')
        >>> parse_package_spec("ripgrep@1.0.0")
        PackageRequest(identifier='ripgrep', version='1.0.0')

    Raises:
        ValueError: If the identifier or an explicit version is empty, the
            identifier is not a plain file name, or the spec has more than one "@"
    """
    if spec.count("@") > 1:
        msg = f"Invalid package spec '{spec}': expected at most one '@'"
        raise ValueError(msg)

    identifier, sep, version = spec.partition("@")
    identifier = identifier.strip()
    if not identifier:
        msg = f"Invalid package spec '{spec}': missing identifier"
        raise ValueError(msg)
    try:
        validate_identifier(identifier)
    except InvalidPackageIdentifier as e:
        msg = f"Invalid package spec '{spec}': {e}"
        raise ValueError(msg) from e
    if not sep:
        return PackageRequest(identifier=identifier)
    if not version.strip():
        msg = f"Invalid package spec '{spec}': empty version after '@'"
        raise ValueError(msg)
    return PackageRequest(identifier=identifier, version=version.strip())


def add_package(ctx: BinkitContext, request: PackageRequest) -> InstalledPackage:
    """Install one package, replacing any previously installed binary for it.

    Raises:
        BinkitError: Any pipeline failure; see binkit.core.errors
    """
    identifier = request.identifier
    layout = ctx.layout
    stage = InstallStage.RESOLVING
    ctx.feedback.info(f"Installing package {click.style(identifier, bold=True)}")

    try:
        manifest = ctx.registry.resolve(identifier)
        branch = resolve_branch(manifest, request.version)
        logger.debug("%s resolved to branch %s of %s", request, branch, manifest.repo)

        stage = InstallStage.SYNCING
        working_copy = layout.working_copy(identifier)
        ctx.feedback.info("Cloning")
        sync(ctx.git, manifest.repo, working_copy, branch)

        stage = InstallStage.BUILDING
        ctx.build_strategy.before_build(identifier, working_copy)
        ctx.feedback.info("Building")
        events = list(ctx.toolchain.build(working_copy))
        artifact = locate(events, working_copy)
        if not artifact.is_absolute():
            artifact = working_copy / artifact

        stage = InstallStage.INSTALLING
        ctx.feedback.info("Installing")
        filename = relocate_artifact(artifact, layout.bin_root, identifier)
        ctx.build_strategy.after_build(identifier, working_copy)

        ctx.feedback.info("Adding to binary index")
        store = ctx.binary_index
        store.save(store.load_or_empty().with_entry(identifier, filename))
    except Exception:
        logger.debug("Install of %s failed while %s", request, stage.value, exc_info=True)
        raise

    logger.debug("%s is %s as %s", request, InstallStage.INSTALLED.value, filename)
    ctx.feedback.success(f"Installed {identifier}")
    return InstalledPackage(
        identifier=identifier,
        version=request.version,
        branch=branch,
        filename=filename,
    )


def add_packages(ctx: BinkitContext, requests: Sequence[PackageRequest]) -> list[InstalledPackage]:
    """Install packages strictly in order, stopping at the first failure.

    Entries after a failing one are not attempted.
    """
    return [add_package(ctx, request) for request in requests]
