"""Locate the executable a build produced and move it into the binary directory."""

import errno
import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from binkit.core.errors import ArtifactNotFound, FilesystemFailure
from binkit.core.toolchain import BuildEvent

logger = logging.getLogger(__name__)


def locate(events: Iterable[BuildEvent], working_copy: Path) -> Path:
    """Return the executable reported by the first event that carries one.

    When a build produces several binaries only the first reported one is used.

    Raises:
        ArtifactNotFound: If no event reports an executable
    """
    for event in events:
        if event.executable is not None:
            logger.debug("Build reported executable %s", event.executable)
            return event.executable
    raise ArtifactNotFound(working_copy)


def installed_name(identifier: str, artifact: Path) -> str:
    """Name an artifact after its package, keeping any executable suffix.

    Example:
        >>> installed_name("ripgrep", Path("target/release/rg.exe"))
        'ripgrep.exe'
    """
    return f"{identifier}{artifact.suffix}"


def relocate_artifact(artifact: Path, bin_root: Path, identifier: str) -> str:
    """Move the artifact into bin_root under its installed name.

    Within one filesystem this is a single rename that replaces any previous
    binary. Across filesystems the file is copied next to its destination and
    then renamed into place before the source is deleted.

    Returns:
        The installed filename (relative to bin_root)

    Raises:
        FilesystemFailure: If the move fails
    """
    filename = installed_name(identifier, artifact)
    destination = bin_root / filename

    try:
        bin_root.mkdir(parents=True, exist_ok=True)
        try:
            os.replace(artifact, destination)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise
            logger.debug("Cross-device move of %s, copying instead", artifact)
            staging = bin_root / f".{filename}.partial"
            shutil.copy2(artifact, staging)
            os.replace(staging, destination)
            artifact.unlink()
    except OSError as e:
        raise FilesystemFailure("install binary to", destination, str(e)) from e

    return filename
