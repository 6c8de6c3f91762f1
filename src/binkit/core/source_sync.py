"""Keep a local working copy identical to the tip of a remote branch."""

import logging
from pathlib import Path

from binkit.core.errors import FilesystemFailure, RegistrySyncFailure
from binkit.core.git import REMOTE_NAME, Git, remote_tracking_ref

logger = logging.getLogger(__name__)


def sync(git: Git, repository_url: str, local_path: Path, branch: str) -> None:
    """Clone or fast-forward local_path to the tip of the remote branch.

    A missing local_path is cloned with the branch checked out. An existing one is
    fetched from origin and hard-reset to the fetched tip, so local modifications
    and local-only commits are discarded. After a successful call HEAD equals
    the remote branch tip.

    Raises:
        RegistrySyncFailure: If any git step fails. Nothing is retried.
    """
    try:
        if not local_path.exists():
            logger.debug("Cloning %s (branch %s) into %s", repository_url, branch, local_path)
            try:
                local_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemFailure("create directory", local_path.parent, str(e)) from e
            git.clone(repository_url, local_path, branch)
            return

        logger.debug("Fetching %s from %s into %s", branch, REMOTE_NAME, local_path)
        git.fetch(local_path, REMOTE_NAME, branch)
        git.hard_reset(local_path, remote_tracking_ref(branch))
    except RuntimeError as e:
        raise RegistrySyncFailure(repository_url, local_path, branch, str(e)) from e
