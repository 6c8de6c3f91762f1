"""High-level git operations interface.

This module provides a small abstraction over the git commands binkit needs to
keep a local working copy identical to a remote branch tip.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using the git CLI
- FakeGit (tests/fakes/git.py): In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from pathlib import Path

REMOTE_NAME = "origin"


def remote_tracking_ref(branch: str) -> str:
    """Return the remote-tracking ref for a branch fetched from origin.

    Example:
        >>> remote_tracking_ref("main")
        'refs/remotes/origin/main'
    """
    return f"refs/remotes/{REMOTE_NAME}/{branch}"


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    Failures are raised as RuntimeError carrying the command context.
    """

    @abstractmethod
    def clone(self, url: str, destination: Path, branch: str) -> None:
        """Clone a repository with the given branch checked out.

        Args:
            url: Remote repository URL (or local path)
            destination: Directory to clone into; must not exist yet
            branch: Branch to check out after cloning

        Raises:
            RuntimeError: If the clone fails (network, auth, unknown branch)
        """
        ...

    @abstractmethod
    def fetch(self, repo_root: Path, remote: str, branch: str) -> None:
        """Fetch a single branch from a named remote.

        Updates the remote-tracking ref refs/remotes/<remote>/<branch>.

        Raises:
            RuntimeError: If the fetch fails or the branch does not exist remotely
        """
        ...

    @abstractmethod
    def hard_reset(self, repo_root: Path, ref: str) -> None:
        """Reset the working copy, index and HEAD to the given ref.

        Discards local modifications and local-only commits.
        """
        ...

    @abstractmethod
    def head_commit(self, repo_root: Path) -> str:
        """Return the full commit sha of HEAD."""
        ...
