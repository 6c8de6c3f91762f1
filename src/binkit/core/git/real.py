"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

from pathlib import Path

from binkit.core.git.abc import Git
from binkit.core.subprocess import run_subprocess_with_context


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def clone(self, url: str, destination: Path, branch: str) -> None:
        """Clone a repository with the given branch checked out."""
        run_subprocess_with_context(
            ["git", "clone", "--quiet", "--branch", branch, url, str(destination)],
            operation_context=f"clone '{url}' at branch '{branch}'",
        )

    def fetch(self, repo_root: Path, remote: str, branch: str) -> None:
        """Fetch a single branch from a named remote.

        Uses an explicit refspec so the remote-tracking ref is updated even when
        the clone was made with a narrowed fetch configuration.
        """
        refspec = f"+refs/heads/{branch}:refs/remotes/{remote}/{branch}"
        run_subprocess_with_context(
            ["git", "fetch", "--quiet", remote, refspec],
            operation_context=f"fetch branch '{branch}' from '{remote}'",
            cwd=repo_root,
        )

    def hard_reset(self, repo_root: Path, ref: str) -> None:
        """Reset the working copy, index and HEAD to the given ref."""
        run_subprocess_with_context(
            ["git", "reset", "--hard", "--quiet", ref],
            operation_context=f"hard reset to '{ref}'",
            cwd=repo_root,
        )

    def head_commit(self, repo_root: Path) -> str:
        """Return the full commit sha of HEAD."""
        result = run_subprocess_with_context(
            ["git", "rev-parse", "HEAD"],
            operation_context="read HEAD commit",
            cwd=repo_root,
        )
        return result.stdout.strip()
