"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes.
"""

from binkit.core.git.abc import REMOTE_NAME, Git, remote_tracking_ref
from binkit.core.git.real import RealGit

__all__ = [
    "Git",
    "RealGit",
    "REMOTE_NAME",
    "remote_tracking_ref",
]
