"""User-facing progress output with mode awareness."""

from abc import ABC, abstractmethod

import click

from binkit.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing progress output that's mode-aware.

    Pipelines call ctx.feedback methods instead of printing, so the quiet flag
    does not have to be threaded through every function signature.

    Two modes:
    - Interactive: show all messages (info, success, warnings, errors)
    - Quiet: suppress info and success, keep warnings and errors
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message (suppressed in quiet mode)."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message (suppressed in quiet mode)."""

    @abstractmethod
    def warning(self, message: str) -> None:
        """Show warning message (always shown)."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message (always shown)."""


class InteractiveFeedback(UserFeedback):
    """Feedback shown in interactive mode (all messages)."""

    def info(self, message: str) -> None:
        user_output(click.style("- info ", fg="blue") + message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def warning(self, message: str) -> None:
        user_output(click.style("- warn ", fg="yellow") + message)

    def error(self, message: str) -> None:
        user_output(click.style("Error: ", fg="red") + message)


class QuietFeedback(InteractiveFeedback):
    """Feedback for --quiet: only warnings and errors reach the terminal."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass
