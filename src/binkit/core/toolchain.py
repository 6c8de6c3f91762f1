"""Build toolchain execution abstraction.

This module provides abstraction over the external build toolchain (cargo by
default), enabling dependency injection for testing without mock.patch.
"""

import json
import logging
import shutil
import subprocess
import sys
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO

from binkit.core.errors import ToolchainUnavailable
from binkit.core.subprocess import run_subprocess_with_context

logger = logging.getLogger(__name__)

DEFAULT_TOOLCHAIN = "cargo"


@dataclass(frozen=True)
class BuildEvent:
    """One structured message emitted by the toolchain during a build.

    Attributes:
        reason: Message kind as reported by the toolchain (e.g. "compiler-artifact",
            "build-finished"), or None for an empty event
        executable: Path of a produced executable, when the message reports one
        payload: The decoded message as-is
    """

    reason: str | None = None
    executable: Path | None = None
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.reason is None and self.executable is None and not self.payload


def decode_build_event(line: str) -> BuildEvent:
    """Decode one line of the toolchain's message stream.

    A line that is not a JSON object decodes to an empty event so a single
    malformed line does not abort the scan.
    """
    if not line.strip():
        return BuildEvent()

    try:
        parsed = json.loads(line)
    except json.JSONDecodeError:
        logger.debug("Ignoring undecodable build message: %r", line[:200])
        return BuildEvent()

    if not isinstance(parsed, dict):
        return BuildEvent()

    reason = parsed.get("reason")
    executable = parsed.get("executable")
    return BuildEvent(
        reason=reason if isinstance(reason, str) else None,
        executable=Path(executable) if isinstance(executable, str) and executable else None,
        payload=parsed,
    )


class Toolchain(ABC):
    """Abstract interface for the external build toolchain."""

    @property
    @abstractmethod
    def output_dir_name(self) -> str:
        """Name of the build-output directory inside a working copy (e.g. "target")."""
        ...

    @abstractmethod
    def build(self, working_copy: Path) -> Iterator[BuildEvent]:
        """Build the working copy in release mode and yield build events in order.

        The process's exit status is not turned into an error here; callers decide
        success by whether an executable was reported.

        Raises:
            ToolchainUnavailable: If the toolchain executable is not installed
        """
        ...

    @abstractmethod
    def clean(self, working_copy: Path) -> None:
        """Remove the working copy's build output.

        Raises:
            RuntimeError: If the clean command fails
        """
        ...


class RealCargoToolchain(Toolchain):
    """Production implementation driving a cargo-compatible CLI via subprocess.

    Runs `<executable> build --release --message-format=json -q` with stdout piped
    and parsed line by line. stderr carries the compiler diagnostics and is copied
    to `diagnostics` (sys.stderr by default) as it arrives. Both pipes are decoded
    as UTF-8 with invalid bytes replaced, so a bad byte costs one event at most.
    """

    def __init__(self, executable: str = DEFAULT_TOOLCHAIN, diagnostics: TextIO | None = None):
        self._executable = executable
        self._diagnostics = diagnostics

    @property
    def output_dir_name(self) -> str:
        return "target"

    def build(self, working_copy: Path) -> Iterator[BuildEvent]:
        if shutil.which(self._executable) is None:
            raise ToolchainUnavailable(self._executable)

        cmd_args = [self._executable, "build", "--release", "--message-format=json", "-q"]
        logger.debug("Running %s in %s", cmd_args, working_copy)

        process = subprocess.Popen(
            cmd_args,
            cwd=working_copy,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
            bufsize=1,  # Line buffered
        )

        diagnostics = self._diagnostics if self._diagnostics is not None else sys.stderr

        def forward_stderr() -> None:
            if process.stderr:
                for line in process.stderr:
                    diagnostics.write(line)
                diagnostics.flush()

        stderr_thread = threading.Thread(target=forward_stderr, daemon=True)
        stderr_thread.start()

        if process.stdout:
            for line in process.stdout:
                yield decode_build_event(line)

        returncode = process.wait()
        stderr_thread.join()

        if returncode != 0:
            logger.debug("%s build exited with status %d", self._executable, returncode)

    def clean(self, working_copy: Path) -> None:
        run_subprocess_with_context(
            [self._executable, "clean"],
            operation_context=f"clean build output in {working_copy}",
            cwd=working_copy,
        )
