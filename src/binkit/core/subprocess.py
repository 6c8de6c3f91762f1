"""Subprocess execution with rich error context.

Gateways (git, build toolchain) call external programs through
run_subprocess_with_context so that a failure reports which operation was
attempted, the full command line, the exit code and whatever the program wrote.
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path


def _stream_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace").strip()
    return value.strip()


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Run a blocking command, capturing its output as text.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of the operation, used as
            "Failed to <operation_context>" in error messages
        cwd: Working directory for command execution
        check: Whether a non-zero exit status is an error (default: True)

    Returns:
        CompletedProcess with decoded stdout and stderr

    Raises:
        RuntimeError: If the command exits non-zero (when check=True) or the
            program is not installed
    """
    cmd_str = " ".join(str(arg) for arg in cmd)
    try:
        return subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=check,
        )
    except subprocess.CalledProcessError as e:
        error_msg = f"Failed to {operation_context}"
        error_msg += f"\nCommand: {cmd_str}"
        error_msg += f"\nExit code: {e.returncode}"

        stdout_text = _stream_text(e.stdout)
        if stdout_text:
            error_msg += f"\nstdout: {stdout_text}"

        stderr_text = _stream_text(e.stderr)
        if stderr_text:
            error_msg += f"\nstderr: {stderr_text}"

        raise RuntimeError(error_msg) from e
    except FileNotFoundError as e:
        error_msg = f"Command not found while trying to {operation_context}: {cmd[0]}"
        error_msg += f"\nFull command: {cmd_str}"
        raise RuntimeError(error_msg) from e
