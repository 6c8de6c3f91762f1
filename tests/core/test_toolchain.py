"""Tests for build event decoding and the subprocess-backed toolchain."""

import io
import json
import shutil
import stat
from pathlib import Path

import pytest

from binkit.core.errors import ToolchainUnavailable
from binkit.core.toolchain import BuildEvent, RealCargoToolchain, decode_build_event

requires_sh = pytest.mark.skipif(shutil.which("sh") is None, reason="requires a POSIX shell")


def _write_script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def test_decode_artifact_with_executable() -> None:
    line = json.dumps(
        {"reason": "compiler-artifact", "executable": "/w/target/release/rg", "fresh": False}
    )

    event = decode_build_event(line)

    assert event.reason == "compiler-artifact"
    assert event.executable == Path("/w/target/release/rg")
    assert event.payload["fresh"] is False


def test_decode_null_executable() -> None:
    event = decode_build_event('{"reason": "compiler-artifact", "executable": null}')

    assert event.reason == "compiler-artifact"
    assert event.executable is None


def test_decode_malformed_line_is_empty_event() -> None:
    assert decode_build_event("warning: not json").is_empty


def test_decode_non_object_is_empty_event() -> None:
    assert decode_build_event("[1, 2, 3]") == BuildEvent()


def test_decode_blank_line_is_empty_event() -> None:
    assert decode_build_event("\n").is_empty


def test_build_missing_executable_raises_toolchain_unavailable(tmp_path: Path) -> None:
    toolchain = RealCargoToolchain("binkit-test-no-such-toolchain")

    with pytest.raises(ToolchainUnavailable) as exc_info:
        list(toolchain.build(tmp_path))

    assert exc_info.value.executable == "binkit-test-no-such-toolchain"


@requires_sh
def test_build_streams_events_and_forwards_diagnostics(tmp_path: Path) -> None:
    script = _write_script(
        tmp_path / "fake-cargo",
        'echo "   Compiling pkg v0.1.0" >&2\n'
        'echo \'{"reason":"compiler-artifact","executable":null}\'\n'
        "echo 'garbage'\n"
        "echo '{\"reason\":\"compiler-artifact\",\"executable\":\"/opt/out/pkg\"}'\n"
        'echo \'{"reason":"build-finished","success":true}\'\n',
    )
    working_copy = tmp_path / "pkg"
    working_copy.mkdir()
    diagnostics = io.StringIO()

    events = list(RealCargoToolchain(str(script), diagnostics=diagnostics).build(working_copy))

    assert [e.reason for e in events] == [
        "compiler-artifact",
        None,
        "compiler-artifact",
        "build-finished",
    ]
    assert events[2].executable == Path("/opt/out/pkg")
    assert "Compiling pkg" in diagnostics.getvalue()


@requires_sh
def test_build_nonzero_exit_is_not_an_error(tmp_path: Path) -> None:
    script = _write_script(
        tmp_path / "fake-cargo",
        "echo 'error[E0425]: cannot find value' >&2\n"
        'echo \'{"reason":"build-finished","success":false}\'\n'
        "exit 101\n",
    )
    diagnostics = io.StringIO()

    events = list(RealCargoToolchain(str(script), diagnostics=diagnostics).build(tmp_path))

    assert all(event.executable is None for event in events)
    assert "E0425" in diagnostics.getvalue()


@requires_sh
def test_clean_failure_raises_runtime_error(tmp_path: Path) -> None:
    script = _write_script(tmp_path / "fake-cargo", "echo 'cannot clean' >&2\nexit 1\n")

    with pytest.raises(RuntimeError, match="clean build output"):
        RealCargoToolchain(str(script)).clean(tmp_path)


@requires_sh
def test_clean_runs_in_working_copy(tmp_path: Path) -> None:
    script = _write_script(tmp_path / "fake-cargo", "rm -rf target\n")
    working_copy = tmp_path / "pkg"
    (working_copy / "target").mkdir(parents=True)

    RealCargoToolchain(str(script)).clean(working_copy)

    assert not (working_copy / "target").exists()


@requires_sh
def test_build_survives_invalid_utf8_on_both_streams(tmp_path: Path) -> None:
    script = _write_script(
        tmp_path / "fake-cargo",
        "printf 'warning: bad \\377 byte\\n' >&2\n"
        "printf 'bad \\377 line\\n'\n"
        "echo '{\"reason\":\"compiler-artifact\",\"executable\":\"/opt/out/pkg\"}'\n"
        "echo '   Finished release' >&2\n",
    )
    diagnostics = io.StringIO()

    events = list(RealCargoToolchain(str(script), diagnostics=diagnostics).build(tmp_path))

    assert events[0].is_empty
    assert events[1].executable == Path("/opt/out/pkg")
    assert "bad \ufffd byte" in diagnostics.getvalue()
    assert "Finished release" in diagnostics.getvalue()
