"""Tests for cloning and hard-resetting working copies."""

from pathlib import Path

import pytest

from binkit.core.errors import RegistrySyncFailure
from binkit.core.source_sync import sync
from tests.fakes.git import FakeGit

URL = "https://example.test/tool.git"


def test_sync_clones_missing_working_copy(tmp_path: Path) -> None:
    git = FakeGit(remotes={URL: {"main": {"README": "v1"}}})
    working_copy = tmp_path / "src" / "tool"

    sync(git, URL, working_copy, "main")

    assert git.clone_calls == [(URL, working_copy, "main")]
    assert git.fetch_calls == []
    assert (working_copy / "README").read_text() == "v1"
    assert git.head_commit(working_copy) == git.remote_tip(URL, "main")


def test_sync_fetches_and_resets_existing_working_copy(tmp_path: Path) -> None:
    git = FakeGit(remotes={URL: {"main": {"README": "v1"}}})
    working_copy = tmp_path / "tool"
    sync(git, URL, working_copy, "main")

    git.push(URL, "main", {"README": "v2"})
    sync(git, URL, working_copy, "main")

    assert len(git.clone_calls) == 1
    assert git.fetch_calls == [(working_copy, "origin", "main")]
    assert git.reset_calls == [(working_copy, "refs/remotes/origin/main")]
    assert (working_copy / "README").read_text() == "v2"
    assert git.head_commit(working_copy) == git.remote_tip(URL, "main")


def test_sync_discards_local_modifications(tmp_path: Path) -> None:
    git = FakeGit(remotes={URL: {"main": {"README": "upstream"}}})
    working_copy = tmp_path / "tool"
    sync(git, URL, working_copy, "main")

    (working_copy / "README").write_text("local edit")
    sync(git, URL, working_copy, "main")

    assert (working_copy / "README").read_text() == "upstream"


def test_sync_switches_existing_working_copy_to_other_branch(tmp_path: Path) -> None:
    git = FakeGit(remotes={URL: {"main": {"VERSION": "2"}, "v1": {"VERSION": "1"}}})
    working_copy = tmp_path / "tool"
    sync(git, URL, working_copy, "main")

    sync(git, URL, working_copy, "v1")

    assert (working_copy / "VERSION").read_text() == "1"
    assert git.head_commit(working_copy) == git.remote_tip(URL, "v1")


def test_sync_unknown_branch_raises_sync_failure(tmp_path: Path) -> None:
    git = FakeGit(remotes={URL: {"main": {}}})

    with pytest.raises(RegistrySyncFailure) as exc_info:
        sync(git, URL, tmp_path / "tool", "does-not-exist")

    assert exc_info.value.branch == "does-not-exist"
    assert exc_info.value.url == URL


def test_sync_unreachable_remote_raises(tmp_path: Path) -> None:
    failing = FakeGit(remotes={URL: {"main": {}}}, unreachable_urls={URL})
    with pytest.raises(RegistrySyncFailure, match="Failed to sync"):
        sync(failing, URL, tmp_path / "other", "main")
