"""Tests for the install pipeline."""

from pathlib import Path

import pytest

from binkit.core.errors import (
    ArtifactNotFound,
    CorruptBinaryIndex,
    PackageNotFound,
    PackageVersionNotFound,
    RegistrySyncFailure,
)
from binkit.core.experiments import Experiment
from binkit.core.install import PackageRequest, add_package, add_packages, parse_package_spec
from tests.fakes.context import REGISTRY_URL, create_test_context, manifest_files, package_source
from tests.fakes.git import FakeGit
from tests.fakes.toolchain import BUILD_COUNT_FILE, FakeToolchain
from tests.fakes.user_feedback import FakeUserFeedback

PKG_URL = "https://example.test/pkg.git"
OTHER_URL = "https://example.test/other.git"

PKG = {"id": "pkg", "repo": PKG_URL, "versions": {"latest": "main", "1.0.0": "v1"}}
OTHER = {"id": "other", "repo": OTHER_URL, "versions": {"latest": "main"}}


def _git() -> FakeGit:
    return FakeGit(
        remotes={
            REGISTRY_URL: {"main": manifest_files(PKG, OTHER)},
            PKG_URL: {"main": package_source("pkg"), "v1": package_source("pkg")},
            OTHER_URL: {"main": package_source("other")},
        }
    )


def test_parse_package_spec_defaults_to_latest() -> None:
    assert parse_package_spec("pkg") == PackageRequest("pkg", "latest")


def test_parse_package_spec_with_version() -> None:
    request = parse_package_spec("pkg@1.0.0")

    assert request == PackageRequest("pkg", "1.0.0")
    assert str(request) == "pkg@1.0.0"


@pytest.mark.parametrize(
    "spec", ["", "@1.0.0", "pkg@", "  @  ", "pkg@1.0@x", "sub/pkg", "..@1.0.0"]
)
def test_parse_package_spec_rejects_malformed_specs(spec: str) -> None:
    with pytest.raises(ValueError, match="Invalid package spec"):
        parse_package_spec(spec)


def test_add_latest_installs_binary_from_main(tmp_path: Path) -> None:
    git = _git()
    ctx = create_test_context(tmp_path, git=git)

    installed = add_package(ctx, PackageRequest("pkg"))

    assert installed.branch == "main"
    assert installed.filename == "pkg"
    assert (tmp_path / "bin" / "pkg").is_file()
    assert ctx.binary_index.load().filename_for("pkg") == "pkg"
    working_copy = tmp_path / "src" / "pkg"
    assert git.head_commit(working_copy) == git.remote_tip(PKG_URL, "main")


def test_add_explicit_version_checks_out_its_branch(tmp_path: Path) -> None:
    git = _git()
    git.push(PKG_URL, "v1", {**package_source("pkg"), "VERSION": "1.0.0"})
    ctx = create_test_context(tmp_path, git=git)

    installed = add_package(ctx, PackageRequest("pkg", "1.0.0"))

    assert installed.branch == "v1"
    assert (tmp_path / "src" / "pkg" / "VERSION").read_text() == "1.0.0"
    assert git.head_commit(tmp_path / "src" / "pkg") == git.remote_tip(PKG_URL, "v1")


def test_add_names_binary_after_package(tmp_path: Path) -> None:
    toolchain = FakeToolchain(binaries={"pkg": "pkg-cli"}, binary_suffix=".exe")
    ctx = create_test_context(tmp_path, git=_git(), toolchain=toolchain)

    installed = add_package(ctx, PackageRequest("pkg"))

    assert installed.filename == "pkg.exe"
    assert (tmp_path / "bin" / "pkg.exe").is_file()
    assert not (tmp_path / "bin" / "pkg-cli.exe").exists()


def test_add_unknown_version_leaves_index_untouched(tmp_path: Path) -> None:
    ctx = create_test_context(tmp_path, git=_git())
    add_package(ctx, PackageRequest("other"))
    before = ctx.binary_index.path.read_text()

    with pytest.raises(PackageVersionNotFound):
        add_package(ctx, PackageRequest("pkg", "9.9.9"))

    assert ctx.binary_index.path.read_text() == before
    assert not (tmp_path / "src" / "pkg").exists()


def test_add_unknown_package(tmp_path: Path) -> None:
    ctx = create_test_context(tmp_path, git=_git())

    with pytest.raises(PackageNotFound):
        add_package(ctx, PackageRequest("missing"))

    assert not ctx.binary_index.exists()


def test_add_unreachable_source_raises_sync_failure(tmp_path: Path) -> None:
    git = FakeGit(
        remotes={REGISTRY_URL: {"main": manifest_files(PKG)}, PKG_URL: {}},
    )
    ctx = create_test_context(tmp_path, git=git)

    with pytest.raises(RegistrySyncFailure) as exc_info:
        add_package(ctx, PackageRequest("pkg"))

    assert exc_info.value.url == PKG_URL
    assert not ctx.binary_index.exists()


def test_failed_build_keeps_working_copy_and_skips_index(tmp_path: Path) -> None:
    toolchain = FakeToolchain(failing={"pkg"})
    ctx = create_test_context(tmp_path, git=_git(), toolchain=toolchain)

    with pytest.raises(ArtifactNotFound):
        add_package(ctx, PackageRequest("pkg"))

    assert (tmp_path / "src" / "pkg" / "Cargo.toml").exists()
    assert not (tmp_path / "bin" / "pkg").exists()
    assert not ctx.binary_index.exists()
    assert toolchain.clean_calls == []


def test_add_cleans_build_output_by_default(tmp_path: Path) -> None:
    toolchain = FakeToolchain()
    ctx = create_test_context(tmp_path, git=_git(), toolchain=toolchain)

    add_package(ctx, PackageRequest("pkg"))

    assert toolchain.clean_calls == [tmp_path / "src" / "pkg"]
    assert not (tmp_path / "src" / "pkg" / "target").exists()
    assert not (tmp_path / "targets").exists()


def test_reinstall_replaces_binary_and_keeps_single_entry(tmp_path: Path) -> None:
    ctx = create_test_context(tmp_path, git=_git())

    add_package(ctx, PackageRequest("pkg"))
    add_package(ctx, PackageRequest("pkg", "1.0.0"))

    assert ctx.binary_index.load().identifiers() == ["pkg"]


def test_target_cache_reuses_output_between_installs(tmp_path: Path) -> None:
    toolchain = FakeToolchain()
    ctx = create_test_context(
        tmp_path,
        git=_git(),
        toolchain=toolchain,
        experiments=frozenset({Experiment.TARGET_CACHE}),
    )

    add_package(ctx, PackageRequest("pkg"))
    assert not (tmp_path / "src" / "pkg" / "target").exists()
    assert (tmp_path / "targets" / "pkg" / BUILD_COUNT_FILE).read_text() == "1"

    add_package(ctx, PackageRequest("pkg"))

    assert toolchain.reused_output == [False, True]
    assert (tmp_path / "targets" / "pkg" / BUILD_COUNT_FILE).read_text() == "2"
    assert toolchain.clean_calls == []


def test_add_packages_stops_at_first_failure(tmp_path: Path) -> None:
    toolchain = FakeToolchain()
    ctx = create_test_context(tmp_path, git=_git(), toolchain=toolchain)

    with pytest.raises(PackageNotFound):
        add_packages(
            ctx,
            [PackageRequest("pkg"), PackageRequest("missing"), PackageRequest("other")],
        )

    assert ctx.binary_index.load().identifiers() == ["pkg"]
    assert toolchain.build_calls == [tmp_path / "src" / "pkg"]
    assert not (tmp_path / "src" / "other").exists()


def test_add_packages_installs_in_order(tmp_path: Path) -> None:
    ctx = create_test_context(tmp_path, git=_git())

    installed = add_packages(ctx, [PackageRequest("other"), PackageRequest("pkg", "1.0.0")])

    assert [(p.identifier, p.branch) for p in installed] == [("other", "main"), ("pkg", "v1")]
    assert ctx.binary_index.load().identifiers() == ["other", "pkg"]


def test_add_with_corrupt_index_fails_without_overwriting(tmp_path: Path) -> None:
    ctx = create_test_context(tmp_path, git=_git())
    index_file = tmp_path / "bin" / "index.json"
    index_file.parent.mkdir(parents=True)
    index_file.write_text("{corrupt")

    with pytest.raises(CorruptBinaryIndex):
        add_package(ctx, PackageRequest("pkg"))

    assert index_file.read_text() == "{corrupt"


def test_add_reports_progress(tmp_path: Path) -> None:
    feedback = FakeUserFeedback()
    ctx = create_test_context(tmp_path, git=_git(), feedback=feedback)

    add_package(ctx, PackageRequest("pkg"))

    infos = feedback.messages_at("info")
    assert "pkg" in infos[0]
    assert infos[1:] == ["Cloning", "Building", "Installing", "Adding to binary index"]
    assert feedback.messages_at("success") == ["Installed pkg"]
