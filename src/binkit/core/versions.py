"""Version label lookup for manifests."""

from collections.abc import Iterator

from binkit.core.errors import PackageNoVersions, PackageVersionNotFound
from binkit.core.manifest import LATEST_LABEL, Manifest


def resolve_branch(manifest: Manifest, label: str = LATEST_LABEL) -> str:
    """Return the branch a version label points at.

    Labels are matched exactly; there is no semver or prefix matching.

    Raises:
        PackageNoVersions: If the manifest lists no versions at all
        PackageVersionNotFound: If the label is not listed
    """
    if not manifest.versions:
        raise PackageNoVersions(manifest.id)
    if label not in manifest.versions:
        raise PackageVersionNotFound(manifest.id, label)
    return manifest.versions[label]


class VersionLabels:
    """Lazy, restartable view over a manifest's displayable version labels.

    Each iteration walks the manifest afresh and skips the "latest" pseudo-label,
    which is a default selector rather than a distinct version.
    """

    def __init__(self, manifest: Manifest) -> None:
        self._manifest = manifest

    def __iter__(self) -> Iterator[str]:
        for label in self._manifest.versions:
            if label != LATEST_LABEL:
                yield label

    def __repr__(self) -> str:
        return f"VersionLabels({self._manifest.id!r})"


def versions(manifest: Manifest) -> VersionLabels:
    return VersionLabels(manifest)
