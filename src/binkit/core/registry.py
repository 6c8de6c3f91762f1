"""Local mirror of the package registry.

The registry is a git repository holding one manifest per package under
`packages/`. Every read refreshes the mirror first, so lookups always see the
remote's current `main`.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from binkit.core.errors import FilesystemFailure, InvalidManifest, PackageNotFound
from binkit.core.git import Git
from binkit.core.layout import InstallLayout
from binkit.core.manifest import Manifest, parse_manifest, validate_identifier
from binkit.core.source_sync import sync

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryStore:
    """Resolves package identifiers to manifests via the registry mirror.

    Attributes:
        git: Git gateway used to refresh the mirror
        layout: Install layout providing the mirror location
        url: Registry repository URL
        branch: Registry branch to mirror (normally "main")
    """

    git: Git
    layout: InstallLayout
    url: str
    branch: str

    def refresh(self) -> None:
        """Clone or hard-reset the mirror to the registry branch tip."""
        logger.debug("Refreshing registry mirror at %s", self.layout.index_root)
        sync(self.git, self.url, self.layout.index_root, self.branch)

    def resolve(self, identifier: str) -> Manifest:
        """Refresh the mirror and read `<identifier>.json`.

        Raises:
            InvalidPackageIdentifier: If the identifier is not a plain file name
            RegistrySyncFailure: If the mirror cannot be refreshed
            PackageNotFound: If no manifest exists for the identifier
            InvalidManifest: If the manifest cannot be decoded
        """
        validate_identifier(identifier)
        self.refresh()
        path = self.layout.manifest_path(identifier)
        if not path.is_file():
            raise PackageNotFound(identifier)

        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise InvalidManifest(path, str(e)) from e
        except OSError as e:
            raise FilesystemFailure("read manifest", path, str(e)) from e
        return parse_manifest(path, content, identifier)

    def resolve_many(self, identifiers: Sequence[str]) -> list[Manifest]:
        """Resolve each identifier independently, stopping at the first failure.

        Each resolution refreshes the mirror again.
        """
        return [self.resolve(identifier) for identifier in identifiers]

    def list_identifiers(self) -> list[str]:
        """Refresh the mirror and list every identifier it holds, sorted."""
        self.refresh()
        manifest_dir = self.layout.manifest_dir
        if not manifest_dir.is_dir():
            return []
        return sorted(path.stem for path in manifest_dir.glob("*.json") if path.is_file())
