"""On-disk layout of a binkit installation.

All locations derive from a single install root::

    <root>/index/               mirror of the registry repository
    <root>/index/packages/      manifest files (<identifier>.json)
    <root>/src/<identifier>/    per-package working copy
    <root>/bin/                 installed binaries
    <root>/bin/index.json       binary index (identifier -> filename)
    <root>/targets/<identifier> cached build output (target-cache experiment)
"""

from dataclasses import dataclass
from pathlib import Path

INDEX_DIR = "index"
PACKAGE_DIR = "packages"
SOURCES_DIR = "src"
BINARY_DIR = "bin"
TARGETS_DIR = "targets"
BINARY_INDEX_FILE = "index.json"


@dataclass(frozen=True)
class InstallLayout:
    """Resolved directory locations, constructed once at startup.

    Threaded explicitly through every pipeline call instead of being looked up
    from the running executable's location.
    """

    root: Path

    @property
    def index_root(self) -> Path:
        return self.root / INDEX_DIR

    @property
    def manifest_dir(self) -> Path:
        return self.index_root / PACKAGE_DIR

    @property
    def source_root(self) -> Path:
        return self.root / SOURCES_DIR

    @property
    def bin_root(self) -> Path:
        return self.root / BINARY_DIR

    @property
    def index_file(self) -> Path:
        return self.bin_root / BINARY_INDEX_FILE

    @property
    def cache_root(self) -> Path:
        return self.root / TARGETS_DIR

    def working_copy(self, identifier: str) -> Path:
        return self.source_root / identifier

    def cache_entry(self, identifier: str) -> Path:
        return self.cache_root / identifier

    def manifest_path(self, identifier: str) -> Path:
        return self.manifest_dir / f"{identifier}.json"
