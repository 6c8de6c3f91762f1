"""Persisted record of installed packages.

`bin/index.json` maps each installed identifier to the filename of its binary
inside `bin/`. It is the sole source of truth for what is installed. It does not
record which version produced the binary.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from pydantic import ConfigDict, RootModel, ValidationError

from binkit.core.errors import CorruptBinaryIndex, FilesystemFailure, NoBinaryIndex

logger = logging.getLogger(__name__)


class BinaryIndex(RootModel[dict[str, str]]):
    """Immutable identifier -> installed filename mapping."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def empty(cls) -> "BinaryIndex":
        return cls({})

    def identifiers(self) -> list[str]:
        return list(self.root)

    def filename_for(self, identifier: str) -> str | None:
        return self.root.get(identifier)

    def with_entry(self, identifier: str, filename: str) -> "BinaryIndex":
        """Return a copy recording identifier -> filename, replacing any prior entry."""
        return BinaryIndex({**self.root, identifier: filename})

    def without_entry(self, identifier: str) -> "BinaryIndex":
        return BinaryIndex({k: v for k, v in self.root.items() if k != identifier})

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.root

    def __len__(self) -> int:
        return len(self.root)


@dataclass(frozen=True)
class BinaryIndexStore:
    """Reads and writes the binary index file.

    Writes replace the whole file in place. There is no inter-process locking:
    two concurrent binkit processes can lose each other's updates.
    """

    path: Path

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> BinaryIndex:
        """Load the index.

        Raises:
            NoBinaryIndex: If the index file does not exist
            CorruptBinaryIndex: If the file is not a JSON object of strings
            FilesystemFailure: If the file cannot be read
        """
        if not self.exists():
            raise NoBinaryIndex(self.path)

        try:
            content = self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise CorruptBinaryIndex(self.path, str(e)) from e
        except OSError as e:
            raise FilesystemFailure("read binary index", self.path, str(e)) from e

        try:
            return BinaryIndex.model_validate_json(content)
        except ValidationError as e:
            raise CorruptBinaryIndex(self.path, str(e)) from e

    def load_or_empty(self) -> BinaryIndex:
        """Load the index, treating a missing file as an empty index.

        A present but undecodable file still raises CorruptBinaryIndex.
        """
        if not self.exists():
            return BinaryIndex.empty()
        return self.load()

    def save(self, index: BinaryIndex) -> None:
        """Persist the whole index, creating the bin directory when needed."""
        logger.debug("Writing binary index with %d entries to %s", len(index), self.path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(index.root, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise FilesystemFailure("write binary index", self.path, str(e)) from e
