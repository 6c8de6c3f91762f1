"""Typed package manifests read from the registry mirror.

A manifest file is named `<identifier>.json` and has the shape::

    {"id": "ripgrep", "repo": "https://...", "versions": {"latest": "main", "1.0.0": "v1"}}
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from binkit.core.errors import InvalidManifest, InvalidPackageIdentifier

LATEST_LABEL = "latest"

_RESERVED_IDENTIFIERS = frozenset({".", ".."})


class Manifest(BaseModel):
    """One package's descriptor: identifier, source repository, version labels.

    Attributes:
        id: Package identifier; equals the manifest filename stem
        repo: Git URL of the package source
        versions: Mapping of version label to branch name. Labels are opaque and
            matched exactly; "latest" is the default selector.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    repo: str
    versions: dict[str, str] = Field(default_factory=dict)

    @field_validator("id", "repo")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "must not be empty"
            raise ValueError(msg)
        return v

    @property
    def identifier(self) -> str:
        return self.id


def validate_identifier(identifier: str) -> None:
    """Reject identifiers that would escape their directory when used as a path.

    Raises:
        InvalidPackageIdentifier: If the identifier is empty, is "." or "..", or
            contains a path separator
    """
    if (
        not identifier.strip()
        or identifier in _RESERVED_IDENTIFIERS
        or "/" in identifier
        or "\\" in identifier
    ):
        raise InvalidPackageIdentifier(identifier)


def parse_manifest(path: Path, content: str, identifier: str | None = None) -> Manifest:
    """Decode a manifest file's content.

    Args:
        path: Location of the file, used for error context
        content: Raw JSON text
        identifier: Identifier the manifest was requested as; defaults to the
            filename stem

    Raises:
        InvalidManifest: If the JSON is malformed, fails validation, or the declared
            id is not the requested identifier
    """
    try:
        manifest = Manifest.model_validate_json(content)
    except ValidationError as e:
        raise InvalidManifest(path, str(e)) from e

    expected = identifier if identifier is not None else path.stem
    if manifest.id != expected:
        raise InvalidManifest(path, f"declares id '{manifest.id}' but is stored as '{expected}'")
    return manifest
