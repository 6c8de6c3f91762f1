"""Domain errors raised by the install and removal pipelines.

Every error carries enough context (identifier, version label, path) for a user
to retry the failed step by hand. The CLI catches BinkitError at the top level
and renders the message; nothing below the CLI swallows these.
"""

from pathlib import Path


class BinkitError(Exception):
    """Base class for all binkit domain errors."""


class RegistrySyncFailure(BinkitError):
    """A clone, fetch or reset failed while synchronizing a repository."""

    def __init__(self, url: str, path: Path, branch: str, detail: str) -> None:
        self.url = url
        self.path = path
        self.branch = branch
        self.detail = detail
        super().__init__(f"Failed to sync {url} (branch '{branch}') into {path}\n{detail}")


class PackageNotFound(BinkitError):
    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Package not found: {identifier}")


class PackageVersionNotFound(BinkitError):
    def __init__(self, identifier: str, label: str) -> None:
        self.identifier = identifier
        self.label = label
        super().__init__(
            f"Version {label} not found, run `binkit versions {identifier}` "
            "to see available versions"
        )


class PackageNoVersions(BinkitError):
    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Package `{identifier}` has no versions")


class NoBinaryIndex(BinkitError):
    def __init__(self, index_file: Path) -> None:
        self.index_file = index_file
        super().__init__(f"There is no binary index at {index_file}")


class ArtifactNotFound(BinkitError):
    """The build finished without reporting a produced executable."""

    def __init__(self, working_copy: Path) -> None:
        self.working_copy = working_copy
        super().__init__(
            f"Build in {working_copy} did not report an executable; "
            "see the toolchain output above for details"
        )


class ToolchainUnavailable(BinkitError):
    def __init__(self, executable: str) -> None:
        self.executable = executable
        super().__init__(f"Build toolchain '{executable}' was not found on PATH")


class FilesystemFailure(BinkitError):
    def __init__(self, operation: str, path: Path, detail: str) -> None:
        self.operation = operation
        self.path = path
        self.detail = detail
        super().__init__(f"Failed to {operation} {path}: {detail}")


class InvalidManifest(BinkitError):
    """A manifest file could not be decoded or does not match its filename."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid package manifest {path}: {detail}")


class CorruptBinaryIndex(BinkitError):
    """The binary index exists but cannot be decoded.

    Raised instead of substituting an empty index, which would silently forget
    every installed package on the next write.
    """

    def __init__(self, index_file: Path, detail: str) -> None:
        self.index_file = index_file
        self.detail = detail
        super().__init__(f"Binary index {index_file} is corrupt: {detail}")


class ConfigError(BinkitError):
    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid configuration in {path}: {detail}")


class InvalidPackageIdentifier(BinkitError):
    """An identifier that cannot name a single file under the install root."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Invalid package identifier: {identifier!r}")
