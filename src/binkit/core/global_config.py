"""Global configuration data structures and loading.

Provides immutable global config loaded from ~/.binkit/config.toml (or the file
named by $BINKIT_CONFIG). Loaded eagerly at the CLI entry point; every value has
a default so the file is optional.

Example config:
    install_root = "~/.binkit"
    registry_url = "https://github.com/rustutil/.index.git"
    registry_branch = "main"
    toolchain = "cargo"
    experiments = ["target-cache"]
"""

import os
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from binkit.core.errors import ConfigError
from binkit.core.experiments import Experiment, parse_experiments
from binkit.core.layout import InstallLayout
from binkit.core.toolchain import DEFAULT_TOOLCHAIN

CONFIG_ENV_VAR = "BINKIT_CONFIG"
DEFAULT_REGISTRY_URL = "https://github.com/rustutil/.index.git"
DEFAULT_REGISTRY_BRANCH = "main"

CONFIG_KEYS = ("install_root", "registry_url", "registry_branch", "toolchain", "experiments")


def default_install_root() -> Path:
    return Path.home() / ".binkit"


@dataclass(frozen=True)
class GlobalConfig:
    """Immutable global configuration data.

    Loaded once at CLI entry point and stored in BinkitContext.
    All fields are read-only after construction.
    """

    install_root: Path
    registry_url: str
    registry_branch: str
    toolchain: str
    experiments: frozenset[Experiment]

    @staticmethod
    def default() -> "GlobalConfig":
        return GlobalConfig(
            install_root=default_install_root(),
            registry_url=DEFAULT_REGISTRY_URL,
            registry_branch=DEFAULT_REGISTRY_BRANCH,
            toolchain=DEFAULT_TOOLCHAIN,
            experiments=frozenset(),
        )

    @property
    def layout(self) -> InstallLayout:
        return InstallLayout(root=self.install_root)

    def display_value(self, key: str) -> str:
        """Render one config key the way it is written in the TOML file."""
        match key:
            case "install_root":
                return str(self.install_root)
            case "registry_url":
                return self.registry_url
            case "registry_branch":
                return self.registry_branch
            case "toolchain":
                return self.toolchain
            case "experiments":
                return ",".join(sorted(e.value for e in self.experiments))
            case _:
                raise KeyError(key)


def _require_str(data: dict[str, Any], key: str, default: str, path: Path) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(path, f"'{key}' must be a non-empty string")
    return value


def config_from_mapping(data: dict[str, Any], path: Path) -> GlobalConfig:
    """Build a GlobalConfig from decoded TOML, applying defaults for absent keys.

    Raises:
        ConfigError: If a key has the wrong type or names an unknown experiment
    """
    defaults = GlobalConfig.default()

    install_root = _require_str(data, "install_root", str(defaults.install_root), path)

    raw_experiments = data.get("experiments", [])
    if not isinstance(raw_experiments, list) or not all(
        isinstance(name, str) for name in raw_experiments
    ):
        raise ConfigError(path, "'experiments' must be a list of strings")
    try:
        experiments = parse_experiments(raw_experiments)
    except ValueError as e:
        raise ConfigError(path, str(e)) from e

    return GlobalConfig(
        install_root=Path(install_root).expanduser().resolve(),
        registry_url=_require_str(data, "registry_url", defaults.registry_url, path),
        registry_branch=_require_str(data, "registry_branch", defaults.registry_branch, path),
        toolchain=_require_str(data, "toolchain", defaults.toolchain, path),
        experiments=experiments,
    )


def with_config_value(config: GlobalConfig, key: str, value: str, path: Path) -> GlobalConfig:
    """Return a copy of config with one key set from its string form.

    Experiments are given comma-separated.

    Raises:
        ConfigError: If the key is unknown or the value is invalid
    """
    match key:
        case "install_root":
            return replace(config, install_root=Path(value).expanduser().resolve())
        case "registry_url" | "registry_branch" | "toolchain":
            if not value.strip():
                raise ConfigError(path, f"'{key}' must be a non-empty string")
            return replace(config, **{key: value})
        case "experiments":
            names = [name.strip() for name in value.split(",") if name.strip()]
            try:
                return replace(config, experiments=parse_experiments(names))
            except ValueError as e:
                raise ConfigError(path, str(e)) from e
        case _:
            raise ConfigError(path, f"unknown key '{key}' (known: {', '.join(CONFIG_KEYS)})")


class ConfigStore(ABC):
    """Abstract interface for global config operations.

    Provides dependency injection for global config access, enabling
    in-memory implementations for tests without touching filesystem.
    """

    @abstractmethod
    def exists(self) -> bool:
        """Check if global config exists."""
        ...

    @abstractmethod
    def load(self) -> GlobalConfig:
        """Load global config.

        Raises:
            FileNotFoundError: If config doesn't exist
            ConfigError: If config is malformed
        """
        ...

    @abstractmethod
    def save(self, config: GlobalConfig) -> None:
        """Save global config."""
        ...

    @abstractmethod
    def path(self) -> Path:
        """Get the path to the global config file (for messages)."""
        ...

    def load_or_default(self) -> GlobalConfig:
        if not self.exists():
            return GlobalConfig.default()
        return self.load()


class FilesystemConfigStore(ConfigStore):
    """Production implementation that reads/writes the TOML config file."""

    def __init__(self, config_path: Path | None = None) -> None:
        self._path = config_path

    def exists(self) -> bool:
        return self.path().is_file()

    def load(self) -> GlobalConfig:
        config_path = self.path()
        if not config_path.exists():
            raise FileNotFoundError(f"Global config not found at {config_path}")

        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
            raise ConfigError(config_path, str(e)) from e
        return config_from_mapping(data, config_path)

    def save(self, config: GlobalConfig) -> None:
        """Write config, preserving comments and formatting of an existing file.

        Raises:
            ConfigError: If the existing file cannot be parsed or the file cannot
                be written
        """
        config_path = self.path()
        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)

            if config_path.exists():
                doc = tomlkit.parse(config_path.read_text(encoding="utf-8"))
            else:
                doc = tomlkit.document()
                doc.add(tomlkit.comment("Global binkit configuration"))

            doc["install_root"] = str(config.install_root)
            doc["registry_url"] = config.registry_url
            doc["registry_branch"] = config.registry_branch
            doc["toolchain"] = config.toolchain
            doc["experiments"] = sorted(e.value for e in config.experiments)

            config_path.write_text(tomlkit.dumps(doc), encoding="utf-8")
        except (OSError, UnicodeDecodeError, TOMLKitError) as e:
            raise ConfigError(config_path, str(e)) from e

    def path(self) -> Path:
        if self._path is not None:
            return self._path
        override = os.environ.get(CONFIG_ENV_VAR)
        if override:
            return Path(override).expanduser()
        return Path.home() / ".binkit" / "config.toml"


class InMemoryConfigStore(ConfigStore):
    """Test implementation that stores config in memory without touching filesystem."""

    def __init__(self, config: GlobalConfig | None = None) -> None:
        """Initialize in-memory config store.

        Args:
            config: Initial config state (None = config doesn't exist)
        """
        self._config = config

    def exists(self) -> bool:
        return self._config is not None

    def load(self) -> GlobalConfig:
        if self._config is None:
            raise FileNotFoundError(f"Global config not found at {self.path()}")
        return self._config

    def save(self, config: GlobalConfig) -> None:
        self._config = config

    def path(self) -> Path:
        return Path("/fake/binkit/config.toml")
