"""Application context with dependency injection."""

from collections.abc import Iterable
from dataclasses import dataclass

from binkit.core.binary_index import BinaryIndexStore
from binkit.core.build_strategy import BuildStrategy, select_build_strategy
from binkit.core.experiments import Experiment
from binkit.core.git import Git, RealGit
from binkit.core.global_config import ConfigStore, FilesystemConfigStore, GlobalConfig
from binkit.core.layout import InstallLayout
from binkit.core.registry import RegistryStore
from binkit.core.toolchain import RealCargoToolchain, Toolchain
from binkit.core.user_feedback import InteractiveFeedback, QuietFeedback, UserFeedback


@dataclass(frozen=True)
class BinkitContext:
    """Immutable context holding all dependencies for binkit operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.

    Attributes:
        git: Git gateway for the registry mirror and working copies
        toolchain: Build toolchain gateway
        feedback: User-facing progress output
        config_store: Where the global config came from (for `config set`)
        config: Global configuration loaded at startup
        experiments: Experiments enabled for this invocation (config file plus flags)
        build_strategy: Build-output handling selected from the experiments
    """

    git: Git
    toolchain: Toolchain
    feedback: UserFeedback
    config_store: ConfigStore
    config: GlobalConfig
    experiments: frozenset[Experiment]
    build_strategy: BuildStrategy

    @property
    def layout(self) -> InstallLayout:
        return self.config.layout

    @property
    def registry(self) -> RegistryStore:
        return RegistryStore(
            git=self.git,
            layout=self.layout,
            url=self.config.registry_url,
            branch=self.config.registry_branch,
        )

    @property
    def binary_index(self) -> BinaryIndexStore:
        return BinaryIndexStore(self.layout.index_file)

    @staticmethod
    def build(
        *,
        git: Git,
        toolchain: Toolchain,
        feedback: UserFeedback,
        config_store: ConfigStore,
        config: GlobalConfig,
        extra_experiments: Iterable[Experiment] = (),
    ) -> "BinkitContext":
        """Assemble a context, selecting the build strategy once."""
        experiments = config.experiments | frozenset(extra_experiments)
        return BinkitContext(
            git=git,
            toolchain=toolchain,
            feedback=feedback,
            config_store=config_store,
            config=config,
            experiments=experiments,
            build_strategy=select_build_strategy(experiments, config.layout, toolchain),
        )


def create_context(*, experiments: Iterable[Experiment] = (), quiet: bool = False) -> BinkitContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        experiments: Experiments enabled on the command line, added to those
            enabled in the config file
        quiet: If True, suppress informational progress output

    Raises:
        ConfigError: If the config file exists but is malformed
    """
    config_store = FilesystemConfigStore()
    config = config_store.load_or_default()

    feedback: UserFeedback
    if quiet:
        feedback = QuietFeedback()
    else:
        feedback = InteractiveFeedback()

    return BinkitContext.build(
        git=RealGit(),
        toolchain=RealCargoToolchain(config.toolchain),
        feedback=feedback,
        config_store=config_store,
        config=config,
        extra_experiments=experiments,
    )
