"""Build-output handling around a package build.

Two strategies implement the same hook pair:

- CleanBuildStrategy: nothing before the build; cleans the build output after.
- TargetCacheStrategy: moves the cached output into the working copy before the
  build and moves it back out to `targets/<identifier>` after.

The strategy is selected once per invocation from the enabled experiments.
"""

import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from binkit.core.errors import FilesystemFailure
from binkit.core.experiments import Experiment
from binkit.core.layout import InstallLayout
from binkit.core.toolchain import Toolchain

logger = logging.getLogger(__name__)


class BuildStrategy(ABC):
    """Hooks run around the build of one package."""

    @abstractmethod
    def before_build(self, identifier: str, working_copy: Path) -> None:
        """Prepare the working copy before the toolchain runs."""
        ...

    @abstractmethod
    def after_build(self, identifier: str, working_copy: Path) -> None:
        """Dispose of the build output once the artifact has been relocated."""
        ...

    @abstractmethod
    def purge(self, identifier: str) -> None:
        """Delete anything this strategy keeps for a removed package."""
        ...


class CleanBuildStrategy(BuildStrategy):
    """Reclaims disk space by cleaning the build output after every install."""

    def __init__(self, toolchain: Toolchain) -> None:
        self._toolchain = toolchain

    def before_build(self, identifier: str, working_copy: Path) -> None:
        pass

    def after_build(self, identifier: str, working_copy: Path) -> None:
        logger.debug("Cleaning build output of %s", identifier)
        try:
            self._toolchain.clean(working_copy)
        except RuntimeError as e:
            raise FilesystemFailure("clean build output in", working_copy, str(e)) from e

    def purge(self, identifier: str) -> None:
        pass


class TargetCacheStrategy(BuildStrategy):
    """Keeps build output under the cache root between installs."""

    def __init__(self, layout: InstallLayout, toolchain: Toolchain) -> None:
        self._layout = layout
        self._toolchain = toolchain

    def _output_dir(self, working_copy: Path) -> Path:
        return working_copy / self._toolchain.output_dir_name

    def before_build(self, identifier: str, working_copy: Path) -> None:
        cache_entry = self._layout.cache_entry(identifier)
        if not cache_entry.exists():
            return

        output_dir = self._output_dir(working_copy)
        logger.debug("Restoring cached build output %s -> %s", cache_entry, output_dir)
        try:
            if output_dir.exists():
                shutil.rmtree(output_dir)
            shutil.move(cache_entry, output_dir)
        except OSError as e:
            raise FilesystemFailure("restore build cache into", output_dir, str(e)) from e

    def after_build(self, identifier: str, working_copy: Path) -> None:
        output_dir = self._output_dir(working_copy)
        if not output_dir.exists():
            return

        cache_entry = self._layout.cache_entry(identifier)
        logger.debug("Caching build output %s -> %s", output_dir, cache_entry)
        try:
            self._layout.cache_root.mkdir(parents=True, exist_ok=True)
            if cache_entry.exists():
                shutil.rmtree(cache_entry)
            shutil.move(output_dir, cache_entry)
        except OSError as e:
            raise FilesystemFailure("save build cache to", cache_entry, str(e)) from e

    def purge(self, identifier: str) -> None:
        cache_entry = self._layout.cache_entry(identifier)
        if not cache_entry.exists():
            return
        try:
            shutil.rmtree(cache_entry)
        except OSError as e:
            raise FilesystemFailure("delete build cache", cache_entry, str(e)) from e


def select_build_strategy(
    experiments: frozenset[Experiment], layout: InstallLayout, toolchain: Toolchain
) -> BuildStrategy:
    if Experiment.TARGET_CACHE in experiments:
        return TargetCacheStrategy(layout, toolchain)
    return CleanBuildStrategy(toolchain)
