"""Opt-in capabilities ("experiments") selectable per invocation."""

from collections.abc import Iterable
from enum import Enum


class Experiment(Enum):
    """Known experiments.

    TARGET_CACHE keeps each package's build-output directory under `targets/`
    between installs so rebuilds can reuse compiled dependencies. The directory
    is deleted when the package is removed.
    """

    TARGET_CACHE = "target-cache"


def experiment_names() -> list[str]:
    return [experiment.value for experiment in Experiment]


def parse_experiments(names: Iterable[str]) -> frozenset[Experiment]:
    """Convert experiment names to Experiment values.

    Raises:
        ValueError: If a name is not a known experiment
    """
    known = {experiment.value: experiment for experiment in Experiment}
    result: set[Experiment] = set()
    for name in names:
        if name not in known:
            msg = f"unknown experiment '{name}' (known: {', '.join(experiment_names())})"
            raise ValueError(msg)
        result.add(known[name])
    return frozenset(result)
