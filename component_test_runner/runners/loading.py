"""Loading of runners from entry points."""

from importlib.metadata import entry_points
from typing import Any

from pydantic import BaseModel

from component_test_runner.errors import ConfigurationError
from component_test_runner.runners.manifest import RunnerManifest

ENTRY_POINT_GROUP = "component_test_runner.runners"


class RunnerNotFoundError(ConfigurationError):
    """Raised when a runner is not found."""


class InvalidRunnerError(ConfigurationError):
    """Raised when a runner entry point does not publish a usable manifest."""


def load_runner_manifest(key: str) -> RunnerManifest[Any]:
    """Load a runner manifest by key.

    Args:
        key: The runner key as registered in pyproject.toml
             (e.g., "cargo", "command")

    Returns:
        The runner manifest instance

    Raises:
        RunnerNotFoundError: If no runner with the given key is found
        InvalidRunnerError: If the entry point is not a manifest with a
            pydantic configuration class

    """
    entries = entry_points(group=ENTRY_POINT_GROUP)

    for entry in entries:
        if entry.name == key:
            return validate_manifest(key, entry.load())

    available = sorted(e.name for e in entries)
    raise RunnerNotFoundError(
        f"Runner '{key}' not found. Available runners: {available}"
    )


def validate_manifest(key: str, manifest: object) -> RunnerManifest[Any]:
    """Check that a loaded entry point can configure and build a runner."""
    if not isinstance(manifest, RunnerManifest):
        raise InvalidRunnerError(
            f"Runner '{key}' entry point is a {type(manifest).__name__}, "
            "not a RunnerManifest"
        )

    config_cls = manifest.config_cls
    if not (isinstance(config_cls, type) and issubclass(config_cls, BaseModel)):
        raise InvalidRunnerError(
            f"Runner '{key}' configuration class must be a pydantic model, "
            f"got {config_cls!r}"
        )

    if not callable(manifest.runner_factory):
        raise InvalidRunnerError(f"Runner '{key}' has no callable runner factory")

    return manifest
