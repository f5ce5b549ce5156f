"""Runner manifest definition for the plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from component_test_runner.runners.base import TestRunner

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True, kw_only=True)
class RunnerManifest(Generic[ConfigT]):
    """Manifest describing a runner plugin.

    The manifest contains references to the configuration class and the
    runner factory function for lazy loading of runners based on their key.
    The factory raises ``InvocationError`` when the underlying tool is not
    available.
    """

    config_cls: type[ConfigT]
    runner_factory: Callable[[ConfigT], AbstractAsyncContextManager[TestRunner]]
