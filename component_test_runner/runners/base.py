"""Abstract base class for component test runners."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from component_test_runner.models.result import RunnerResult


@dataclass(frozen=True, kw_only=True)
class TestRunner(ABC):
    """Abstract base for the tools that run a single component's tests.

    A runner performs the whole build-and-test cycle of one component and
    reports whether it passed. It must be safe to call concurrently for
    different components and must stop its underlying process when the
    calling task is cancelled.
    """

    __test__ = False

    @abstractmethod
    async def run(self, component: str, *, capture_output: bool) -> RunnerResult:
        """Run the test suite of one component.

        Args:
            component: Component identifier (e.g., "chain")
            capture_output: Whether to collect the tool's output as
                diagnostics instead of letting it stream to the terminal

        Returns:
            ``passed`` or ``failed`` when the suite ran, ``errored`` when it
            could not be executed at all

        """
