"""Models for test execution results."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

RunnerStatus = Literal["passed", "failed", "errored"]
OutcomeStatus = Literal["passed", "failed", "errored", "skipped"]

EXIT_SUCCESS = 0
EXIT_TESTS_FAILED = 1
EXIT_HARNESS_ERROR = 2


@dataclass(frozen=True, kw_only=True)
class RunnerResult:
    """What a test runner reports for one invocation.

    Contains only the execution outcome - the caller knows which component
    was run and how long it took.
    """

    status: RunnerStatus
    diagnostics: str | None = None


@dataclass(frozen=True, kw_only=True)
class TestOutcome:
    """Final result of one component within a run."""

    __test__ = False

    component: str
    status: OutcomeStatus
    duration: float = 0.0
    diagnostics: str | None = None
    attempts: int = 0


@dataclass(frozen=True, kw_only=True)
class RunReport:
    """Aggregate of every component outcome for one orchestration run."""

    outcomes: Sequence[TestOutcome]

    def __post_init__(self) -> None:
        object.__setattr__(self, "outcomes", tuple(self.outcomes))

    @property
    def succeeded(self) -> bool:
        """Whether there was something to test and all of it passed."""
        return bool(self.outcomes) and all(
            outcome.status == "passed" for outcome in self.outcomes
        )

    @property
    def verdict(self) -> Literal["success", "failure"]:
        return "success" if self.succeeded else "failure"

    @property
    def exit_code(self) -> int:
        return EXIT_SUCCESS if self.succeeded else EXIT_TESTS_FAILED

    def count(self, status: OutcomeStatus) -> int:
        """Number of outcomes with the given status."""
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    def components_with(self, status: OutcomeStatus) -> Sequence[str]:
        """Components whose outcome has the given status, in registry order."""
        return [o.component for o in self.outcomes if o.status == status]
