"""Test orchestrator for running every component's tests through one runner."""

import asyncio
import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from component_test_runner.models.policy import RunPolicy
from component_test_runner.models.registry import ComponentRegistry
from component_test_runner.models.result import (
    OutcomeStatus,
    RunnerResult,
    RunReport,
    TestOutcome,
)
from component_test_runner.runners.base import TestRunner

log = logging.getLogger(__name__)

HALTING_STATUSES: frozenset[OutcomeStatus] = frozenset({"failed", "errored"})

SKIPPED_FAIL_FAST = "Not run: an earlier component failed (fail-fast)"
SKIPPED_CANCELLED = "Not run: the run was cancelled"
INTERRUPTED_CANCELLED = "Interrupted: the run was cancelled"


@dataclass(frozen=True, kw_only=True)
class ProgressEvent:
    """A component starting or finishing, reported while a run is underway."""

    component: str
    phase: Literal["started", "finished"]
    status: OutcomeStatus | None = None
    elapsed: float = 0.0
    attempt: int = 1


ProgressCallback = Callable[[ProgressEvent], None]


@dataclass(frozen=True, kw_only=True)
class TestOrchestrator:
    """Orchestrates the test suites of all registered components on one runner."""

    __test__ = False

    runner: TestRunner
    on_progress: ProgressCallback | None = None

    async def run_all(
        self,
        registry: ComponentRegistry,
        policy: RunPolicy | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> RunReport:
        """Run the tests of every component and aggregate the outcomes.

        Args:
            registry: Components to test
            policy: Scheduling policy, defaults to a sequential run of everything
            cancel_event: When set, running components are stopped and the
                rest are skipped

        Returns:
            Report with exactly one outcome per component, in registry order

        Raises:
            ConfigurationError: If the registry is empty or has duplicates

        """
        components = registry.list()
        policy = policy or RunPolicy()
        cancel_event = cancel_event or asyncio.Event()

        log.info(
            "Running tests for %d component(s) (parallelism=%d, fail_fast=%s)",
            len(registry),
            policy.parallelism,
            policy.fail_fast,
        )

        outcomes: dict[str, TestOutcome] = {}
        pending = deque(components)
        running: dict[asyncio.Task[TestOutcome], str] = {}
        halted = False
        cancel_wait = asyncio.create_task(cancel_event.wait())

        try:
            while pending or running:
                while (
                    pending
                    and len(running) < policy.parallelism
                    and not halted
                    and not cancel_event.is_set()
                ):
                    component = pending.popleft()
                    task = asyncio.create_task(self._run_component(component, policy))
                    running[task] = component

                if not running:
                    break

                done, _ = await asyncio.wait(
                    {*running, cancel_wait}, return_when=asyncio.FIRST_COMPLETED
                )
                for task in done:
                    if task is cancel_wait:
                        continue
                    outcome = task.result()
                    outcomes[running.pop(task)] = outcome
                    if policy.fail_fast and outcome.status in HALTING_STATUSES:
                        if not halted:
                            log.info(
                                "%s %s, not starting further components",
                                outcome.component,
                                outcome.status,
                            )
                        halted = True

                if cancel_event.is_set():
                    log.warning("Run cancelled, stopping %d component(s)", len(running))
                    outcomes.update(await self._cancel_running(running))
                    running.clear()
                    break
        finally:
            cancel_wait.cancel()
            if running:
                await self._cancel_running(running)

        reason = SKIPPED_CANCELLED if cancel_event.is_set() else SKIPPED_FAIL_FAST
        for component in components:
            if component not in outcomes:
                outcomes[component] = self._skip(component, reason)

        report = RunReport(outcomes=[outcomes[c] for c in components])
        log.info("Test execution completed: %s", report.verdict)
        return report

    async def _cancel_running(
        self, running: dict[asyncio.Task[TestOutcome], str]
    ) -> dict[str, TestOutcome]:
        """Cancel in-flight runs, keeping any that completed in the meantime."""
        for task in running:
            task.cancel()
        await asyncio.gather(*running, return_exceptions=True)

        outcomes: dict[str, TestOutcome] = {}
        for task, component in running.items():
            if not task.cancelled() and task.exception() is None:
                outcomes[component] = task.result()
            else:
                outcomes[component] = self._skip(component, INTERRUPTED_CANCELLED)
        return outcomes

    async def _run_component(self, component: str, policy: RunPolicy) -> TestOutcome:
        """Run one component, retrying errored attempts as the policy allows."""
        loop = asyncio.get_running_loop()
        started = loop.time()
        attempt = 0

        while True:
            attempt += 1
            self._notify(
                ProgressEvent(component=component, phase="started", attempt=attempt)
            )
            result, retryable = await self._attempt(component, policy)

            if result.status != "errored" or not retryable or attempt > policy.retries:
                break

            log.warning(
                "%s errored (attempt %d of %d), retrying",
                component,
                attempt,
                policy.retries + 1,
            )

        elapsed = loop.time() - started
        self._notify(
            ProgressEvent(
                component=component,
                phase="finished",
                status=result.status,
                elapsed=elapsed,
                attempt=attempt,
            )
        )
        return TestOutcome(
            component=component,
            status=result.status,
            duration=elapsed,
            diagnostics=result.diagnostics,
            attempts=attempt,
        )

    async def _attempt(
        self, component: str, policy: RunPolicy
    ) -> tuple[RunnerResult, bool]:
        """Invoke the runner once; also report whether an errored result may retry."""
        timeout = asyncio.timeout(policy.timeout)
        try:
            async with timeout:
                result = await self.runner.run(
                    component, capture_output=policy.capture_output
                )
        except Exception as e:
            if timeout.expired():
                log.warning("%s timed out after %gs", component, policy.timeout)
                message = f"Timed out after {policy.timeout:g}s"
                return RunnerResult(status="errored", diagnostics=message), False
            log.error("Runner crashed for %s: %s", component, e, exc_info=e)
            return RunnerResult(status="errored", diagnostics=str(e)), True

        if not policy.capture_output:
            result = RunnerResult(status=result.status)
        return result, True

    def _skip(self, component: str, reason: str) -> TestOutcome:
        self._notify(
            ProgressEvent(component=component, phase="finished", status="skipped")
        )
        return TestOutcome(component=component, status="skipped", diagnostics=reason)

    def _notify(self, event: ProgressEvent) -> None:
        log.debug("Progress: %s", event)
        if self.on_progress is not None:
            self.on_progress(event)

