"""Integration tests for the cargo runner using a fake cargo executable."""

import asyncio
import time
from pathlib import Path

import pytest

from component_test_runner.models.policy import RunPolicy
from component_test_runner.models.registry import ComponentRegistry
from component_test_runner.orchestrator import TestOrchestrator
from component_test_runner.runners.cargo import CargoConfig, CargoRunner


def config(fake_cargo: Path, workspace: Path, **kwargs: object) -> CargoConfig:
    """Cargo configuration pointing at the fake executable."""
    return CargoConfig(cargo_path=str(fake_cargo), workspace=workspace, **kwargs)


class TestCargoRunner:
    """Tests for CargoRunner.run."""

    async def test_passing_package(self, fake_cargo: Path, workspace: Path) -> None:
        """Reports passed with cargo's output as diagnostics."""
        cfg = config(
            fake_cargo, workspace, extra_args=["--release"], env={"HARNESS_MARK": "x1"}
        )
        async with CargoRunner.from_config(cfg) as runner:
            result = await runner.run("ok-chain", capture_output=True)

        assert result.status == "passed"
        assert result.diagnostics is not None
        assert "args: test -p ok-chain --release" in result.diagnostics
        assert "mark: x1" in result.diagnostics

    async def test_failing_package(self, fake_cargo: Path, workspace: Path) -> None:
        """Reports failed and captures standard error too."""
        async with CargoRunner.from_config(config(fake_cargo, workspace)) as runner:
            result = await runner.run("fail-db", capture_output=True)

        assert result.status == "failed"
        assert result.diagnostics is not None
        assert "running 3 tests" in result.diagnostics
        assert "1 failed" in result.diagnostics

    @pytest.mark.parametrize("capture_output", [True, False])
    async def test_unknown_package_is_errored(
        self, fake_cargo: Path, workspace: Path, capture_output: bool
    ) -> None:
        """Reports errored when the package is not in the workspace."""
        async with CargoRunner.from_config(config(fake_cargo, workspace)) as runner:
            result = await runner.run("nonexistent", capture_output=capture_output)

        assert result.status == "errored"
        if capture_output:
            assert result.diagnostics is not None
            assert "did not match any packages" in result.diagnostics
        else:
            assert result.diagnostics is None

    async def test_without_capture(self, fake_cargo: Path, workspace: Path) -> None:
        """Keeps no diagnostics when output is not captured."""
        async with CargoRunner.from_config(config(fake_cargo, workspace)) as runner:
            result = await runner.run("fail-db", capture_output=False)

        assert result.status == "failed"
        assert result.diagnostics is None

    async def test_cancellation_stops_cargo(
        self, fake_cargo: Path, workspace: Path
    ) -> None:
        """Terminates the cargo process when the run is cancelled."""
        async with CargoRunner.from_config(config(fake_cargo, workspace)) as runner:
            task = asyncio.create_task(runner.run("slow-sync", capture_output=True))
            await asyncio.sleep(0.2)
            started = time.monotonic()
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        assert task.cancelled()
        assert time.monotonic() - started < 5


async def test_orchestrated_workspace(fake_cargo: Path, workspace: Path) -> None:
    """Runs a mixed workspace end to end through the orchestrator."""
    registry = ComponentRegistry(
        components=["ok-chain", "fail-db", "missing", "slow-sync", "ok-p2p"]
    )

    async with CargoRunner.from_config(config(fake_cargo, workspace)) as runner:
        report = await TestOrchestrator(runner=runner).run_all(
            registry, RunPolicy(parallelism=2, timeout=1.0)
        )

    assert [o.status for o in report.outcomes] == [
        "passed",
        "failed",
        "errored",
        "errored",
        "passed",
    ]
    assert report.outcomes[3].diagnostics == "Timed out after 1s"
    assert report.exit_code == 1
