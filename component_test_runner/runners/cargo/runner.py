"""Cargo workspace runner implementation."""

import logging
import shutil
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from component_test_runner.errors import InvocationError
from component_test_runner.models.result import RunnerResult, RunnerStatus
from component_test_runner.runners.base import TestRunner
from component_test_runner.runners.cargo.config import CargoConfig
from component_test_runner.runners.process import run_process

log = logging.getLogger(__name__)

# Printed by cargo when ``-p`` names a crate that is not in the workspace.
UNKNOWN_PACKAGE_MARKER = "did not match any packages"


@dataclass(frozen=True, kw_only=True)
class CargoRunner(TestRunner):
    """Runs each component as one package of a cargo workspace."""

    config: CargoConfig
    cargo: str

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: CargoConfig
    ) -> AsyncGenerator["CargoRunner", None]:
        """Create runner after checking that cargo and the workspace exist."""
        cargo = shutil.which(config.cargo_path)
        if cargo is None:
            raise InvocationError(f"cargo executable not found: {config.cargo_path}")
        if not config.workspace.is_dir():
            raise InvocationError(f"Cargo workspace not found: {config.workspace}")

        log.debug("Using cargo at %s in %s", cargo, config.workspace)
        yield cls(config=config, cargo=cargo)

    def command(self, component: str) -> list[str]:
        """Build the cargo invocation for one package."""
        return [self.cargo, "test", "-p", component, *self.config.extra_args]

    async def run(self, component: str, *, capture_output: bool) -> RunnerResult:
        """Run ``cargo test`` for one workspace package."""
        try:
            result = await run_process(
                self.command(component),
                cwd=self.config.workspace,
                env=self.config.env,
                capture_output=capture_output,
            )
        except OSError as e:
            return RunnerResult(
                status="errored", diagnostics=f"Failed to start cargo: {e}"
            )

        status: RunnerStatus = "failed"
        if result.returncode == 0:
            status = "passed"
        elif UNKNOWN_PACKAGE_MARKER in result.output:
            status = "errored"

        diagnostics = result.output if capture_output else None
        return RunnerResult(status=status, diagnostics=diagnostics)
