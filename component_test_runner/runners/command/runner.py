"""Generic command runner implementation."""

import logging
import shutil
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from component_test_runner.errors import InvocationError
from component_test_runner.models.result import RunnerResult, RunnerStatus
from component_test_runner.runners.base import TestRunner
from component_test_runner.runners.command.config import (
    COMPONENT_PLACEHOLDER,
    CommandConfig,
)
from component_test_runner.runners.process import run_process

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class CommandRunner(TestRunner):
    """Runs a configured command once per component."""

    config: CommandConfig
    executable: str

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: CommandConfig
    ) -> AsyncGenerator["CommandRunner", None]:
        """Create runner after checking that the command can be found."""
        program = config.command[0]
        executable = shutil.which(program)
        if executable is None:
            raise InvocationError(f"Test command not found: {program}")
        if config.cwd is not None and not config.cwd.is_dir():
            raise InvocationError(f"Working directory not found: {config.cwd}")

        yield cls(config=config, executable=executable)

    def command(self, component: str) -> list[str]:
        """Build the command line for one component."""
        args = list(self.config.command[1:])
        if any(COMPONENT_PLACEHOLDER in arg for arg in args):
            args = [arg.replace(COMPONENT_PLACEHOLDER, component) for arg in args]
        else:
            args.append(component)
        return [self.executable, *args]

    async def run(self, component: str, *, capture_output: bool) -> RunnerResult:
        """Run the configured command for one component."""
        argv = self.command(component)
        try:
            result = await run_process(
                argv,
                cwd=self.config.cwd,
                env=self.config.env,
                capture_output=capture_output,
            )
        except OSError as e:
            return RunnerResult(
                status="errored", diagnostics=f"Failed to start {argv[0]}: {e}"
            )

        log.debug("%s exited with %d", component, result.returncode)
        status: RunnerStatus = "passed" if result.returncode == 0 else "failed"
        diagnostics = result.output if capture_output else None
        return RunnerResult(status=status, diagnostics=diagnostics)
