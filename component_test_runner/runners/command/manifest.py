"""Command runner manifest."""

from component_test_runner.runners.command.config import CommandConfig
from component_test_runner.runners.command.runner import CommandRunner
from component_test_runner.runners.manifest import RunnerManifest

command_manifest = RunnerManifest(
    config_cls=CommandConfig,
    runner_factory=CommandRunner.from_config,
)
