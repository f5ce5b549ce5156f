"""Generic command runner module."""

from component_test_runner.runners.command.config import CommandConfig
from component_test_runner.runners.command.manifest import command_manifest
from component_test_runner.runners.command.runner import CommandRunner

__all__ = ["CommandConfig", "CommandRunner", "command_manifest"]
