"""Cargo runner manifest."""

from component_test_runner.runners.cargo.config import CargoConfig
from component_test_runner.runners.cargo.runner import CargoRunner
from component_test_runner.runners.manifest import RunnerManifest

cargo_manifest = RunnerManifest(
    config_cls=CargoConfig,
    runner_factory=CargoRunner.from_config,
)
