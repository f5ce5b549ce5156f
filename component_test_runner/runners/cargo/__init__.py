"""Cargo runner module."""

from component_test_runner.runners.cargo.config import CargoConfig
from component_test_runner.runners.cargo.manifest import cargo_manifest
from component_test_runner.runners.cargo.runner import CargoRunner

__all__ = ["CargoConfig", "CargoRunner", "cargo_manifest"]
