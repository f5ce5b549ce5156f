"""Models for the harness configuration file."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import Field

from component_test_runner.models.base import Model
from component_test_runner.models.policy import RunPolicy
from component_test_runner.models.registry import ComponentRegistry

# Workspace packages exercised by the project's tools/test.sh.
DEFAULT_COMPONENTS: Sequence[str] = (
    "bitcrypto",
    "chain",
    "db",
    "ethcore-devtools",
    "import",
    "keys",
    "message",
    "miner",
    "pbtc",
    "p2p",
    "primitives",
    "script",
    "serialization",
    "sync",
    "verification",
)
DEFAULT_RUNNER = "cargo"


class HarnessConfig(Model):
    """Complete harness configuration, usually loaded from components.yaml."""

    version: str = Field(default="1.0", description="Configuration schema version")
    runner: str = Field(default=DEFAULT_RUNNER, description="Runner plugin key")
    runner_config: Mapping[str, Any] = Field(
        default_factory=dict, description="Configuration passed to the runner"
    )
    components: Sequence[str] = Field(
        default=DEFAULT_COMPONENTS, description="Components to test, in order"
    )
    policy: RunPolicy = Field(default_factory=RunPolicy)

    def registry(self) -> ComponentRegistry:
        """Build the component registry described by this configuration."""
        return ComponentRegistry(components=self.components)
