"""Configuration for the cargo runner."""

from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import BaseModel, Field


class CargoConfig(BaseModel):
    """Configuration for running ``cargo test -p <component>``."""

    cargo_path: str = "cargo"
    workspace: Path = Path(".")
    extra_args: Sequence[str] = Field(
        default_factory=list,
        description="Arguments appended after the package selection",
    )
    env: Mapping[str, str] = Field(default_factory=dict)
