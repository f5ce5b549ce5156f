"""Configuration for the generic command runner."""

from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import BaseModel, Field

COMPONENT_PLACEHOLDER = "{component}"


class CommandConfig(BaseModel):
    """Configuration for running an arbitrary test command per component.

    Every occurrence of ``{component}`` in the command arguments is replaced
    with the component identifier. The program itself is never substituted.
    When no argument contains the placeholder the identifier is appended as
    the last argument.
    """

    command: Sequence[str] = Field(..., min_length=1)
    cwd: Path | None = None
    env: Mapping[str, str] = Field(default_factory=dict)
