"""Execution policy for an orchestration run."""

import re

from pydantic import Field, field_validator

from component_test_runner.models.base import Model

DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def parse_duration(value: str | float) -> float:
    """Parse a duration into seconds.

    Accepts plain numbers of seconds (``90``, ``1.5``) or a number with a
    ``ms``, ``s``, ``m`` or ``h`` suffix (``500ms``, ``30s``, ``5m``, ``1h``).

    Raises:
        ValueError: If the value is not a positive duration

    """
    if isinstance(value, int | float):
        seconds = float(value)
    else:
        match = DURATION_PATTERN.match(value)
        if match is None:
            raise ValueError(f"Invalid duration: {value!r}")
        amount, unit = match.groups()
        seconds = float(amount) * DURATION_UNITS[unit or "s"]

    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return seconds


class RunPolicy(Model):
    """How the orchestrator schedules and treats component runs."""

    fail_fast: bool = Field(
        default=False,
        description="Stop starting new runs after the first failed or errored one",
    )
    parallelism: int = Field(
        default=1, ge=1, description="Number of component runs executing at once"
    )
    capture_output: bool = Field(
        default=True, description="Keep runner output as outcome diagnostics"
    )
    timeout: float | None = Field(
        default=None, description="Per-component time limit in seconds"
    )
    retries: int = Field(
        default=0, ge=0, description="Extra attempts for an errored runner result"
    )

    @field_validator("timeout", mode="before")
    @classmethod
    def _parse_timeout(cls, value: object) -> object:
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, str | int | float):
            return parse_duration(value)
        return value
