"""Integration tests for subprocess execution."""

import asyncio
import io
import sys
import time

import pytest

from component_test_runner.runners.process import run_process, terminate_process


async def test_run_process_merges_output() -> None:
    """Collects standard output and standard error together."""
    result = await run_process(
        [
            sys.executable,
            "-c",
            "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)",
        ]
    )

    assert result.returncode == 3
    assert "out" in result.output
    assert "err" in result.output


async def test_run_process_applies_env() -> None:
    """Adds configured variables to the inherited environment."""
    result = await run_process(
        [sys.executable, "-c", "import os; print(os.environ['HARNESS_MARK'])"],
        env={"HARNESS_MARK": "present"},
    )

    assert result.returncode == 0
    assert result.output.strip() == "present"


async def test_run_process_raises_for_missing_program() -> None:
    """Raises OSError when the program does not exist."""
    with pytest.raises(OSError):
        await run_process(["/nonexistent/definitely-not-a-program"])


async def test_terminate_process_kills_stubborn_process() -> None:
    """Kills a process that ignores SIGTERM after the grace period."""
    process = await asyncio.create_subprocess_exec(
        "sh", "-c", "trap '' TERM; exec sleep 30"
    )
    await asyncio.sleep(0.2)

    started = time.monotonic()
    await terminate_process(process, grace_period=0.2)

    assert process.returncode is not None
    assert time.monotonic() - started < 5


async def test_run_process_echoes_output_without_capture() -> None:
    """Streams output to the echo target and still returns it."""
    echo = io.BytesIO()

    result = await run_process(
        [sys.executable, "-c", "print('streamed line')"],
        capture_output=False,
        echo=echo,
    )

    assert result.returncode == 0
    assert "streamed line" in result.output
    assert b"streamed line" in echo.getvalue()


async def test_run_process_does_not_echo_when_capturing() -> None:
    """Leaves the echo target untouched when output is captured."""
    echo = io.BytesIO()

    result = await run_process(
        [sys.executable, "-c", "print('kept')"], capture_output=True, echo=echo
    )

    assert "kept" in result.output
    assert echo.getvalue() == b""
