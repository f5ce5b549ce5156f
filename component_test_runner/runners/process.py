"""Subprocess execution shared by the command-line based runners."""

import asyncio
import contextlib
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

log = logging.getLogger(__name__)

TERMINATE_GRACE_PERIOD = 5.0
READ_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True, kw_only=True)
class ProcessResult:
    """Exit status and combined output of a finished process."""

    returncode: int
    output: str


async def run_process(
    argv: Sequence[str],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    capture_output: bool = True,
    echo: BinaryIO | None = None,
) -> ProcessResult:
    """Run a process to completion.

    Standard error is merged into standard output, which is always read so
    that callers can classify the result. Without ``capture_output`` the
    output is also copied to ``echo`` (standard output by default) as it
    arrives. If the calling task is cancelled the process is terminated
    before the cancellation propagates.

    Raises:
        OSError: If the process could not be started

    """
    process_env = {**os.environ, **env} if env else None
    if not capture_output and echo is None:
        echo = sys.stdout.buffer

    log.debug("Starting process: %s (cwd=%s)", " ".join(argv), cwd)
    process = await asyncio.create_subprocess_exec(
        *argv,
        cwd=cwd,
        env=process_env,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
    )

    try:
        output = await _read_output(process, echo if not capture_output else None)
        returncode = await process.wait()
    except asyncio.CancelledError:
        await terminate_process(process)
        raise

    return ProcessResult(returncode=returncode, output=output)


async def _read_output(
    process: asyncio.subprocess.Process, echo: BinaryIO | None
) -> str:
    """Read the process output until EOF, copying it to ``echo`` if given."""
    if process.stdout is None:
        return ""

    chunks: list[bytes] = []
    while chunk := await process.stdout.read(READ_CHUNK_SIZE):
        chunks.append(chunk)
        if echo is not None:
            echo.write(chunk)
            echo.flush()
    return b"".join(chunks).decode(errors="replace")


async def terminate_process(
    process: asyncio.subprocess.Process,
    grace_period: float = TERMINATE_GRACE_PERIOD,
) -> None:
    """Terminate a process, killing it if it ignores the request."""
    if process.returncode is not None:
        return

    log.info("Terminating process %d", process.pid)
    with contextlib.suppress(ProcessLookupError):
        process.terminate()

    try:
        async with asyncio.timeout(grace_period):
            await process.wait()
    except TimeoutError:
        log.warning("Process %d ignored SIGTERM, killing it", process.pid)
        with contextlib.suppress(ProcessLookupError):
            process.kill()
        await process.wait()
