"""CLI entry point for the component test harness."""

import argparse
import asyncio
import contextlib
import json
import logging
import signal
import sys
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import Any, TextIO

from pydantic import ValidationError

from component_test_runner.config_loader import resolve_config
from component_test_runner.errors import ConfigurationError, HarnessError
from component_test_runner.models.config import HarnessConfig
from component_test_runner.models.result import EXIT_HARNESS_ERROR, RunReport
from component_test_runner.orchestrator import (
    ProgressCallback,
    ProgressEvent,
    TestOrchestrator,
)
from component_test_runner.runners.loading import load_runner_manifest

STATUS_SYMBOLS = {
    "passed": "✓",
    "failed": "✗",
    "errored": "!",
    "skipped": "-",
}

DIAGNOSTICS_TAIL_LINES = 20


def log_results_summary(log: logging.Logger, report: RunReport) -> None:
    """Log a formatted summary of component outcomes."""
    log.info("=" * 80)
    log.info("Test Results Summary:")
    log.info("=" * 80)

    for outcome in report.outcomes:
        symbol = STATUS_SYMBOLS.get(outcome.status, "?")
        log.info(
            "%s %s: %s (%.2fs)",
            symbol,
            outcome.component,
            outcome.status,
            outcome.duration,
        )
        if outcome.attempts > 1:
            log.info("  Attempts: %d", outcome.attempts)
        if outcome.status != "passed" and outcome.diagnostics:
            log.info("  Output (last lines):")
            for line in outcome.diagnostics.splitlines()[-DIAGNOSTICS_TAIL_LINES:]:
                log.info("    %s", line)

    for status in ("failed", "errored", "skipped"):
        if components := report.components_with(status):
            log.info("%s: %s", status.capitalize(), ", ".join(components))


def format_summary_line(report: RunReport) -> str:
    """One-line summary of the report's counts and verdict."""
    return (
        f"passed={report.count('passed')} failed={report.count('failed')} "
        f"errored={report.count('errored')} skipped={report.count('skipped')} "
        f"verdict={report.verdict.upper()}"
    )


def format_output(report: RunReport) -> dict[str, Any]:
    """Format a run report for JSON output."""
    return {
        "total": len(report.outcomes),
        "passed": report.count("passed"),
        "failed": report.count("failed"),
        "errored": report.count("errored"),
        "skipped": report.count("skipped"),
        "verdict": report.verdict,
        "results": [
            {
                "component": outcome.component,
                "status": outcome.status,
                "duration": outcome.duration,
                "attempts": outcome.attempts,
                "diagnostics": outcome.diagnostics,
            }
            for outcome in report.outcomes
        ],
    }


def make_progress_printer(stream: TextIO) -> ProgressCallback:
    """Return a progress callback writing one line per start and finish."""

    def _print(event: ProgressEvent) -> None:
        if event.phase == "started":
            suffix = f" (attempt {event.attempt})" if event.attempt > 1 else ""
            print(f"▶ {event.component}: running{suffix}", file=stream, flush=True)
            return

        symbol = STATUS_SYMBOLS.get(event.status or "", "?")
        print(
            f"{symbol} {event.component}: {event.status} ({event.elapsed:.2f}s)",
            file=stream,
            flush=True,
        )

    return _print


async def run(
    config: HarnessConfig,
    output_format: str = "text",
    cancel_event: asyncio.Event | None = None,
) -> int:
    """Run component tests and return exit code."""
    log = logging.getLogger("component_test_runner")
    cancel_event = cancel_event or asyncio.Event()

    try:
        registry = config.registry()
        log.info("Components: %s", ", ".join(registry.list()))

        log.info("Loading runner: %s", config.runner)
        manifest = load_runner_manifest(config.runner)
        try:
            runner_config = manifest.config_cls(**config.runner_config)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid runner configuration: {e}") from e

        progress_stream = sys.stdout if output_format == "text" else sys.stderr
        with _cancel_on_signals(cancel_event):
            async with manifest.runner_factory(runner_config) as runner:
                orchestrator = TestOrchestrator(
                    runner=runner,
                    on_progress=make_progress_printer(progress_stream),
                )
                report = await orchestrator.run_all(
                    registry, config.policy, cancel_event
                )
    except HarnessError as e:
        log.error("Cannot run tests: %s", e)
        return EXIT_HARNESS_ERROR

    log_results_summary(log, report)

    if output_format == "json":
        print(json.dumps(format_output(report), indent=2))
    else:
        print(format_summary_line(report))

    return report.exit_code


@contextlib.contextmanager
def _cancel_on_signals(cancel_event: asyncio.Event) -> Iterator[None]:
    """Set the cancel event on SIGINT and SIGTERM while the block runs."""
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(sig, cancel_event.set)
            installed.append(sig)
    try:
        yield
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


def build_config(args: argparse.Namespace) -> HarnessConfig:
    """Combine the configuration file with command-line overrides.

    Raises:
        ConfigurationError: If the file or any override is invalid

    """
    config = resolve_config(args.config)
    data = config.model_dump()

    if args.component:
        data["components"] = list(args.component)

    if args.runner and args.runner != config.runner:
        data["runner"] = args.runner
        data["runner_config"] = {}

    if args.runner_config:
        try:
            overrides = json.loads(args.runner_config)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid --runner-config JSON: {e}") from e
        if not isinstance(overrides, dict):
            raise ConfigurationError("--runner-config must be a JSON object")
        data["runner_config"] = {**data["runner_config"], **overrides}

    policy = data["policy"]
    if args.fail_fast:
        policy["fail_fast"] = True
    if args.parallelism is not None:
        policy["parallelism"] = args.parallelism
    if args.no_capture:
        policy["capture_output"] = False
    if args.timeout is not None:
        policy["timeout"] = args.timeout
    if args.retries is not None:
        policy["retries"] = args.retries

    try:
        return HarnessConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid options: {e}") from e


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        description="Run the test suite of every project component"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: components.yaml if present)",
    )
    parser.add_argument(
        "--component",
        action="append",
        default=[],
        help="Component to test; repeat to test several (overrides the config)",
    )
    parser.add_argument(
        "--runner",
        default=None,
        help="Runner key (cargo, command)",
    )
    parser.add_argument(
        "--runner-config",
        default=None,
        help="JSON configuration for the runner, merged over the config file",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Skip remaining components after the first failure",
    )
    parser.add_argument(
        "--parallelism",
        type=int,
        default=None,
        help="Number of components to test concurrently (default: 1)",
    )
    parser.add_argument(
        "--no-capture",
        action="store_true",
        help="Stream runner output instead of keeping it for the report",
    )
    parser.add_argument(
        "--timeout",
        default=None,
        help="Per-component timeout (e.g., '300', '90s', '5m')",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=None,
        help="Retries for a component whose runner could not execute",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Final report format on stdout",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = build_config(args)
    except ConfigurationError as e:
        logging.getLogger("component_test_runner").error("Cannot run tests: %s", e)
        sys.exit(EXIT_HARNESS_ERROR)

    exit_code = asyncio.run(run(config, output_format=args.format))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
