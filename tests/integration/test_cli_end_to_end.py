"""End-to-end tests running the CLI against real processes."""

import json
import sys
from pathlib import Path

import pytest

from component_test_runner.cli import main

EXIT_ON_BAD = "import sys; sys.exit(1 if sys.argv[1] == 'bad' else 0)"


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test in an empty working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def run_main(*argv: str) -> int:
    """Run the CLI and return its exit code."""
    with pytest.raises(SystemExit) as exc_info:
        main(list(argv))
    return int(exc_info.value.code or 0)


def command_runner_args() -> list[str]:
    """Arguments selecting a command runner driven by the component name."""
    runner_config = json.dumps({"command": [sys.executable, "-c", EXIT_ON_BAD]})
    return ["--runner", "command", "--runner-config", runner_config]


def test_all_components_pass(capsys: pytest.CaptureFixture[str]) -> None:
    """Exits 0 when every component passes."""
    exit_code = run_main(
        *command_runner_args(), "--component", "alpha", "--component", "beta"
    )

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "✓ alpha: passed" in out
    assert "✓ beta: passed" in out
    assert out.splitlines()[-1].endswith("verdict=SUCCESS")


def test_failure_exits_one(capsys: pytest.CaptureFixture[str]) -> None:
    """Exits 1 and still runs the remaining components."""
    exit_code = run_main(
        *command_runner_args(), "--component", "bad", "--component", "beta"
    )

    out = capsys.readouterr().out
    assert exit_code == 1
    assert "✗ bad: failed" in out
    assert "✓ beta: passed" in out
    assert "passed=1 failed=1 errored=0 skipped=0 verdict=FAILURE" in out


def test_fail_fast_skips_remaining(capsys: pytest.CaptureFixture[str]) -> None:
    """Skips the components after the first failure with --fail-fast."""
    exit_code = run_main(
        *command_runner_args(),
        "--fail-fast",
        "--component",
        "bad",
        "--component",
        "beta",
        "--format",
        "json",
    )

    output = json.loads(capsys.readouterr().out)
    assert exit_code == 1
    assert [r["status"] for r in output["results"]] == ["failed", "skipped"]


def test_config_file(isolated_cwd: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Reads components, runner and policy from components.yaml."""
    (isolated_cwd / "components.yaml").write_text(
        json.dumps(
            {
                "runner": "command",
                "runner_config": {"command": [sys.executable, "-c", EXIT_ON_BAD]},
                "components": ["one", "two", "three"],
                "policy": {"parallelism": 3},
            }
        )
    )

    exit_code = run_main()

    assert exit_code == 0
    assert "passed=3" in capsys.readouterr().out


def test_missing_runner_tool_exits_two(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Exits 2 without producing outcomes when cargo is absent."""
    exit_code = run_main(
        "--runner-config",
        json.dumps({"cargo_path": "no-such-cargo-binary"}),
        "--component",
        "chain",
    )

    assert exit_code == 2
    assert "verdict" not in capsys.readouterr().out


def test_empty_registry_exits_two(isolated_cwd: Path) -> None:
    """Exits 2 when the configured component list is empty."""
    (isolated_cwd / "components.yaml").write_text("components: []\n")

    assert run_main() == 2


def test_duplicate_components_exit_two() -> None:
    """Exits 2 when a component is listed twice."""
    assert run_main("--component", "a", "--component", "a") == 2
