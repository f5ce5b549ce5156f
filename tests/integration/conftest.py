"""Fixtures for integration tests."""

import stat
from pathlib import Path

import pytest

FAKE_CARGO = """#!/bin/sh
# Mimics `cargo test -p <package> [args...]` for a few package name prefixes.
package="$3"
case "$package" in
  ok-*)
    echo "args: $*"
    echo "mark: $HARNESS_MARK"
    echo "test result: ok. 3 passed; 0 failed"
    exit 0
    ;;
  fail-*)
    echo "running 3 tests"
    echo "test result: FAILED. 2 passed; 1 failed" >&2
    exit 101
    ;;
  slow-*)
    exec sleep 30
    ;;
  *)
    echo "error: package ID specification \\`$package\\` did not match any packages" >&2
    exit 101
    ;;
esac
"""


@pytest.fixture
def fake_cargo(tmp_path: Path) -> Path:
    """Create an executable script standing in for cargo."""
    script = tmp_path / "bin" / "cargo"
    script.parent.mkdir()
    script.write_text(FAKE_CARGO)
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create an empty cargo workspace directory."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path
