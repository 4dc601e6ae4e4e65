"""Fixtures for end-to-end tests running real shell commands."""

from pathlib import Path
from typing import Protocol

import pytest


class WriteTestFn(Protocol):
    """Protocol for test file creation function."""

    def __call__(self, name: str, *lines: str) -> Path:
        """Write a test file below the test directory and return its path."""


@pytest.fixture
def test_dir(tmp_path: Path) -> Path:
    """Create an empty test directory."""
    directory = tmp_path / "tests"
    directory.mkdir()
    return directory


@pytest.fixture
def write_test(test_dir: Path) -> WriteTestFn:
    """Return a function to create test files."""

    def _write(name: str, *lines: str) -> Path:
        path = test_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n")
        return path

    return _write
