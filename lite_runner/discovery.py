"""Discover test files containing RUN directives."""

import logging
import re
from collections.abc import Collection, Sequence
from pathlib import Path

from lite_runner.exceptions import LiteError
from lite_runner.models.directive import TestUnit
from lite_runner.parser import read_directives

log = logging.getLogger(__name__)


def validate_test_dir(test_dir: Path) -> Path:
    """Check the test directory and return its absolute path.

    Raises:
        LiteError: If the path does not exist or is not a directory

    """
    if not test_dir.exists():
        raise LiteError.could_not_open_test_dir(str(test_dir))
    if not test_dir.is_dir():
        raise LiteError.test_dir_is_not_directory(str(test_dir))
    return test_dir.absolute()


def compile_filters(patterns: Sequence[str]) -> Sequence[re.Pattern[str]]:
    """Compile name filters, raising LiteError for an invalid expression."""
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            raise LiteError.invalid_filter(f"{pattern} ({e})") from e
    return compiled


def matches_filters(path: Path, filters: Sequence[re.Pattern[str]]) -> bool:
    """Check whether any filter matches the full path; no filters keeps all."""
    if not filters:
        return True
    return any(f.search(str(path)) for f in filters)


def has_extension(path: Path, extensions: Collection[str]) -> bool:
    """Check a file's extension (without the dot) against the allowed set."""
    return path.suffix.removeprefix(".") in extensions


def discover_tests(
    test_dir: Path,
    path_extensions: Collection[str],
    test_line_prefix: str,
    name_filters: Sequence[re.Pattern[str]] = (),
) -> Sequence[TestUnit]:
    """Find every test file below ``test_dir`` that has at least one directive.

    Args:
        test_dir: Root directory, searched recursively
        path_extensions: Extensions of files to consider, without the dot
        test_line_prefix: Comment prefix preceding directive keywords
        name_filters: If non-empty, a file is kept only if one matches its path

    Returns:
        Test units sorted by path

    """
    root = validate_test_dir(test_dir)
    units: list[TestUnit] = []

    for path in root.rglob("*"):
        if not path.is_file() or not has_extension(path, path_extensions):
            continue
        if not matches_filters(path, name_filters):
            log.debug("Skipping %s: no filter matches", path)
            continue

        directives = read_directives(path, test_line_prefix)
        if not directives:
            log.debug("Skipping %s: no directives", path)
            continue
        units.append(TestUnit(path=path, directives=directives))

    log.info("Discovered %d test file(s) in %s", len(units), root)
    return sorted(units, key=lambda unit: str(unit.path))
