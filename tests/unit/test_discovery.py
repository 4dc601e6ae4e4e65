"""Tests for test discovery."""

import re
from pathlib import Path

import pytest

from lite_runner.discovery import (
    compile_filters,
    discover_tests,
    has_extension,
    matches_filters,
    validate_test_dir,
)
from lite_runner.exceptions import LiteError


@pytest.fixture
def test_tree(tmp_path: Path) -> Path:
    """Create a directory tree with a mix of test and non-test files."""
    (tmp_path / "sub" / "deeper").mkdir(parents=True)
    (tmp_path / "b.test").write_text("// RUN: echo b\n")
    (tmp_path / "a.test").write_text("// RUN: echo a\n// RUN-NOT: false\n")
    (tmp_path / "sub" / "c.test").write_text("// RUN-XFAIL: false\n")
    (tmp_path / "sub" / "deeper" / "d.test").write_text("// RUN: echo d\n")
    (tmp_path / "no_directives.test").write_text("int main() {}\n")
    (tmp_path / "no_colon.test").write_text("// RUN echo nothing\n")
    (tmp_path / "other.txt").write_text("// RUN: echo wrong extension\n")
    return tmp_path


def test_discovers_sorted_units(test_tree: Path) -> None:
    """Finds every file with directives, sorted by path."""
    units = discover_tests(test_tree, {"test"}, "//")

    assert [u.path.relative_to(test_tree).as_posix() for u in units] == [
        "a.test",
        "b.test",
        "sub/c.test",
        "sub/deeper/d.test",
    ]
    assert [d.mode for d in units[0].directives] == ["RUN", "RUN-NOT"]


def test_paths_are_absolute(test_tree: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Units carry absolute paths even for a relative root."""
    monkeypatch.chdir(test_tree)

    units = discover_tests(Path("sub"), {"test"}, "//")

    assert all(u.path.is_absolute() for u in units)


def test_filters_by_extension(test_tree: Path) -> None:
    """Only files with an allowed extension are considered."""
    units = discover_tests(test_tree, {"txt"}, "//")

    assert [u.path.name for u in units] == ["other.txt"]


def test_no_matching_files(test_tree: Path) -> None:
    """An extension with no files yields no units."""
    assert discover_tests(test_tree, {"swift"}, "//") == []


def test_respects_line_prefix(tmp_path: Path) -> None:
    """Directives under a different prefix are not found."""
    (tmp_path / "x.test").write_text("# RUN: echo hash\n")

    assert discover_tests(tmp_path, {"test"}, "//") == []
    assert len(discover_tests(tmp_path, {"test"}, "#")) == 1


def test_name_filters(test_tree: Path) -> None:
    """Only files matching at least one filter are kept."""
    filters = compile_filters([r"sub/c\.test$", r"/b\."])

    units = discover_tests(test_tree, {"test"}, "//", filters)

    assert [u.path.name for u in units] == ["b.test", "c.test"]


def test_missing_directory() -> None:
    """A non-existent root fails before anything runs."""
    with pytest.raises(LiteError, match="could not open test directory"):
        discover_tests(Path("/does/not/exist"), {"test"}, "//")


def test_root_is_a_file(tmp_path: Path) -> None:
    """A root that is a file is rejected."""
    file_path = tmp_path / "file.test"
    file_path.write_text("")

    with pytest.raises(LiteError, match="is not a directory"):
        validate_test_dir(file_path)


def test_invalid_filter() -> None:
    """A filter that is not a valid regular expression is rejected."""
    with pytest.raises(LiteError, match="invalid filter"):
        compile_filters(["(unclosed"])


def test_matches_filters_empty_keeps_all() -> None:
    """No filters means every path is kept."""
    assert matches_filters(Path("/any/path.test"), [])
    assert not matches_filters(Path("/any/path.test"), [re.compile("other")])


@pytest.mark.parametrize(
    ("name", "expected"),
    [("a.test", True), ("a.test.bak", False), ("test", False), ("a.TEST", False)],
)
def test_has_extension(name: str, expected: bool) -> None:
    """Extensions are compared exactly, without the dot."""
    assert has_extension(Path(name), {"test"}) is expected
