"""Console reporting and aggregation of test results."""

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, TextIO

from lite_runner.models.directive import Outcome, TestUnit
from lite_runner.models.result import ExecutionResult, RunSummary, UnitResult

STATUS_SYMBOLS: Mapping[Outcome, str] = {
    "pass": "✓",
    "fail": "✗",
    "xfail": "⚠",
}

DURATION_UNITS = (
    (1.0, 1, "s"),
    (1e-3, 1e3, "ms"),
    (1e-6, 1e6, "µs"),
)


def format_duration(seconds: float) -> str:
    """Format a duration using the largest fitting unit, e.g. ``1.5s``."""
    for threshold, scale, unit in DURATION_UNITS:
        if seconds > threshold:
            break
    else:
        scale, unit = 1e9, "ns"
    value = f"{seconds * scale:.1f}".rstrip("0").rstrip(".")
    return f"{value}{unit}"


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    return f"{count} {singular if count == 1 else plural or singular + 's'}"


def common_prefix(paths: Sequence[str]) -> str:
    """Longest common leading string of all paths (character-wise)."""
    return os.path.commonprefix(list(paths))


def indent_block(text: str, indent: str = "      ") -> str:
    return "\n".join(indent + line for line in text.splitlines())


@dataclass(kw_only=True)
class Reporter:
    """Writes per-unit feedback and the final summary to a text stream.

    Each unit's block is written by a single ``report_unit`` call, so blocks
    from different units never interleave.
    """

    stream: TextIO
    success_message: str
    prefix: str = field(default="", init=False)

    def _print(self, text: str = "") -> None:
        print(text, file=self.stream)

    def begin(self, units: Sequence[TestUnit], test_dir: Path) -> None:
        """Print the banner and remember the prefix used to shorten paths."""
        if not units:
            self._print(f"No tests found in {test_dir}")
            return
        self.prefix = common_prefix([str(unit.path) for unit in units])
        self._print(f"Running all tests in {self.prefix}")

    def short_name(self, path: Path) -> str:
        """Path with the common prefix removed (the file name if nothing is left)."""
        short = str(path).removeprefix(self.prefix)
        return short or path.name

    def report_unit(self, unit_result: UnitResult) -> None:
        """Print one unit's status line followed by one line per directive."""
        glyph = STATUS_SYMBOLS["pass" if unit_result.passed else "fail"]
        lines = [f"{glyph} {self.short_name(unit_result.unit.path)}"]
        for result in unit_result.results:
            lines.extend(self._result_lines(unit_result.unit, result))
        self._print("\n".join(lines))
        self.stream.flush()

    def _result_lines(self, unit: TestUnit, result: ExecutionResult) -> list[str]:
        lines = [
            f"  {STATUS_SYMBOLS[result.outcome]} {result.directive.as_string}"
            f" ({format_duration(result.execution_time)})"
        ]
        if result.outcome != "fail":
            return lines

        if result.stderr:
            lines.append("    stderr:")
            lines.append(indent_block(result.stderr))
        if result.stdout:
            lines.append("    stdout:")
            lines.append(indent_block(result.stdout))
        lines.append("    command line:")
        lines.append(f"      {result.command_line}")
        lines.append(f"    location: {unit.path}:{result.directive.line_number}")
        return lines

    def finish(
        self, unit_results: Sequence[UnitResult], running_time: float
    ) -> RunSummary:
        """Print the run summary and return it."""
        summary = RunSummary.from_results(unit_results, running_time=running_time)
        self._print(
            f"Executed {pluralize(summary.total, 'test')}"
            f" in {format_duration(summary.cpu_time)}"
            f" (running time {format_duration(summary.running_time)})"
            f" with {pluralize(summary.passes, 'pass', 'passes')},"
            f" {pluralize(summary.expected_failures, 'expected failure')}"
            f" and {pluralize(summary.failures, 'failure')}"
        )
        if summary.succeeded:
            self._print(self.success_message)
        self.stream.flush()
        return summary


def format_output(unit_results: Sequence[UnitResult]) -> dict[str, Any]:
    """Format unit results for JSON output."""
    all_results: list[dict[str, Any]] = []
    for unit_result in unit_results:
        for result in unit_result.results:
            all_results.append(
                {
                    "file": str(unit_result.unit.path),
                    "line": result.directive.line_number,
                    "directive": result.directive.as_string,
                    "command_line": result.command_line,
                    "exit_status": result.exit_status,
                    "outcome": result.outcome,
                    "duration": result.execution_time,
                }
            )

    summary = RunSummary.from_results(unit_results)
    return {
        "total": summary.total,
        "passed": summary.passes,
        "failed": summary.failures,
        "expected_failures": summary.expected_failures,
        "cpu_time": summary.cpu_time,
        "results": all_results,
    }
