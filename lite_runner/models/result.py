"""Models for directive execution results and run summaries."""

from collections.abc import Sequence
from dataclasses import dataclass

from lite_runner.models.directive import Directive, Outcome, TestUnit


@dataclass(frozen=True, kw_only=True)
class CommandOutput:
    """Exit status and captured output of one executed command line."""

    exit_status: int
    stdout: str = ""
    stderr: str = ""


@dataclass(frozen=True, kw_only=True)
class ExecutionResult:
    """Result of running one directive against one test unit.

    The outcome is derived from the directive's mode and the exit status,
    never stored separately.
    """

    directive: Directive
    command_line: str
    exit_status: int
    stdout: str
    stderr: str
    execution_time: float

    @property
    def outcome(self) -> Outcome:
        """Outcome of the directive for the recorded exit status."""
        return self.directive.outcome(self.exit_status)


@dataclass(frozen=True, kw_only=True)
class UnitResult:
    """Ordered execution results for a single test unit."""

    unit: TestUnit
    results: Sequence[ExecutionResult]

    @property
    def passed(self) -> bool:
        """Whether no directive in the unit failed."""
        return all(result.outcome != "fail" for result in self.results)


@dataclass(frozen=True, kw_only=True)
class RunSummary:
    """Aggregate counts and timings over a whole run."""

    passes: int = 0
    failures: int = 0
    expected_failures: int = 0
    cpu_time: float = 0.0
    running_time: float = 0.0

    @property
    def total(self) -> int:
        return self.passes + self.failures + self.expected_failures

    @property
    def succeeded(self) -> bool:
        return self.failures == 0

    @classmethod
    def from_results(
        cls, unit_results: Sequence[UnitResult], running_time: float = 0.0
    ) -> "RunSummary":
        """Aggregate unit results; the counts do not depend on their order."""
        outcomes = [
            result.outcome
            for unit_result in unit_results
            for result in unit_result.results
        ]
        return cls(
            passes=outcomes.count("pass"),
            failures=outcomes.count("fail"),
            expected_failures=outcomes.count("xfail"),
            cpu_time=sum(
                result.execution_time
                for unit_result in unit_results
                for result in unit_result.results
            ),
            running_time=running_time,
        )


@dataclass(frozen=True, kw_only=True)
class SessionResult:
    """Everything produced by one test session."""

    summary: RunSummary
    unit_results: Sequence[UnitResult]
