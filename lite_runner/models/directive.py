"""Models for directives parsed out of test files."""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Literal, TypeAlias

from pydantic import Field

from lite_runner.models.base import Model

DirectiveMode: TypeAlias = Literal["RUN", "RUN-NOT", "RUN-XFAIL"]
Outcome: TypeAlias = Literal["pass", "fail", "xfail"]

# (outcome on exit status 0, outcome on any other exit status)
OUTCOME_TABLE: Mapping[DirectiveMode, tuple[Outcome, Outcome]] = {
    "RUN": ("pass", "fail"),
    "RUN-NOT": ("fail", "pass"),
    "RUN-XFAIL": ("fail", "xfail"),
}


def derive_outcome(mode: DirectiveMode, exit_status: int) -> Outcome:
    """Map a directive mode and a process exit status to an outcome."""
    on_zero, on_nonzero = OUTCOME_TABLE[mode]
    return on_zero if exit_status == 0 else on_nonzero


class Directive(Model):
    """A single RUN-style instruction found in a test file."""

    mode: DirectiveMode = Field(..., description="Directive keyword")
    command_line: str = Field(
        ..., min_length=1, description="Command text before substitution"
    )
    line_number: int = Field(default=0, ge=0, description="1-based source line")

    @property
    def as_string(self) -> str:
        """Re-serialize the directive the way it appears in a test file."""
        return f"{self.mode}: {self.command_line}"

    def outcome(self, exit_status: int) -> Outcome:
        """Judge an exit status according to this directive's mode."""
        return derive_outcome(self.mode, exit_status)


class TestUnit(Model):
    """A discovered test file and its directives, in file order."""

    __test__ = False

    path: Path = Field(..., description="Absolute path of the test file")
    directives: Sequence[Directive] = Field(..., min_length=1)
