"""Configuration for a lite test run."""

import os
from collections.abc import Sequence
from pathlib import Path
from typing import Literal, TypeAlias

from pydantic import Field, PositiveInt, field_validator

from lite_runner.models.base import Model

ParallelismLevel: TypeAlias = Literal["automatic", "none"] | PositiveInt

DEFAULT_SUCCESS_MESSAGE = "All tests passed! 🎉"


class LiteConfig(Model):
    """Everything the engine needs to discover and run tests."""

    substitutions: Sequence[tuple[str, str]] = Field(
        default=(), description="Ordered (token name, replacement) pairs"
    )
    path_extensions: frozenset[str] = Field(
        ..., description="File extensions to scan, without the leading dot"
    )
    test_dir_path: Path | None = Field(
        default=None, description="Root test directory (None means the cwd)"
    )
    test_line_prefix: str = Field(
        default="//", min_length=1, description="Text preceding RUN keywords"
    )
    parallelism: ParallelismLevel = Field(
        default="none", description="'automatic', 'none' or a worker count"
    )
    success_message: str = DEFAULT_SUCCESS_MESSAGE
    name_filters: Sequence[str] = Field(
        default=(), description="Regular expressions matched against file paths"
    )
    max_output_chars: PositiveInt = Field(
        default=65536, description="Per-stream bound on captured output"
    )

    @field_validator("path_extensions", mode="before")
    @classmethod
    def _strip_leading_dots(cls, value: object) -> object:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list | tuple | set | frozenset):
            return [ext.lstrip(".") if isinstance(ext, str) else ext for ext in value]
        return value

    def resolved_test_dir(self) -> Path:
        """Return the test directory, defaulting to the working directory."""
        return self.test_dir_path if self.test_dir_path is not None else Path.cwd()

    def worker_count(self) -> int:
        """Number of concurrent workers implied by the parallelism level."""
        if self.parallelism == "none":
            return 1
        if self.parallelism == "automatic":
            return os.cpu_count() or 1
        return self.parallelism
