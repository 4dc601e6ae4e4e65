"""Execution capabilities for running directive command lines."""

from lite_runner.executors.base import CommandExecutor
from lite_runner.executors.shell import ShellExecutor

__all__ = ["CommandExecutor", "ShellExecutor"]
