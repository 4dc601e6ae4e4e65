"""Abstract base class for command executors."""

from abc import ABC, abstractmethod

from lite_runner.models.result import CommandOutput


class CommandExecutor(ABC):
    """Runs a fully substituted command line and captures its output.

    Implementations report a process that could not be started as a
    ``CommandOutput`` with a non-zero exit status rather than raising.
    """

    @abstractmethod
    async def execute(self, command_line: str) -> CommandOutput:
        """Execute ``command_line`` and wait for it to finish.

        Args:
            command_line: Command text after substitution

        Returns:
            Exit status and captured stdout/stderr

        """
