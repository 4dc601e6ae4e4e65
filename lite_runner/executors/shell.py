"""Command executor backed by asyncio subprocesses."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from lite_runner.executors.base import CommandExecutor
from lite_runner.models.result import CommandOutput

log = logging.getLogger(__name__)

SPAWN_FAILURE_STATUS = 127
TRUNCATION_MARKER = "\n... (output truncated)\n"
READ_CHUNK_SIZE = 65536
# Upper bound on UTF-8 bytes per decoded character.
MAX_BYTES_PER_CHAR = 4


def bound_output(data: bytes, limit: int) -> str:
    """Decode captured output, keeping at most ``limit`` characters."""
    text = data.decode("utf-8", errors="replace")
    if len(text) > limit:
        return text[:limit] + TRUNCATION_MARKER
    return text


async def read_bounded(stream: asyncio.StreamReader, limit: int) -> bytes:
    """Read a stream to EOF, keeping only enough bytes for ``limit`` characters.

    Bytes past the kept prefix are read and discarded so the writer never
    blocks on a full pipe. One extra byte is kept so that ``bound_output``
    can still tell the output was cut.
    """
    keep = limit * MAX_BYTES_PER_CHAR + 1
    chunks: list[bytes] = []
    kept = 0
    while chunk := await stream.read(READ_CHUNK_SIZE):
        if kept < keep:
            chunk = chunk[: keep - kept]
            chunks.append(chunk)
            kept += len(chunk)
    return b"".join(chunks)


@dataclass(frozen=True, kw_only=True)
class ShellExecutor(CommandExecutor):
    """Runs command lines through a shell, by default ``bash -c``."""

    shell: Sequence[str] = ("bash", "-c")
    working_dir: Path | None = None
    max_output_chars: int = 65536

    async def execute(self, command_line: str) -> CommandOutput:
        """Run the command line in a subprocess and capture its output."""
        log.debug("Executing: %s", command_line)
        try:
            process = await asyncio.create_subprocess_exec(
                *self.shell,
                command_line,
                cwd=self.working_dir,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            log.error("Could not start %s: %s", self.shell[0], e)
            return CommandOutput(
                exit_status=SPAWN_FAILURE_STATUS,
                stderr=f"could not start command: {e}",
            )

        assert process.stdout is not None
        assert process.stderr is not None
        stdout, stderr = await asyncio.gather(
            read_bounded(process.stdout, self.max_output_chars),
            read_bounded(process.stderr, self.max_output_chars),
        )
        exit_status = await process.wait()
        log.debug("Command exited with status %d: %s", exit_status, command_line)

        return CommandOutput(
            exit_status=exit_status,
            stdout=bound_output(stdout, self.max_output_chars),
            stderr=bound_output(stderr, self.max_output_chars),
        )
