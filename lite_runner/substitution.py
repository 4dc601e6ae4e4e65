"""Expand ``%`` tokens in directive command lines."""

import logging
import re
import tempfile
import threading
import uuid
from collections.abc import Sequence
from pathlib import Path

from lite_runner.exceptions import LiteError

log = logging.getLogger(__name__)

MARKER = "%"

# %s: test file, %S: its directory, %t: per-file temp path, %T: shared temp dir
BUILTIN_TOKENS = frozenset({"s", "S", "t", "T"})


def quoted(value: str | Path) -> str:
    """Wrap a path in double quotes for use on a shell command line."""
    return f'"{value}"'


def validate_token_name(name: str) -> None:
    """Raise LiteError if ``name`` cannot be used as a substitution token."""
    if not name or any(ch.isspace() for ch in name) or MARKER in name:
        raise LiteError.invalid_substitution(name)


class Substitutor:
    """Expands user-defined and built-in tokens in command lines.

    User tokens are matched before built-ins, in the order given, and a user
    token whose name equals a built-in is shadowed by it. Expansion is a single
    left-to-right pass: replacement text is never scanned again.

    The shared temp directory is created on first use. Each test file gets one
    temp path inside it, allocated on first reference and reused after that.
    """

    def __init__(
        self,
        substitutions: Sequence[tuple[str, str]] = (),
        temp_root: Path | None = None,
    ) -> None:
        self._replacements: dict[str, str] = {}
        for name, replacement in substitutions:
            validate_token_name(name)
            if name in BUILTIN_TOKENS:
                log.warning("Substitution %%%s is shadowed by a built-in token", name)
                continue
            self._replacements.setdefault(name, replacement)

        alternatives = [re.escape(name) for name in self._replacements]
        alternatives.append("[sStT]")
        self._pattern = re.compile(
            f"{re.escape(MARKER)}(?P<name>{'|'.join(alternatives)})"
        )

        self._temp_root = temp_root
        self._temp_dir: Path | None = None
        self._temp_files: dict[Path, Path] = {}
        self._lock = threading.Lock()

    @property
    def temp_dir(self) -> Path:
        """The run-wide temporary directory, created on first access."""
        with self._lock:
            return self._ensure_temp_dir()

    def _ensure_temp_dir(self) -> Path:
        if self._temp_dir is None:
            self._temp_dir = Path(
                tempfile.mkdtemp(prefix="lite-", dir=self._temp_root)
            )
            log.debug("Created temporary directory %s", self._temp_dir)
        return self._temp_dir

    def temp_file(self, file: Path) -> Path:
        """Return the temp path reserved for ``file``, allocating it if needed."""
        with self._lock:
            temp_file = self._temp_files.get(file)
            if temp_file is None:
                temp_file = self._ensure_temp_dir() / uuid.uuid4().hex
                self._temp_files[file] = temp_file
            return temp_file

    def substitute(self, line: str, file: Path) -> str:
        """Expand every token in ``line`` for the test file ``file``."""
        builtins = {
            "s": lambda: quoted(file),
            "S": lambda: quoted(file.parent),
            "t": lambda: quoted(self.temp_file(file)),
            "T": lambda: quoted(self.temp_dir),
        }

        def replace(match: re.Match[str]) -> str:
            name = match.group("name")
            if name in self._replacements:
                return self._replacements[name]
            return builtins[name]()

        return self._pattern.sub(replace, line)
