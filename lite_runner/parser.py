"""Extract RUN directives from the text of a test file."""

import logging
import re
from collections.abc import Mapping, Sequence
from functools import lru_cache
from pathlib import Path

from lite_runner.models.directive import Directive, DirectiveMode

log = logging.getLogger(__name__)

KEYWORD_TO_MODE: Mapping[str, DirectiveMode] = {
    "RUN": "RUN",
    "RUN-NOT": "RUN-NOT",
    "RUN-XFAIL": "RUN-XFAIL",
}


@lru_cache(maxsize=32)
def directive_pattern(prefix: str) -> re.Pattern[str]:
    """Build the per-line directive regex for a comment prefix.

    The prefix may appear anywhere on the line and is followed by optional
    whitespace, a keyword made of word characters and hyphens, a colon, and
    the command text up to the end of the line.
    """
    return re.compile(rf"{re.escape(prefix)}[^\S\n]*([\w-]+):(.*)$", re.MULTILINE)


def parse_directives(text: str, prefix: str) -> Sequence[Directive]:
    """Parse every directive in ``text``, in the order they appear.

    Lines whose keyword is not a known directive, or whose command text is
    blank, are skipped.
    """
    directives: list[Directive] = []
    for match in directive_pattern(prefix).finditer(text):
        keyword, command_line = match.groups()
        mode = KEYWORD_TO_MODE.get(keyword)
        if mode is None:
            continue
        command_line = command_line.strip()
        if not command_line:
            continue
        directives.append(
            Directive(
                mode=mode,
                command_line=command_line,
                line_number=text.count("\n", 0, match.start()) + 1,
            )
        )
    return directives


def read_directives(path: Path, prefix: str) -> Sequence[Directive]:
    """Read ``path`` and parse its directives.

    A file that cannot be read or is not valid UTF-8 yields no directives;
    a warning is logged and the file is treated as containing no tests.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Could not open '%s'; skipping test: %s", path, e)
        return []
    return parse_directives(text, prefix)
