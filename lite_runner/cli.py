"""CLI entry point for the lite test runner."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from lite_runner.exceptions import LiteError
from lite_runner.models.config import LiteConfig, ParallelismLevel
from lite_runner.reporter import format_output
from lite_runner.runner import run_session

DEFAULT_EXTENSIONS = ("test",)


def parse_substitution(value: str) -> tuple[str, str]:
    """Parse a ``NAME=VALUE`` substitution argument."""
    name, sep, replacement = value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{value}'")
    return name, replacement


def parse_parallelism(value: str) -> ParallelismLevel:
    """Parse 'automatic', 'none' or a positive worker count."""
    if value in ("automatic", "none"):
        return value
    try:
        count = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"expected 'automatic', 'none' or a number, got '{value}'"
        ) from None
    if count < 1:
        raise argparse.ArgumentTypeError("worker count must be at least 1")
    return count


def build_config(args: argparse.Namespace) -> LiteConfig:
    """Merge the optional JSON config file with command-line overrides."""
    config_dict: dict[str, Any] = {}
    if args.config is not None:
        loaded = json.loads(args.config.read_text(encoding="utf-8"))
        if not isinstance(loaded, dict):
            raise ValueError("config file must contain a JSON object")
        config_dict = loaded

    overrides = {
        "test_dir_path": args.test_dir,
        "path_extensions": args.extensions,
        "test_line_prefix": args.prefix,
        "substitutions": args.substitutions,
        "parallelism": args.parallelism,
        "name_filters": args.filters,
        "success_message": args.success_message,
    }
    config_dict.update({k: v for k, v in overrides.items() if v is not None})
    config_dict.setdefault("path_extensions", list(DEFAULT_EXTENSIONS))

    return LiteConfig.model_validate(config_dict)


async def run(config: LiteConfig, *, json_output: bool = False) -> int:
    """Run the test session and return the exit code."""
    log = logging.getLogger("lite_runner")

    # Keep stdout for the JSON document when it is requested.
    stream = sys.stderr if json_output else sys.stdout
    session = await run_session(config, stream=stream)

    if json_output:
        print(json.dumps(format_output(session.unit_results), indent=2))

    if not session.summary.succeeded:
        log.info("%d directive(s) failed", session.summary.failures)
        return 1
    return 0


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lite-runner",
        description="Run RUN-line annotated test files",
    )
    parser.add_argument(
        "test_dir",
        nargs="?",
        type=Path,
        default=None,
        help="Directory to search for tests (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="JSON file with a base configuration; flags override its values",
    )
    parser.add_argument(
        "-e",
        "--extension",
        dest="extensions",
        action="append",
        help="File extension to scan (repeatable, default: test)",
    )
    parser.add_argument(
        "--prefix",
        help="Text preceding RUN keywords, usually a line comment (default: //)",
    )
    parser.add_argument(
        "-D",
        "--substitute",
        dest="substitutions",
        action="append",
        type=parse_substitution,
        metavar="NAME=VALUE",
        help="Replace %%NAME with VALUE in RUN lines (repeatable, in order)",
    )
    parser.add_argument(
        "-j",
        "--parallelism",
        type=parse_parallelism,
        help="'automatic', 'none' or an explicit number of workers",
    )
    parser.add_argument(
        "-f",
        "--filter",
        dest="filters",
        action="append",
        metavar="REGEX",
        help="Only run tests whose path matches REGEX (repeatable)",
    )
    parser.add_argument(
        "--success-message",
        help="Message printed when every test passes",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON summary to stdout; the report goes to stderr",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = make_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        exit_code = asyncio.run(run(config, json_output=args.json))
    except LiteError as e:
        print(f"error: {e.message}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
