"""Run a complete lite test session."""

import logging
import sys
import time
from typing import TextIO

from lite_runner.discovery import compile_filters, discover_tests, validate_test_dir
from lite_runner.executors.base import CommandExecutor
from lite_runner.executors.shell import ShellExecutor
from lite_runner.models.config import LiteConfig
from lite_runner.models.result import SessionResult
from lite_runner.reporter import Reporter
from lite_runner.scheduler import TestScheduler
from lite_runner.substitution import Substitutor

log = logging.getLogger(__name__)


async def run_session(
    config: LiteConfig,
    *,
    executor: CommandExecutor | None = None,
    stream: TextIO | None = None,
) -> SessionResult:
    """Discover, run and report every test described by ``config``.

    Configuration problems are detected before anything is printed or executed.

    Args:
        config: Test run configuration
        executor: Execution capability; defaults to a bash-backed executor
        stream: Where the report is written; defaults to stdout

    Returns:
        Summary and per-unit results of the run

    Raises:
        LiteError: If the test directory, a substitution or a filter is invalid

    """
    start = time.perf_counter()

    test_dir = validate_test_dir(config.resolved_test_dir())
    substitutor = Substitutor(config.substitutions)
    filters = compile_filters(config.name_filters)

    units = discover_tests(
        test_dir, config.path_extensions, config.test_line_prefix, filters
    )

    reporter = Reporter(
        stream=stream if stream is not None else sys.stdout,
        success_message=config.success_message,
    )
    reporter.begin(units, test_dir)

    scheduler = TestScheduler(
        executor=executor
        if executor is not None
        else ShellExecutor(max_output_chars=config.max_output_chars),
        substitutor=substitutor,
        worker_count=config.worker_count(),
    )
    unit_results = await scheduler.run(units, on_unit_complete=reporter.report_unit)

    summary = reporter.finish(unit_results, running_time=time.perf_counter() - start)
    log.info(
        "Run finished: total=%d passes=%d failures=%d expected_failures=%d",
        summary.total,
        summary.passes,
        summary.failures,
        summary.expected_failures,
    )
    return SessionResult(summary=summary, unit_results=unit_results)


async def run_lite(
    config: LiteConfig,
    *,
    executor: CommandExecutor | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Run a lite session and return whether every directive passed.

    Expected failures count as success.
    """
    session = await run_session(config, executor=executor, stream=stream)
    return session.summary.succeeded
