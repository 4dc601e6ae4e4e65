"""Schedule test units across a bounded pool of workers."""

import asyncio
import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from lite_runner.executors.base import CommandExecutor
from lite_runner.models.directive import Directive, TestUnit
from lite_runner.models.result import ExecutionResult, UnitResult
from lite_runner.substitution import Substitutor

log = logging.getLogger(__name__)

UnitCallback = Callable[[UnitResult], None]


@dataclass(frozen=True, kw_only=True)
class TestScheduler:
    """Runs the directives of every test unit.

    Directives of one unit run strictly in file order. Units are pulled from a
    shared queue by ``worker_count`` workers, so with more than one worker the
    order across units is unspecified.
    """

    __test__ = False

    executor: CommandExecutor
    substitutor: Substitutor
    worker_count: int = 1

    async def run(
        self,
        units: Sequence[TestUnit],
        on_unit_complete: UnitCallback | None = None,
    ) -> Sequence[UnitResult]:
        """Run all units and return their results sorted by path.

        Args:
            units: Test units to execute
            on_unit_complete: Called with each unit's results as soon as that
                unit finishes

        Returns:
            One result per unit, ordered by path

        """
        if not units:
            log.info("No test units to run")
            return []

        queue: asyncio.Queue[TestUnit] = asyncio.Queue()
        for unit in units:
            queue.put_nowait(unit)

        workers = max(1, min(self.worker_count, len(units)))
        log.info("Running %d test file(s) on %d worker(s)", len(units), workers)

        unit_results: list[UnitResult] = []
        await asyncio.gather(
            *(
                self._worker(queue, unit_results, on_unit_complete)
                for _ in range(workers)
            )
        )
        log.info("Test execution completed")

        return sorted(unit_results, key=lambda result: str(result.unit.path))

    async def _worker(
        self,
        queue: asyncio.Queue[TestUnit],
        unit_results: list[UnitResult],
        on_unit_complete: UnitCallback | None,
    ) -> None:
        while True:
            try:
                unit = queue.get_nowait()
            except asyncio.QueueEmpty:
                return

            unit_result = await self.run_unit(unit)
            unit_results.append(unit_result)
            if on_unit_complete is not None:
                on_unit_complete(unit_result)

    async def run_unit(self, unit: TestUnit) -> UnitResult:
        """Run one unit's directives in order."""
        results = [
            await self.run_directive(unit, directive) for directive in unit.directives
        ]
        return UnitResult(unit=unit, results=results)

    async def run_directive(
        self, unit: TestUnit, directive: Directive
    ) -> ExecutionResult:
        """Substitute, execute and time a single directive."""
        command_line = self.substitutor.substitute(directive.command_line, unit.path)

        start = time.perf_counter()
        output = await self.executor.execute(command_line)
        execution_time = time.perf_counter() - start

        result = ExecutionResult(
            directive=directive,
            command_line=command_line,
            exit_status=output.exit_status,
            stdout=output.stdout,
            stderr=output.stderr,
            execution_time=execution_time,
        )
        log.debug(
            "Directive finished: file=%s line=%d outcome=%s duration=%.3fs",
            unit.path,
            directive.line_number,
            result.outcome,
            execution_time,
        )
        return result
