"""Use Case: Analyze - run the pass runner over every compilation unit of a target."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor

from godolint.domain.entities import AnalysisResult, CompilationUnit, UnitReport
from godolint.domain.protocols import FrontendProtocol, TelemetryPort
from godolint.use_cases.pass_runner import PassRunner

logger = logging.getLogger(__name__)


class AnalyzeUseCase:
    """
    Orchestrate one lint session.

    Units are independent, so they run on a thread pool. Reports keep the
    front-end's order regardless of completion order. A set cancel event stops
    units that have not started; units already running finish.
    """

    def __init__(
        self,
        frontend: FrontendProtocol,
        runner: PassRunner,
        telemetry: TelemetryPort,
        workers: int = 1,
    ) -> None:
        self.frontend = frontend
        self.runner = runner
        self.telemetry = telemetry
        self.workers = max(1, workers)

    def execute(self, target: str, cancel_event: threading.Event | None = None) -> AnalysisResult:
        self.telemetry.step(f"Loading Go sources from {target}")
        units = self.frontend.load(target)
        return self.run_units(units, cancel_event)

    def run_units(
        self, units: list[CompilationUnit], cancel_event: threading.Event | None = None
    ) -> AnalysisResult:
        cancel = cancel_event or threading.Event()
        rule_names = ", ".join(r.name for r in self.runner.graph.order)
        self.telemetry.step(f"Analyzing {len(units)} file(s) with: {rule_names}")

        if self.workers == 1 or len(units) <= 1:
            reports: list[UnitReport | None] = [self._run_one(u, cancel) for u in units]
        else:
            with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="godolint") as pool:
                futures: list[Future[UnitReport | None]] = [
                    pool.submit(self._run_one, unit, cancel) for unit in units
                ]
                try:
                    reports = [future.result() for future in futures]
                except KeyboardInterrupt:
                    # queued units see the event and return without running
                    cancel.set()
                    raise

        completed = tuple(r for r in reports if r is not None)
        if cancel.is_set():
            self.telemetry.warning(
                f"Analysis cancelled after {len(completed)} of {len(units)} file(s)"
            )
        return AnalysisResult(reports=completed, cancelled=cancel.is_set())

    def _run_one(self, unit: CompilationUnit, cancel: threading.Event) -> UnitReport | None:
        if cancel.is_set():
            logger.debug("Cancelled before %s", unit.path)
            return None
        return self.runner.run(unit)
