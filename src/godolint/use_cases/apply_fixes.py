"""Use Case: Apply suggested fixes to source files."""

from __future__ import annotations

import difflib
import logging
from collections.abc import Mapping

from godolint.domain.diagnostics import SuggestedFix, apply_fixes, fixes_conflict
from godolint.domain.entities import AnalysisResult, FixOutcome, UnitReport
from godolint.domain.protocols import FileSystemProtocol, TelemetryPort

logger = logging.getLogger(__name__)


def choose_fixes(report: UnitReport) -> tuple[list[SuggestedFix], list[SuggestedFix]]:
    """
    First fix of every diagnostic, in stream order.

    A fix overlapping one already accepted is refused rather than merged.
    Returns (accepted, skipped).
    """
    accepted: list[SuggestedFix] = []
    skipped: list[SuggestedFix] = []
    for diagnostic in report.diagnostics:
        if not diagnostic.fixes:
            continue
        candidate = diagnostic.fixes[0]
        if any(fixes_conflict(candidate, kept) for kept in accepted):
            skipped.append(candidate)
        else:
            accepted.append(candidate)
    return accepted, skipped


class ApplyFixesUseCase:
    """Apply the non-conflicting suggested fixes of an analysis result."""

    def __init__(self, filesystem: FileSystemProtocol, telemetry: TelemetryPort) -> None:
        self.filesystem = filesystem
        self.telemetry = telemetry

    def execute(
        self,
        result: AnalysisResult,
        write: bool = True,
        sources: Mapping[str, bytes] | None = None,
    ) -> list[FixOutcome]:
        """
        Apply fixes file by file.

        Edits are offsets into the content the analysis saw, so ``sources``
        (path -> original bytes) wins over re-reading the file. With
        ``write=False`` only a unified diff is produced.
        """
        outcomes: list[FixOutcome] = []
        for report in result.reports:
            accepted, skipped = choose_fixes(report)
            if not accepted:
                continue
            original = (
                sources[report.path]
                if sources is not None and report.path in sources
                else self.filesystem.read_bytes(report.path)
            )
            fixed = apply_fixes(original, accepted)
            diff = "".join(
                difflib.unified_diff(
                    original.decode("utf-8", errors="replace").splitlines(keepends=True),
                    fixed.decode("utf-8", errors="replace").splitlines(keepends=True),
                    fromfile=f"a/{report.path}",
                    tofile=f"b/{report.path}",
                )
            )
            if write:
                self.filesystem.write_bytes(report.path, fixed)
                logger.info("Applied %d fix(es) to %s", len(accepted), report.path)
            for fix in skipped:
                self.telemetry.warning(f"{report.path}: skipped overlapping fix '{fix.message}'")
            outcomes.append(
                FixOutcome(
                    path=report.path,
                    applied=tuple(f.message for f in accepted),
                    skipped=tuple(f.message for f in skipped),
                    diff=diff,
                    written=write,
                )
            )
        changed = sum(1 for o in outcomes if o.changed)
        verb = "repaired" if write else "with pending fixes"
        self.telemetry.step(f"Fix run complete. Files {verb}: {changed}")
        return outcomes
