"""Terminal and JSON reporters for analysis results."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from godolint.domain.protocols import ReporterProtocol

if TYPE_CHECKING:
    from godolint.domain.entities import AnalysisResult, FixOutcome

REPORT_FORMATS: tuple[str, ...] = ("text", "table", "json")


class TextReporter(ReporterProtocol):
    """One ``path:line:column: message [rule]`` line per diagnostic on stdout."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(soft_wrap=True)

    def _plain(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def report(self, result: AnalysisResult) -> None:
        for diagnostic in result.diagnostics:
            self._plain(diagnostic.format())

    def report_fixes(self, outcomes: list[FixOutcome]) -> None:
        for outcome in outcomes:
            if outcome.diff:
                self._plain(outcome.diff.rstrip("\n"))
            for message in outcome.applied:
                verb = "fixed" if outcome.written else "would fix"
                self._plain(f"{outcome.path}: {verb}: {message}")
            for message in outcome.skipped:
                self._plain(f"{outcome.path}: skipped (overlaps another fix): {message}")


class TableReporter(TextReporter):
    """Rich table grouped by file, followed by a per-rule summary."""

    def report(self, result: AnalysisResult) -> None:
        diagnostics = result.diagnostics
        if not diagnostics:
            self.console.print("[green]No diagnostics.[/]")
            return
        table = Table(title="godolint diagnostics", show_lines=False)
        table.add_column("Location", style="bold blue", no_wrap=True)
        table.add_column("Rule", style="bold magenta")
        table.add_column("Message")
        table.add_column("Fix", style="green")
        for diagnostic in diagnostics:
            message = escape(diagnostic.message)
            if diagnostic.is_fault:
                message = f"[bold red]{message}[/]"
            table.add_row(
                escape(f"{diagnostic.path}:{diagnostic.line}:{diagnostic.column}"),
                diagnostic.rule,
                message,
                escape(diagnostic.fixes[0].message) if diagnostic.fixes else "",
            )
        self.console.print(table)

        counts: dict[str, int] = {}
        for diagnostic in diagnostics:
            counts[diagnostic.rule] = counts.get(diagnostic.rule, 0) + 1
        summary = Table(title="Summary by rule")
        summary.add_column("Rule", style="bold magenta")
        summary.add_column("Count", justify="right")
        for rule, count in sorted(counts.items(), key=lambda item: (-item[1], item[0])):
            summary.add_row(rule, str(count))
        self.console.print(summary)


class JsonReporter(TextReporter):
    """Machine-readable output; one JSON document per run."""

    def report(self, result: AnalysisResult) -> None:
        document = {
            "cancelled": result.cancelled,
            "files": [
                {
                    "path": report.path,
                    "rules_run": list(report.rules_run),
                    "failed_rules": list(report.failed_rules),
                    "diagnostics": [d.to_dict() for d in report.diagnostics],
                }
                for report in result.reports
            ],
        }
        self._plain(json.dumps(document, indent=2))

    def report_fixes(self, outcomes: list[FixOutcome]) -> None:
        document = [
            {
                "path": outcome.path,
                "applied": list(outcome.applied),
                "skipped": list(outcome.skipped),
                "written": outcome.written,
                "diff": outcome.diff,
            }
            for outcome in outcomes
        ]
        self._plain(json.dumps(document, indent=2))


def create_reporter(output_format: str, console: Console | None = None) -> ReporterProtocol:
    reporters: dict[str, type[TextReporter]] = {
        "text": TextReporter,
        "table": TableReporter,
        "json": JsonReporter,
    }
    try:
        reporter_class = reporters[output_format]
    except KeyError:
        raise ValueError(
            f"unknown output format {output_format!r}; choose from {', '.join(REPORT_FORMATS)}"
        ) from None
    return reporter_class(console)
