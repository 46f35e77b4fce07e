from __future__ import annotations

from dataclasses import dataclass, field

from godolint.domain.diagnostics import Diagnostic, DiagnosticCategory
from godolint.domain.semantics import SemanticBridge, SemanticIndex
from godolint.domain.syntax import SourceFile, SyntaxTree


@dataclass(frozen=True)
class CompilationUnit:
    """One parsed Go file plus its resolved semantic facts."""

    tree: SyntaxTree
    semantics: SemanticBridge = field(default_factory=SemanticIndex.empty)
    module: str = ""
    package_dir: str = ""

    @property
    def path(self) -> str:
        return self.tree.path

    @property
    def source(self) -> SourceFile:
        return self.tree.source


@dataclass(frozen=True)
class UnitReport:
    """Ordered diagnostic stream produced for one compilation unit."""

    path: str
    diagnostics: tuple[Diagnostic, ...] = ()
    rules_run: tuple[str, ...] = ()
    failed_rules: tuple[str, ...] = ()

    @property
    def findings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.category is DiagnosticCategory.FINDING)

    @property
    def faults(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.category is DiagnosticCategory.FAULT)


@dataclass(frozen=True)
class AnalysisResult:
    """Result of one lint session across all units."""

    reports: tuple[UnitReport, ...] = ()
    cancelled: bool = False

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(d for report in self.reports for d in report.diagnostics)

    def has_findings(self) -> bool:
        """Faults alone never fail a run."""
        return any(report.findings for report in self.reports)

    def report_for(self, path: str) -> UnitReport | None:
        return next((r for r in self.reports if r.path == path), None)


@dataclass(frozen=True)
class FixOutcome:
    """What applying fixes did to one file."""

    path: str
    applied: tuple[str, ...] = ()
    skipped: tuple[str, ...] = ()
    diff: str = ""
    written: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.applied)
