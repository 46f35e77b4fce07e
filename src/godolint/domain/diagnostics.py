"""
Diagnostic & fix builder.

Edits are half-open byte ranges into the original, unmodified source.
A fix's own edits never overlap; applying fixes happens against the frozen
original in descending offset order.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from godolint.domain.errors import FixConflictError
from godolint.domain.syntax import SourceFile, SyntaxNode


@dataclass(frozen=True)
class TextEdit:
    start: int
    end: int
    new_text: str

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid edit range [{self.start}, {self.end})")

    @property
    def is_insertion(self) -> bool:
        return self.start == self.end

    def overlaps(self, other: TextEdit) -> bool:
        """True when the ranges intersect or both insert at the same point."""
        if self.is_insertion and other.is_insertion:
            return self.start == other.start
        if self.is_insertion:
            return other.start < self.start < other.end
        if other.is_insertion:
            return self.start < other.start < self.end
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class SuggestedFix:
    """A named, ordered set of text edits resolving one diagnostic."""

    message: str
    edits: tuple[TextEdit, ...]

    def __post_init__(self) -> None:
        for index, edit in enumerate(self.edits):
            for other in self.edits[index + 1 :]:
                if edit.overlaps(other):
                    raise FixConflictError(
                        f"fix {self.message!r} has overlapping edits "
                        f"[{edit.start}, {edit.end}) and [{other.start}, {other.end})"
                    )

    @property
    def span(self) -> tuple[int, int]:
        return (min(e.start for e in self.edits), max(e.end for e in self.edits))


class DiagnosticCategory(Enum):
    FINDING = "finding"
    FAULT = "fault"


@dataclass(frozen=True)
class Diagnostic:
    """A positioned finding. Severity is always ``warning``."""

    path: str
    offset: int
    line: int
    column: int
    message: str
    rule: str
    category: DiagnosticCategory = DiagnosticCategory.FINDING
    fixes: tuple[SuggestedFix, ...] = ()

    severity: str = field(default="warning", init=False)

    @property
    def is_fault(self) -> bool:
        return self.category is DiagnosticCategory.FAULT

    def format(self) -> str:
        return f"{self.path}:{self.line}:{self.column}: {self.message} [{self.rule}]"

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "offset": self.offset,
            "message": self.message,
            "rule": self.rule,
            "category": self.category.value,
            "severity": self.severity,
            "fixes": [
                {
                    "message": fix.message,
                    "edits": [
                        {"start": e.start, "end": e.end, "new_text": e.new_text}
                        for e in fix.edits
                    ],
                }
                for fix in self.fixes
            ],
        }


class DiagnosticCollector:
    """Per-unit diagnostic stream; append is safe from several threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: list[Diagnostic] = []

    def append(self, diagnostic: Diagnostic) -> None:
        with self._lock:
            self._items.append(diagnostic)

    def snapshot(self) -> tuple[Diagnostic, ...]:
        with self._lock:
            return tuple(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class DiagnosticBuilder:
    """Creates diagnostics and fixes for one rule over one source file."""

    def __init__(self, source: SourceFile, rule: str, sink: DiagnosticCollector) -> None:
        self._source = source
        self._rule = rule
        self._sink = sink

    @property
    def source(self) -> SourceFile:
        return self._source

    def diagnostic(
        self,
        at: SyntaxNode | int,
        message: str,
        *fixes: SuggestedFix,
        category: DiagnosticCategory = DiagnosticCategory.FINDING,
    ) -> Diagnostic:
        offset = at if isinstance(at, int) else at.start
        line, column = self._source.line_col(offset)
        return Diagnostic(
            path=self._source.path,
            offset=offset,
            line=line,
            column=column,
            message=message,
            rule=self._rule,
            category=category,
            fixes=tuple(fixes),
        )

    def report(self, at: SyntaxNode | int, message: str, *fixes: SuggestedFix) -> Diagnostic:
        diagnostic = self.diagnostic(at, message, *fixes)
        self._sink.append(diagnostic)
        return diagnostic

    def fault(self, at: SyntaxNode | int, message: str) -> Diagnostic:
        diagnostic = self.diagnostic(at, message, category=DiagnosticCategory.FAULT)
        self._sink.append(diagnostic)
        return diagnostic

    @staticmethod
    def replace(node: SyntaxNode, text: str) -> TextEdit:
        return TextEdit(node.start, node.end, text)

    @staticmethod
    def insert(offset: int, text: str) -> TextEdit:
        return TextEdit(offset, offset, text)

    @staticmethod
    def fix(message: str, *edits: TextEdit) -> SuggestedFix:
        return SuggestedFix(message, tuple(edits))


def fixes_conflict(a: SuggestedFix, b: SuggestedFix) -> bool:
    return any(x.overlaps(y) for x in a.edits for y in b.edits)


def apply_fixes(content: bytes, fixes: Sequence[SuggestedFix] | Iterable[SuggestedFix]) -> bytes:
    """Apply every edit of ``fixes`` to ``content``; overlapping fixes are refused."""
    fixes = list(fixes)
    for index, fix in enumerate(fixes):
        for other in fixes[index + 1 :]:
            if fixes_conflict(fix, other):
                raise FixConflictError(f"fixes {fix.message!r} and {other.message!r} overlap")
    edits = sorted(
        (edit for fix in fixes for edit in fix.edits),
        key=lambda e: (e.start, e.end),
        reverse=True,
    )
    result = bytearray(content)
    for edit in edits:
        if edit.end > len(content):
            raise FixConflictError(f"edit [{edit.start}, {edit.end}) is past end of file")
        result[edit.start : edit.end] = edit.new_text.encode("utf-8")
    return bytes(result)
