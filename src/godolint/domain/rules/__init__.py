"""Domain models for rules, their registration, and the per-unit pass."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from godolint.domain.diagnostics import (
    Diagnostic,
    DiagnosticBuilder,
    DiagnosticCollector,
    SuggestedFix,
    TextEdit,
)
from godolint.domain.errors import ConfigurationError

if TYPE_CHECKING:
    from godolint.domain.config import ConfigurationLoader
    from godolint.domain.entities import CompilationUnit
    from godolint.domain.semantics import SemanticBridge
    from godolint.domain.syntax import SourceFile, SyntaxNode, SyntaxTree

__all__ = [
    "Pass",
    "Rule",
    "RuleModule",
    "RuleRegistry",
]


@dataclass(frozen=True)
class Rule:
    """
    A named, stateless unit of analysis.

    ``run`` receives a ``Pass`` for one compilation unit and may return a
    result that rules listing this one in ``requires`` can read.
    """

    name: str
    doc: str
    run: Callable[[Pass], object]
    requires: tuple[str, ...] = ()


class RuleRegistry:
    """Name -> Rule table, filled once at start-up and never reassigned."""

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: dict[str, Rule] = {}
        for rule in rules:
            self.add(rule)

    def add(self, rule: Rule) -> Rule:
        if rule.name in self._rules:
            raise ConfigurationError(f"rule {rule.name!r} is registered twice")
        self._rules[rule.name] = rule
        return rule

    def register(
        self,
        name: str,
        doc: str,
        run: Callable[[Pass], object],
        requires: Iterable[str] = (),
    ) -> Rule:
        return self.add(Rule(name=name, doc=doc, run=run, requires=tuple(requires)))

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def get(self, name: str) -> Rule:
        try:
            return self._rules[name]
        except KeyError:
            raise ConfigurationError(f"unknown rule {name!r}") from None

    def rules(self) -> tuple[Rule, ...]:
        """All rules in declaration order."""
        return tuple(self._rules.values())

    def names(self) -> tuple[str, ...]:
        return tuple(self._rules)

    def select(self, names: Iterable[str]) -> tuple[Rule, ...]:
        """The named rules plus their transitive prerequisites, in declaration order."""
        wanted: set[str] = set()
        pending = list(names)
        while pending:
            name = pending.pop()
            if name in wanted:
                continue
            rule = self.get(name)
            wanted.add(name)
            pending.extend(r for r in rule.requires if r in self._rules)
        return tuple(rule for rule in self._rules.values() if rule.name in wanted)


class Pass:
    """What one rule sees while it runs over one compilation unit."""

    def __init__(
        self,
        rule: Rule,
        unit: CompilationUnit,
        config: ConfigurationLoader,
        results: Mapping[str, object],
        collector: DiagnosticCollector,
    ) -> None:
        self._rule = rule
        self._unit = unit
        self._config = config
        self._results = results
        self._builder = DiagnosticBuilder(unit.source, rule.name, collector)

    @property
    def rule(self) -> Rule:
        return self._rule

    @property
    def unit(self) -> CompilationUnit:
        return self._unit

    @property
    def tree(self) -> SyntaxTree:
        return self._unit.tree

    @property
    def root(self) -> SyntaxNode:
        return self._unit.tree.root

    @property
    def source(self) -> SourceFile:
        return self._unit.source

    @property
    def semantics(self) -> SemanticBridge:
        return self._unit.semantics

    @property
    def config(self) -> ConfigurationLoader:
        return self._config

    def result_of(self, prerequisite: str) -> object:
        if prerequisite not in self._rule.requires:
            raise ConfigurationError(
                f"rule {self._rule.name!r} did not declare {prerequisite!r} as a prerequisite"
            )
        return self._results[prerequisite]

    def type_of(self, node: SyntaxNode) -> str | None:
        return self._unit.semantics.type_of(node)

    def report(self, at: SyntaxNode | int, message: str, *fixes: SuggestedFix) -> Diagnostic:
        return self._builder.report(at, message, *fixes)

    def replace(self, node: SyntaxNode, text: str) -> TextEdit:
        return self._builder.replace(node, text)

    def insert(self, offset: int, text: str) -> TextEdit:
        return self._builder.insert(offset, text)

    def fix(self, message: str, *edits: TextEdit) -> SuggestedFix:
        return self._builder.fix(message, *edits)


class RuleModule:
    """
    Base class for the catalog rules.

    Subclasses set ``name``, ``doc`` and ``requires`` and implement ``run``.
    Instances hold only configuration read at construction; per-file state
    lives in local variables of ``run``.
    """

    name: ClassVar[str] = ""
    doc: ClassVar[str] = ""
    requires: ClassVar[tuple[str, ...]] = ()

    def run(self, pass_: Pass) -> object:
        raise NotImplementedError

    def as_rule(self) -> Rule:
        return Rule(name=self.name, doc=self.doc, run=self.run, requires=self.requires)
