"""Use Case: run the rule graph over one compilation unit."""

from __future__ import annotations

import heapq
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from godolint.domain.diagnostics import DiagnosticBuilder, DiagnosticCollector
from godolint.domain.entities import CompilationUnit, UnitReport
from godolint.domain.errors import ConfigurationError
from godolint.domain.rules import Pass, Rule

if TYPE_CHECKING:
    from godolint.domain.config import ConfigurationLoader

logger = logging.getLogger(__name__)

PARSE_FAULT_RULE = "parser"


class PassDependencyGraph:
    """
    Acyclic graph over rules; an edge A -> B means B runs before A.

    Validated once at construction: unknown prerequisites and cycles raise
    ``ConfigurationError`` before any unit is analysed.
    """

    def __init__(self, rules: Sequence[Rule]) -> None:
        self._rules = tuple(rules)
        by_name: dict[str, Rule] = {}
        for rule in self._rules:
            if rule.name in by_name:
                raise ConfigurationError(f"rule {rule.name!r} is registered twice")
            by_name[rule.name] = rule
        for rule in self._rules:
            for prerequisite in rule.requires:
                if prerequisite not in by_name:
                    raise ConfigurationError(
                        f"rule {rule.name!r} requires unknown rule {prerequisite!r}"
                    )
        self._by_name = by_name
        self._order = self._topological_order()

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    @property
    def order(self) -> tuple[Rule, ...]:
        """Execution order: dependencies first, ties broken by declaration order."""
        return self._order

    def _topological_order(self) -> tuple[Rule, ...]:
        position = {rule.name: i for i, rule in enumerate(self._rules)}
        remaining = {rule.name: len(set(rule.requires)) for rule in self._rules}
        dependents: dict[str, list[str]] = {rule.name: [] for rule in self._rules}
        for rule in self._rules:
            for prerequisite in set(rule.requires):
                dependents[prerequisite].append(rule.name)

        ready = [position[name] for name, count in remaining.items() if count == 0]
        heapq.heapify(ready)
        ordered: list[Rule] = []
        while ready:
            rule = self._rules[heapq.heappop(ready)]
            ordered.append(rule)
            for dependent in dependents[rule.name]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    heapq.heappush(ready, position[dependent])

        if len(ordered) != len(self._rules):
            stuck = sorted(name for name, count in remaining.items() if count > 0)
            raise ConfigurationError(f"rule dependency cycle among: {', '.join(stuck)}")
        return tuple(ordered)


class PassRunner:
    """Runs every rule of the graph once per unit, isolating faults per rule."""

    def __init__(self, graph: PassDependencyGraph, config: ConfigurationLoader) -> None:
        self._graph = graph
        self._config = config

    @property
    def graph(self) -> PassDependencyGraph:
        return self._graph

    def run(self, unit: CompilationUnit) -> UnitReport:
        collector = DiagnosticCollector()
        if unit.tree.has_errors:
            offset = unit.tree.error_offsets[0]
            DiagnosticBuilder(unit.source, PARSE_FAULT_RULE, collector).fault(
                offset, "syntax error: file could not be parsed, no rules were run"
            )
            logger.warning("Skipping %s: syntax errors at offsets %s", unit.path, unit.tree.error_offsets)
            return UnitReport(path=unit.path, diagnostics=collector.snapshot())

        results: dict[str, object] = {}
        failed: dict[str, str] = {}
        ran: list[str] = []
        for rule in self._graph.order:
            blocked = next((p for p in rule.requires if p in failed), None)
            if blocked is not None:
                failed[rule.name] = blocked
                DiagnosticBuilder(unit.source, rule.name, collector).fault(
                    0, f"rule {rule.name} skipped: prerequisite {blocked} failed"
                )
                continue
            # findings of a rule that faults half-way are discarded
            own = DiagnosticCollector()
            pass_ = Pass(rule, unit, self._config, results, own)
            try:
                results[rule.name] = rule.run(pass_)
            except Exception as exc:  # noqa: BLE001
                failed[rule.name] = rule.name
                logger.warning("Rule %s failed on %s: %s", rule.name, unit.path, exc)
                logger.debug("Rule %s traceback", rule.name, exc_info=True)
                DiagnosticBuilder(unit.source, rule.name, collector).fault(
                    0, f"rule execution error in {rule.name}: {type(exc).__name__}: {exc}"
                )
                continue
            for diagnostic in own.snapshot():
                collector.append(diagnostic)
            ran.append(rule.name)

        return UnitReport(
            path=unit.path,
            diagnostics=collector.snapshot(),
            rules_run=tuple(ran),
            failed_rules=tuple(failed),
        )
