"""Unit tests for PassDependencyGraph and PassRunner (use_cases/pass_runner.py)."""

import unittest

from godolint.domain.config import ConfigurationLoader
from godolint.domain.errors import ConfigurationError
from godolint.domain.rules import Pass, Rule
from godolint.use_cases.pass_runner import PARSE_FAULT_RULE, PassDependencyGraph, PassRunner
from tests.go_test_utils import load_unit, make_runner

SAMPLE = """
package api

import (
    "net/http"
    "time"
)

type Task struct {
    ID        string
    Content   string
    CreatedAt int64
}

type TaskReader interface {
    GetTask(id string) (*Task, error)
}

func GetTask(w http.ResponseWriter, r *http.Request) {
    t := Task{Content: "x", CreatedAt: time.Now()}
    Error("something failed", t)
}
"""


def _noop(pass_: Pass) -> None:
    return None


def _rule(name: str, run=_noop, *requires: str) -> Rule:
    return Rule(name=name, doc=name, run=run, requires=requires)


class TestPassDependencyGraph(unittest.TestCase):
    """Tests for graph validation and ordering."""

    def test_prerequisites_run_first_ties_by_declaration(self) -> None:
        """b waits for c; a and c keep declaration order."""
        graph = PassDependencyGraph([_rule("a"), _rule("b", _noop, "c"), _rule("c")])
        self.assertEqual([r.name for r in graph.order], ["a", "c", "b"])

    def test_cycle_is_a_configuration_error(self) -> None:
        """A cycle is rejected before any unit runs."""
        with self.assertRaises(ConfigurationError) as ctx:
            PassDependencyGraph([_rule("a", _noop, "b"), _rule("b", _noop, "a"), _rule("c")])
        self.assertIn("a, b", str(ctx.exception))

    def test_unknown_prerequisite_is_a_configuration_error(self) -> None:
        """A dependency on an unregistered rule is rejected."""
        with self.assertRaises(ConfigurationError):
            PassDependencyGraph([_rule("a", _noop, "ghost")])

    def test_duplicate_rule_is_a_configuration_error(self) -> None:
        """The same name twice is rejected."""
        with self.assertRaises(ConfigurationError):
            PassDependencyGraph([_rule("a"), _rule("a")])


class TestPassRunner(unittest.TestCase):
    """Tests for running rules over one unit."""

    def _run(self, *rules: Rule, source: str = "package app\n"):
        runner = PassRunner(PassDependencyGraph(rules), ConfigurationLoader())
        return runner.run(load_unit(source))

    def test_results_flow_to_dependents(self) -> None:
        """A dependent reads its prerequisite's result."""
        seen: list[object] = []

        def consumer(pass_: Pass) -> None:
            seen.append(pass_.result_of("producer"))

        report = self._run(_rule("producer", lambda p: 42), _rule("consumer", consumer, "producer"))
        self.assertEqual(seen, [42])
        self.assertEqual(report.rules_run, ("producer", "consumer"))

    def test_fault_is_isolated_and_dependents_skipped(self) -> None:
        """A raising rule becomes a fault; its findings are dropped; others still run."""

        def boom(pass_: Pass) -> None:
            pass_.report(pass_.root, "half-way finding")
            raise RuntimeError("kaput")

        def finder(pass_: Pass) -> None:
            pass_.report(pass_.root, "real finding")

        report = self._run(_rule("boom", boom), _rule("dep", _noop, "boom"), _rule("finder", finder))
        self.assertEqual([d.message for d in report.findings], ["real finding"])
        self.assertEqual(
            [d.message for d in report.faults],
            [
                "rule execution error in boom: RuntimeError: kaput",
                "rule dep skipped: prerequisite boom failed",
            ],
        )
        self.assertEqual(report.failed_rules, ("boom", "dep"))
        self.assertEqual(report.rules_run, ("finder",))

    def test_syntax_error_yields_single_parser_fault(self) -> None:
        """No rule runs over a file that did not parse."""
        called: list[str] = []
        report = self._run(
            _rule("a", lambda p: called.append("a")), source="package app\n\nfunc Broken( {\n"
        )
        self.assertEqual(called, [])
        self.assertEqual(len(report.diagnostics), 1)
        self.assertEqual(report.diagnostics[0].rule, PARSE_FAULT_RULE)
        self.assertTrue(report.diagnostics[0].is_fault)

    def test_full_catalog_is_deterministic(self) -> None:
        """Two runs over the same unit produce identical streams."""
        runner = make_runner()
        unit = load_unit(SAMPLE, path="internal/api/handler.go")
        first = [d.format() for d in runner.run(unit).diagnostics]
        second = [d.format() for d in runner.run(load_unit(SAMPLE, path="internal/api/handler.go")).diagnostics]
        self.assertEqual(first, second)
        self.assertTrue(first)

    def test_full_catalog_groups_by_rule_order(self) -> None:
        """Diagnostics follow rule execution order, then each rule's own order."""
        runner = make_runner()
        report = runner.run(load_unit(SAMPLE, path="internal/api/handler.go"))
        order = [r.name for r in runner.graph.order]
        positions = [order.index(d.rule) for d in report.diagnostics]
        self.assertEqual(positions, sorted(positions))
        self.assertEqual(report.faults, ())

    def test_every_fix_is_internally_consistent(self) -> None:
        """No fix carries overlapping edits or offsets outside the file."""
        unit = load_unit(SAMPLE, path="internal/api/handler.go")
        report = make_runner().run(unit)
        size = len(unit.source.content)
        fixes = [fix for d in report.diagnostics for fix in d.fixes]
        self.assertTrue(fixes)
        for fix in fixes:
            for index, edit in enumerate(fix.edits):
                self.assertLessEqual(edit.end, size)
                for other in fix.edits[index + 1 :]:
                    self.assertFalse(edit.overlaps(other))
