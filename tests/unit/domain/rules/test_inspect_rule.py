"""Unit tests for the node index prerequisite (inspect)."""

import unittest

from godolint.domain.rules import golang
from godolint.domain.rules.inspect import NodeIndex
from tests.go_test_utils import parse_go

SOURCE = """
package app

func First() {
    if ok {
        call()
    }
}

func (s *Store) Second() int {
    return 1
}
"""


class TestNodeIndex(unittest.TestCase):
    """Tests for NodeIndex."""

    def setUp(self) -> None:
        self.tree = parse_go(SOURCE)
        self.index = NodeIndex(self.tree)

    def test_of_type_merges_types_in_source_order(self) -> None:
        """Functions and methods come back interleaved as written."""
        decls = self.index.of_type("method_declaration", "function_declaration")
        self.assertEqual([golang.declared_name(d) for d in decls], ["First", "Second"])

    def test_of_unknown_type_is_empty(self) -> None:
        """No node of a type gives an empty list."""
        self.assertEqual(self.index.of_type("select_statement"), [])
