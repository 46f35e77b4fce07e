"""Tree-index prerequisite pass shared by most of the catalog."""

from __future__ import annotations

from collections import defaultdict
from typing import cast

from godolint.domain.rules import Pass, RuleModule
from godolint.domain.syntax import SyntaxNode, SyntaxTree


class NodeIndex:
    """
    Nodes grouped by type in source order.

    Rules that only need every node of a few types ask the index; rules that
    need enclosing context walk the tree with an ancestor stack instead.
    """

    def __init__(self, tree: SyntaxTree) -> None:
        by_type: dict[str, list[SyntaxNode]] = defaultdict(list)
        for node in tree.nodes:
            by_type[node.type].append(node)
        self._by_type = {k: tuple(v) for k, v in by_type.items()}

    def of_type(self, *types: str) -> list[SyntaxNode]:
        """Nodes of the given types, merged back into source (pre-order) order."""
        if len(types) == 1:
            return list(self._by_type.get(types[0], ()))
        merged = [n for t in types for n in self._by_type.get(t, ())]
        merged.sort(key=lambda n: n.id)
        return merged


class InspectRule(RuleModule):
    name = "inspect"
    doc = "optimize AST traversal: index nodes by type"

    def run(self, pass_: Pass) -> NodeIndex:
        return NodeIndex(pass_.tree)


def node_index(pass_: Pass) -> NodeIndex:
    """The ``inspect`` result for the unit ``pass_`` runs over."""
    return cast(NodeIndex, pass_.result_of(InspectRule.name))
