"""Tree-sitter Gateway - parses Go source into the immutable SyntaxNode arena."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from godolint.domain.errors import ParseError
from godolint.domain.protocols import ParserProtocol
from godolint.domain.syntax import SourceFile, SyntaxNode, SyntaxTree

logger = logging.getLogger(__name__)

GO_LANGUAGE = Language(tree_sitter_go.language())

# Wrapper nodes that only some grammar releases emit; their children are
# hoisted into the parent so rules see one shape.
SPLICED_TYPES = frozenset({"statement_list", "literal_element"})
RENAMED_TYPES = {"method_spec": "method_elem"}
DROPPED_TYPES = frozenset({"comment"})


@dataclass
class _Entry:
    type: str
    start: int
    end: int
    field_name: str | None
    children: list[int] = field(default_factory=list)


class TreeSitterGateway(ParserProtocol):
    """Infrastructure implementation of ParserProtocol using tree-sitter-go."""

    def __init__(self) -> None:
        self._parser = Parser(GO_LANGUAGE)
        self._lock = threading.Lock()

    def parse(self, path: str, content: bytes) -> SyntaxTree:
        try:
            with self._lock:
                ts_tree = self._parser.parse(content)
        except (TypeError, ValueError) as exc:
            raise ParseError(path, str(exc)) from exc
        source = SourceFile(path=path, content=content)
        entries, errors = self._flatten(ts_tree.root_node)
        nodes = self._build(entries, source)
        if errors:
            logger.debug("%s: %d syntax error(s)", path, len(errors))
        return SyntaxTree(source=source, root=nodes[0], nodes=nodes, error_offsets=tuple(sorted(errors)))

    @staticmethod
    def _named_children(node: Node, errors: list[int]) -> list[tuple[Node, str | None]]:
        kept: list[tuple[Node, str | None]] = []
        for position, child in enumerate(node.children):
            if child.is_missing:
                errors.append(child.start_byte)
            if not child.is_named or child.type in DROPPED_TYPES:
                continue
            kept.append((child, node.field_name_for_child(position)))
        return kept

    def _flatten(self, root: Node) -> tuple[list[_Entry], list[int]]:
        """Pre-order entries; ``children`` hold arena indexes."""
        entries: list[_Entry] = []
        errors: list[int] = []
        pending: list[tuple[Node, str | None, int]] = [(root, None, -1)]
        while pending:
            node, field_name, parent = pending.pop()
            if node.is_error:
                errors.append(node.start_byte)
            children = self._named_children(node, errors)
            if node.type in SPLICED_TYPES and parent >= 0:
                inherit = field_name if len(children) == 1 else None
                for child, child_field in reversed(children):
                    pending.append((child, child_field or inherit, parent))
                continue
            index = len(entries)
            entries.append(
                _Entry(
                    type=RENAMED_TYPES.get(node.type, node.type),
                    start=node.start_byte,
                    end=node.end_byte,
                    field_name=field_name,
                )
            )
            if parent >= 0:
                entries[parent].children.append(index)
            for child, child_field in reversed(children):
                pending.append((child, child_field, index))
        return entries, errors

    @staticmethod
    def _build(entries: list[_Entry], source: SourceFile) -> tuple[SyntaxNode, ...]:
        # children always have larger indexes than their parent
        built: list[SyntaxNode | None] = [None] * len(entries)
        for index in range(len(entries) - 1, -1, -1):
            entry = entries[index]
            built[index] = SyntaxNode(
                id=index,
                type=entry.type,
                start=entry.start,
                end=entry.end,
                source=source,
                field_name=entry.field_name,
                children=tuple(built[c] for c in entry.children),  # type: ignore[misc]
            )
        return tuple(n for n in built if n is not None)
