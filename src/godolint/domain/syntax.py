"""
Immutable Go syntax tree and the traversal core shared by every rule.

Nodes only point downwards (to their children) and back to their source
file. Ancestry is never stored on a node: walkers keep an explicit
``AncestorStack`` and the ``inspect`` pass keeps a parent table indexed by
arena position.
"""

from __future__ import annotations

import bisect
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from pathlib import PurePath


class NodeKind(Enum):
    """Coarse classification of Go grammar node types."""

    DECLARATION = "declaration"
    STATEMENT = "statement"
    EXPRESSION = "expression"
    TYPE = "type"
    IDENTIFIER = "identifier"
    LITERAL = "literal"
    OTHER = "other"


_KIND_BY_TYPE: dict[str, NodeKind] = {
    # declarations
    "package_clause": NodeKind.DECLARATION,
    "import_declaration": NodeKind.DECLARATION,
    "import_spec": NodeKind.DECLARATION,
    "function_declaration": NodeKind.DECLARATION,
    "method_declaration": NodeKind.DECLARATION,
    "type_declaration": NodeKind.DECLARATION,
    "type_spec": NodeKind.DECLARATION,
    "type_alias": NodeKind.DECLARATION,
    "var_declaration": NodeKind.DECLARATION,
    "var_spec": NodeKind.DECLARATION,
    "const_declaration": NodeKind.DECLARATION,
    "const_spec": NodeKind.DECLARATION,
    "field_declaration": NodeKind.DECLARATION,
    "method_elem": NodeKind.DECLARATION,
    "parameter_declaration": NodeKind.DECLARATION,
    "variadic_parameter_declaration": NodeKind.DECLARATION,
    # statements
    "block": NodeKind.STATEMENT,
    "expression_statement": NodeKind.STATEMENT,
    "return_statement": NodeKind.STATEMENT,
    "if_statement": NodeKind.STATEMENT,
    "for_statement": NodeKind.STATEMENT,
    "expression_switch_statement": NodeKind.STATEMENT,
    "type_switch_statement": NodeKind.STATEMENT,
    "select_statement": NodeKind.STATEMENT,
    "assignment_statement": NodeKind.STATEMENT,
    "short_var_declaration": NodeKind.STATEMENT,
    "inc_statement": NodeKind.STATEMENT,
    "dec_statement": NodeKind.STATEMENT,
    "go_statement": NodeKind.STATEMENT,
    "defer_statement": NodeKind.STATEMENT,
    "send_statement": NodeKind.STATEMENT,
    "labeled_statement": NodeKind.STATEMENT,
    "break_statement": NodeKind.STATEMENT,
    "continue_statement": NodeKind.STATEMENT,
    "goto_statement": NodeKind.STATEMENT,
    "fallthrough_statement": NodeKind.STATEMENT,
    "empty_statement": NodeKind.STATEMENT,
    # expressions
    "call_expression": NodeKind.EXPRESSION,
    "selector_expression": NodeKind.EXPRESSION,
    "composite_literal": NodeKind.EXPRESSION,
    "unary_expression": NodeKind.EXPRESSION,
    "binary_expression": NodeKind.EXPRESSION,
    "index_expression": NodeKind.EXPRESSION,
    "slice_expression": NodeKind.EXPRESSION,
    "type_assertion_expression": NodeKind.EXPRESSION,
    "type_conversion_expression": NodeKind.EXPRESSION,
    "parenthesized_expression": NodeKind.EXPRESSION,
    "func_literal": NodeKind.EXPRESSION,
    "keyed_element": NodeKind.EXPRESSION,
    "literal_value": NodeKind.EXPRESSION,
    "expression_list": NodeKind.EXPRESSION,
    "argument_list": NodeKind.EXPRESSION,
    # types
    "type_identifier": NodeKind.TYPE,
    "qualified_type": NodeKind.TYPE,
    "pointer_type": NodeKind.TYPE,
    "slice_type": NodeKind.TYPE,
    "array_type": NodeKind.TYPE,
    "map_type": NodeKind.TYPE,
    "channel_type": NodeKind.TYPE,
    "function_type": NodeKind.TYPE,
    "struct_type": NodeKind.TYPE,
    "interface_type": NodeKind.TYPE,
    "generic_type": NodeKind.TYPE,
    # identifiers
    "identifier": NodeKind.IDENTIFIER,
    "field_identifier": NodeKind.IDENTIFIER,
    "package_identifier": NodeKind.IDENTIFIER,
    "blank_identifier": NodeKind.IDENTIFIER,
    # literals
    "interpreted_string_literal": NodeKind.LITERAL,
    "raw_string_literal": NodeKind.LITERAL,
    "int_literal": NodeKind.LITERAL,
    "float_literal": NodeKind.LITERAL,
    "imaginary_literal": NodeKind.LITERAL,
    "rune_literal": NodeKind.LITERAL,
    "nil": NodeKind.LITERAL,
    "true": NodeKind.LITERAL,
    "false": NodeKind.LITERAL,
    "iota": NodeKind.LITERAL,
}


@dataclass(frozen=True)
class SourceFile:
    """Original, unmodified bytes of one Go file."""

    path: str
    content: bytes

    @property
    def name(self) -> str:
        """Base file name, e.g. ``interfaces.go``."""
        return PurePath(self.path).name

    @cached_property
    def _line_starts(self) -> tuple[int, ...]:
        starts = [0]
        for index, byte in enumerate(self.content):
            if byte == 0x0A:
                starts.append(index + 1)
        return tuple(starts)

    def line_col(self, offset: int) -> tuple[int, int]:
        """1-based (line, column); the column counts bytes like go/token."""
        line_index = bisect.bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index] + 1

    def slice(self, start: int, end: int) -> str:
        return self.content[start:end].decode("utf-8", errors="replace")

    def indentation_at(self, offset: int) -> str:
        """Leading whitespace of the line holding ``offset``."""
        line_start = self.content.rfind(b"\n", 0, offset) + 1
        indent_end = line_start
        while indent_end < offset and self.content[indent_end] in (0x20, 0x09):
            indent_end += 1
        return self.slice(line_start, indent_end)


@dataclass(frozen=True, eq=False)
class SyntaxNode:
    """One named node of the parsed tree; hashed by identity."""

    id: int
    type: str
    start: int
    end: int
    source: SourceFile = field(repr=False)
    field_name: str | None = None
    children: tuple[SyntaxNode, ...] = field(default=(), repr=False)

    @property
    def kind(self) -> NodeKind:
        return _KIND_BY_TYPE.get(self.type, NodeKind.OTHER)

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    @property
    def text(self) -> str:
        return self.source.slice(self.start, self.end)

    def child(self, field_name: str) -> SyntaxNode | None:
        """First child attached under the grammar field ``field_name``."""
        for child in self.children:
            if child.field_name == field_name:
                return child
        return None

    def children_by_field(self, field_name: str) -> tuple[SyntaxNode, ...]:
        return tuple(c for c in self.children if c.field_name == field_name)

    def named(self, *types: str) -> tuple[SyntaxNode, ...]:
        """Direct children whose type is one of ``types``."""
        return tuple(c for c in self.children if c.type in types)

    def first(self, *types: str) -> SyntaxNode | None:
        for child in self.children:
            if not types or child.type in types:
                return child
        return None


@dataclass(frozen=True)
class SyntaxTree:
    """A parsed file: its root plus the pre-order arena of all nodes."""

    source: SourceFile
    root: SyntaxNode
    nodes: tuple[SyntaxNode, ...]
    error_offsets: tuple[int, ...] = ()

    @property
    def path(self) -> str:
        return self.source.path

    @property
    def has_errors(self) -> bool:
        return bool(self.error_offsets)


class AncestorStack:
    """Enclosing nodes of the node currently being visited, outermost first."""

    FUNCTION_TYPES: tuple[str, ...] = ("function_declaration", "method_declaration", "func_literal")

    def __init__(self) -> None:
        self._stack: list[SyntaxNode] = []

    def _truncate(self, depth: int) -> None:
        del self._stack[depth:]

    def _push(self, node: SyntaxNode) -> None:
        self._stack.append(node)

    def __len__(self) -> int:
        return len(self._stack)

    def __iter__(self) -> Iterator[SyntaxNode]:
        """Innermost ancestor first."""
        return reversed(self._stack)

    @property
    def parent(self) -> SyntaxNode | None:
        return self._stack[-1] if self._stack else None

    def nearest(self, *types: str) -> SyntaxNode | None:
        for node in reversed(self._stack):
            if node.type in types:
                return node
        return None

    def enclosing_function(self) -> SyntaxNode | None:
        return self.nearest(*self.FUNCTION_TYPES)

    def enclosing_declaration(self) -> SyntaxNode | None:
        """Nearest named function or method, skipping function literals."""
        return self.nearest("function_declaration", "method_declaration")

    def snapshot(self) -> tuple[SyntaxNode, ...]:
        return tuple(self._stack)


def walk(root: SyntaxNode, visit: Callable[[SyntaxNode], bool]) -> None:
    """Pre-order depth-first walk in source order; ``visit`` returning False prunes."""
    pending: list[SyntaxNode] = [root]
    while pending:
        node = pending.pop()
        if visit(node):
            pending.extend(reversed(node.children))


def walk_with_ancestors(
    root: SyntaxNode, visit: Callable[[SyntaxNode, AncestorStack], bool]
) -> None:
    """Like ``walk`` but hands every visit the stack of enclosing nodes."""
    ancestors = AncestorStack()
    pending: list[tuple[SyntaxNode, int]] = [(root, 0)]
    while pending:
        node, depth = pending.pop()
        ancestors._truncate(depth)
        if not visit(node, ancestors):
            continue
        ancestors._push(node)
        pending.extend((child, depth + 1) for child in reversed(node.children))


def iter_nodes(root: SyntaxNode, *types: str) -> Iterator[SyntaxNode]:
    """All nodes below and including ``root`` (pre-order), optionally filtered by type."""
    pending: list[SyntaxNode] = [root]
    while pending:
        node = pending.pop()
        if not types or node.type in types:
            yield node
        pending.extend(reversed(node.children))


Handler = Callable[[SyntaxNode, AncestorStack], None]


def dispatch(root: SyntaxNode, handlers: Mapping[str, Handler]) -> None:
    """Walk ``root`` and route each node to the handler registered for its type."""

    def visit(node: SyntaxNode, ancestors: AncestorStack) -> bool:
        handler = handlers.get(node.type)
        if handler is not None:
            handler(node, ancestors)
        return True

    walk_with_ancestors(root, visit)
