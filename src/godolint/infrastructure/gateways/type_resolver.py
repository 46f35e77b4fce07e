"""
Syntactic type resolution for one Go package.

This is not a type checker. It follows declared types through parameters,
receivers, variable declarations, composite literals and a handful of
well-known standard library calls, and gives up (no fact) on anything else.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from godolint.domain.constants import GO_BASIC_TYPES
from godolint.domain.rules import golang
from godolint.domain.semantics import Method, ReceiverKind, Span
from godolint.domain.syntax import SyntaxNode, SyntaxTree, iter_nodes

logger = logging.getLogger(__name__)

# (package qualifier, function) -> result type
KNOWN_CALLS: dict[tuple[str, str], str] = {
    ("time", "Now"): "time.Time",
    ("time", "Unix"): "time.Time",
    ("time", "Since"): "time.Duration",
    ("errors", "New"): "error",
    ("errors", "Wrap"): "error",
    ("errors", "Wrapf"): "error",
    ("errors", "Join"): "error",
    ("fmt", "Errorf"): "error",
    ("fmt", "Sprintf"): "string",
    ("context", "Background"): "context.Context",
    ("context", "TODO"): "context.Context",
}

# (receiver type, method) -> result type
KNOWN_METHODS: dict[tuple[str, str], str] = {
    ("time.Time", "Unix"): "int64",
    ("time.Time", "UnixNano"): "int64",
    ("time.Time", "UnixMilli"): "int64",
    ("time.Time", "Add"): "time.Time",
    ("time.Time", "UTC"): "time.Time",
    ("*http.Request", "Context"): "context.Context",
    ("error", "Error"): "string",
}

COMPARISON_OPERATORS = frozenset({"==", "!=", "<", "<=", ">", ">=", "&&", "||"})

# Nodes that open a Go block: their declarations end with them
SCOPE_NODES = frozenset(
    {
        "block",
        "func_literal",
        "if_statement",
        "for_statement",
        "expression_switch_statement",
        "type_switch_statement",
        "select_statement",
        "expression_case",
        "type_case",
        "default_case",
        "communication_case",
    }
)


def receiver_base(type_text: str) -> str:
    """``*Stack[T]`` -> ``Stack``."""
    return type_text.lstrip("*").split("[", 1)[0].strip()


def local_type_name(type_text: str) -> str:
    return type_text.lstrip("*")


class TypeResolver:
    """
    Package-wide declarations collected once, then per-file expression types.

    Every file of a Go package sees the methods and functions declared in
    its sibling files, so the resolver is built over all of them.
    """

    def __init__(self, trees: Sequence[SyntaxTree]) -> None:
        self._declared_types: set[str] = set()
        self._methods: dict[str, list[Method]] = {}
        self._functions: dict[str, list[str]] = {}
        self._method_results: dict[tuple[str, str], list[str]] = {}
        self._fields: dict[tuple[str, str], str] = {}
        self._package_vars: dict[str, str] = {}
        for tree in trees:
            self._collect(tree.root)

    def methods(self) -> dict[str, tuple[Method, ...]]:
        """Method table of every type declared in the package; () when it has none."""
        table = {name: tuple(self._methods.get(name, ())) for name in self._declared_types}
        for name, methods in self._methods.items():
            table.setdefault(name, tuple(methods))
        return table

    # -- package declarations ------------------------------------------------

    def _collect(self, root: SyntaxNode) -> None:
        for spec in golang.type_specs(root):
            name = golang.declared_name(spec)
            self._declared_types.add(name)
            declared = spec.child("type")
            if declared is not None and declared.type == "struct_type":
                for field in golang.struct_fields(declared):
                    type_node = field.child("type")
                    if type_node is None:
                        continue
                    for field_name in golang.field_names(field):
                        self._fields[(name, field_name)] = type_node.text
        for decl in root.named("function_declaration"):
            self._functions[golang.declared_name(decl)] = [t.text for t in golang.result_types(decl)]
        for decl in root.named("method_declaration"):
            receiver = golang.receiver_type(decl)
            if receiver is None:
                continue
            base = receiver_base(receiver)
            kind = ReceiverKind.POINTER if receiver.startswith("*") else ReceiverKind.VALUE
            method_name = golang.declared_name(decl)
            self._methods.setdefault(base, []).append(Method(method_name, kind))
            self._method_results[(base, method_name)] = [t.text for t in golang.result_types(decl)]
        for declaration in root.named("var_declaration"):
            for spec in iter_nodes(declaration, "var_spec"):
                self._bind_var_spec(spec, self._package_vars, {})

    # -- per-file resolution ---------------------------------------------------

    def resolve(self, tree: SyntaxTree) -> dict[Span, str]:
        types: dict[Span, str] = {}
        for decl in tree.root.named(*golang.FUNCTION_DECLARATIONS):
            scope = dict(self._package_vars)
            self._bind_parameters(decl.child("receiver"), scope)
            self._bind_parameters(decl.child("parameters"), scope)
            self._bind_named_results(decl, scope)
            body = golang.function_body(decl)
            if body is not None:
                self._resolve_body(body, scope, types)
        for declaration in tree.root.named("var_declaration"):
            for node in iter_nodes(declaration):
                self._record(node, dict(self._package_vars), types)
        logger.debug("%s: %d typed expression(s)", tree.path, len(types))
        return types

    def _resolve_body(self, body: SyntaxNode, scope: dict[str, str], types: dict[Span, str]) -> None:
        """
        Pre-order walk carrying the scope of each node.

        Blocks, function literals and the statements that open an implicit
        block get a copy of the enclosing scope, so inner declarations
        shadow outer ones only until the block ends.
        """
        pending: list[tuple[SyntaxNode, dict[str, str]]] = [(body, scope)]
        while pending:
            node, current = pending.pop()
            if node.type in SCOPE_NODES:
                current = dict(current)
            if node.type == "short_var_declaration":
                self._bind_short_var(node, current, types)
            elif node.type == "var_spec":
                self._bind_var_spec(node, current, types)
            elif node.type == "func_literal":
                self._bind_parameters(node.child("parameters"), current)
            self._record(node, current, types)
            pending.extend((child, current) for child in reversed(node.children))

    def _record(self, node: SyntaxNode, scope: dict[str, str], types: dict[Span, str]) -> None:
        if node.span in types:
            return
        resolved = self.expression_type(node, scope)
        if resolved is not None:
            types[node.span] = resolved

    def _bind_parameters(self, parameters: SyntaxNode | None, scope: dict[str, str]) -> None:
        if parameters is None:
            return
        for entry in parameters.named(*golang.PARAMETER_ENTRIES):
            type_node = entry.child("type")
            if type_node is None:
                continue
            type_text = type_node.text
            if entry.type == "variadic_parameter_declaration":
                type_text = f"[]{type_text}"
            for name in entry.children_by_field("name"):
                scope[name.text] = type_text

    def _bind_named_results(self, decl: SyntaxNode, scope: dict[str, str]) -> None:
        result = decl.child("result")
        if result is not None and result.type == "parameter_list":
            self._bind_parameters(result, scope)

    def _bind_short_var(self, node: SyntaxNode, scope: dict[str, str], types: dict[Span, str]) -> None:
        names = golang.expression_list_items(node.child("left"))
        values = golang.expression_list_items(node.child("right"))
        self._bind_names(names, values, None, scope, types)

    def _bind_var_spec(self, spec: SyntaxNode, scope: dict[str, str], types: dict[Span, str]) -> None:
        names = spec.children_by_field("name")
        declared = spec.child("type")
        values = golang.expression_list_items(spec.child("value"))
        self._bind_names(names, values, declared.text if declared is not None else None, scope, types)

    def _bind_names(
        self,
        names: Sequence[SyntaxNode],
        values: Sequence[SyntaxNode],
        declared: str | None,
        scope: dict[str, str],
        types: dict[Span, str],
    ) -> None:
        if declared is not None:
            resolved: list[str | None] = [declared] * len(names)
        elif len(values) == 1 and len(names) > 1:
            results = self.call_results(values[0], scope)
            resolved = list(results) if results is not None and len(results) == len(names) else []
        else:
            resolved = [self.expression_type(v, scope) for v in values]
        for name, type_text in zip(names, resolved):
            if type_text is None or name.text == "_":
                continue
            scope[name.text] = type_text
            types[name.span] = type_text

    # -- expressions -------------------------------------------------------------

    def expression_type(self, node: SyntaxNode, scope: dict[str, str]) -> str | None:
        """Type text of ``node``, or None when it cannot be told from syntax alone."""
        kind = node.type
        if kind == "identifier":
            return scope.get(node.text)
        if kind in ("true", "false"):
            return "bool"
        if kind == "parenthesized_expression":
            return self.expression_type(golang.unwrap_parens(node), scope) if node.children else None
        if kind == "composite_literal":
            type_node = node.child("type")
            return type_node.text if type_node is not None else None
        if kind in ("type_assertion_expression", "type_conversion_expression"):
            type_node = node.child("type")
            return type_node.text if type_node is not None else None
        if kind == "unary_expression":
            return self._unary_type(node, scope)
        if kind == "binary_expression":
            return self._binary_type(node, scope)
        if kind == "selector_expression":
            return self._selector_type(node, scope)
        if kind == "index_expression":
            operand = node.child("operand")
            operand_type = self.expression_type(operand, scope) if operand is not None else None
            if operand_type is not None and operand_type.startswith("[]"):
                return operand_type[2:]
            return None
        if kind == "call_expression":
            results = self.call_results(node, scope)
            if results is not None and len(results) == 1:
                return results[0]
        return None

    def call_results(self, node: SyntaxNode, scope: dict[str, str]) -> tuple[str, ...] | None:
        """Result types of a call expression, None when unknown."""
        node = golang.unwrap_parens(node)
        if node.type != "call_expression":
            return None
        function = node.child("function")
        if function is None:
            return None
        name = golang.callee_name(node)
        if function.type == "identifier":
            return self._plain_call_results(node, name, scope)
        if function.type != "selector_expression":
            return None
        operand = function.child("operand")
        if operand is None:
            return None
        qualifier = operand.text
        if operand.type == "identifier" and qualifier not in scope:
            known = KNOWN_CALLS.get((qualifier, name))
            return (known,) if known is not None else None
        receiver = self.expression_type(operand, scope)
        if receiver is None:
            return None
        known = KNOWN_METHODS.get((receiver, name)) or KNOWN_METHODS.get((local_type_name(receiver), name))
        if known is not None:
            return (known,)
        declared = self._method_results.get((receiver_base(receiver), name))
        return tuple(declared) if declared is not None else None

    def _plain_call_results(
        self, node: SyntaxNode, name: str, scope: dict[str, str]
    ) -> tuple[str, ...] | None:
        if name in scope:
            return None
        if name in GO_BASIC_TYPES or name in self._declared_types:
            return (name,)
        arguments = golang.call_arguments(node)
        if name == "new" and arguments:
            return (f"*{arguments[0].text}",)
        if name == "make" and arguments:
            return (arguments[0].text,)
        if name == "len" or name == "cap":
            return ("int",)
        declared = self._functions.get(name)
        return tuple(declared) if declared is not None else None

    def _unary_type(self, node: SyntaxNode, scope: dict[str, str]) -> str | None:
        operand = node.child("operand")
        if operand is None:
            return None
        operator = golang.unary_operator(node)
        if operator == "!":
            return "bool"
        operand_type = self.expression_type(operand, scope)
        if operand_type is None:
            return None
        if operator == "&":
            return f"*{operand_type}"
        if operator == "*":
            return operand_type[1:] if operand_type.startswith("*") else None
        if operator in ("-", "+", "^"):
            return operand_type
        return None

    def _binary_type(self, node: SyntaxNode, scope: dict[str, str]) -> str | None:
        if golang.binary_operator(node) in COMPARISON_OPERATORS:
            return "bool"
        left, right = node.child("left"), node.child("right")
        for operand in (left, right):
            if operand is None:
                continue
            operand_type = self.expression_type(operand, scope)
            if operand_type is not None:
                return operand_type
        return None

    def _selector_type(self, node: SyntaxNode, scope: dict[str, str]) -> str | None:
        operand, field = node.child("operand"), node.child("field")
        if operand is None or field is None:
            return None
        if operand.type == "identifier" and operand.text not in scope:
            return None
        operand_type = self.expression_type(operand, scope)
        if operand_type is None:
            return None
        return self._fields.get((receiver_base(operand_type), field.text))
