"""
Go syntax predicates shared by the rule catalog.

Everything here is a pure function of the tree. Semantic questions go
through the ``SemanticBridge`` held by the pass, never through this module.
"""

from __future__ import annotations

from godolint.domain.constants import LOG_CALL_PREFIX, LOG_LEVELS, WRAP_CALL_NAMES, WRAP_CALL_PREFIX
from godolint.domain.syntax import SyntaxNode, iter_nodes

FUNCTION_DECLARATIONS = ("function_declaration", "method_declaration")
PARAMETER_ENTRIES = ("parameter_declaration", "variadic_parameter_declaration")
STRING_LITERALS = ("interpreted_string_literal", "raw_string_literal")


def is_exported(name: str) -> bool:
    return name[:1].isupper()


def string_value(node: SyntaxNode) -> str | None:
    """Unquoted content of a string literal, None for anything else."""
    if node.type not in STRING_LITERALS:
        return None
    return node.text[1:-1]


def string_arguments(call: SyntaxNode) -> list[str]:
    return [v for v in (string_value(a) for a in call_arguments(call)) if v is not None]


# -- calls -------------------------------------------------------------------


def callee_name(call: SyntaxNode) -> str:
    """``pkg.Fn(...)`` / ``x.Method(...)`` -> last name, ``Fn(...)`` -> ``Fn``."""
    function = call.child("function")
    if function is None:
        return ""
    while function.type == "parenthesized_expression" and function.children:
        function = function.children[0]
    if function.type == "identifier":
        return function.text
    if function.type == "selector_expression":
        field = function.child("field")
        return field.text if field is not None else ""
    if function.type == "generic_type":
        inner = function.child("type")
        return inner.text if inner is not None else ""
    return ""


def callee_qualifier(call: SyntaxNode) -> str:
    """Operand text of a selector callee (``time`` in ``time.Now()``), else ''."""
    function = call.child("function")
    if function is None or function.type != "selector_expression":
        return ""
    operand = function.child("operand")
    return operand.text if operand is not None else ""


def is_wrap_call(node: SyntaxNode) -> bool:
    """``errors.Wrap(err, ...)`` and friends: a call that already adds context."""
    if node.type != "call_expression":
        return False
    name = callee_name(node)
    return name in WRAP_CALL_NAMES or name.startswith(WRAP_CALL_PREFIX)


def call_arguments(call: SyntaxNode) -> tuple[SyntaxNode, ...]:
    arguments = call.child("arguments")
    if arguments is None:
        return ()
    return arguments.children


def calls_in(root: SyntaxNode | None) -> list[SyntaxNode]:
    if root is None:
        return []
    return list(iter_nodes(root, "call_expression"))


def is_logging_call(call: SyntaxNode) -> bool:
    name = callee_name(call)
    return name.startswith(LOG_CALL_PREFIX) or name in LOG_LEVELS


# -- declarations --------------------------------------------------------------


def declared_name(node: SyntaxNode) -> str:
    name = node.child("name")
    return name.text if name is not None else ""


def function_body(decl: SyntaxNode) -> SyntaxNode | None:
    return decl.child("body")


def parameter_entries(decl: SyntaxNode) -> tuple[SyntaxNode, ...]:
    """Parameter field-list entries; ``a, b int`` counts once."""
    parameters = decl.child("parameters")
    if parameters is None:
        return ()
    return parameters.named(*PARAMETER_ENTRIES)


def parameter_types(decl: SyntaxNode) -> list[SyntaxNode]:
    """One type node per declared parameter slot (``a, b int`` gives two)."""
    slots: list[SyntaxNode] = []
    for entry in parameter_entries(decl):
        type_node = entry.child("type")
        if type_node is None:
            continue
        slots.extend([type_node] * max(1, len(entry.children_by_field("name"))))
    return slots


def result_entries(decl: SyntaxNode) -> tuple[SyntaxNode, ...]:
    """
    Result field-list entries.

    A bare result type is one entry; a parenthesised list yields its
    parameter declarations.
    """
    result = decl.child("result")
    if result is None:
        return ()
    if result.type == "parameter_list":
        return result.named(*PARAMETER_ENTRIES)
    return (result,)


def result_types(decl: SyntaxNode) -> list[SyntaxNode]:
    """One type node per result slot, matching the order of a return's values."""
    result = decl.child("result")
    if result is None:
        return []
    if result.type != "parameter_list":
        return [result]
    slots: list[SyntaxNode] = []
    for entry in result.named(*PARAMETER_ENTRIES):
        type_node = entry.child("type")
        if type_node is None:
            continue
        slots.extend([type_node] * max(1, len(entry.children_by_field("name"))))
    return slots


def receiver_type(decl: SyntaxNode) -> str | None:
    """Receiver type text of a method (``*Store``), None for plain functions."""
    receiver = decl.child("receiver")
    if receiver is None:
        return None
    entry = receiver.first(*PARAMETER_ENTRIES)
    if entry is None:
        return None
    type_node = entry.child("type")
    return type_node.text if type_node is not None else None


def type_specs(root: SyntaxNode, *type_types: str) -> list[SyntaxNode]:
    """``type_spec`` nodes, optionally only those whose type is one of ``type_types``."""
    specs = []
    for spec in iter_nodes(root, "type_spec"):
        declared = spec.child("type")
        if not type_types or (declared is not None and declared.type in type_types):
            specs.append(spec)
    return specs


def struct_fields(struct: SyntaxNode) -> tuple[SyntaxNode, ...]:
    """``field_declaration`` entries of a struct type."""
    field_list = struct.first("field_declaration_list")
    if field_list is None:
        return ()
    return field_list.named("field_declaration")


def field_names(field: SyntaxNode) -> list[str]:
    return [n.text for n in field.children_by_field("name")]


def interface_methods(interface: SyntaxNode) -> tuple[SyntaxNode, ...]:
    return interface.named("method_elem")


def interface_method_names(interface: SyntaxNode) -> list[str]:
    return [declared_name(m) for m in interface_methods(interface)]


def import_specs(root: SyntaxNode) -> list[SyntaxNode]:
    return list(iter_nodes(root, "import_spec"))


def import_path(spec: SyntaxNode) -> str:
    path = spec.child("path")
    if path is None:
        return ""
    return string_value(path) or ""


def package_name(root: SyntaxNode) -> SyntaxNode | None:
    clause = root.first("package_clause")
    if clause is None:
        return None
    return clause.first("package_identifier")


# -- types ---------------------------------------------------------------------


def selector_type_name(type_node: SyntaxNode) -> str:
    """``http.ResponseWriter`` -> ``ResponseWriter``; bare identifiers pass through."""
    if type_node.type == "qualified_type":
        name = type_node.child("name")
        return name.text if name is not None else ""
    if type_node.type == "type_identifier":
        return type_node.text
    return ""


def pointer_target(type_node: SyntaxNode) -> SyntaxNode | None:
    if type_node.type != "pointer_type" or not type_node.children:
        return None
    return type_node.children[0]


def type_names_in(root: SyntaxNode) -> set[str]:
    """Every type identifier and qualified type name mentioned below ``root``."""
    names: set[str] = set()
    for node in iter_nodes(root, "type_identifier", "qualified_type", "selector_expression"):
        if node.type == "type_identifier":
            names.add(node.text)
        elif node.type == "qualified_type":
            names.add(selector_type_name(node))
        else:
            field = node.child("field")
            if field is not None:
                names.add(field.text)
    return names


# -- expressions ---------------------------------------------------------------


def binary_operator(node: SyntaxNode) -> str:
    left, right = node.child("left"), node.child("right")
    if left is None or right is None:
        return ""
    return node.source.slice(left.end, right.start).strip()


def unary_operator(node: SyntaxNode) -> str:
    operand = node.child("operand")
    if operand is None:
        return ""
    return node.source.slice(node.start, operand.start).strip()


def selector_field(node: SyntaxNode) -> str:
    """``x.Field`` -> ``Field``; '' for anything that is not a selector."""
    if node.type != "selector_expression":
        return ""
    field = node.child("field")
    return field.text if field is not None else ""


def unwrap_parens(node: SyntaxNode) -> SyntaxNode:
    while node.type == "parenthesized_expression" and node.children:
        node = node.children[0]
    return node


def is_nil(node: SyntaxNode) -> bool:
    return unwrap_parens(node).type == "nil"


def is_error_identifier(name: str) -> bool:
    return name == "err" or name.endswith("Err")


def error_nil_check(condition: SyntaxNode) -> SyntaxNode | None:
    """The identifier in ``err != nil`` (either operand order), else None."""
    condition = unwrap_parens(condition)
    if condition.type != "binary_expression" or binary_operator(condition) != "!=":
        return None
    left, right = condition.child("left"), condition.child("right")
    if left is None or right is None:
        return None
    for candidate, other in ((left, right), (right, left)):
        candidate = unwrap_parens(candidate)
        if candidate.type == "identifier" and is_nil(other):
            return candidate
    return None


def returned_values(statement: SyntaxNode) -> tuple[SyntaxNode, ...]:
    """Values of a ``return`` statement in order; () for a bare return."""
    values = statement.first("expression_list")
    if values is not None:
        return values.children
    return tuple(c for c in statement.children)


def returns_in(body: SyntaxNode | None) -> list[SyntaxNode]:
    """Return statements of ``body`` that belong to it, skipping nested function literals."""
    if body is None:
        return []
    found: list[SyntaxNode] = []
    pending = [body]
    while pending:
        node = pending.pop()
        if node.type == "return_statement":
            found.append(node)
        if node.type == "func_literal":
            continue
        pending.extend(reversed(node.children))
    found.sort(key=lambda n: n.start)
    return found


def expression_list_items(node: SyntaxNode | None) -> tuple[SyntaxNode, ...]:
    if node is None:
        return ()
    if node.type == "expression_list":
        return node.children
    return (node,)
