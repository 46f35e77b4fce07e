"""Middleware chaining rule (middlewarecheck) and the fixes it shares with apicheck."""

from __future__ import annotations

from godolint.domain.diagnostics import SuggestedFix
from godolint.domain.rules import Pass, RuleModule
from godolint.domain.rules import golang
from godolint.domain.rules.inspect import node_index
from godolint.domain.syntax import SyntaxNode, iter_nodes

HANDLER_FUNC_TYPE = "HandlerFunc"
NEXT_CALL = "ServeHTTP"


def is_middleware(decl: SyntaxNode) -> bool:
    """Exactly one result, and it is ``http.HandlerFunc``."""
    results = golang.result_entries(decl)
    if len(results) != 1:
        return False
    result = results[0]
    if result.type in golang.PARAMETER_ENTRIES:
        if len(result.children_by_field("name")) > 1:
            return False
        type_node = result.child("type")
        if type_node is None:
            return False
        result = type_node
    return result.type == "qualified_type" and golang.selector_type_name(result) == HANDLER_FUNC_TYPE


def forwarding_fix(pass_: Pass, decl: SyntaxNode) -> SuggestedFix | None:
    """Insert ``next.ServeHTTP(w, r)`` before the first return; None when there is none."""
    returns = golang.returns_in(golang.function_body(decl))
    if not returns:
        return None
    target = returns[0]
    indent = pass_.source.indentation_at(target.start)
    return pass_.fix(
        "Add next handler call",
        pass_.insert(target.start, f"next.ServeHTTP(w, r)\n{indent}"),
    )


def context_fix(pass_: Pass, decl: SyntaxNode) -> SuggestedFix | None:
    """Capture and reattach the request context right after the body's ``{``."""
    body = golang.function_body(decl)
    if body is None:
        return None
    indent = pass_.source.indentation_at(decl.start) + "\t"
    return pass_.fix(
        "Add context preservation",
        pass_.insert(
            body.start + 1,
            f"\n{indent}ctx := r.Context()\n{indent}r = r.WithContext(ctx)",
        ),
    )


def report_with_fix(pass_: Pass, decl: SyntaxNode, message: str, fix: SuggestedFix | None) -> None:
    if fix is None:
        pass_.report(decl, message)
    else:
        pass_.report(decl, message, fix)


class MiddlewareRule(RuleModule):
    name = "middlewarecheck"
    doc = "checks for proper middleware patterns and provides auto-fixes"
    requires = ("inspect",)

    def run(self, pass_: Pass) -> None:
        for decl in node_index(pass_).of_type(*golang.FUNCTION_DECLARATIONS):
            if is_middleware(decl):
                self._check(pass_, decl)

    def _check(self, pass_: Pass, decl: SyntaxNode) -> None:
        body = golang.function_body(decl)
        if body is None:
            return
        calls_next = any(golang.callee_name(c) == NEXT_CALL for c in golang.calls_in(body))
        reads_context = any(
            golang.selector_field(sel) == "Context"
            for sel in iter_nodes(body, "selector_expression")
        )
        if not calls_next:
            report_with_fix(pass_, decl, "middleware should call next handler", forwarding_fix(pass_, decl))
        if not reads_context:
            report_with_fix(
                pass_, decl, "middleware should preserve request context", context_fix(pass_, decl)
            )
