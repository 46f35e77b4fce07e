"""API handler and middleware shape rule (apicheck)."""

from __future__ import annotations

from godolint.domain.rules import Pass, RuleModule
from godolint.domain.rules import golang
from godolint.domain.rules.inspect import node_index
from godolint.domain.rules.middleware import (
    context_fix,
    forwarding_fix,
    is_middleware,
    report_with_fix,
)
from godolint.domain.syntax import SyntaxNode

RESPONSE_SINK_TYPE = "ResponseWriter"
REQUEST_TYPE = "Request"

# (message, callee-name fragments), checked and reported in this order
HANDLER_EXPECTATIONS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("handler should validate request input", ("Validate", "Decode")),
    ("handler should implement error handling", ("Error", "WriteError")),
    ("handler should use request context", ("Context", "WithValue")),
)


def is_http_handler(decl: SyntaxNode) -> bool:
    """No results, and exactly ``(http.ResponseWriter, *http.Request)``."""
    if golang.result_entries(decl):
        return False
    params = golang.parameter_types(decl)
    if len(params) != 2:
        return False
    sink, request = params
    if sink.type != "qualified_type" or golang.selector_type_name(sink) != RESPONSE_SINK_TYPE:
        return False
    target = golang.pointer_target(request)
    return (
        target is not None
        and target.type == "qualified_type"
        and golang.selector_type_name(target) == REQUEST_TYPE
    )


class APIRule(RuleModule):
    name = "apicheck"
    doc = "checks for proper API implementation patterns"
    requires = ("inspect",)

    def run(self, pass_: Pass) -> None:
        for decl in node_index(pass_).of_type(*golang.FUNCTION_DECLARATIONS):
            if is_http_handler(decl):
                self._check_handler(pass_, decl)
            if is_middleware(decl):
                self._check_middleware(pass_, decl)

    def _check_handler(self, pass_: Pass, decl: SyntaxNode) -> None:
        names = [golang.callee_name(c) for c in golang.calls_in(golang.function_body(decl))]
        for message, fragments in HANDLER_EXPECTATIONS:
            if not any(fragment in name for name in names for fragment in fragments):
                pass_.report(decl, message)

    def _check_middleware(self, pass_: Pass, decl: SyntaxNode) -> None:
        names = [golang.callee_name(c) for c in golang.calls_in(golang.function_body(decl))]
        preserves_context = any("WithContext" in n or "Context" in n for n in names)
        calls_next = any(n == "ServeHTTP" or "Handle" in n for n in names)
        if not preserves_context:
            report_with_fix(
                pass_, decl, "middleware should preserve request context", context_fix(pass_, decl)
            )
        if not calls_next:
            report_with_fix(pass_, decl, "middleware should call next handler", forwarding_fix(pass_, decl))
