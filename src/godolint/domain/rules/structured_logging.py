"""Structured-logging hygiene rule (loggingcheck)."""

from __future__ import annotations

from godolint.domain.constants import CONTEXT_TERMS, LOG_LEVELS, SENSITIVE_TERMS
from godolint.domain.rules import Pass, RuleModule
from godolint.domain.rules import golang
from godolint.domain.rules.inspect import node_index
from godolint.domain.syntax import SyntaxNode

ERROR_TYPE = "error"


def is_structured(call: SyntaxNode) -> bool:
    """A message followed by at least one key/value pair, every key a string literal."""
    trailing = golang.call_arguments(call)[1:]
    if not trailing or len(trailing) % 2:
        return False
    return all(golang.string_value(key) is not None for key in trailing[::2])


def returns_error(pass_: Pass, function: SyntaxNode) -> bool:
    """
    Whether ``function`` returns a non-nil value typed as ``error``.

    A value is error-typed when it sits in a result slot declared ``error``
    or the semantic bridge resolves it to ``error``.
    """
    slots = [t.text for t in golang.result_types(function)]
    for statement in golang.returns_in(golang.function_body(function)):
        values = golang.returned_values(statement)
        for position, value in enumerate(values):
            if golang.is_nil(value):
                continue
            if len(values) == len(slots) and slots[position] == ERROR_TYPE:
                return True
            if pass_.type_of(value) == ERROR_TYPE:
                return True
    return False


def is_error_logging_call(pass_: Pass, call: SyntaxNode) -> bool:
    name = golang.callee_name(call)
    if name == "Error":
        return True
    if name == "Log":
        return any(pass_.type_of(arg) == ERROR_TYPE for arg in golang.call_arguments(call))
    return False


class StructuredLoggingRule(RuleModule):
    name = "loggingcheck"
    doc = "checks for proper logging patterns and provides auto-fixes"
    requires = ("inspect",)

    def run(self, pass_: Pass) -> None:
        index = node_index(pass_)
        for call in index.of_type("call_expression"):
            if golang.is_logging_call(call):
                self._check_call(pass_, call)
        for function in index.of_type(*golang.FUNCTION_DECLARATIONS, "func_literal"):
            self._check_error_logging(pass_, function)

    def _check_call(self, pass_: Pass, call: SyntaxNode) -> None:
        if not is_structured(call):
            pass_.report(call, "use structured logging with key-value pairs")
        if golang.callee_name(call) not in LOG_LEVELS:
            pass_.report(call, "use appropriate log level")
        literals = [s.lower() for s in golang.string_arguments(call)]
        if not any(term in text for text in literals for term in CONTEXT_TERMS):
            pass_.report(call, "include relevant context in log messages")
        if any(term in text for text in literals for term in SENSITIVE_TERMS):
            pass_.report(call, "avoid logging sensitive information")

    def _check_error_logging(self, pass_: Pass, function: SyntaxNode) -> None:
        body = golang.function_body(function)
        if body is None or not returns_error(pass_, function):
            return
        if any(is_error_logging_call(pass_, call) for call in golang.calls_in(body)):
            return
        pass_.report(function, "log errors before returning them")
