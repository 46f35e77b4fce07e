"""Error-handling rule (errorcheck): errors are logged before being returned."""

from __future__ import annotations

from godolint.domain.rules import Pass, RuleModule
from godolint.domain.rules import golang
from godolint.domain.rules.inspect import node_index
from godolint.domain.syntax import SyntaxNode


def is_error_check(pass_: Pass, condition: SyntaxNode) -> SyntaxNode | None:
    """The checked identifier of ``err != nil``, when it names or is typed as an error."""
    checked = golang.error_nil_check(condition)
    if checked is None:
        return None
    if golang.is_error_identifier(checked.text) or pass_.type_of(checked) == "error":
        return checked
    return None


def logs_at_top_level(block: SyntaxNode) -> bool:
    for statement in block.named("expression_statement"):
        call = statement.first("call_expression")
        if call is not None and golang.is_logging_call(call):
            return True
    return False


class ErrorHandlingRule(RuleModule):
    name = "errorcheck"
    doc = "checks for proper error handling patterns and provides auto-fixes"
    requires = ("inspect",)

    def run(self, pass_: Pass) -> None:
        for statement in node_index(pass_).of_type("if_statement"):
            condition = statement.child("condition")
            block = statement.child("consequence")
            if condition is None or block is None:
                continue
            checked = is_error_check(pass_, condition)
            if checked is not None:
                self._check_block(pass_, block, checked.text)

    def _check_block(self, pass_: Pass, block: SyntaxNode, error_name: str) -> None:
        returns = block.named("return_statement")
        if not returns or logs_at_top_level(block):
            return
        statement = returns[-1]
        returned = [v.text for v in golang.returned_values(statement) if v.type == "identifier"]
        if error_name not in returned:
            return
        indent = pass_.source.indentation_at(statement.start)
        pass_.report(
            statement,
            "errors should be logged before being returned",
            pass_.fix(
                "Add error logging",
                pass_.insert(
                    statement.start,
                    f'log.Error("error occurred", "error", {error_name})\n{indent}',
                ),
            ),
        )
