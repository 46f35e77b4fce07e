"""Task-field normalisation rule (taskcheck)."""

from __future__ import annotations

from godolint.domain.constants import (
    TASK_FIELD_RENAMES,
    TASK_TIME_FIELDS,
    TASK_TYPE_SUFFIX,
    UNIX_TIMESTAMP_TYPE,
)
from godolint.domain.rules import Pass, RuleModule
from godolint.domain.rules import golang
from godolint.domain.semantics import base_type_name
from godolint.domain.syntax import AncestorStack, SyntaxNode, dispatch

KEY_TYPES = ("identifier", "field_identifier")


def is_task_type(type_name: str | None) -> bool:
    return type_name is not None and base_type_name(type_name).endswith(TASK_TYPE_SUFFIX)


def keyed_parts(element: SyntaxNode) -> tuple[SyntaxNode | None, SyntaxNode | None]:
    key, value = element.child("key"), element.child("value")
    if key is None and len(element.children) == 2:
        key, value = element.children
    return key, value


def is_current_time_call(node: SyntaxNode) -> bool:
    return (
        node.type == "call_expression"
        and golang.callee_qualifier(node) == "time"
        and golang.callee_name(node) == "Now"
        and not golang.call_arguments(node)
    )


class TaskFieldRule(RuleModule):
    name = "taskcheck"
    doc = "checks for proper Task struct field usage and provides auto-fixes"

    def run(self, pass_: Pass) -> None:
        dispatch(
            pass_.root,
            {
                "composite_literal": lambda node, _: self._check_literal(pass_, node),
                "selector_expression": lambda node, ancestors: self._check_selector(pass_, node, ancestors),
            },
        )

    def _check_literal(self, pass_: Pass, literal: SyntaxNode) -> None:
        if not is_task_type(pass_.type_of(literal)):
            return
        body = literal.child("body")
        if body is None:
            return
        for element in body.named("keyed_element"):
            key, value = keyed_parts(element)
            if key is None or key.type not in KEY_TYPES:
                continue
            if key.text in TASK_FIELD_RENAMES:
                self._rename(pass_, key)
            elif key.text in TASK_TIME_FIELDS and value is not None:
                self._check_time_value(pass_, value)

    def _check_selector(self, pass_: Pass, selector: SyntaxNode, ancestors: AncestorStack) -> None:
        operand, field = selector.child("operand"), selector.child("field")
        if operand is None or field is None or not is_task_type(pass_.type_of(operand)):
            return
        if field.text in TASK_FIELD_RENAMES:
            self._rename(pass_, field)
        elif field.text in TASK_TIME_FIELDS:
            enclosing = tuple(ancestors)
            assigned = self._assigned_value(selector, enclosing)
            if assigned is not None:
                self._check_time_value(pass_, assigned)
            self._check_duration_assert(pass_, selector, enclosing)

    def _rename(self, pass_: Pass, token: SyntaxNode) -> None:
        replacement = TASK_FIELD_RENAMES[token.text]
        pass_.report(
            token,
            f"use {replacement} instead of {token.text} in Task struct",
            pass_.fix(f"Rename to {replacement}", pass_.replace(token, replacement)),
        )

    def _check_time_value(self, pass_: Pass, value: SyntaxNode) -> None:
        value_type = pass_.type_of(value)
        if value_type is None or value_type == UNIX_TIMESTAMP_TYPE:
            return
        message = "time fields must be int64 (Unix timestamp)"
        if is_current_time_call(value):
            pass_.report(
                value,
                message,
                pass_.fix("Convert to Unix timestamp", pass_.insert(value.end, ".Unix()")),
            )
        else:
            pass_.report(value, message)

    def _check_duration_assert(
        self, pass_: Pass, selector: SyntaxNode, enclosing: tuple[SyntaxNode, ...]
    ) -> None:
        """``assert.WithinDuration`` needs ``time.Time``, not a Unix timestamp."""
        if len(enclosing) < 2:
            return
        arguments, call = enclosing[0], enclosing[1]
        if arguments.type != "argument_list" or call.type != "call_expression":
            return
        if golang.callee_qualifier(call) != "assert" or golang.callee_name(call) != "WithinDuration":
            return
        if pass_.type_of(selector) != UNIX_TIMESTAMP_TYPE:
            return
        pass_.report(
            selector,
            "convert Unix timestamp to time.Time using time.Unix() before using assert.WithinDuration",
            pass_.fix("Convert to time.Time", pass_.replace(selector, f"time.Unix({selector.text}, 0)")),
        )

    @staticmethod
    def _assigned_value(selector: SyntaxNode, enclosing: tuple[SyntaxNode, ...]) -> SyntaxNode | None:
        """Right-hand value when ``selector`` is an assignment target; ``enclosing`` is innermost first."""
        if len(enclosing) < 2:
            return None
        targets, statement = enclosing[0], enclosing[1]
        if targets.field_name != "left" or statement.type != "assignment_statement":
            return None
        position = next(i for i, t in enumerate(targets.children) if t is selector)
        values = golang.expression_list_items(statement.child("right"))
        if position >= len(values) or len(values) != len(targets.children):
            return None
        return values[position]
