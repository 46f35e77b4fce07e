"""Unit tests for the API handler shape rule (apicheck)."""

import unittest

from godolint.domain.rules.api import is_http_handler
from godolint.domain.rules.middleware import is_middleware
from tests.go_test_utils import findings_of, go_source, messages_of, parse_go, run_rules

EMPTY_HANDLER = """
package api

import "net/http"

func GetTask(w http.ResponseWriter, r *http.Request) {
}
"""

COMPLETE_HANDLER = """
package api

import (
    "encoding/json"
    "net/http"
)

func CreateTask(w http.ResponseWriter, r *http.Request) {
    ctx := r.Context()
    var req createRequest
    if err := json.NewDecoder(r.Body).Decode(&req); err != nil {
        http.Error(w, "bad request", http.StatusBadRequest)
        return
    }
    save(ctx, req)
}
"""

EMPTY_MIDDLEWARE = """
package api

import "net/http"

func Logging(next http.Handler) http.HandlerFunc {
    return func(w http.ResponseWriter, r *http.Request) {
    }
}
"""


def _first_function(source: str):
    tree = parse_go(source)
    return tree.root.named("function_declaration", "method_declaration")[0]


class TestHandlerShape(unittest.TestCase):
    """Tests for handler and middleware classification."""

    def test_handler_signature_is_recognised(self) -> None:
        """(http.ResponseWriter, *http.Request) with no results is a handler."""
        self.assertTrue(is_http_handler(_first_function(EMPTY_HANDLER)))

    def test_handler_with_result_is_not_a_handler(self) -> None:
        """Any result disqualifies the handler shape."""
        source = """
        package api

        import "net/http"

        func GetTask(w http.ResponseWriter, r *http.Request) error {
            return nil
        }
        """
        self.assertFalse(is_http_handler(_first_function(source)))

    def test_request_must_be_a_pointer(self) -> None:
        """A by-value http.Request is not the request shape."""
        source = """
        package api

        import "net/http"

        func GetTask(w http.ResponseWriter, r http.Request) {
        }
        """
        self.assertFalse(is_http_handler(_first_function(source)))

    def test_handler_func_result_is_middleware(self) -> None:
        """A single http.HandlerFunc result marks middleware."""
        self.assertTrue(is_middleware(_first_function(EMPTY_MIDDLEWARE)))
        self.assertFalse(is_middleware(_first_function(EMPTY_HANDLER)))


class TestAPIRule(unittest.TestCase):
    """Tests for apicheck diagnostics."""

    def test_empty_handler_yields_three_ordered_diagnostics(self) -> None:
        """Validation, error handling, context; all at the declaration."""
        report = run_rules(EMPTY_HANDLER, "apicheck")
        findings = findings_of(report, "apicheck")
        self.assertEqual(
            [d.message for d in findings],
            [
                "handler should validate request input",
                "handler should implement error handling",
                "handler should use request context",
            ],
        )
        self.assertEqual({(d.line, d.column) for d in findings}, {(5, 1)})

    def test_complete_handler_is_clean(self) -> None:
        """Decode, Error and Context calls anywhere in the body satisfy the rule."""
        report = run_rules(COMPLETE_HANDLER, "apicheck")
        self.assertEqual(messages_of(report, "apicheck"), [])

    def test_nested_calls_count(self) -> None:
        """Calls nested inside statements are found by the full scan."""
        source = """
        package api

        import "net/http"

        func GetTask(w http.ResponseWriter, r *http.Request) {
            for i := 0; i < 1; i++ {
                if validate(r) {
                    WriteError(w, r.Context())
                }
            }
        }

        func validate(r *http.Request) bool { return r.Method != "" }
        """
        report = run_rules(source, "apicheck")
        self.assertEqual(messages_of(report, "apicheck"), ["handler should validate request input"])

    def test_middleware_reports_missing_context_and_forwarding(self) -> None:
        """Middleware without context or next call gets two fixable diagnostics."""
        report = run_rules(EMPTY_MIDDLEWARE, "apicheck")
        findings = findings_of(report, "apicheck")
        self.assertEqual(
            [d.message for d in findings],
            ["middleware should preserve request context", "middleware should call next handler"],
        )
        self.assertEqual(findings[0].fixes[0].message, "Add context preservation")
        self.assertEqual(findings[1].fixes[0].message, "Add next handler call")

    def test_middleware_forwarding_fix_inserts_before_return(self) -> None:
        """The forwarding call lands immediately before the return statement."""
        report = run_rules(EMPTY_MIDDLEWARE, "apicheck")
        fix = findings_of(report, "apicheck")[1].fixes[0]
        (edit,) = fix.edits
        self.assertTrue(edit.is_insertion)
        self.assertEqual(edit.start, go_source(EMPTY_MIDDLEWARE).index(b"return"))
        self.assertEqual(edit.new_text, "next.ServeHTTP(w, r)\n    ")

    def test_middleware_forwarding_via_handle_is_accepted(self) -> None:
        """A callee name containing Handle counts as forwarding."""
        source = """
        package api

        import "net/http"

        func Recover(next http.Handler) http.HandlerFunc {
            return func(w http.ResponseWriter, r *http.Request) {
                ctx := r.Context()
                HandleNext(next, w, r.WithContext(ctx))
            }
        }
        """
        report = run_rules(source, "apicheck")
        self.assertEqual(messages_of(report, "apicheck"), [])
