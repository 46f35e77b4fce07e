"""Unit tests for the structured-logging rule (loggingcheck)."""

import unittest

from tests.go_test_utils import findings_of, messages_of, run_rules

STRUCTURED = "use structured logging with key-value pairs"
LEVEL = "use appropriate log level"
CONTEXT = "include relevant context in log messages"
SENSITIVE = "avoid logging sensitive information"
UNLOGGED_ERROR = "log errors before returning them"


def _call_messages(body: str) -> list[str]:
    source = f"package app\n\nfunc run(id string, pw string, k string) {{\n    {body}\n}}\n"
    return messages_of(run_rules(source, "loggingcheck"), "loggingcheck")


class TestLoggingCalls(unittest.TestCase):
    """Tests for per-call checks."""

    def test_single_message_is_unstructured_but_levelled(self) -> None:
        """Error("something failed") is unstructured, yet its name is a level."""
        messages = _call_messages('Error("something failed")')
        self.assertIn(STRUCTURED, messages)
        self.assertNotIn(LEVEL, messages)
        self.assertEqual(messages, [STRUCTURED, CONTEXT])

    def test_structured_call_with_context_is_clean(self) -> None:
        """Message plus string-keyed pairs with a context key passes every check."""
        self.assertEqual(_call_messages('log.Info("request handled", "request_id", id)'), [])

    def test_log_prefixed_call_needs_a_level_name(self) -> None:
        """LogRequest is a logging call whose name is not a level."""
        self.assertEqual(_call_messages('LogRequest("ctx handled", "request_id", id)'), [LEVEL])

    def test_odd_trailing_arguments_are_unstructured(self) -> None:
        """A dangling key breaks the key/value shape."""
        self.assertEqual(_call_messages('log.Warn("ctx retry", "attempt")'), [STRUCTURED])

    def test_non_literal_key_is_unstructured(self) -> None:
        """Keys must be string literals."""
        self.assertEqual(_call_messages('log.Debug("ctx state", k, id)'), [STRUCTURED])

    def test_sensitive_term_is_reported(self) -> None:
        """Literal arguments naming secrets are flagged."""
        self.assertEqual(_call_messages('log.Info("login ctx", "password", pw)'), [SENSITIVE])

    def test_sensitive_match_is_case_insensitive(self) -> None:
        """Terms are matched against the lowercased literal."""
        self.assertEqual(_call_messages('log.Info("ctx AuthHeader read", "user", id)'), [SENSITIVE])

    def test_non_logging_call_is_ignored(self) -> None:
        """Other calls are not checked."""
        self.assertEqual(_call_messages('fmt.Println("something failed")'), [])


class TestErrorLogging(unittest.TestCase):
    """Tests for the function-level error logging check."""

    def test_returning_error_without_logging_is_reported_once(self) -> None:
        """One diagnostic at the function, however many returns."""
        source = """
        package app

        func Load() error {
            err := fetch()
            if err != nil {
                return err
            }
            if retry() {
                return err
            }
            return nil
        }
        """
        findings = [d for d in findings_of(run_rules(source, "loggingcheck")) if d.message == UNLOGGED_ERROR]
        self.assertEqual(len(findings), 1)
        self.assertEqual((findings[0].line, findings[0].column), (3, 1))

    def test_error_call_counts_as_logging(self) -> None:
        """Any call named Error logs the error."""
        source = """
        package app

        func Load() error {
            err := fetch()
            if err != nil {
                logger.Error("load failed", "ctx", err)
                return err
            }
            return nil
        }
        """
        self.assertNotIn(UNLOGGED_ERROR, messages_of(run_rules(source, "loggingcheck")))

    def test_log_call_with_error_argument_counts(self) -> None:
        """Log(...) counts when one argument is typed error."""
        source = """
        package app

        import "errors"

        func Load() error {
            err := errors.New("boom")
            logger.Log("load failed ctx", "error", err)
            return err
        }
        """
        self.assertNotIn(UNLOGGED_ERROR, messages_of(run_rules(source, "loggingcheck")))

    def test_log_call_without_error_argument_does_not_count(self) -> None:
        """Log(...) with no error-typed argument is not error logging."""
        source = """
        package app

        import "errors"

        func Load() error {
            err := errors.New("boom")
            logger.Log("load failed ctx", "step", "fetch")
            return err
        }
        """
        self.assertIn(UNLOGGED_ERROR, messages_of(run_rules(source, "loggingcheck")))

    def test_nil_only_returns_are_not_error_returns(self) -> None:
        """Returning nil for an error result is fine."""
        source = """
        package app

        func Close() error {
            return nil
        }
        """
        self.assertEqual(messages_of(run_rules(source, "loggingcheck")), [])

    def test_non_error_results_are_ignored(self) -> None:
        """A function returning a string never needs error logging."""
        source = """
        package app

        func Name(err string) string {
            return err
        }
        """
        self.assertEqual(messages_of(run_rules(source, "loggingcheck")), [])
