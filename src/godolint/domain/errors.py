"""Exception hierarchy for godolint."""


class GodoLintError(Exception):
    """Base class for all godolint errors."""


class ConfigurationError(GodoLintError):
    """Fatal setup problem: bad rule graph, unknown rule, duplicate registration."""


class FixConflictError(GodoLintError):
    """Two text edits claim overlapping byte ranges of the same file."""


class ParseError(GodoLintError):
    """A source file could not be read or handed to the parser."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason
