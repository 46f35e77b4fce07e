"""godolint: convention and architecture linter for Go services."""

__version__ = "0.3.0"
