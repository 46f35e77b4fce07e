from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol

from godolint.domain.registry_types import RuleRegistryEntry

if TYPE_CHECKING:
    from godolint.domain.entities import AnalysisResult, CompilationUnit, FixOutcome
    from godolint.domain.syntax import SyntaxTree


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...
    def handshake(self) -> None: ...


class ParserProtocol(Protocol):
    """Turns Go source bytes into a SyntaxTree."""

    def parse(self, path: str, content: bytes) -> "SyntaxTree": ...


class FrontendProtocol(Protocol):
    """Parses and type-resolves Go sources into compilation units."""

    def load(self, target: str) -> list["CompilationUnit"]:
        """Collect, parse and resolve every Go file under target (file or directory)."""
        ...

    def load_sources(
        self, sources: Mapping[str, bytes], module: str = ""
    ) -> list["CompilationUnit"]:
        """Same as load, for in-memory sources keyed by path."""
        ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def resolve_path(self, path: str) -> str:
        """Resolve and normalize a path string."""
        ...

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        ...

    def exists(self, path: str) -> bool:
        """Return True if path exists (file or directory)."""
        ...

    def glob_go_files(self, path: str) -> list[str]:
        """Get all Go files in path (recursive if directory), sorted."""
        ...

    def read_bytes(self, path: str) -> bytes:
        """Read raw file content."""
        ...

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        ...

    def write_bytes(self, path: str, content: bytes) -> None:
        """Write raw content to a file."""
        ...

    def join_path(self, *paths: str) -> str:
        """Join path components into a single path string."""
        ...


class ReporterProtocol(Protocol):
    """Renders an analysis result."""

    def report(self, result: "AnalysisResult") -> None: ...

    def report_fixes(self, outcomes: list["FixOutcome"]) -> None: ...


class GuidanceServiceProtocol(Protocol):
    """Rule documentation beyond the one-line doc string."""

    def get_entry(self, rule_name: str) -> RuleRegistryEntry | None: ...

    def get_display_name(self, rule_name: str) -> str: ...

    def get_manual_instructions(self, rule_name: str) -> str: ...

    def get_fixable_rules(self) -> list[str]: ...
