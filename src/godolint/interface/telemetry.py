"""Terminal telemetry and logging setup on a rich console."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.theme import Theme

from godolint.domain.protocols import TelemetryPort

_THEME = Theme(
    {
        "info": "dim cyan",
        "warning": "yellow",
        "error": "bold red",
        "path": "bold blue",
        "rule": "bold magenta",
    }
)


def make_console(stderr: bool = True) -> Console:
    return Console(theme=_THEME, stderr=stderr)


def setup_logging(level: int = logging.WARNING, console: Console | None = None) -> None:
    """Route the stdlib root logger through a single RichHandler on stderr."""
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if isinstance(handler, RichHandler):
            root_logger.removeHandler(handler)
    rich_handler = RichHandler(
        console=console or make_console(),
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
    )
    root_logger.setLevel(level)
    root_logger.addHandler(rich_handler)


class ProjectTelemetry(TelemetryPort):
    """User-facing progress lines; diagnostics themselves go to the reporter."""

    def __init__(
        self,
        project_name: str,
        color: str = "cyan",
        welcome_msg: str = "",
        console: Console | None = None,
        quiet: bool = False,
    ) -> None:
        self.project_name = project_name
        self.color = color
        self.welcome_msg = welcome_msg
        self.console = console or make_console()
        self.quiet = quiet

    def handshake(self) -> None:
        if self.quiet:
            return
        self.console.print(f"[bold {self.color}]{self.project_name}[/] {self.welcome_msg}".rstrip())

    def step(self, message: str) -> None:
        if self.quiet:
            return
        self.console.print(f"[{self.color}]>[/] {escape(message)}", highlight=False)

    def warning(self, message: str) -> None:
        self.console.print(f"[warning]warning:[/] {escape(message)}", highlight=False)

    def error(self, message: str) -> None:
        self.console.print(f"[error]error:[/] {escape(message)}", highlight=False)
