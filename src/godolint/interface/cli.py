"""CLI entry points for godolint - Thin Controller using Typer."""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import typer

from godolint.domain.config import ConfigurationLoader
from godolint.domain.constants import GODOLINT_BANNER
from godolint.domain.entities import AnalysisResult
from godolint.domain.errors import GodoLintError
from godolint.domain.protocols import (
    FileSystemProtocol,
    FrontendProtocol,
    GuidanceServiceProtocol,
    ReporterProtocol,
    TelemetryPort,
)
from godolint.domain.rules.catalog import build_registry, select_rules
from godolint.interface.telemetry import setup_logging
from godolint.use_cases.analyze import AnalyzeUseCase
from godolint.use_cases.apply_fixes import ApplyFixesUseCase
from godolint.use_cases.pass_runner import PassDependencyGraph, PassRunner

EXIT_CLEAN = 0
EXIT_FINDINGS = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigurationLoader
    telemetry: TelemetryPort
    filesystem: FileSystemProtocol
    guidance_service: GuidanceServiceProtocol
    frontend_factory: Callable[[ConfigurationLoader, str | None], FrontendProtocol]
    reporter_factory: Callable[[str], ReporterProtocol]


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def resolve_target_path(path: Path | None) -> str:
        """Explicit path, else the current directory."""
        if path is not None and str(path):
            return str(path)
        return "."

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies. No Service Locator."""
        app = typer.Typer(
            name="godolint",
            help="godolint: multi-pass convention and architecture linter for Go sources.",
            add_completion=False,
        )

        @app.callback()
        def main_callback(
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
        ) -> None:
            setup_logging(logging.DEBUG if verbose else logging.WARNING)

        def _fail(message: str, code: int = EXIT_CONFIG_ERROR) -> NoReturn:
            deps.telemetry.error(message)
            raise typer.Exit(code)

        def _analyze(
            target: str,
            config: ConfigurationLoader,
            rules: list[str] | None,
            facts: str | None,
        ) -> AnalysisResult:
            # graph errors surface here, before any file is parsed
            selected = select_rules(build_registry(config), config, rules)
            runner = PassRunner(PassDependencyGraph(selected), config)
            use_case = AnalyzeUseCase(
                frontend=deps.frontend_factory(config, facts),
                runner=runner,
                telemetry=deps.telemetry,
                workers=config.workers,
            )
            cancel = threading.Event()
            try:
                return use_case.execute(target, cancel)
            except KeyboardInterrupt:
                cancel.set()
                _fail("interrupted", EXIT_INTERRUPTED)

        @app.command()
        def check(
            path: Path | None = typer.Argument(None, help="File or directory to lint (default: .)"),  # noqa: B008
            rule: list[str] | None = typer.Option(  # noqa: B008
                None, "--rule", "-r", help="Run only this rule (repeatable); prerequisites are added"
            ),
            output_format: str = typer.Option("text", "--format", "-f", help="text, table or json"),
            workers: int | None = typer.Option(None, "--workers", "-j", min=1, help="Parallel files"),
            facts: str | None = typer.Option(None, "--facts", help="External type facts (JSON)"),
            module: str | None = typer.Option(None, "--module", help="Module path of internal imports"),
        ) -> None:
            """Lint Go sources; exit 1 when any finding is reported."""
            deps.telemetry.handshake()
            target_path = CLIAppFactory.resolve_target_path(path)
            config = deps.config_loader.with_overrides(workers=workers, module=module)
            try:
                reporter = deps.reporter_factory(output_format)
                result = _analyze(target_path, config, rule, facts)
            except (GodoLintError, ValueError) as exc:
                _fail(str(exc))
            reporter.report(result)
            findings = sum(len(r.findings) for r in result.reports)
            faults = sum(len(r.faults) for r in result.reports)
            deps.telemetry.step(
                f"{len(result.reports)} file(s) checked: {findings} finding(s), {faults} fault(s)"
            )
            raise typer.Exit(EXIT_FINDINGS if result.has_findings() else EXIT_CLEAN)

        @app.command()
        def fix(
            path: Path | None = typer.Argument(None, help="File or directory to fix (default: .)"),  # noqa: B008
            rule: list[str] | None = typer.Option(  # noqa: B008
                None, "--rule", "-r", help="Apply fixes of this rule only (repeatable)"
            ),
            diff: bool = typer.Option(False, "--diff", help="Print a unified diff instead of writing files"),
            facts: str | None = typer.Option(None, "--facts", help="External type facts (JSON)"),
            module: str | None = typer.Option(None, "--module", help="Module path of internal imports"),
        ) -> None:
            """Apply the suggested fixes; overlapping fixes are skipped and reported."""
            deps.telemetry.handshake()
            target_path = CLIAppFactory.resolve_target_path(path)
            config = deps.config_loader.with_overrides(module=module)
            try:
                result = _analyze(target_path, config, rule, facts)
                use_case = ApplyFixesUseCase(deps.filesystem, deps.telemetry)
                outcomes = use_case.execute(result, write=not diff)
            except GodoLintError as exc:
                _fail(str(exc))
            deps.reporter_factory("text").report_fixes(outcomes)
            raise typer.Exit(EXIT_CLEAN)

        @app.command("rules")
        def list_rules() -> None:
            """List registered rules in execution tie-break order."""
            try:
                registry = build_registry(deps.config_loader)
            except GodoLintError as exc:
                _fail(str(exc))
            fixable = set(deps.guidance_service.get_fixable_rules())
            for registered in registry.rules():
                requires = f" (requires: {', '.join(registered.requires)})" if registered.requires else ""
                marker = " [fixable]" if registered.name in fixable else ""
                typer.echo(f"{registered.name}: {registered.doc}{requires}{marker}")

        @app.command()
        def explain(name: str = typer.Argument(..., help="Rule name, e.g. apicheck")) -> None:
            """Show the guidance entry of one rule."""
            registry = build_registry(deps.config_loader)
            if name not in registry:
                _fail(f"unknown rule {name!r}; run 'godolint rules' for the list")
            registered = registry.get(name)
            entry = deps.guidance_service.get_entry(name) or {}
            typer.echo(f"{deps.guidance_service.get_display_name(name)} ({name})")
            typer.echo(str(entry.get("description") or registered.doc))
            typer.echo("")
            typer.echo(f"How to fix: {deps.guidance_service.get_manual_instructions(name)}")
            if entry.get("proactive_guidance"):
                typer.echo(f"Prevention: {entry['proactive_guidance']}")
            typer.echo(f"Auto-fixable: {'yes' if entry.get('fixable') else 'no'}")

        @app.command()
        def version() -> None:
            """Print the banner and version."""
            from godolint import __version__

            typer.echo(f"{GODOLINT_BANNER} {__version__}")

        return app
