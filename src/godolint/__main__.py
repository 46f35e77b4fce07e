"""Package entry point - composition root. Wire dependencies and run the CLI app."""

import sys

from godolint.domain.config import ConfigurationLoader
from godolint.domain.errors import ConfigurationError
from godolint.domain.protocols import FrontendProtocol
from godolint.infrastructure.di.container import GodoLintContainer
from godolint.interface.cli import EXIT_CONFIG_ERROR, CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    try:
        container = GodoLintContainer.get_instance()
    except ConfigurationError as exc:
        print(f"godolint: {exc}", file=sys.stderr)
        sys.exit(EXIT_CONFIG_ERROR)

    def frontend_factory(config: ConfigurationLoader, facts_path: str | None) -> FrontendProtocol:
        return container.create_frontend(config, facts_path)

    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=container.get_telemetry_port(),
        filesystem=container.get_filesystem_gateway(),
        guidance_service=container.get_guidance_service(),
        frontend_factory=frontend_factory,
        reporter_factory=container.create_reporter,
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
