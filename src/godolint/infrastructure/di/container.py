from typing import TYPE_CHECKING, Any, cast

from godolint.domain.config import ConfigurationLoader
from godolint.domain.constants import GODOLINT_BANNER
from godolint.domain.errors import ConfigurationError
from godolint.infrastructure.config_file_loader import ConfigFileLoader
from godolint.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from godolint.infrastructure.gateways.go_frontend import FactTable, GoFrontend
from godolint.infrastructure.gateways.tree_sitter_gateway import TreeSitterGateway
from godolint.infrastructure.reporters import create_reporter
from godolint.infrastructure.services.guidance_service import GuidanceService
from godolint.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from godolint.domain.protocols import (
        FileSystemProtocol,
        GuidanceServiceProtocol,
        ParserProtocol,
        ReporterProtocol,
        TelemetryPort,
    )


class GodoLintContainer:
    """Dependency Injection Container for godolint."""

    _instance: "GodoLintContainer | None" = None

    def __init__(self, config_start: str | None = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._config_start = config_start
        self._register_defaults()

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        config_dict, _ = ConfigFileLoader.load_config_from_fs(self._config_start)
        self.register_singleton("ConfigurationLoader", ConfigurationLoader(config_dict))

        telemetry = ProjectTelemetry("GODOLINT", "cyan", GODOLINT_BANNER.split(" :: ", 1)[-1])
        self.register_singleton("TelemetryPort", telemetry)
        self.register_singleton("TreeSitterGateway", TreeSitterGateway())
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("GuidanceService", GuidanceService())

    # JUSTIFICATION: DI Container must handle any type of service
    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    # JUSTIFICATION: DI Container must return any type of service
    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        """Return the configuration loader (created at composition root)."""
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_parser(self) -> "ParserProtocol":
        """Return the tree-sitter parser gateway."""
        return cast("ParserProtocol", self.get("TreeSitterGateway"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_guidance_service(self) -> "GuidanceServiceProtocol":
        """Return the guidance service (rule registry)."""
        return cast("GuidanceServiceProtocol", self.get("GuidanceService"))

    def create_reporter(self, output_format: str = "text") -> "ReporterProtocol":
        return create_reporter(output_format)

    def create_frontend(
        self, config: ConfigurationLoader, facts_path: str | None = None
    ) -> GoFrontend:
        facts = None
        if facts_path is not None:
            try:
                text = self.get_filesystem_gateway().read_text(facts_path)
            except OSError as exc:
                raise ConfigurationError(f"cannot read facts file {facts_path}: {exc}") from exc
            facts = FactTable.from_json(text, origin=facts_path)
        return GoFrontend(self.get_parser(), self.get_filesystem_gateway(), config, facts)

    @classmethod
    def get_instance(cls, config_start: str | None = None) -> "GodoLintContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = GodoLintContainer(config_start)
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
