"""Load .godolint.toml or [tool.godolint] from pyproject.toml. Infrastructure I/O only."""

import logging
import tomllib
from pathlib import Path

from godolint.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".godolint.toml"
PYPROJECT_FILE_NAME = "pyproject.toml"


class ConfigFileLoader:
    """
    Finds the nearest configuration file above the analysed target.

    ``.godolint.toml`` is a bare table; ``pyproject.toml`` only counts when
    it has a ``[tool.godolint]`` section.
    """

    @staticmethod
    def load_config_from_fs(start: str | None = None) -> tuple[dict[str, object], str | None]:
        """Returns (config_dict, path of the file it came from or None)."""
        current_path = Path(start or Path.cwd()).resolve()
        if current_path.is_file():
            current_path = current_path.parent
        for directory in (current_path, *current_path.parents):
            dedicated = directory / CONFIG_FILE_NAME
            if dedicated.is_file():
                return (ConfigFileLoader._read(dedicated), str(dedicated))
            pyproject = directory / PYPROJECT_FILE_NAME
            if pyproject.is_file():
                tool_section = ConfigFileLoader._read(pyproject).get("tool", {}) or {}
                config_dict = tool_section.get("godolint") if isinstance(tool_section, dict) else None
                if isinstance(config_dict, dict):
                    return (config_dict, str(pyproject))
        return ({}, None)

    @staticmethod
    def _read(config_file: Path) -> dict[str, object]:
        try:
            with config_file.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"{config_file}: invalid TOML: {exc}") from exc
        except OSError as exc:
            logger.warning("Could not read %s: %s", config_file, exc)
            return {}
        logger.debug("Loaded configuration from %s", config_file)
        return data
