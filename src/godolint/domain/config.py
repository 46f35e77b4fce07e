"""Configuration for linter settings. Immutable value object created by Infrastructure."""

from __future__ import annotations

import logging

from godolint.domain.constants import (
    DEFAULT_CONTRACTS,
    DEFAULT_EXCLUDE_PATHS,
    DEFAULT_LAYER_RULES,
    INTERFACE_FILE_SUFFIX,
    MAX_FUNCTION_STATEMENTS,
    MAX_INTERFACE_METHODS,
    MAX_PARAMETERS,
    MAX_RESULTS,
    MAX_STRUCT_FIELDS,
)

logger = logging.getLogger(__name__)

_KNOWN_KEYS = frozenset(
    {
        "module",
        "rules",
        "disable",
        "exclude",
        "workers",
        "max_function_statements",
        "max_parameters",
        "max_results",
        "max_struct_fields",
        "max_interface_methods",
        "interface_file_suffix",
        "layers",
        "contracts",
    }
)


class ConfigurationLoader:
    """
    Immutable configuration for linter settings.

    Created by Infrastructure from the ``[tool.godolint]`` table (or a
    ``.godolint.toml`` file). The domain never reads the filesystem; values
    of the wrong type fall back to the defaults.
    """

    def __init__(self, config_dict: dict[str, object] | None = None) -> None:
        self._config: dict[str, object] = dict(config_dict or {})
        if self._config:
            self.validate_config(self._config)

    def validate_config(self, config: dict[str, object]) -> None:
        """Warn about keys nobody reads."""
        for key in sorted(set(config) - _KNOWN_KEYS):
            logger.warning("Configuration Warning: unknown key %r ignored.", key)

    def with_overrides(self, **overrides: object) -> ConfigurationLoader:
        """A copy with the given keys replaced; ``None`` values are ignored."""
        merged = dict(self._config)
        merged.update({k: v for k, v in overrides.items() if v is not None})
        return ConfigurationLoader(merged)

    @property
    def config(self) -> dict[str, object]:
        return self._config

    @property
    def module(self) -> str:
        raw = self._config.get("module", "")
        return raw if isinstance(raw, str) else ""

    @property
    def enabled_rules(self) -> list[str]:
        raw = self._config.get("rules", [])
        if isinstance(raw, list):
            return [str(x) for x in raw if isinstance(x, str)]
        return []

    @property
    def disabled_rules(self) -> list[str]:
        raw = self._config.get("disable", [])
        if isinstance(raw, list):
            return [str(x) for x in raw if isinstance(x, str)]
        return []

    @property
    def exclude_paths(self) -> list[str]:
        raw = self._config.get("exclude")
        if isinstance(raw, list):
            return [str(x) for x in raw if isinstance(x, str)]
        return list(DEFAULT_EXCLUDE_PATHS)

    @property
    def workers(self) -> int:
        return max(1, self._int("workers", 1))

    @property
    def max_function_statements(self) -> int:
        return self._int("max_function_statements", MAX_FUNCTION_STATEMENTS)

    @property
    def max_parameters(self) -> int:
        return self._int("max_parameters", MAX_PARAMETERS)

    @property
    def max_results(self) -> int:
        return self._int("max_results", MAX_RESULTS)

    @property
    def max_struct_fields(self) -> int:
        return self._int("max_struct_fields", MAX_STRUCT_FIELDS)

    @property
    def max_interface_methods(self) -> int:
        return self._int("max_interface_methods", MAX_INTERFACE_METHODS)

    @property
    def interface_file_suffix(self) -> str:
        raw = self._config.get("interface_file_suffix", INTERFACE_FILE_SUFFIX)
        return raw if isinstance(raw, str) and raw else INTERFACE_FILE_SUFFIX

    @property
    def layers(self) -> dict[str, tuple[str, ...]]:
        """Layer directory fragment -> import fragments it may not use."""
        raw = self._config.get("layers")
        if not isinstance(raw, dict):
            return dict(DEFAULT_LAYER_RULES)
        return ConfigurationLoader.string_list_map(raw)

    @property
    def contracts(self) -> dict[str, tuple[str, ...]]:
        """Trigger method -> methods the whole contract requires."""
        raw = self._config.get("contracts")
        if not isinstance(raw, dict):
            return dict(DEFAULT_CONTRACTS)
        return ConfigurationLoader.string_list_map(raw)

    def _int(self, key: str, default: int) -> int:
        raw = self._config.get(key, default)
        # bool is an int subclass; reject it explicitly
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            return default
        return raw

    @staticmethod
    def string_list_map(raw: dict[object, object]) -> dict[str, tuple[str, ...]]:
        result: dict[str, tuple[str, ...]] = {}
        for key, values in raw.items():
            if not isinstance(key, str):
                continue
            if isinstance(values, str):
                result[key] = (values,)
            elif isinstance(values, list):
                result[key] = tuple(v for v in values if isinstance(v, str))
        return result
