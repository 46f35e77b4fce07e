"""Unit tests for ConfigurationLoader (domain/config.py)."""

import unittest

from godolint.domain.config import ConfigurationLoader
from godolint.domain.constants import DEFAULT_CONTRACTS, DEFAULT_LAYER_RULES


class TestConfigurationDefaults(unittest.TestCase):
    """Defaults when nothing is configured."""

    def test_thresholds_default_to_conventions(self) -> None:
        """Empty config yields the documented limits."""
        config = ConfigurationLoader()
        self.assertEqual(config.max_function_statements, 50)
        self.assertEqual(config.max_parameters, 5)
        self.assertEqual(config.max_results, 3)
        self.assertEqual(config.max_struct_fields, 10)
        self.assertEqual(config.max_interface_methods, 5)
        self.assertEqual(config.interface_file_suffix, "interfaces.go")
        self.assertEqual(config.workers, 1)

    def test_layers_and_contracts_default(self) -> None:
        """Layer rules and contracts fall back to the built-in tables."""
        config = ConfigurationLoader()
        self.assertEqual(config.layers, DEFAULT_LAYER_RULES)
        self.assertEqual(config.contracts, DEFAULT_CONTRACTS)

    def test_exclude_defaults(self) -> None:
        """vendor/ and testdata/ are excluded by default."""
        self.assertEqual(ConfigurationLoader().exclude_paths, ["vendor/", "testdata/"])


class TestConfigurationValues(unittest.TestCase):
    """Reading configured values."""

    def test_wrong_types_fall_back_to_defaults(self) -> None:
        """Non-int, negative and bool thresholds are ignored."""
        config = ConfigurationLoader(
            {"max_parameters": "7", "max_results": -1, "max_struct_fields": True}
        )
        self.assertEqual(config.max_parameters, 5)
        self.assertEqual(config.max_results, 3)
        self.assertEqual(config.max_struct_fields, 10)

    def test_rule_lists_keep_strings_only(self) -> None:
        """rules and disable drop non-string entries."""
        config = ConfigurationLoader({"rules": ["apicheck", 3], "disable": "taskcheck"})
        self.assertEqual(config.enabled_rules, ["apicheck"])
        self.assertEqual(config.disabled_rules, [])

    def test_layers_accept_string_or_list(self) -> None:
        """A single forbidden fragment may be given as a string."""
        config = ConfigurationLoader({"layers": {"internal/api": "internal/storage", "x": ["a", 1]}})
        self.assertEqual(config.layers, {"internal/api": ("internal/storage",), "x": ("a",)})

    def test_with_overrides_ignores_none(self) -> None:
        """None overrides keep the configured value and the original is unchanged."""
        config = ConfigurationLoader({"workers": 2, "module": "example.com/todo"})
        overridden = config.with_overrides(workers=None, module="example.com/other")
        self.assertEqual(overridden.workers, 2)
        self.assertEqual(overridden.module, "example.com/other")
        self.assertEqual(config.module, "example.com/todo")

    def test_workers_is_at_least_one(self) -> None:
        """workers=0 still runs one unit at a time."""
        self.assertEqual(ConfigurationLoader({"workers": 0}).workers, 1)

    def test_unknown_keys_are_warned(self) -> None:
        """Unknown keys log a warning and are otherwise ignored."""
        with self.assertLogs("godolint.domain.config", level="WARNING") as logs:
            ConfigurationLoader({"max_paramters": 3})
        self.assertIn("max_paramters", logs.output[0])
