"""Unit tests for GuidanceService."""

import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from godolint.domain.config import ConfigurationLoader
from godolint.domain.rules.catalog import build_registry
from godolint.infrastructure.services.guidance_service import GuidanceService


class TestPackagedRegistry(unittest.TestCase):
    """Tests against the shipped rule_registry.yaml."""

    def setUp(self) -> None:
        self.service = GuidanceService()

    def test_every_catalog_rule_has_an_entry(self) -> None:
        """Each registered rule is documented."""
        for name in build_registry(ConfigurationLoader()).names():
            entry = self.service.get_entry(name)
            self.assertIsNotNone(entry, name)
            self.assertIn("manual_instructions", entry)

    def test_fixable_rules(self) -> None:
        """Rules offering suggested fixes are flagged fixable."""
        self.assertEqual(
            self.service.get_fixable_rules(),
            ["apicheck", "archcheck", "errorcheck", "middlewarecheck", "taskcheck"],
        )

    def test_display_name(self) -> None:
        """display_name is used when present."""
        self.assertEqual(self.service.get_display_name("apicheck"), "HTTP handler conventions")

    def test_default_entry_is_not_a_rule(self) -> None:
        """_default is only a fallback."""
        self.assertIsNone(self.service.get_entry("_default"))


class TestCustomRegistry(unittest.TestCase):
    """Tests with a registry file written for the test."""

    def test_fallbacks(self) -> None:
        """Unknown rules fall back to the name and the default instructions."""
        with TemporaryDirectory() as directory:
            path = Path(directory) / "registry.yaml"
            path.write_text("_default:\n  manual_instructions: Read the message.\nx:\n  short_description: X rule\n")
            service = GuidanceService(str(path))
        self.assertEqual(service.get_display_name("x"), "X rule")
        self.assertEqual(service.get_display_name("unknown"), "unknown")
        self.assertEqual(service.get_manual_instructions("x"), "Read the message.")
        self.assertEqual(service.get_fixable_rules(), [])

    def test_missing_file_gives_empty_registry(self) -> None:
        """A missing registry is not an error."""
        service = GuidanceService("/nonexistent/registry.yaml")
        self.assertEqual(service.get_registry(), {})
        self.assertEqual(service.get_manual_instructions("x"), "Fix the violation at the reported location.")
