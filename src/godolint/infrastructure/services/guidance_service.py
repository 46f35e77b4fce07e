"""GuidanceService: loads the rule registry and provides display names and manual instructions."""

from pathlib import Path
from typing import cast

import yaml

from godolint.domain.protocols import GuidanceServiceProtocol
from godolint.domain.registry_types import RuleRegistryEntry

DEFAULT_ENTRY = "_default"


class GuidanceService(GuidanceServiceProtocol):
    """Loads rule_registry.yaml and answers ``godolint explain``."""

    def __init__(self, registry_path: str | None = None) -> None:
        if registry_path is not None:
            self._path = Path(registry_path)
        else:
            # Default: packaged resource next to this package
            _base = Path(__file__).resolve().parent.parent.parent
            self._path = _base / "resources" / "rule_registry.yaml"
        self._registry: dict[str, RuleRegistryEntry] = {}
        self._load()

    def _load(self) -> None:
        if self._path.exists():
            with open(self._path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
                self._registry = (
                    cast(dict[str, RuleRegistryEntry], data) if isinstance(data, dict) else {}
                )
        else:
            self._registry = {}

    def get_registry(self) -> dict[str, RuleRegistryEntry]:
        """Return a shallow copy of the loaded registry."""
        return dict(self._registry)

    def get_entry(self, rule_name: str) -> RuleRegistryEntry | None:
        if rule_name == DEFAULT_ENTRY:
            return None
        entry = self._registry.get(rule_name)
        return cast(RuleRegistryEntry, dict(entry)) if entry else None

    def get_display_name(self, rule_name: str) -> str:
        entry = self.get_entry(rule_name)
        if not entry:
            return rule_name
        return str(entry.get("display_name") or entry.get("short_description") or rule_name)

    def get_manual_instructions(self, rule_name: str) -> str:
        """Manual fix instructions for a rule, falling back to the registry default."""
        entry = self.get_entry(rule_name)
        if entry and "manual_instructions" in entry:
            return str(entry["manual_instructions"])
        default_entry = self._registry.get(DEFAULT_ENTRY)
        if default_entry and "manual_instructions" in default_entry:
            return str(default_entry["manual_instructions"])
        return "Fix the violation at the reported location."

    def get_fixable_rules(self) -> list[str]:
        return sorted(
            name
            for name, entry in self._registry.items()
            if name != DEFAULT_ENTRY and isinstance(entry, dict) and entry.get("fixable")
        )
