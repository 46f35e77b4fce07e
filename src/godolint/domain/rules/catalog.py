"""The built-in rule catalog, registered once in declaration order."""

from __future__ import annotations

from typing import TYPE_CHECKING

from godolint.domain.rules import Rule, RuleModule, RuleRegistry
from godolint.domain.rules.api import APIRule
from godolint.domain.rules.architecture import ArchitectureRule
from godolint.domain.rules.error_handling import ErrorHandlingRule
from godolint.domain.rules.inspect import InspectRule
from godolint.domain.rules.interface_contracts import InterfaceContractRule
from godolint.domain.rules.interface_location import InterfaceLocationRule
from godolint.domain.rules.middleware import MiddlewareRule
from godolint.domain.rules.standard import StandardRule
from godolint.domain.rules.storage import StorageRule
from godolint.domain.rules.structured_logging import StructuredLoggingRule
from godolint.domain.rules.task_fields import TaskFieldRule

if TYPE_CHECKING:
    from godolint.domain.config import ConfigurationLoader


def catalog_modules(config: ConfigurationLoader) -> list[RuleModule]:
    """Rule instances in declaration order, which is also the tie-break order."""
    return [
        InspectRule(),
        APIRule(),
        StorageRule(),
        StructuredLoggingRule(),
        ErrorHandlingRule(),
        TaskFieldRule(),
        MiddlewareRule(),
        StandardRule(
            max_statements=config.max_function_statements,
            max_parameters=config.max_parameters,
            max_results=config.max_results,
            max_fields=config.max_struct_fields,
            max_methods=config.max_interface_methods,
        ),
        ArchitectureRule(
            max_interface_methods=config.max_interface_methods,
            layers=config.layers,
        ),
        InterfaceLocationRule(file_suffix=config.interface_file_suffix),
        InterfaceContractRule(contracts=config.contracts),
    ]


def build_registry(config: ConfigurationLoader) -> RuleRegistry:
    registry = RuleRegistry()
    for module in catalog_modules(config):
        registry.add(module.as_rule())
    return registry


def select_rules(
    registry: RuleRegistry, config: ConfigurationLoader, names: list[str] | None = None
) -> tuple[Rule, ...]:
    """Rules to run: explicit names, else configured ``rules``, minus ``disable``."""
    wanted = names or config.enabled_rules
    selected = registry.select(wanted) if wanted else registry.rules()
    disabled = set(config.disabled_rules)
    if not disabled:
        return selected
    for name in disabled:
        registry.get(name)
    kept = [r.name for r in selected if r.name not in disabled]
    return registry.select(kept)
