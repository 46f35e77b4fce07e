"""Storage-interface shape rule (storagecheck)."""

from __future__ import annotations

from godolint.domain.constants import STORE_INTERFACE_METHODS
from godolint.domain.rules import Pass, RuleModule
from godolint.domain.rules import golang

STORE_SUFFIX = "Store"


class StorageRule(RuleModule):
    name = "storagecheck"
    doc = "checks for proper storage implementation patterns"

    def run(self, pass_: Pass) -> None:
        for spec in golang.type_specs(pass_.root, "interface_type"):
            if not golang.declared_name(spec).endswith(STORE_SUFFIX):
                continue
            interface = spec.child("type")
            declared = set(golang.interface_method_names(interface)) if interface else set()
            for required in STORE_INTERFACE_METHODS:
                if required not in declared:
                    pass_.report(spec, f"storage interface must implement {required} method")
