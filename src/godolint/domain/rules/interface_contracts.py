"""Interface-contract rule (interfacecheck), driven by declared method sets."""

from __future__ import annotations

from godolint.domain.rules import Pass, RuleModule
from godolint.domain.rules import golang


class InterfaceContractRule(RuleModule):
    """
    A type whose pointer method set holds a trigger method must provide the
    whole contract that trigger stands for. Types with an unknown method set
    are skipped.
    """

    name = "interfacecheck"
    doc = "checks for proper interface implementations"

    def __init__(self, contracts: dict[str, tuple[str, ...]] | None = None) -> None:
        self._contracts = dict(contracts) if contracts is not None else None

    def run(self, pass_: Pass) -> None:
        contracts = self._contracts if self._contracts is not None else pass_.config.contracts
        for spec in golang.type_specs(pass_.root):
            name = golang.declared_name(spec)
            methods = pass_.semantics.method_set(f"*{name}")
            if methods is None:
                continue
            provided = {m.name for m in methods}
            for trigger, required in contracts.items():
                if trigger not in provided:
                    continue
                for method in required:
                    if method not in provided:
                        pass_.report(spec, f"type {name} must implement method {method}")
