"""Interface-location rule (interfacelocation): interfaces live in interfaces.go."""

from __future__ import annotations

from godolint.domain.constants import INTERFACE_FILE_SUFFIX
from godolint.domain.rules import Pass, RuleModule
from godolint.domain.rules import golang


class InterfaceLocationRule(RuleModule):
    """Only the file name decides; package boundaries play no part."""

    name = "interfacelocation"
    doc = "checks that interfaces are defined in the correct files"

    def __init__(self, file_suffix: str = INTERFACE_FILE_SUFFIX) -> None:
        self._suffix = file_suffix

    def run(self, pass_: Pass) -> None:
        if pass_.source.name.endswith(self._suffix):
            return
        for spec in golang.type_specs(pass_.root, "interface_type"):
            pass_.report(
                spec,
                f'interface "{golang.declared_name(spec)}" must be defined in {self._suffix}',
            )
