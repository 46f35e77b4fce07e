"""General style and size-limit rule (standardcheck)."""

from __future__ import annotations

from typing import ClassVar

from godolint.domain.constants import (
    INTERFACE_NAME_SUFFIXES,
    MAX_FUNCTION_STATEMENTS,
    MAX_INTERFACE_METHODS,
    MAX_PARAMETERS,
    MAX_RESULTS,
    MAX_STRUCT_FIELDS,
)
from godolint.domain.rules import Pass, RuleModule
from godolint.domain.rules import golang
from godolint.domain.syntax import SyntaxNode, dispatch

STDLIB, THIRD_PARTY, INTERNAL = 0, 1, 2
BLANK = "_"


def import_rank(path: str, module: str) -> int:
    if module and module in path:
        return INTERNAL
    if "." not in path:
        return STDLIB
    return THIRD_PARTY


def is_all_caps(name: str) -> bool:
    return name.upper() == name and " " not in name


def is_camel_case(name: str) -> bool:
    return "_" not in name and " " not in name


def is_valid_package_name(name: str) -> bool:
    return "_" not in name and name.lower() == name


class StandardRule(RuleModule):
    name = "standardcheck"
    doc = "enforces consistent code patterns and clean code practices"

    DEFAULT_MAX_STATEMENTS: ClassVar[int] = MAX_FUNCTION_STATEMENTS
    DEFAULT_MAX_PARAMETERS: ClassVar[int] = MAX_PARAMETERS
    DEFAULT_MAX_RESULTS: ClassVar[int] = MAX_RESULTS
    DEFAULT_MAX_FIELDS: ClassVar[int] = MAX_STRUCT_FIELDS
    DEFAULT_MAX_METHODS: ClassVar[int] = MAX_INTERFACE_METHODS

    def __init__(
        self,
        max_statements: int | None = None,
        max_parameters: int | None = None,
        max_results: int | None = None,
        max_fields: int | None = None,
        max_methods: int | None = None,
    ) -> None:
        self._max_statements = max_statements if max_statements is not None else self.DEFAULT_MAX_STATEMENTS
        self._max_parameters = max_parameters if max_parameters is not None else self.DEFAULT_MAX_PARAMETERS
        self._max_results = max_results if max_results is not None else self.DEFAULT_MAX_RESULTS
        self._max_fields = max_fields if max_fields is not None else self.DEFAULT_MAX_FIELDS
        self._max_methods = max_methods if max_methods is not None else self.DEFAULT_MAX_METHODS

    def run(self, pass_: Pass) -> None:
        self._check_package(pass_)
        self._check_imports(pass_)
        dispatch(
            pass_.root,
            {
                "function_declaration": lambda node, _: self._check_function(pass_, node),
                "method_declaration": lambda node, _: self._check_function(pass_, node),
                "type_spec": lambda node, _: self._check_type(pass_, node),
                "const_spec": lambda node, _: self._check_names(pass_, node, constant=True),
                "var_spec": lambda node, _: self._check_names(pass_, node, constant=False),
            },
        )

    # -- functions -------------------------------------------------------------

    def _check_function(self, pass_: Pass, decl: SyntaxNode) -> None:
        name = golang.declared_name(decl)
        body = golang.function_body(decl)
        if body is not None and len(body.children) > self._max_statements:
            pass_.report(
                decl,
                f"function {name} is too long (> {self._max_statements} statements), "
                "consider breaking it down",
            )
        parameters = golang.parameter_entries(decl)
        if len(parameters) > self._max_parameters:
            pass_.report(
                decl,
                f"function {name} has too many parameters (> {self._max_parameters}), "
                "consider using a config struct",
            )
        results = golang.result_entries(decl)
        if len(results) > self._max_results:
            pass_.report(
                decl,
                f"function {name} has too many return values (> {self._max_results}), "
                "consider using a result struct",
            )
        if decl.type == "method_declaration":
            if name.startswith("Get") and not results:
                pass_.report(decl, f"getter method {name} should return a value")
            if name.startswith("Set") and not parameters:
                pass_.report(decl, f"setter method {name} should take a parameter")
        if name.endswith("Handler") and not any(
            t.type == "qualified_type" and golang.selector_type_name(t) == "ResponseWriter"
            for t in golang.parameter_types(decl)
        ):
            pass_.report(
                decl,
                f"handler function {name} should take http.ResponseWriter and *http.Request parameters",
            )

    # -- types -----------------------------------------------------------------

    def _check_type(self, pass_: Pass, spec: SyntaxNode) -> None:
        declared = spec.child("type")
        if declared is None:
            return
        name = golang.declared_name(spec)
        if declared.type == "struct_type":
            self._check_struct(pass_, declared, name)
        elif declared.type == "interface_type":
            self._check_interface(pass_, declared, name)

    def _check_struct(self, pass_: Pass, struct: SyntaxNode, name: str) -> None:
        fields = golang.struct_fields(struct)
        if len(fields) > self._max_fields:
            pass_.report(
                struct,
                f"struct {name} has too many fields (> {self._max_fields}), consider breaking it down",
            )
        seen_unexported = False
        for field in fields:
            names = golang.field_names(field)
            if not names:
                continue
            if golang.is_exported(names[0]):
                if seen_unexported:
                    pass_.report(field, "exported fields should be declared before unexported fields")
            else:
                seen_unexported = True

    def _check_interface(self, pass_: Pass, interface: SyntaxNode, name: str) -> None:
        if len(golang.interface_methods(interface)) > self._max_methods:
            pass_.report(
                interface,
                f"interface {name} has too many methods (> {self._max_methods}), consider splitting it",
            )
        if not name.endswith(INTERFACE_NAME_SUFFIXES):
            pass_.report(interface, f"interface {name} should end with 'er' or 'Service'")

    # -- names -----------------------------------------------------------------

    def _check_names(self, pass_: Pass, spec: SyntaxNode, constant: bool) -> None:
        for identifier in spec.children_by_field("name"):
            name = identifier.text
            if name == BLANK:
                continue
            if constant and not is_all_caps(name):
                pass_.report(identifier, f"constant {name} should be ALL_CAPS")
            if not constant and not is_camel_case(name):
                pass_.report(identifier, f"variable {name} should be camelCase")

    def _check_package(self, pass_: Pass) -> None:
        package = golang.package_name(pass_.root)
        if package is not None and not is_valid_package_name(package.text):
            pass_.report(package, f"package name {package.text} should be a single lowercase word")

    def _check_imports(self, pass_: Pass) -> None:
        module = pass_.config.module or pass_.unit.module
        previous = STDLIB
        for spec in golang.import_specs(pass_.root):
            rank = import_rank(golang.import_path(spec), module)
            if rank < previous:
                pass_.report(spec, "imports should be grouped: stdlib > third-party > internal")
            previous = rank
