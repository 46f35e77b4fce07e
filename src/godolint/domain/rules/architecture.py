"""
Layered-architecture rule (archcheck).

Covers domain struct placement, interface size and naming, storage
implementations, error wrapping on return, layer import boundaries, and
the conventions of each layer package (handlers, middleware, storage,
services, API types).
"""

from __future__ import annotations

import posixpath
from typing import ClassVar

from godolint.domain.constants import (
    API_LAYER,
    BRANCH_STATEMENTS,
    DOMAIN_PACKAGE_SEGMENT,
    DTO_SUFFIXES,
    HANDLER_PACKAGE,
    HTTP_PACKAGE,
    INTERFACE_NAME_SUFFIXES,
    MAX_INTERFACE_METHODS,
    MIDDLEWARE_PACKAGE,
    MIDDLEWARE_RESULT_TYPES,
    SERVICE_LAYER,
    SERVICE_SUFFIX,
    STORAGE_IMPORT_TERM,
    STORAGE_LAYER,
    STORAGE_TYPE_SUFFIXES,
    STORE_INTERFACE_METHODS,
    STORE_SUFFIX,
)
from godolint.domain.rules import Pass, RuleModule
from godolint.domain.rules import golang
from godolint.domain.semantics import ReceiverKind
from godolint.domain.syntax import AncestorStack, SyntaxNode, dispatch, iter_nodes, walk

DOMAIN_ID_FIELD = "ID"
DOMAIN_TIME_FIELDS = frozenset({"CreatedAt", "UpdatedAt"})
VALIDATE_METHOD = "Validate"
TRANSACTION_METHOD = "BeginTx"
ERROR_REFERENCE = "Error"


def is_domain_struct(struct: SyntaxNode) -> bool:
    names = {n for f in golang.struct_fields(struct) for n in golang.field_names(f)}
    return DOMAIN_ID_FIELD in names and bool(names & DOMAIN_TIME_FIELDS)


def is_returned_error(node: SyntaxNode) -> bool:
    return node.type == "identifier" and (node.text == "err" or node.text.endswith("Error"))


def qualifier_of(type_node: SyntaxNode) -> str:
    """``storage.Row`` -> ``storage``; '' for unqualified types."""
    if type_node.type != "qualified_type":
        return ""
    package = type_node.child("package")
    return package.text if package is not None else ""


def field_type(field: SyntaxNode) -> SyntaxNode | None:
    """Declared type of a struct field with one pointer level removed."""
    type_node = field.child("type")
    if type_node is None:
        return None
    return golang.pointer_target(type_node) or type_node


def mentions_dto(decl: SyntaxNode) -> bool:
    """True when ``decl`` names a *Request or *Response type of its own, not net/http's."""
    found = False

    def visit(node: SyntaxNode) -> bool:
        nonlocal found
        if found:
            return False
        if node.type == "qualified_type":
            name = golang.selector_type_name(node)
            found = qualifier_of(node) != HTTP_PACKAGE and name.endswith(DTO_SUFFIXES)
            return False
        if node.type == "type_identifier" and node.text.endswith(DTO_SUFFIXES):
            found = True
        return True

    walk(decl, visit)
    return found


def returns_handler(decl: SyntaxNode) -> bool:
    """Exactly one result, and it is ``x.HandlerFunc`` or ``x.Handler``."""
    entries = golang.result_entries(decl)
    if len(entries) != 1:
        return False
    result = entries[0]
    if result.type in golang.PARAMETER_ENTRIES:
        result = result.child("type")
    return (
        result is not None
        and result.type == "qualified_type"
        and golang.selector_type_name(result) in MIDDLEWARE_RESULT_TYPES
    )


def has_branching(decl: SyntaxNode) -> bool:
    body = golang.function_body(decl)
    return body is not None and next(iter_nodes(body, *BRANCH_STATEMENTS), None) is not None


class ArchitectureRule(RuleModule):
    name = "archcheck"
    doc = "enforces architectural patterns and package structure"

    DEFAULT_MAX_INTERFACE_METHODS: ClassVar[int] = MAX_INTERFACE_METHODS

    def __init__(
        self,
        max_interface_methods: int | None = None,
        layers: dict[str, tuple[str, ...]] | None = None,
    ) -> None:
        self._max_methods = (
            max_interface_methods
            if max_interface_methods is not None
            else self.DEFAULT_MAX_INTERFACE_METHODS
        )
        self._layers = dict(layers) if layers is not None else None

    def run(self, pass_: Pass) -> None:
        directory = pass_.unit.package_dir or posixpath.dirname(pass_.unit.path.replace("\\", "/"))
        self._check_imports(pass_, directory)
        dispatch(
            pass_.root,
            {
                "type_spec": lambda node, _: self._check_type(pass_, node, directory),
                "function_declaration": lambda node, _: self._check_function(pass_, node, directory),
                "method_declaration": lambda node, _: self._check_function(pass_, node, directory),
                "return_statement": lambda node, ancestors: self._check_error_wrapping(
                    pass_, node, ancestors
                ),
            },
        )

    def _check_type(self, pass_: Pass, spec: SyntaxNode, directory: str) -> None:
        declared = spec.child("type")
        if declared is None:
            return
        name = golang.declared_name(spec)
        if declared.type == "struct_type" and is_domain_struct(declared):
            self._check_domain_type(pass_, spec, name)
        if declared.type == "interface_type":
            self._check_interface(pass_, spec, declared, name)
        if name.endswith(STORAGE_TYPE_SUFFIXES):
            self._check_storage(pass_, spec, declared, name)
        if API_LAYER in directory and declared.type == "struct_type":
            self._check_api_type(pass_, declared)
        elif STORAGE_LAYER in directory and golang.is_exported(name):
            self._check_storage_layer_type(pass_, spec, declared, name)
        elif SERVICE_LAYER in directory and declared.type == "struct_type" and name.endswith(SERVICE_SUFFIX):
            self._check_service_type(pass_, spec, declared)

    def _check_function(self, pass_: Pass, decl: SyntaxNode, directory: str) -> None:
        if HANDLER_PACKAGE in directory:
            self._check_handler(pass_, decl)
        elif MIDDLEWARE_PACKAGE in directory:
            self._check_middleware(pass_, decl)
        if API_LAYER in directory and not mentions_dto(decl):
            pass_.report(decl, "api layer should use DTOs for request/response")
        elif SERVICE_LAYER in directory and not has_branching(decl):
            pass_.report(decl, "service layer should contain business logic")

    def _check_domain_type(self, pass_: Pass, spec: SyntaxNode, name: str) -> None:
        package = pass_.semantics.package_path(spec)
        if package is not None and DOMAIN_PACKAGE_SEGMENT not in package.split("/"):
            pass_.report(spec, f"domain type {name} must be defined in a domain package")
        methods = pass_.semantics.method_set(f"*{name}")
        if methods is None:
            return
        if not any(
            m.name == VALIDATE_METHOD and m.receiver is ReceiverKind.POINTER for m in methods
        ):
            pass_.report(spec, f"domain type {name} must have a pointer-receiver Validate method")

    def _check_interface(
        self, pass_: Pass, spec: SyntaxNode, interface: SyntaxNode, name: str
    ) -> None:
        if len(golang.interface_methods(interface)) > self._max_methods:
            pass_.report(
                spec, f"interface {name} must declare at most {self._max_methods} methods"
            )
        if not name.endswith(INTERFACE_NAME_SUFFIXES):
            pass_.report(spec, f"interface {name} name must end with 'er' or 'Service'")

    def _check_storage(
        self, pass_: Pass, spec: SyntaxNode, declared: SyntaxNode, name: str
    ) -> None:
        mentioned = golang.type_names_in(spec)
        if ERROR_REFERENCE not in mentioned:
            pass_.report(spec, f"storage type {name} should use domain error wrapping")
        if TRANSACTION_METHOD in mentioned or TRANSACTION_METHOD in golang.interface_method_names(declared):
            return
        if declared.type != "interface_type":
            methods = pass_.semantics.method_set(f"*{name}")
            if methods is None:
                return
            if any(m.name == TRANSACTION_METHOD for m in methods):
                return
        pass_.report(spec, f"storage type {name} should support transactions ({TRANSACTION_METHOD})")

    # -- layer packages --------------------------------------------------------

    def _check_handler(self, pass_: Pass, decl: SyntaxNode) -> None:
        if any(STORAGE_IMPORT_TERM in golang.import_path(s) for s in golang.import_specs(pass_.root)):
            pass_.report(decl, "handlers should not import storage directly, use service layer instead")
        if not any(n.endswith(SERVICE_SUFFIX) for n in golang.type_names_in(decl)):
            pass_.report(decl, "handlers should depend on service interfaces")

    def _check_middleware(self, pass_: Pass, decl: SyntaxNode) -> None:
        receiver = golang.receiver_type(decl)
        if receiver is not None and receiver.startswith("*"):
            pass_.report(decl, "middleware should be stateless")
        if not returns_handler(decl):
            pass_.report(decl, "middleware must implement standard middleware interface")

    def _check_storage_layer_type(
        self, pass_: Pass, spec: SyntaxNode, declared: SyntaxNode, name: str
    ) -> None:
        """
        Exported storage types are either a *Store interface or a struct
        whose pointer method set covers the Store contract.

        Structs without any known methods are not judged.
        """
        if declared.type == "interface_type":
            implements = name.endswith(STORE_SUFFIX)
            transactional = TRANSACTION_METHOD in golang.interface_method_names(declared)
        elif declared.type == "struct_type":
            method_set = pass_.semantics.method_set(f"*{name}")
            if method_set is None:
                return
            methods = {m.name for m in method_set}
            implements = all(m in methods for m in STORE_INTERFACE_METHODS)
            transactional = TRANSACTION_METHOD in methods
        else:
            return
        if not implements:
            pass_.report(spec, "storage types must implement Store interface")
        # *Store and *Repository types already get the BeginTx diagnostic
        if not transactional and not name.endswith(STORAGE_TYPE_SUFFIXES):
            pass_.report(spec, "storage operations should use transactions")

    def _check_service_type(self, pass_: Pass, spec: SyntaxNode, struct: SyntaxNode) -> None:
        types = [t for t in (field_type(f) for f in golang.struct_fields(struct)) if t is not None]
        if not any(golang.selector_type_name(t).endswith(STORE_SUFFIX) for t in types):
            pass_.report(spec, "services should depend on storage interfaces")
        if any(
            qualifier_of(t) == STORAGE_IMPORT_TERM and not golang.selector_type_name(t).endswith(STORE_SUFFIX)
            for t in types
        ):
            pass_.report(spec, "services should not expose storage implementation details")

    def _check_api_type(self, pass_: Pass, struct: SyntaxNode) -> None:
        for field in golang.struct_fields(struct):
            type_node = field_type(field)
            if type_node is not None and STORAGE_IMPORT_TERM in qualifier_of(type_node):
                pass_.report(field, "api types should not embed storage types")

    # -- returns and imports ---------------------------------------------------

    def _check_error_wrapping(self, pass_: Pass, statement: SyntaxNode, ancestors: AncestorStack) -> None:
        for value in golang.returned_values(statement):
            value = golang.unwrap_parens(value)
            if golang.is_wrap_call(value) or not is_returned_error(value):
                continue
            declaration = ancestors.enclosing_declaration()
            function = golang.declared_name(declaration) if declaration is not None else ""
            wrapped = f'fmt.Errorf("{function or "error"}: %w", {value.text})'
            pass_.report(
                value,
                "errors should be wrapped with context before returning",
                pass_.fix("Wrap error with context", pass_.replace(value, wrapped)),
            )

    def _check_imports(self, pass_: Pass, directory: str) -> None:
        layers = self._layers if self._layers is not None else pass_.config.layers
        for fragment, forbidden in layers.items():
            if fragment not in directory:
                continue
            layer = fragment.rstrip("/").rsplit("/", 1)[-1]
            for spec in golang.import_specs(pass_.root):
                path = golang.import_path(spec)
                for target in forbidden:
                    if target in path:
                        other = target.rstrip("/").rsplit("/", 1)[-1]
                        pass_.report(spec, f"{layer} layer cannot depend on {other} layer")
                        break
