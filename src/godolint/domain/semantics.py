"""
Semantic bridge: read-only type, method-set and package facts per node.

Facts are computed once per compilation unit by the front-end. Absence of a
fact is a normal outcome; rules treat it as "cannot confirm" and skip.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Protocol

from godolint.domain.syntax import SyntaxNode

Span = tuple[int, int]


class ReceiverKind(Enum):
    VALUE = "value"
    POINTER = "pointer"


@dataclass(frozen=True)
class Method:
    name: str
    receiver: ReceiverKind = ReceiverKind.VALUE


class SemanticBridge(Protocol):
    """What rules may ask about a node beyond its syntax."""

    def type_of(self, node: SyntaxNode) -> str | None: ...

    def method_set(self, type_name: str) -> tuple[Method, ...] | None: ...

    def package_path(self, node: SyntaxNode) -> str | None: ...


def is_pointer_type(type_name: str) -> bool:
    return type_name.startswith("*")


def base_type_name(type_name: str) -> str:
    """Strip pointer stars and package qualifiers: ``*store.SQLiteStore`` -> ``SQLiteStore``."""
    stripped = type_name.lstrip("*")
    return stripped.rsplit(".", 1)[-1]


class SemanticIndex:
    """
    Immutable fact table implementing ``SemanticBridge``.

    ``types`` is keyed by node span, ``methods`` by bare type name (no
    pointer), and ``package`` is the import path of the unit's package.
    """

    def __init__(
        self,
        types: Mapping[Span, str] | None = None,
        methods: Mapping[str, tuple[Method, ...]] | None = None,
        package: str | None = None,
    ) -> None:
        self._types: Mapping[Span, str] = MappingProxyType(dict(types or {}))
        self._methods: Mapping[str, tuple[Method, ...]] = MappingProxyType(
            {name: tuple(ms) for name, ms in (methods or {}).items()}
        )
        self._package = package

    @classmethod
    def empty(cls) -> SemanticIndex:
        return cls()

    @property
    def types(self) -> Mapping[Span, str]:
        return self._types

    @property
    def methods(self) -> Mapping[str, tuple[Method, ...]]:
        return self._methods

    @property
    def package(self) -> str | None:
        return self._package

    def type_of(self, node: SyntaxNode) -> str | None:
        return self._types.get(node.span)

    def method_set(self, type_name: str) -> tuple[Method, ...] | None:
        """
        Methods callable on ``type_name``.

        A pointer type sees value and pointer receivers; a value type sees
        only value receivers. Returns None when the type is unknown.
        """
        declared = self._methods.get(base_type_name(type_name))
        if declared is None:
            return None
        if is_pointer_type(type_name):
            return declared
        return tuple(m for m in declared if m.receiver is ReceiverKind.VALUE)

    def package_path(self, node: SyntaxNode) -> str | None:
        return self._package

    def method_names(self, type_name: str) -> frozenset[str] | None:
        methods = self.method_set(type_name)
        if methods is None:
            return None
        return frozenset(m.name for m in methods)
