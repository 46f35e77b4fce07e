"""Go front-end: collect sources, parse them, and attach per-unit semantic facts."""

from __future__ import annotations

import json
import logging
import posixpath
from collections.abc import Mapping
from pathlib import PurePath
from typing import TYPE_CHECKING

from godolint.domain.entities import CompilationUnit
from godolint.domain.errors import ConfigurationError, ParseError
from godolint.domain.protocols import FileSystemProtocol, FrontendProtocol, ParserProtocol
from godolint.domain.semantics import Method, ReceiverKind, SemanticIndex, Span
from godolint.domain.syntax import SyntaxTree
from godolint.infrastructure.gateways.type_resolver import TypeResolver

if TYPE_CHECKING:
    from godolint.domain.config import ConfigurationLoader

logger = logging.getLogger(__name__)

GO_MOD_FILE = "go.mod"


def parse_module_line(go_mod: str) -> str:
    """Module path declared by a go.mod file, '' when there is none."""
    for line in go_mod.splitlines():
        parts = line.split("//", 1)[0].split()
        if len(parts) == 2 and parts[0] == "module":
            return parts[1].strip('"')
    return ""


def package_path(module: str, package_dir: str) -> str | None:
    """Import path of a package directory: ``module/dir``, or what is known of it."""
    directory = "" if package_dir in ("", ".") else package_dir
    if module and directory:
        return f"{module}/{directory}"
    return module or directory or None


def is_excluded(relative_path: str, fragments: list[str]) -> bool:
    anchored = "/" + relative_path.lstrip("/")
    return any(f"/{fragment.lstrip('/')}" in anchored for fragment in fragments if fragment)


class FactTable:
    """
    External semantic facts produced by a real Go type checker.

    Listed files take their types and package from the table instead of the
    syntactic resolver; its method table extends the resolver's.
    """

    def __init__(self, data: Mapping[str, object]) -> None:
        files = data.get("files", {})
        methods = data.get("methods", {})
        if not isinstance(files, dict) or not isinstance(methods, dict):
            raise ConfigurationError("facts: 'files' and 'methods' must be objects")
        self._files: dict[str, tuple[str | None, dict[Span, str]]] = {}
        for path, entry in files.items():
            if not isinstance(entry, dict):
                continue
            package = entry.get("package")
            types: dict[Span, str] = {}
            for row in entry.get("types", []):
                if isinstance(row, list) and len(row) == 3:
                    start, end, type_name = row
                    types[(int(start), int(end))] = str(type_name)
            self._files[self._key(path)] = (package if isinstance(package, str) else None, types)
        self._methods: dict[str, tuple[Method, ...]] = {}
        for type_name, rows in methods.items():
            self._methods[str(type_name)] = tuple(
                Method(str(row[0]), ReceiverKind(row[1]))
                for row in rows
                if isinstance(row, list) and len(row) == 2
            )

    @classmethod
    def from_json(cls, text: str, origin: str = "facts") -> FactTable:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{origin}: invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"{origin}: expected a JSON object")
        try:
            return cls(data)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"{origin}: malformed fact table: {exc}") from exc

    @staticmethod
    def _key(path: str) -> str:
        return PurePath(path).as_posix()

    @property
    def methods(self) -> dict[str, tuple[Method, ...]]:
        return self._methods

    def facts_for(self, path: str) -> tuple[str | None, dict[Span, str]] | None:
        return self._files.get(self._key(path))


class GoFrontend(FrontendProtocol):
    """Infrastructure implementation of FrontendProtocol over tree-sitter."""

    def __init__(
        self,
        parser: ParserProtocol,
        filesystem: FileSystemProtocol,
        config: ConfigurationLoader,
        facts: FactTable | None = None,
    ) -> None:
        self.parser = parser
        self.filesystem = filesystem
        self.config = config
        self.facts = facts

    def load(self, target: str) -> list[CompilationUnit]:
        if not self.filesystem.exists(target):
            raise ConfigurationError(f"path does not exist: {target}")
        module_root, module = self._find_module(target)
        sources: dict[str, bytes] = {}
        for path in self.filesystem.glob_go_files(target):
            relative = self._relative(path, module_root)
            if is_excluded(relative, self.config.exclude_paths):
                logger.debug("Excluded %s", path)
                continue
            try:
                sources[path] = self.filesystem.read_bytes(path)
            except OSError as exc:
                raise ParseError(path, str(exc)) from exc
        directories = {path: posixpath.dirname(self._relative(path, module_root)) for path in sources}
        return self._build_units(sources, self.config.module or module, directories)

    def load_sources(self, sources: Mapping[str, bytes], module: str = "") -> list[CompilationUnit]:
        directories = {path: posixpath.dirname(PurePath(path).as_posix()) for path in sources}
        return self._build_units(dict(sources), module or self.config.module, directories)

    def _build_units(
        self, sources: dict[str, bytes], module: str, directories: dict[str, str]
    ) -> list[CompilationUnit]:
        trees = {path: self.parser.parse(path, sources[path]) for path in sorted(sources)}
        packages: dict[str, list[SyntaxTree]] = {}
        for path, tree in trees.items():
            packages.setdefault(directories[path], []).append(tree)

        units: dict[str, CompilationUnit] = {}
        for directory, members in packages.items():
            resolver = TypeResolver([t for t in members if not t.has_errors])
            methods = resolver.methods()
            if self.facts is not None:
                methods.update(self.facts.methods)
            for tree in members:
                units[tree.path] = CompilationUnit(
                    tree=tree,
                    semantics=self._semantics(tree, resolver, methods, module, directory),
                    module=module,
                    package_dir=directory,
                )
        logger.info("Loaded %d file(s) in %d package(s)", len(units), len(packages))
        return [units[path] for path in sorted(units)]

    def _semantics(
        self,
        tree: SyntaxTree,
        resolver: TypeResolver,
        methods: dict[str, tuple[Method, ...]],
        module: str,
        directory: str,
    ) -> SemanticIndex:
        listed = self.facts.facts_for(tree.path) if self.facts is not None else None
        if listed is not None:
            package, types = listed
            return SemanticIndex(types, methods, package or package_path(module, directory))
        types = {} if tree.has_errors else resolver.resolve(tree)
        return SemanticIndex(types, methods, package_path(module, directory))

    def _find_module(self, target: str) -> tuple[str, str]:
        """(module root directory, module path) of the nearest go.mod above target."""
        resolved = PurePath(self.filesystem.resolve_path(target))
        start = resolved if self.filesystem.is_directory(str(resolved)) else resolved.parent
        for directory in (start, *start.parents):
            go_mod = self.filesystem.join_path(str(directory), GO_MOD_FILE)
            if self.filesystem.exists(go_mod):
                module = parse_module_line(self.filesystem.read_text(go_mod))
                logger.debug("Module %r from %s", module, go_mod)
                return str(directory), module
        return str(start), ""

    def _relative(self, path: str, module_root: str) -> str:
        resolved = PurePath(self.filesystem.resolve_path(path))
        try:
            return resolved.relative_to(module_root).as_posix()
        except ValueError:
            return PurePath(path).as_posix()
