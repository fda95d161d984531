"""Go source parsing via tree-sitter.

Turns Go source text into ``SourceUnit`` objects (tree, package clause, import
specs) and lists their top-level declarations. Everything downstream works on
the tree-sitter nodes held by ``Declaration``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import cached_property, lru_cache
from pathlib import Path
from typing import Any, Iterable, Iterator

from .declarations import NODE_KINDS, Declaration
from .errors import SourceParseError

logger = logging.getLogger(__name__)

_MAJOR_VERSION_RE = re.compile(r"^v[0-9]+$")
_GOPKG_VERSION_RE = re.compile(r"\.v[0-9]+$")


@dataclass(frozen=True)
class ImportSpec:
    """A single ``import`` line: optional alias plus the import path."""

    path: str
    alias: str | None = None

    @property
    def is_blank(self) -> bool:
        return self.alias == "_"

    @property
    def is_dot(self) -> bool:
        return self.alias == "."

    @property
    def local_name(self) -> str:
        """Name the importing file uses to qualify members of this package.

        Without an alias this is a guess from the path: the last element,
        skipping a ``/vN`` major version element, minus a gopkg.in ``.vN``
        suffix and a ``go-`` prefix.
        """
        if self.alias:
            return self.alias
        parts = [part for part in self.path.split("/") if part]
        if not parts:
            return ""
        last = parts[-1]
        if _MAJOR_VERSION_RE.match(last) and len(parts) > 1:
            last = parts[-2]
        last = _GOPKG_VERSION_RE.sub("", last)
        if last.startswith("go-") and len(last) > 3:
            last = last[3:]
        return last.replace("-", "_").replace(".", "_")

    def render(self) -> str:
        if self.alias:
            return f'{self.alias} "{self.path}"'
        return f'"{self.path}"'


@dataclass(eq=False)
class SourceUnit:
    """One parsed Go file."""

    path: str
    source: bytes
    tree: Any
    package: str
    imports: list[ImportSpec] = field(default_factory=list)

    @property
    def root(self) -> Any:
        return self.tree.root_node

    def text(self, node: Any) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    @cached_property
    def import_names(self) -> frozenset[str]:
        """Local names that qualify imported package members in this file."""
        return frozenset(
            spec.local_name
            for spec in self.imports
            if not spec.is_blank and not spec.is_dot and spec.local_name
        )

    def import_for(self, name: str) -> ImportSpec | None:
        for spec in self.imports:
            if not spec.is_blank and not spec.is_dot and spec.local_name == name:
                return spec
        return None


@lru_cache(maxsize=None)
def _go_language():
    try:
        from tree_sitter import Language
        import tree_sitter_go
    except Exception:
        return None

    try:
        return Language(tree_sitter_go.language())
    except Exception:
        return None


@lru_cache(maxsize=None)
def _get_parser():
    lang = _go_language()
    if lang is None:
        return None
    try:
        from tree_sitter import Parser

        parser = Parser()
        parser.language = lang
        return parser
    except Exception:
        try:
            from tree_sitter import Parser

            return Parser(lang)
        except Exception:
            return None


def iter_nodes(node: Any) -> Iterator[Any]:
    """Pre-order, left-to-right walk over ``node`` and all its descendants."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        for child in reversed(current.children):
            stack.append(child)


def _first_error(root: Any) -> Any | None:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        for child in reversed(node.children):
            if child.has_error or child.is_missing:
                stack.append(child)
    return None


def _iter_specs(node: Any, spec_types: set[str]) -> Iterator[Any]:
    # Grouped declarations wrap their specs in a *_list node on newer grammars.
    for child in node.named_children:
        if child.type in spec_types:
            yield child
        elif child.type.endswith("_list"):
            yield from _iter_specs(child, spec_types)


def _package_name(unit: SourceUnit) -> str:
    for child in unit.root.named_children:
        if child.type != "package_clause":
            continue
        for part in child.named_children:
            if part.type in {"package_identifier", "identifier"}:
                return unit.text(part)
    return ""


def field_names(node: Any, field_name: str, unit: SourceUnit) -> list[str]:
    """Identifier texts under a field; skips the separating commas some grammars tag too."""
    return [
        unit.text(child)
        for child in node.children_by_field_name(field_name)
        if child.type == "identifier"
    ]


def _strip_quotes(literal: str) -> str:
    if len(literal) >= 2 and literal[0] in {'"', "`"} and literal[-1] == literal[0]:
        return literal[1:-1]
    return literal


def _imports(unit: SourceUnit) -> list[ImportSpec]:
    specs: list[ImportSpec] = []
    for child in unit.root.named_children:
        if child.type != "import_declaration":
            continue
        for spec in _iter_specs(child, {"import_spec"}):
            path_node = spec.child_by_field_name("path")
            if path_node is None:
                continue
            name_node = spec.child_by_field_name("name")
            alias = unit.text(name_node) if name_node is not None else None
            specs.append(ImportSpec(path=_strip_quotes(unit.text(path_node)), alias=alias))
    return specs


def parse_source(source: str | bytes, path: str = "<memory>") -> SourceUnit:
    """Parse one Go file.

    Raises:
        SourceParseError: the grammar is unavailable, the text has a syntax
            error, or the package clause is missing.
    """
    parser = _get_parser()
    if parser is None:
        raise SourceParseError(path, "tree-sitter Go grammar is not installed")

    data = source.encode("utf-8") if isinstance(source, str) else source
    tree = parser.parse(data)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root) or root
        row, column = bad.start_point[0], bad.start_point[1]
        raise SourceParseError(path, f"syntax error at line {row + 1}, column {column + 1}")

    unit = SourceUnit(path=path, source=data, tree=tree, package="")
    unit.package = _package_name(unit)
    if not unit.package:
        raise SourceParseError(path, "missing package clause")
    unit.imports = _imports(unit)
    return unit


def parse_file(path: str | Path) -> SourceUnit:
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise SourceParseError(str(file_path), str(exc)) from exc
    unit = parse_source(data, str(file_path))
    logger.debug("parsed %s (package %s, %d imports)", file_path, unit.package, len(unit.imports))
    return unit


def parse_files(paths: Iterable[str | Path]) -> list[SourceUnit]:
    return [parse_file(path) for path in paths]


def _base_type_name(node: Any | None, unit: SourceUnit) -> str | None:
    while node is not None and node.type in {"pointer_type", "parenthesized_type"}:
        inner = [child for child in node.named_children if child.type != "comment"]
        node = inner[0] if inner else None
    if node is None:
        return None
    if node.type == "generic_type":
        node = node.child_by_field_name("type")
        if node is None:
            return None
    if node.type == "type_identifier":
        return unit.text(node)
    return None


def receiver_type_name(node: Any, unit: SourceUnit) -> str | None:
    """Base type name of a method receiver: ``(s *Server[T])`` gives ``Server``."""
    receiver = node.child_by_field_name("receiver")
    if receiver is None:
        return None
    for param in receiver.named_children:
        if param.type == "parameter_declaration":
            return _base_type_name(param.child_by_field_name("type"), unit)
    return None


def declared_names(node: Any, unit: SourceUnit) -> list[str]:
    """Identifiers declared by one top-level declaration node, in source order."""
    node_type = node.type
    if node_type in {"function_declaration", "method_declaration"}:
        name_node = node.child_by_field_name("name")
        return [unit.text(name_node)] if name_node is not None else []
    if node_type == "type_declaration":
        specs = _iter_specs(node, {"type_spec", "type_alias"})
        return [
            unit.text(spec.child_by_field_name("name"))
            for spec in specs
            if spec.child_by_field_name("name") is not None
        ]
    if node_type in {"var_declaration", "const_declaration"}:
        names: list[str] = []
        for spec in _iter_specs(node, {"var_spec", "const_spec"}):
            names.extend(field_names(spec, "name", unit))
        return names
    return []


def top_level_declarations(unit: SourceUnit) -> list[Declaration]:
    """Every function, method, type, var and const declared at file scope."""
    decls: list[Declaration] = []
    for child in unit.root.named_children:
        kind = NODE_KINDS.get(child.type)
        if kind is None:
            continue
        names = declared_names(child, unit)
        receiver = None
        if child.type == "method_declaration":
            receiver = receiver_type_name(child, unit) or ""
            names = [f"{receiver}.{name}" if receiver else name for name in names]
        decls.append(Declaration(kind=kind, names=tuple(names), node=child, unit=unit, receiver=receiver))
    return decls
