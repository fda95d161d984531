"""Public entry points: load a Go package, extract a function with its closure.

Failures are returned as structured error dicts (see ``errors``) rather than
raised, so callers can report them uniformly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import ExtractConfig, load_config
from .declarations import Declaration, DeclKind
from .errors import (
    ExtractError,
    error_from_exception,
    is_error,
    make_no_sources_error,
    make_not_found_error,
)
from .go_parser import SourceUnit, parse_files, top_level_declarations
from .renderer import render_extraction
from .resolver import closure_edges
from .symbol_index import SymbolTable, build_symbol_table
from .workspace import iter_go_files

logger = logging.getLogger(__name__)


@dataclass
class GoPackage:
    """Parsed sources and symbol table of one Go package."""

    name: str
    directory: Path
    units: list[SourceUnit]
    declarations: list[Declaration]
    table: SymbolTable

    @property
    def files(self) -> list[str]:
        return [unit.path for unit in self.units]


@dataclass
class ExtractionResult:
    """A requested function and the declarations it transitively needs."""

    package: str
    target: Declaration
    closure: list[Declaration] = field(default_factory=list)
    discovered_from: list[Declaration] = field(default_factory=list)
    files: list[str] = field(default_factory=list)

    @property
    def declarations(self) -> list[Declaration]:
        return [self.target, *self.closure]

    def dependency_names(self) -> list[str]:
        return [decl.name for decl in self.closure]

    def render(self, include_imports: bool = True) -> str:
        return render_extraction(self.package, self.target, self.closure, include_imports)

    def to_dict(self) -> dict:
        dependencies = []
        for decl, parent in zip(self.closure, self.discovered_from):
            entry = decl.to_dict()
            entry["via"] = parent.name
            dependencies.append(entry)
        return {
            "package": self.package,
            "target": self.target.to_dict(),
            "dependencies": dependencies,
            "files": list(self.files),
        }


def _group_by_package(units: list[SourceUnit]) -> dict[str, list[SourceUnit]]:
    groups: dict[str, list[SourceUnit]] = {}
    for unit in units:
        groups.setdefault(unit.package, []).append(unit)
    return groups


def _declares_function(decls: list[Declaration], name: str) -> bool:
    return any(decl.kind is DeclKind.FUNCTION and name in decl.names for decl in decls)


def _select_package(
    groups: dict[str, list[SourceUnit]],
    unit_decls: dict[int, list[Declaration]],
    function_name: str | None,
) -> str:
    names = list(groups)
    if len(names) == 1:
        return names[0]

    chosen = names[0]
    if function_name:
        for name in names:
            decls = [decl for unit in groups[name] for decl in unit_decls[id(unit)]]
            if _declares_function(decls, function_name):
                chosen = name
                break
    logger.warning("Multiple packages found (%s), using '%s'", ", ".join(names), chosen)
    return chosen


def load_package(
    directory: str | Path,
    config: ExtractConfig | None = None,
    package: str | None = None,
    function_name: str | None = None,
) -> GoPackage | dict:
    """Parse the Go files of ``directory`` and index one package.

    When the directory holds several packages, ``package`` picks one by name;
    otherwise the package declaring ``function_name`` wins, falling back to
    the first package in file order.
    """
    root = Path(directory).resolve()
    if not root.is_dir():
        return make_not_found_error("Directory", str(directory))

    cfg = config or load_config(root)
    files = list(
        iter_go_files(root, include_tests=cfg.include_tests, exclude_patterns=cfg.exclude_patterns)
    )
    if not files:
        return make_no_sources_error(str(root))

    try:
        units = parse_files(files)
    except ExtractError as exc:
        return error_from_exception(exc)

    unit_decls = {id(unit): top_level_declarations(unit) for unit in units}
    groups = _group_by_package(units)
    if package is not None:
        if package not in groups:
            return make_not_found_error("Package", package)
        chosen = package
    else:
        chosen = _select_package(groups, unit_decls, function_name)

    chosen_units = groups[chosen]
    declarations = [decl for unit in chosen_units for decl in unit_decls[id(unit)]]
    try:
        table = build_symbol_table(declarations, on_duplicate=cfg.on_duplicate)
    except ExtractError as exc:
        return error_from_exception(exc)

    logger.info(
        "Loaded package %s: %d files, %d declarations", chosen, len(chosen_units), len(declarations)
    )
    return GoPackage(
        name=chosen,
        directory=root,
        units=chosen_units,
        declarations=declarations,
        table=table,
    )


def extract_function(
    directory: str | Path,
    function_name: str,
    config: ExtractConfig | None = None,
    package: str | None = None,
) -> ExtractionResult | dict:
    """Find ``function_name`` in the package at ``directory`` and resolve its closure.

    Returns a not-found error dict, before any traversal, when the package
    declares no such function.
    """
    pkg = load_package(directory, config=config, package=package, function_name=function_name)
    if is_error(pkg):
        return pkg
    return extract_from_package(pkg, function_name)


def extract_from_package(pkg: GoPackage, function_name: str) -> ExtractionResult | dict:
    target = pkg.table.find_function(function_name)
    if target is None:
        return make_not_found_error("Function", function_name)

    edges = closure_edges(target, pkg.table)
    return ExtractionResult(
        package=pkg.name,
        target=target,
        closure=[decl for decl, _ in edges],
        discovered_from=[parent for _, parent in edges],
        files=pkg.files,
    )


def list_symbols(
    directory: str | Path,
    config: ExtractConfig | None = None,
    package: str | None = None,
) -> dict:
    pkg = load_package(directory, config=config, package=package)
    if is_error(pkg):
        return pkg
    return {"package": pkg.name, "files": pkg.files, "symbols": pkg.table.to_dict()}


def write_extraction(
    result: ExtractionResult,
    output: str | Path,
    include_imports: bool = True,
) -> Path:
    """Render ``result`` and write it to ``output``; returns the written path."""
    out_path = Path(output)
    out_path.write_text(result.render(include_imports=include_imports), encoding="utf-8")
    logger.info("Wrote %s", out_path)
    return out_path
