"""
goextract: standalone extraction of Go functions.

Given a Go package directory and a function name, goextract finds every
package-level function, type, variable and constant the function depends on
and writes them, together with the function, into one Go file.

Layers:
- go_parser: tree-sitter Go parsing into declarations
- symbol_index: per-kind symbol tables
- bindings / idents: locally bound names and identifier occurrences
- resolver: breadth-first dependency closure
- renderer: source output
"""

try:
    from importlib.metadata import version
    __version__ = version("goextract")
except Exception:
    __version__ = "0.1.0"

from .api import (
    ExtractionResult,
    GoPackage,
    extract_from_package,
    extract_function,
    list_symbols,
    load_package,
    write_extraction,
)
from .config import ExtractConfig, load_config
from .declarations import DeclKind, Declaration
from .errors import is_error
from .go_parser import ImportSpec, SourceUnit, parse_file, parse_source, top_level_declarations
from .resolver import closure_edges, direct_dependencies, find_closure, resolve_closure
from .symbol_index import SymbolTable, build_symbol_table

__all__ = [
    "DeclKind",
    "Declaration",
    "ExtractConfig",
    "ExtractionResult",
    "GoPackage",
    "ImportSpec",
    "SourceUnit",
    "SymbolTable",
    "build_symbol_table",
    "closure_edges",
    "direct_dependencies",
    "extract_from_package",
    "extract_function",
    "find_closure",
    "is_error",
    "list_symbols",
    "load_config",
    "load_package",
    "parse_file",
    "parse_source",
    "resolve_closure",
    "top_level_declarations",
    "write_extraction",
]
