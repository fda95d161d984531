"""Dependency resolution over the package symbol table.

``direct_dependencies`` reports the package-level names one function body
refers to. ``resolve_closure`` expands those breadth-first into every
declaration the function transitively needs. Only functions are expanded:
types, variables and constants join the closure as leaves.
"""

from __future__ import annotations

import logging

from .bindings import local_bindings
from .declarations import Declaration
from .idents import collect_identifiers
from .intrinsics import is_builtin
from .symbol_index import SymbolTable

logger = logging.getLogger(__name__)


def direct_dependencies(decl: Declaration) -> list[str]:
    """Names of package-level declarations referenced by ``decl``.

    Skips blank and empty names, Go builtins, names the function binds
    locally, and occurrences the parse already resolved (selector fields,
    labels, package-qualified members). Order follows the body; duplicates
    are kept.
    """
    if not decl.is_function:
        return []

    bound = local_bindings(decl)
    names: list[str] = []
    for ident in collect_identifiers(decl):
        name = ident.name
        if not name or name == "_" or is_builtin(name) or name in bound:
            continue
        if ident.resolved:
            continue
        names.append(name)
    return names


def closure_edges(start: Declaration, table: SymbolTable) -> list[tuple[Declaration, Declaration]]:
    """Breadth-first closure of ``start`` as ``(declaration, discovered_from)`` pairs.

    ``start`` itself is never part of the result, even when it refers to
    itself. Each declaration appears once, in discovery order.
    """
    visited: set[Declaration] = {start}
    found: list[tuple[Declaration, Declaration]] = []
    queue = [start]

    while queue:
        current = queue.pop(0)
        for name in direct_dependencies(current):
            for dep in table.lookup(name):
                if dep in visited:
                    continue
                visited.add(dep)
                found.append((dep, current))
                if dep.is_function:
                    queue.append(dep)

    logger.debug("closure of %s: %d declarations", start.name, len(found))
    return found


def resolve_closure(start: Declaration, table: SymbolTable) -> list[Declaration]:
    return [decl for decl, _ in closure_edges(start, table)]


def find_closure(table: SymbolTable, function_name: str) -> list[Declaration] | None:
    """Closure of the named function, or None when no such function is declared."""
    start = table.find_function(function_name)
    if start is None:
        return None
    return resolve_closure(start, table)
