"""Package symbol table: every top-level declaration, split by kind.

Built once per extraction in a single pass over the parsed declarations and
read-only afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .declarations import DeclKind, Declaration
from .errors import DuplicateDeclarationError

logger = logging.getLogger(__name__)

ON_DUPLICATE_REPLACE = "replace"
ON_DUPLICATE_WARN = "warn"
ON_DUPLICATE_ERROR = "error"
DUPLICATE_POLICIES = (ON_DUPLICATE_REPLACE, ON_DUPLICATE_WARN, ON_DUPLICATE_ERROR)

# Lookup order when a name is resolved against the whole table.
KIND_ORDER = (DeclKind.FUNCTION, DeclKind.TYPE, DeclKind.VARIABLE, DeclKind.CONSTANT)

# Names Go allows to be declared more than once per package.
_REPEATABLE = {"init"}


def _location(decl: Declaration) -> str:
    return f"{decl.file}:{decl.line}"


@dataclass
class SymbolTable:
    """Four ``name -> Declaration`` tables, one per declaration kind."""

    functions: dict[str, Declaration] = field(default_factory=dict)
    types: dict[str, Declaration] = field(default_factory=dict)
    variables: dict[str, Declaration] = field(default_factory=dict)
    constants: dict[str, Declaration] = field(default_factory=dict)

    def table_for(self, kind: DeclKind) -> dict[str, Declaration]:
        if kind is DeclKind.FUNCTION:
            return self.functions
        if kind is DeclKind.TYPE:
            return self.types
        if kind is DeclKind.VARIABLE:
            return self.variables
        return self.constants

    def register(
        self,
        kind: DeclKind,
        name: str,
        decl: Declaration,
        on_duplicate: str = ON_DUPLICATE_WARN,
    ) -> None:
        """Register ``decl`` under ``name``; a same-kind redeclaration replaces the entry.

        Raises:
            DuplicateDeclarationError: on a redeclaration when ``on_duplicate``
                is ``"error"``.
        """
        if not name or name == "_":
            return
        table = self.table_for(kind)
        existing = table.get(name)
        if existing is not None and existing is not decl and name not in _REPEATABLE:
            if on_duplicate == ON_DUPLICATE_ERROR:
                raise DuplicateDeclarationError(kind.value, name, _location(existing), _location(decl))
            if on_duplicate == ON_DUPLICATE_WARN:
                logger.warning(
                    "%s '%s' redeclared at %s; replacing %s",
                    kind.value,
                    name,
                    _location(decl),
                    _location(existing),
                )
        table[name] = decl

    def lookup(self, name: str) -> list[Declaration]:
        """All declarations registered under ``name``, functions first."""
        matches = []
        for kind in KIND_ORDER:
            decl = self.table_for(kind).get(name)
            if decl is not None:
                matches.append(decl)
        return matches

    def find_function(self, name: str) -> Declaration | None:
        return self.functions.get(name)

    def __len__(self) -> int:
        return sum(len(self.table_for(kind)) for kind in KIND_ORDER)

    def to_dict(self) -> dict:
        return {
            kind.value: {name: decl.to_dict() for name, decl in self.table_for(kind).items()}
            for kind in KIND_ORDER
        }


def build_symbol_table(
    declarations: Iterable[Declaration],
    on_duplicate: str = ON_DUPLICATE_WARN,
) -> SymbolTable:
    """Index declarations by kind and name. Input declarations are not modified."""
    if on_duplicate not in DUPLICATE_POLICIES:
        raise ValueError(f"Unknown duplicate policy: {on_duplicate}")
    table = SymbolTable()
    for decl in declarations:
        for name in decl.names:
            table.register(decl.kind, name, decl, on_duplicate=on_duplicate)
    logger.debug(
        "indexed %d functions, %d types, %d vars, %d consts",
        len(table.functions),
        len(table.types),
        len(table.variables),
        len(table.constants),
    )
    return table
