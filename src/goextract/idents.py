"""Identifier occurrences inside a Go function body."""

from __future__ import annotations

from dataclasses import dataclass

from .declarations import Declaration
from .go_parser import iter_nodes

_IDENT_TYPES = {
    "identifier",
    "type_identifier",
    "field_identifier",
    "package_identifier",
    "label_name",
}

# Occurrences that can never name a package-level declaration.
_ALWAYS_RESOLVED = {"field_identifier", "package_identifier", "label_name"}


@dataclass(frozen=True)
class Ident:
    """One identifier occurrence.

    ``resolved`` is True when the parse already ties the occurrence to
    something other than a package-level declaration: a selector field, a
    label, or a member qualified by an imported package.
    """

    name: str
    resolved: bool
    line: int
    column: int


def collect_identifiers(decl: Declaration) -> list[Ident]:
    """Every identifier in the body of ``decl``, in source order, duplicates kept.

    The signature is not scanned. Bodiless functions and non-function
    declarations yield an empty list.
    """
    body = decl.body
    if body is None:
        return []

    unit = decl.unit
    import_names = unit.import_names
    qualified: set[int] = set()
    idents: list[Ident] = []

    for node in iter_nodes(body):
        node_type = node.type
        if node_type == "selector_expression":
            operand = node.child_by_field_name("operand")
            if operand is not None and operand.type == "identifier" and unit.text(operand) in import_names:
                qualified.add(operand.start_byte)
        elif node_type == "qualified_type":
            name = node.child_by_field_name("name")
            if name is not None:
                qualified.add(name.start_byte)
        elif node_type in _IDENT_TYPES:
            idents.append(
                Ident(
                    name=unit.text(node),
                    resolved=node_type in _ALWAYS_RESOLVED or node.start_byte in qualified,
                    line=node.start_point[0] + 1,
                    column=node.start_point[1] + 1,
                )
            )
    return idents
