"""Top-level Go declarations as produced by the parser."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .go_parser import SourceUnit


class DeclKind(str, enum.Enum):
    FUNCTION = "func"
    TYPE = "type"
    VARIABLE = "var"
    CONSTANT = "const"


# tree-sitter-go node type -> declaration kind
NODE_KINDS: dict[str, DeclKind] = {
    "function_declaration": DeclKind.FUNCTION,
    "method_declaration": DeclKind.FUNCTION,
    "type_declaration": DeclKind.TYPE,
    "var_declaration": DeclKind.VARIABLE,
    "const_declaration": DeclKind.CONSTANT,
}


@dataclass(eq=False)
class Declaration:
    """One top-level declaration node.

    Equality and hashing are by object identity: a grouped ``var ( ... )``
    block is a single Declaration registered under several names, and two
    declarations sharing a name are still distinct entities.
    """

    kind: DeclKind
    names: tuple[str, ...]
    node: Any
    unit: "SourceUnit"
    receiver: str | None = None

    @property
    def name(self) -> str:
        return self.names[0] if self.names else ""

    @property
    def is_function(self) -> bool:
        return self.kind is DeclKind.FUNCTION

    @property
    def is_method(self) -> bool:
        return self.receiver is not None

    @property
    def file(self) -> str:
        return self.unit.path

    @property
    def line(self) -> int:
        return self.node.start_point[0] + 1

    @property
    def body(self) -> Any | None:
        """Function body block, or None for bodiless functions and non-functions."""
        if not self.is_function:
            return None
        return self.node.child_by_field_name("body")

    @property
    def text(self) -> str:
        return self.unit.text(self.node)

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "names": list(self.names),
            "file": self.file,
            "line": self.line,
        }

    def __repr__(self) -> str:
        return f"Declaration({self.kind.value} {self.name} @ {self.file}:{self.line})"
