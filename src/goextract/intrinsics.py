"""Go predeclared functions that never count as package dependencies."""

from __future__ import annotations

GO_BUILTINS: frozenset[str] = frozenset(
    {
        "len",
        "cap",
        "append",
        "make",
        "new",
        "delete",
        "complex",
        "real",
        "imag",
        "panic",
        "recover",
        "close",
        "print",
        "println",
    }
)


def is_builtin(name: str) -> bool:
    return name in GO_BUILTINS
