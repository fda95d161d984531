"""Render extracted declarations back to Go source.

Declarations are sliced out of the original file bytes, so formatting and
doc comments survive exactly as written.
"""

from __future__ import annotations

from typing import Any, Iterable

from .bindings import local_bindings
from .declarations import Declaration
from .go_parser import ImportSpec, iter_nodes

REQUESTED_HEADER = "// --- Requested Function ---"
DEPENDENCIES_HEADER = "// --- Top-level Dependencies Found ---"
NO_DEPENDENCIES = "// No additional top-level dependencies found."


def _is_trailing_comment(comment: Any) -> bool:
    before = comment.prev_named_sibling
    return before is not None and before.end_point[0] == comment.start_point[0]


def leading_comments(decl: Declaration) -> list[Any]:
    """Comment nodes directly above ``decl`` with no blank line in between."""
    comments: list[Any] = []
    expected_row = decl.node.start_point[0]
    prev = decl.node.prev_named_sibling
    while prev is not None and prev.type == "comment" and prev.end_point[0] >= expected_row - 1:
        if _is_trailing_comment(prev):
            break
        comments.append(prev)
        expected_row = prev.start_point[0]
        prev = prev.prev_named_sibling
    comments.reverse()
    return comments


def render_declaration(decl: Declaration, include_doc: bool = True) -> str:
    start = decl.node.start_byte
    if include_doc:
        comments = leading_comments(decl)
        if comments:
            start = comments[0].start_byte
    return decl.unit.source[start:decl.node.end_byte].decode("utf-8", errors="replace")


def used_imports(decls: Iterable[Declaration]) -> list[ImportSpec]:
    """Import specs the given declarations refer to, sorted by path.

    Dot imports of a contributing file are always kept since their use
    cannot be seen syntactically. Blank imports are dropped.
    """
    found: dict[tuple[str | None, str], ImportSpec] = {}
    for decl in decls:
        unit = decl.unit
        for spec in unit.imports:
            if spec.is_dot:
                found[(spec.alias, spec.path)] = spec
        shadowed = local_bindings(decl)
        for node in iter_nodes(decl.node):
            qualifier = None
            if node.type == "selector_expression":
                operand = node.child_by_field_name("operand")
                if operand is not None and operand.type == "identifier":
                    qualifier = unit.text(operand)
            elif node.type == "qualified_type":
                package = node.child_by_field_name("package")
                if package is not None:
                    qualifier = unit.text(package)
            if not qualifier or qualifier in shadowed:
                continue
            spec = unit.import_for(qualifier)
            if spec is not None:
                found[(spec.alias, spec.path)] = spec
    return sorted(found.values(), key=lambda spec: (spec.path, spec.alias or ""))


def render_imports(specs: list[ImportSpec]) -> str:
    if not specs:
        return ""
    if len(specs) == 1:
        return f"import {specs[0].render()}"
    body = "\n".join(f"\t{spec.render()}" for spec in specs)
    return f"import (\n{body}\n)"


def render_extraction(
    package: str,
    target: Declaration,
    closure: list[Declaration],
    include_imports: bool = True,
) -> str:
    """Standalone Go file: the requested function followed by its closure."""
    parts = [f"package {package}", ""]
    if include_imports:
        imports = render_imports(used_imports([target, *closure]))
        if imports:
            parts.extend([imports, ""])

    parts.append(REQUESTED_HEADER)
    parts.append(render_declaration(target))
    parts.append("")

    if closure:
        parts.append(DEPENDENCIES_HEADER)
        for decl in closure:
            parts.append(render_declaration(decl))
            parts.append("")
    else:
        parts.append(NO_DEPENDENCIES)
        parts.append("")
    return "\n".join(parts)
