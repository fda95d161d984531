"""Names a Go function binds locally.

The result is a single flat set per function: a name bound anywhere in the
body (nested blocks and function literals included) is treated as local
everywhere in that function. This can hide a package-level dependency whose
name is reused by an inner local.
"""

from __future__ import annotations

from typing import Any

from .declarations import Declaration
from .go_parser import SourceUnit, field_names, iter_nodes


def _identifiers(expr_list: Any | None, unit: SourceUnit) -> list[str]:
    if expr_list is None:
        return []
    if expr_list.type == "identifier":
        return [unit.text(expr_list)]
    return [unit.text(child) for child in expr_list.named_children if child.type == "identifier"]


def _param_names(param_list: Any | None, unit: SourceUnit) -> list[str]:
    if param_list is None or param_list.type != "parameter_list":
        return []
    names: list[str] = []
    for param in param_list.named_children:
        if param.type in {"parameter_declaration", "variadic_parameter_declaration"}:
            names.extend(field_names(param, "name", unit))
    return names


def _type_param_names(type_params: Any | None, unit: SourceUnit) -> list[str]:
    if type_params is None:
        return []
    names: list[str] = []
    for param in type_params.named_children:
        if param.type == "type_parameter_declaration":
            names.extend(field_names(param, "name", unit))
    return names


def _receiver_type_params(receiver: Any | None, unit: SourceUnit) -> list[str]:
    # func (l *List[T]) ... binds T for the method body.
    if receiver is None:
        return []
    names: list[str] = []
    for node in iter_nodes(receiver):
        if node.type == "type_arguments":
            names.extend(
                unit.text(arg) for arg in iter_nodes(node) if arg.type == "type_identifier"
            )
    return names


def _defines(node: Any) -> bool:
    return any(child.type == ":=" for child in node.children)


def signature_bindings(decl: Declaration) -> set[str]:
    """Receiver, type parameter, parameter and named result names."""
    node = decl.node
    unit = decl.unit
    bound: set[str] = set()
    bound.update(_param_names(node.child_by_field_name("receiver"), unit))
    bound.update(_receiver_type_params(node.child_by_field_name("receiver"), unit))
    bound.update(_type_param_names(node.child_by_field_name("type_parameters"), unit))
    bound.update(_param_names(node.child_by_field_name("parameters"), unit))
    bound.update(_param_names(node.child_by_field_name("result"), unit))
    return bound


def body_bindings(body: Any | None, unit: SourceUnit) -> set[str]:
    """Names introduced anywhere inside a function body."""
    bound: set[str] = set()
    if body is None:
        return bound

    for node in iter_nodes(body):
        node_type = node.type
        if node_type == "short_var_declaration":
            bound.update(_identifiers(node.child_by_field_name("left"), unit))
        elif node_type in {"var_spec", "const_spec"}:
            bound.update(field_names(node, "name", unit))
        elif node_type in {"type_spec", "type_alias"}:
            name = node.child_by_field_name("name")
            if name is not None:
                bound.add(unit.text(name))
        elif node_type in {"range_clause", "receive_statement"}:
            if _defines(node):
                bound.update(_identifiers(node.child_by_field_name("left"), unit))
        elif node_type == "type_switch_statement":
            bound.update(_identifiers(node.child_by_field_name("alias"), unit))
        elif node_type == "func_literal":
            bound.update(_param_names(node.child_by_field_name("parameters"), unit))
            bound.update(_param_names(node.child_by_field_name("result"), unit))
    return bound


def local_bindings(decl: Declaration) -> set[str]:
    """Every name ``decl`` binds locally; empty for non-function declarations."""
    if not decl.is_function:
        return set()
    bound = signature_bindings(decl)
    bound |= body_bindings(decl.body, decl.unit)
    bound.discard("_")
    return bound
