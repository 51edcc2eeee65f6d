"""Small structural model of Go type expressions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from tree_sitter import Node

from .parser import node_text


@dataclass(frozen=True)
class Named:
    name: str


@dataclass(frozen=True)
class Qualified:
    package: str
    name: str


@dataclass(frozen=True)
class Pointer:
    elem: "TypeExpr"


@dataclass(frozen=True)
class Slice:
    elem: "TypeExpr"


@dataclass(frozen=True)
class Map:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(frozen=True)
class Opaque:
    """Any other shape (arrays, funcs, channels, interfaces, generics)."""

    text: str


TypeExpr = Union[Named, Qualified, Pointer, Slice, Map, Opaque]


def type_from_node(node: Node, source: bytes) -> TypeExpr:
    """Build a :data:`TypeExpr` from a tree-sitter type node."""
    kind = node.type
    if kind == "type_identifier":
        return Named(node_text(node, source))
    if kind == "qualified_type":
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        if package is not None and name is not None:
            return Qualified(node_text(package, source), node_text(name, source))
    if kind == "pointer_type" and node.named_child_count:
        return Pointer(type_from_node(node.named_children[0], source))
    if kind == "parenthesized_type" and node.named_child_count:
        return type_from_node(node.named_children[0], source)
    if kind == "slice_type":
        elem = node.child_by_field_name("element")
        if elem is not None:
            return Slice(type_from_node(elem, source))
    if kind == "map_type":
        key = node.child_by_field_name("key")
        value = node.child_by_field_name("value")
        if key is not None and value is not None:
            return Map(type_from_node(key, source), type_from_node(value, source))
    return Opaque(node_text(node, source))


def format_type(expr: TypeExpr) -> str:
    """Render a type back to Go syntax, for diagnostics."""
    if isinstance(expr, Named):
        return expr.name
    if isinstance(expr, Qualified):
        return f"{expr.package}.{expr.name}"
    if isinstance(expr, Pointer):
        return f"*{format_type(expr.elem)}"
    if isinstance(expr, Slice):
        return f"[]{format_type(expr.elem)}"
    if isinstance(expr, Map):
        return f"map[{format_type(expr.key)}]{format_type(expr.value)}"
    return expr.text


__all__ = [
    "Map",
    "Named",
    "Opaque",
    "Pointer",
    "Qualified",
    "Slice",
    "TypeExpr",
    "format_type",
    "type_from_node",
]
