"""Maps Go parameter and result types onto interpreter kinds."""

from __future__ import annotations

from dataclasses import dataclass

from ..models import Kind
from .types import Map, Named, Pointer, Qualified, Slice, TypeExpr


@dataclass(frozen=True)
class KindMapping:
    """A kind plus whether it is fixed at generation time."""

    kind: Kind
    ground: bool = True


# Library and interpreter types, keyed by (package, name). Values name the
# callCtxt accessor used to fetch an argument of that type.
_QUALIFIED_ACCESSORS = {
    ("big", "Int"): "bigInt",
    ("big", "Float"): "bigFloat",
    ("big", "Rat"): "bigRat",
    ("internal", "Decimal"): "decimal",
    ("cue", "Struct"): "structVal",
    ("cue", "Value"): "value",
    ("cue", "List"): "list",
    ("io", "Reader"): "reader",
    ("time", "Time"): "string",
}

_INT_TYPES = frozenset(
    {
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "byte",
        "rune",
    }
)

_NAMED_KINDS = {
    "error": Kind.BOTTOM,
    "bool": Kind.BOOL,
    "string": Kind.STRING,
    "float32": Kind.NUM,
    "float64": Kind.NUM,
}

_ACCESSOR_KINDS = {
    "bigInt": Kind.INT,
    "bigFloat": Kind.NUM,
    "bigRat": Kind.NUM,
    "decimal": Kind.NUM,
    "structVal": Kind.STRUCT,
    "list": Kind.LIST,
    "bytes": Kind.STRING,
    "reader": Kind.STRING,
    "string": Kind.STRING,
    # Resolved manually by the builtin through callCtxt.value.
    "value": Kind.TOP,
}


def accessor_for(expr: TypeExpr) -> str:
    """Name of the callCtxt method that extracts an argument of this Go type."""
    if isinstance(expr, Pointer):
        expr = expr.elem
    if isinstance(expr, Qualified):
        return _QUALIFIED_ACCESSORS.get((expr.package, expr.name), "value")
    if isinstance(expr, Named):
        return expr.name
    if isinstance(expr, Slice):
        elem = expr.elem
        if elem == Named("string"):
            return "strList"
        if elem in (Named("byte"), Named("uint8")):
            return "bytes"
        if elem == Qualified("cue", "Value"):
            return "list"
    return "value"


def map_kind(expr: TypeExpr) -> KindMapping:
    """Return the kind for a Go type. Never fails: unknown shapes are TOP."""
    if isinstance(expr, Pointer):
        expr = expr.elem
    if isinstance(expr, Named):
        if expr.name in _INT_TYPES:
            return KindMapping(Kind.INT)
        if expr.name in _NAMED_KINDS:
            return KindMapping(_NAMED_KINDS[expr.name])
    elif isinstance(expr, Qualified):
        accessor = _QUALIFIED_ACCESSORS.get((expr.package, expr.name))
        if accessor is not None:
            return KindMapping(_ACCESSOR_KINDS[accessor])
    elif isinstance(expr, Slice):
        accessor = accessor_for(expr)
        if accessor == "bytes":
            return KindMapping(Kind.STRING)
        if accessor == "list":
            return KindMapping(Kind.LIST)
        # Element constraints are not checked statically.
        return KindMapping(Kind.LIST, ground=False)
    elif isinstance(expr, Map):
        return KindMapping(Kind.STRUCT, ground=False)
    return KindMapping(Kind.TOP, ground=False)


__all__ = ["KindMapping", "accessor_for", "map_kind"]
