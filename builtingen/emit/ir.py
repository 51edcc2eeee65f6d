"""Structured call-expression IR for the generated Go source.

Registry literals and builtin wrappers are built from these nodes and turned
into text by :class:`builtingen.emit.printer.GoPrinter`. Only the extracted
function bodies travel as :class:`Verbatim` text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Ident:
    name: str


@dataclass(frozen=True)
class Lit:
    """A Go basic literal built from a Python bool, int or str."""

    value: Union[bool, int, str]


@dataclass(frozen=True)
class RawString:
    """A Go raw (backquoted) string literal."""

    text: str


@dataclass(frozen=True)
class Attr:
    """Selector expression ``value.name``."""

    value: "Expr"
    name: str


@dataclass(frozen=True)
class Call:
    func: "Expr"
    args: Tuple["Expr", ...] = ()


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class KeyValue:
    key: "Expr"
    value: "Expr"


@dataclass(frozen=True)
class Composite:
    """Composite literal; ``type`` is None for elided element types."""

    type: Optional[str]
    elements: Tuple[Union["Expr", KeyValue], ...] = ()


@dataclass(frozen=True)
class Verbatim:
    """Source text copied from the scanned file."""

    text: str


@dataclass(frozen=True)
class FuncLit:
    params: str
    results: str
    body: Union["Block", Verbatim]


@dataclass(frozen=True)
class Assign:
    targets: Tuple["Expr", ...]
    values: Tuple["Expr", ...]
    define: bool = False


@dataclass(frozen=True)
class If:
    cond: "Expr"
    body: "Block"


@dataclass(frozen=True)
class Block:
    stmts: Tuple["Stmt", ...] = ()


Expr = Union[Ident, Lit, RawString, Attr, Call, BinaryOp, Composite, FuncLit, Verbatim]
Stmt = Union[Assign, If, Block]


__all__ = [
    "Assign",
    "Attr",
    "BinaryOp",
    "Block",
    "Call",
    "Composite",
    "Expr",
    "FuncLit",
    "Ident",
    "If",
    "KeyValue",
    "Lit",
    "RawString",
    "Stmt",
    "Verbatim",
]
