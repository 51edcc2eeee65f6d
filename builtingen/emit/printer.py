"""Serialises the call IR to Go source text."""

from __future__ import annotations

from typing import List, Union

from .ir import (
    Assign,
    Attr,
    BinaryOp,
    Block,
    Call,
    Composite,
    Expr,
    FuncLit,
    Ident,
    If,
    KeyValue,
    Lit,
    RawString,
    Stmt,
    Verbatim,
)

# surrogateescape maps undecodable bytes 0x80-0xff onto these code points.
_INVALID_BYTE_LOW = 0xDC80
_INVALID_BYTE_HIGH = 0xDCFF

_SIMPLE_ESCAPES = {
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
    "\\": "\\\\",
    '"': '\\"',
}


def go_quote(value: Union[str, bytes]) -> str:
    """Quote a string the way Go's strconv.Quote does.

    Bytes that are not valid UTF-8 are written as \\xNN escapes.
    """
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="surrogateescape")
    parts = ['"']
    for char in value:
        escaped = _SIMPLE_ESCAPES.get(char)
        if _INVALID_BYTE_LOW <= ord(char) <= _INVALID_BYTE_HIGH:
            parts.append(f"\\x{ord(char) - 0xDC00:02x}")
        elif escaped is not None:
            parts.append(escaped)
        elif char.isprintable():
            parts.append(char)
        else:
            code = ord(char)
            if code < 0x20 or code == 0x7F:
                parts.append(f"\\x{code:02x}")
            elif code < 0x10000:
                parts.append(f"\\u{code:04x}")
            else:
                parts.append(f"\\U{code:08x}")
    parts.append('"')
    return "".join(parts)


class GoPrinter:
    """Prints IR nodes with tab indentation; gofmt tidies alignment afterwards."""

    indent = "\t"

    def expr(self, node: Expr, depth: int = 0) -> str:
        if isinstance(node, Ident):
            return node.name
        if isinstance(node, Lit):
            return self._literal(node)
        if isinstance(node, RawString):
            if "`" in node.text:
                raise ValueError("raw string literal cannot contain a backquote")
            return f"`{node.text}`"
        if isinstance(node, Attr):
            return f"{self.expr(node.value, depth)}.{node.name}"
        if isinstance(node, Call):
            args = ", ".join(self.expr(arg, depth) for arg in node.args)
            return f"{self.expr(node.func, depth)}({args})"
        if isinstance(node, BinaryOp):
            return f"{self.expr(node.left, depth)} {node.op} {self.expr(node.right, depth)}"
        if isinstance(node, Composite):
            return self._composite(node, depth)
        if isinstance(node, FuncLit):
            return self._func_lit(node, depth)
        if isinstance(node, Verbatim):
            return node.text
        raise TypeError(f"unsupported expression node {type(node).__name__}")

    def stmt(self, node: Stmt, depth: int = 0) -> List[str]:
        pad = self.indent * depth
        if isinstance(node, Assign):
            targets = ", ".join(self.expr(target, depth) for target in node.targets)
            values = ", ".join(self.expr(value, depth) for value in node.values)
            op = ":=" if node.define else "="
            return [f"{pad}{targets} {op} {values}"]
        if isinstance(node, If):
            lines = [f"{pad}if {self.expr(node.cond, depth)} {{"]
            lines.extend(self._stmts(node.body, depth + 1))
            lines.append(f"{pad}}}")
            return lines
        if isinstance(node, Block):
            return [f"{pad}{{", *self._stmts(node, depth + 1), f"{pad}}}"]
        raise TypeError(f"unsupported statement node {type(node).__name__}")

    def _stmts(self, block: Block, depth: int) -> List[str]:
        lines: List[str] = []
        for stmt in block.stmts:
            lines.extend(self.stmt(stmt, depth))
        return lines

    @staticmethod
    def _literal(node: Lit) -> str:
        value = node.value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        return go_quote(value)

    def _func_lit(self, node: FuncLit, depth: int) -> str:
        header = f"func({node.params})"
        if node.results:
            header += f" {node.results}"
        if isinstance(node.body, Verbatim):
            return f"{header} {node.body.text}"
        body = self._stmts(node.body, depth + 1)
        closing = self.indent * depth + "}"
        return "\n".join([f"{header} {{", *body, closing])

    def _composite(self, node: Composite, depth: int) -> str:
        prefix = node.type or ""
        if not node.elements:
            return f"{prefix}{{}}"
        pad = self.indent * (depth + 1)
        lines = [f"{prefix}{{"]
        for element in node.elements:
            if isinstance(element, KeyValue):
                key = self.expr(element.key, depth + 1)
                value = self.expr(element.value, depth + 1)
                lines.append(f"{pad}{key}: {value},")
            else:
                lines.append(f"{pad}{self.expr(element, depth + 1)},")
        lines.append(self.indent * depth + "}")
        return "\n".join(lines)


__all__ = ["GoPrinter", "go_quote"]
