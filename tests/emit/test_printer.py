from __future__ import annotations

from typing import Union

import pytest

from builtingen.emit.ir import (
    Assign,
    Attr,
    BinaryOp,
    Block,
    Call,
    Composite,
    FuncLit,
    Ident,
    If,
    KeyValue,
    Lit,
    RawString,
    Verbatim,
)
from builtingen.emit.printer import GoPrinter, go_quote


@pytest.mark.parametrize(
    "value, expected",
    [
        ("plain", '"plain"'),
        ('say "hi"\n', '"say \\"hi\\"\\n"'),
        ("tab\there", '"tab\\there"'),
        ("back\\slash", '"back\\\\slash"'),
        ("\x00\x7f", '"\\x00\\x7f"'),
        ("café", '"café"'),
        ("\u200b", '"\\u200b"'),
        (b"\xffa", '"\\xffa"'),
        (b"caf\xc3\xa9\x80", '"caf\u00e9\\x80"'),
    ],
)
def test_go_quote(value: Union[str, bytes], expected: str) -> None:
    assert go_quote(value) == expected


def test_literals() -> None:
    printer = GoPrinter()
    assert printer.expr(Lit(True)) == "true"
    assert printer.expr(Lit(42)) == "42"
    assert printer.expr(Lit("x")) == '"x"'
    assert printer.expr(RawString("a\nb")) == "`a\nb`"


def test_raw_string_rejects_backquote() -> None:
    with pytest.raises(ValueError):
        GoPrinter().expr(RawString("a`b"))


def test_composite_prints_one_element_per_line() -> None:
    node = Composite(
        "map[string]int",
        (KeyValue(Lit("a"), Lit(1)), KeyValue(Lit("b"), BinaryOp("+", Lit(1), Lit(2)))),
    )
    assert GoPrinter().expr(node) == 'map[string]int{\n\t"a": 1,\n\t"b": 1 + 2,\n}'


def test_empty_composite() -> None:
    assert GoPrinter().expr(Composite("[]kind")) == "[]kind{}"


def test_nested_function_literal_is_indented() -> None:
    body = Block(
        (
            Assign((Ident("x"),), (Call(Attr(Ident("c"), "int"), (Lit(0),)),), define=True),
            If(
                Call(Attr(Ident("c"), "do")),
                Block(
                    (
                        Assign(
                            (Attr(Ident("c"), "ret"),),
                            (Call(FuncLit("", "interface{}", Verbatim("{ return x }"))),),
                        ),
                    )
                ),
            ),
        )
    )
    node = Composite(None, (KeyValue(Ident("Func"), FuncLit("c *callCtxt", "", body)),))

    assert GoPrinter().expr(node) == (
        "{\n"
        "\tFunc: func(c *callCtxt) {\n"
        "\t\tx := c.int(0)\n"
        "\t\tif c.do() {\n"
        "\t\t\tc.ret = func() interface{} { return x }()\n"
        "\t\t}\n"
        "\t},\n"
        "}"
    )
