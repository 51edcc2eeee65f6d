"""Folds Go constant expressions into normalized literal values.

Only literals, parentheses, unary and binary operators are accepted; values
follow the rules for untyped Go constants: floats and integer quotients are
exact rationals, strings are byte sequences.
"""

from __future__ import annotations

import math
import operator
import re
from fractions import Fraction
from typing import Callable, Dict, List, Optional, Tuple, Union

from tree_sitter import Node

from ..emit.printer import go_quote
from ..errors import UnsupportedExpressionError
from ..models import ConstValue, FileContext
from .parser import node_text

GoConst = Union[bool, int, Fraction, bytes, complex]

# Floats are rounded to a mantissa at least this wide before printing.
_MIN_FLOAT_PRECISION = 64

_ESCAPE_RE = re.compile(
    r"\\(?:([abfnrtv\\'\"])|([0-7]{3})|x([0-9a-fA-F]{2})|u([0-9a-fA-F]{4})|U([0-9a-fA-F]{8}))"
)
_HEX_FLOAT_RE = re.compile(r"0[xX]([0-9a-fA-F]*)(?:\.([0-9a-fA-F]*))?[pP]([+-]?\d+)")
_SIMPLE_UNESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_COMPARISONS: Dict[str, Callable[[object, object], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def evaluate(node: Node, source: bytes, ctx: FileContext) -> GoConst:
    """Fold ``node``; raise UnsupportedExpressionError for other shapes."""
    kind = node.type
    try:
        if kind == "parenthesized_expression" and node.named_child_count == 1:
            return evaluate(node.named_children[0], source, ctx)
        if kind == "unary_expression":
            op = node.child_by_field_name("operator")
            operand = node.child_by_field_name("operand")
            if op is not None and operand is not None:
                return _unary(node_text(op, source), evaluate(operand, source, ctx))
        if kind == "binary_expression":
            left = node.child_by_field_name("left")
            op = node.child_by_field_name("operator")
            right = node.child_by_field_name("right")
            if left is not None and op is not None and right is not None:
                return _binary(
                    node_text(op, source),
                    evaluate(left, source, ctx),
                    evaluate(right, source, ctx),
                )
        literal = _literal(node, source)
    except (TypeError, ValueError, ZeroDivisionError) as exc:
        raise UnsupportedExpressionError(
            f"{ctx.label}: cannot fold {node_text(node, source)!r}: {exc}"
        ) from exc
    if literal is None:
        raise UnsupportedExpressionError(
            f"{ctx.label}: unsupported expression type {kind}: {node_text(node, source)}"
        )
    return literal


def normalize(value: GoConst) -> Optional[ConstValue]:
    """Classify a folded value; None for kinds the registry cannot hold."""
    if isinstance(value, bool):
        return ConstValue("bool", "true" if value else "false")
    if isinstance(value, int):
        return ConstValue("int", str(value))
    if isinstance(value, bytes):
        return ConstValue("string", go_quote(value))
    if isinstance(value, Fraction):
        return ConstValue("float", format_float(value))
    return None


def kind_name(value: GoConst) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, Fraction):
        return "float"
    if isinstance(value, complex):
        return "complex"
    return "string"


def format_float(value: Fraction) -> str:
    """Shortest text of ``value`` in Go's %g layout.

    The value is first rounded to a binary mantissa as wide as the larger of
    its numerator and denominator (at least 64 bits); the digits printed are the
    fewest that round back to that mantissa.
    """
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    precision = max(
        magnitude.numerator.bit_length(),
        magnitude.denominator.bit_length(),
        _MIN_FLOAT_PRECISION,
    )
    mantissa, exponent = _round_binary(magnitude, precision)
    digits, point = _shortest_digits(mantissa, exponent)
    return sign + _layout_g(digits, point)


def _round_binary(value: Fraction, precision: int) -> Tuple[int, int]:
    """Round a positive rational to ``mantissa * 2**exponent`` (ties to even)."""
    top = value.numerator.bit_length() - value.denominator.bit_length()
    if _pow2(top) > value:
        top -= 1
    exponent = top - precision + 1
    mantissa = round(value / _pow2(exponent))
    if mantissa.bit_length() > precision:
        mantissa >>= 1
        exponent += 1
    return mantissa, exponent


def _shortest_digits(mantissa: int, exponent: int) -> Tuple[str, int]:
    """Fewest decimal digits inside the rounding interval of the mantissa.

    Returns the significant digits and the position of the decimal point
    relative to the first digit.
    """
    exact = mantissa * _pow2(exponent)
    half_ulp = _pow2(exponent - 1)
    lower, upper = exact - half_ulp, exact + half_ulp
    inclusive = mantissa % 2 == 0

    top = _decimal_exponent(exact)
    count = 1
    while True:
        scale = top - count + 1
        unit = _pow10(scale)
        target = exact / unit
        below = math.floor(target)
        inside = [
            quotient
            for quotient in (below, below + 1)
            if lower < quotient * unit < upper
            or (inclusive and quotient * unit in (lower, upper))
        ]
        if inside:
            quotient = _nearest(inside, target)
            text = str(quotient)
            return text.rstrip("0"), len(text) + scale
        count += 1


def _nearest(quotients: List[int], target: Fraction) -> int:
    if len(quotients) == 1:
        return quotients[0]
    low, high = quotients
    if target - low != high - target:
        return low if target - low < high - target else high
    return low if low % 2 == 0 else high


def _decimal_exponent(value: Fraction) -> int:
    """Largest ``n`` with ``10**n <= value``."""
    top = len(str(value.numerator)) - len(str(value.denominator))
    while _pow10(top) > value:
        top -= 1
    while _pow10(top + 1) <= value:
        top += 1
    return top


def _layout_g(digits: str, point: int) -> str:
    exp = point - 1
    if exp < -4 or exp >= 6:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        exp_sign = "+" if exp >= 0 else "-"
        return f"{mantissa}e{exp_sign}{abs(exp):02d}"
    if point <= 0:
        return f"0.{'0' * -point}{digits}"
    if point >= len(digits):
        return f"{digits}{'0' * (point - len(digits))}"
    return f"{digits[:point]}.{digits[point:]}"


def _pow2(exponent: int) -> Fraction:
    return Fraction(2) ** exponent


def _pow10(exponent: int) -> Fraction:
    return Fraction(10) ** exponent


def _literal(node: Node, source: bytes) -> Optional[GoConst]:
    kind = node.type
    text = node_text(node, source)
    if kind == "true":
        return True
    if kind == "false":
        return False
    if kind == "int_literal":
        return _parse_int(text)
    if kind == "float_literal":
        return _parse_float(text)
    if kind == "imaginary_literal":
        body = text[:-1]
        magnitude = _parse_float(body) if _looks_float(body) else _parse_int(body)
        return complex(0, float(magnitude))
    if kind == "rune_literal":
        return _rune_value(text[1:-1])
    if kind == "interpreted_string_literal":
        return _unescape(text[1:-1])
    if kind == "raw_string_literal":
        return text[1:-1].replace("\r", "").encode("utf-8")
    return None


def _parse_int(text: str) -> int:
    cleaned = text.replace("_", "").lower()
    if cleaned.startswith(("0x", "0o", "0b")):
        return int(cleaned, 0)
    if len(cleaned) > 1 and cleaned.startswith("0"):
        return int(cleaned, 8)
    return int(cleaned, 10)


def _looks_float(text: str) -> bool:
    lowered = text.lower()
    if lowered.startswith("0x"):
        return "p" in lowered or "." in lowered
    return "." in lowered or "e" in lowered


def _parse_float(text: str) -> Fraction:
    cleaned = text.replace("_", "")
    match = _HEX_FLOAT_RE.fullmatch(cleaned)
    if match is not None:
        whole, fraction, exponent = match.groups()
        fraction = fraction or ""
        mantissa = int(whole + fraction or "0", 16)
        return mantissa * _pow2(int(exponent) - 4 * len(fraction))
    return Fraction(cleaned)


def _unescape(body: str) -> bytes:
    """Decode the escapes of an interpreted string; the result may be invalid UTF-8."""
    out = bytearray()
    position = 0
    for match in _ESCAPE_RE.finditer(body):
        out.extend(body[position : match.start()].encode("utf-8"))
        simple, octal, hex_byte, short, long = match.groups()
        if simple is not None:
            out.extend(_SIMPLE_UNESCAPES[simple].encode("utf-8"))
        elif octal is not None:
            out.append(int(octal, 8))
        elif hex_byte is not None:
            out.append(int(hex_byte, 16))
        else:
            out.extend(chr(int(short or long, 16)).encode("utf-8"))
        position = match.end()
    out.extend(body[position:].encode("utf-8"))
    return bytes(out)


def _rune_value(body: str) -> int:
    match = _ESCAPE_RE.fullmatch(body)
    if match is None:
        if len(body) != 1:
            raise ValueError(f"invalid rune literal '{body}'")
        return ord(body)
    simple, octal, hex_byte, short, long = match.groups()
    if simple is not None:
        return ord(_SIMPLE_UNESCAPES[simple])
    if octal is not None:
        return int(octal, 8)
    return int(hex_byte or short or long, 16)


def _unary(op: str, value: GoConst) -> GoConst:
    if op == "!":
        if not isinstance(value, bool):
            raise TypeError("operator ! requires a boolean")
        return not value
    if isinstance(value, (bool, bytes)):
        raise TypeError(f"operator {op} not defined on {kind_name(value)}")
    if op == "+":
        return value
    if op == "-":
        return -value
    if op == "^" and isinstance(value, int):
        return ~value
    raise TypeError(f"operator {op} not defined on {kind_name(value)}")


def _binary(op: str, left: GoConst, right: GoConst) -> GoConst:
    if op in ("&&", "||"):
        if not (isinstance(left, bool) and isinstance(right, bool)):
            raise TypeError(f"operator {op} requires booleans")
        return (left and right) if op == "&&" else (left or right)

    if op in ("<<", ">>"):
        shifted = _as_integer(left)
        count = _as_integer(right)
        if count < 0:
            raise ValueError("negative shift count")
        return shifted << count if op == "<<" else shifted >> count

    if isinstance(left, bool) or isinstance(right, bool):
        if op in ("==", "!=") and isinstance(left, bool) and isinstance(right, bool):
            return _COMPARISONS[op](left, right)
        raise TypeError(f"operator {op} not defined on bool")

    if isinstance(left, bytes) or isinstance(right, bytes):
        if not (isinstance(left, bytes) and isinstance(right, bytes)):
            raise TypeError("mismatched string operands")
        if op == "+":
            return left + right
        if op in _COMPARISONS:
            return _COMPARISONS[op](left, right)
        raise TypeError(f"operator {op} not defined on string")

    if op in _COMPARISONS:
        if isinstance(left, complex) or isinstance(right, complex):
            if op not in ("==", "!="):
                raise TypeError(f"operator {op} not defined on complex")
        return _COMPARISONS[op](left, right)

    if isinstance(left, int) and isinstance(right, int):
        return _integer_op(op, left, right)

    if op not in ("+", "-", "*", "/"):
        raise TypeError(f"operator {op} requires integers")
    if isinstance(left, complex) or isinstance(right, complex):
        left_c, right_c = complex(left), complex(right)
        if op == "/":
            return left_c / right_c
        return {"+": operator.add, "-": operator.sub, "*": operator.mul}[op](left_c, right_c)
    left_f, right_f = Fraction(left), Fraction(right)
    if op == "/":
        return left_f / right_f
    return {"+": operator.add, "-": operator.sub, "*": operator.mul}[op](left_f, right_f)


def _integer_op(op: str, left: int, right: int) -> GoConst:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        return Fraction(left, right)
    if op == "%":
        quotient = abs(left) // abs(right)
        if (left < 0) != (right < 0):
            quotient = -quotient
        return left - right * quotient
    if op == "&":
        return left & right
    if op == "|":
        return left | right
    if op == "^":
        return left ^ right
    if op == "&^":
        return left & ~right
    raise TypeError(f"unknown operator {op}")


def _as_integer(value: GoConst) -> int:
    if isinstance(value, bool) or isinstance(value, (bytes, complex)):
        raise TypeError(f"shift of {kind_name(value)} value")
    if isinstance(value, Fraction):
        if value.denominator != 1:
            raise ValueError("shift of non-integer constant")
        return int(value)
    return value


__all__ = ["GoConst", "evaluate", "format_float", "kind_name", "normalize"]
