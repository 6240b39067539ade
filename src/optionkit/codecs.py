"""
Codecs — the parse/render strategy a typed wrapper applies to its value.

A Codec bundles everything that differs between, say, an 8-bit integer
and a boolean option: how text is parsed, how values are rendered, how
assigned values are checked, and how the value maps onto JSON. One
generic wrapper (loadable.Loadable) plus one Codec per primitive replaces
a hand-written class per integer width.

Numeric text is checked against an ASCII pattern first, as Go's strconv
does; a failed check raises ValueError("... invalid syntax"). Other parser
errors are raised as-is.
"""

from __future__ import annotations

import math
import re
import struct
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Generic, TypeVar

from optionkit.errors import ValueRangeError

T = TypeVar("T")


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True, slots=True)
class Codec(Generic[T]):
    """
    Immutable parse/render strategy for one value type.

    name       stable type tag reported by Loadable.type()
    parse      text → value (raises the parser's own error)
    render     value → machine text (marshal_text)
    display    value → human text (str()); defaults to render
    coerce     check/normalise a value before it is stored
    to_json    value → JSON-compatible object
    from_json  decoded JSON object → value
    """

    name: str
    parse: Callable[[str], T]
    render: Callable[[T], str]
    display: Callable[[T], str] | None = None
    coerce: Callable[[Any], T] = _identity
    to_json: Callable[[T], Any] = _identity
    from_json: Callable[[Any], T] | None = None

    def show(self, value: T) -> str:
        return (self.display or self.render)(value)

    def decode_json(self, value: Any) -> T:
        if self.from_json is None:
            return self.coerce(value)
        return self.from_json(value)


# ─────────────────────── Booleans ───────────────────────

_TRUE_TEXT = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_TEXT = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(text: str) -> bool:
    """Accept the same spellings as Go's strconv.ParseBool."""
    if text in _TRUE_TEXT:
        return True
    if text in _FALSE_TEXT:
        return False
    raise ValueError(f"parsing {text!r}: invalid syntax")


def _coerce_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected bool, got {type(value).__name__}")
    return value


BOOL: Codec[bool] = Codec(
    name="Bool",
    parse=parse_bool,
    render=lambda value: "true" if value else "false",
    coerce=_coerce_bool,
)


# ─────────────────────── Integers ───────────────────────

# ASCII digits with an optional sign. int() alone also takes "1_000", " 42 "
# and non-ASCII digits.
_DECIMAL_INT = re.compile(r"[+-]?[0-9]+")


def _integer_codec(name: str, bits: int, signed: bool) -> Codec[int]:
    """Build a codec for a fixed-width integer that rejects overflow."""
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1

    def coerce(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"{name} expects int, got {type(value).__name__}")
        if not low <= value <= high:
            raise ValueRangeError(f"value {value} out of range for {name} [{low}, {high}]")
        return value

    def parse(text: str) -> int:
        if not _DECIMAL_INT.fullmatch(text):
            raise ValueError(f"parsing {text!r}: invalid syntax")
        return coerce(int(text, 10))

    return Codec(name=name, parse=parse, render=str, coerce=coerce)


INT = _integer_codec("Int", 64, signed=True)
INT8 = _integer_codec("Int8", 8, signed=True)
INT16 = _integer_codec("Int16", 16, signed=True)
INT32 = _integer_codec("Int32", 32, signed=True)
INT64 = _integer_codec("Int64", 64, signed=True)
UINT = _integer_codec("Uint", 64, signed=False)
UINT8 = _integer_codec("Uint8", 8, signed=False)
UINT16 = _integer_codec("Uint16", 16, signed=False)
UINT32 = _integer_codec("Uint32", 32, signed=False)
UINT64 = _integer_codec("Uint64", 64, signed=False)


# ─────────────────────── Floats ───────────────────────


def _round32(value: float) -> float:
    # struct returns ±inf on overflow in current CPython; older builds raise.
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def to_float32(value: float) -> float:
    """
    Round a Python float to the nearest single-precision value.

    A finite value that rounds to infinity is a range error.
    """
    result = _round32(value)
    if math.isinf(result) and not math.isinf(value):
        raise ValueRangeError(f"value {value!r} out of range for Float32")
    return result


def _shortest32(value: float) -> str:
    """Fewest significant digits that read back as the same float32."""
    for precision in range(9):
        text = f"{value:.{precision}e}"
        if _round32(float(text)) == value:
            return text
    return repr(value)


# strconv.FormatFloat(v, 'g', -1, bits) switches to exponent form at 1e+06.
_EXPONENT_PRECISION = 6


def format_float(value: float, bits: int = 64) -> str:
    """
    Shortest round-trip text in Go's 'g' layout.

        >>> format_float(100.0), format_float(1e6), format_float(0.0001)
        ('100', '1e+06', '0.0001')
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    shortest = _shortest32(value) if bits == 32 else repr(value)
    sign, digits, exponent = Decimal(shortest).normalize().as_tuple()
    mantissa = "".join(str(d) for d in digits)
    point = len(mantissa) + exponent
    exp10 = point - 1
    prefix = "-" if sign else ""

    if exp10 < -4 or exp10 >= _EXPONENT_PRECISION:
        body = mantissa[0]
        if len(mantissa) > 1:
            body += "." + mantissa[1:]
        return f"{prefix}{body}e{'-' if exp10 < 0 else '+'}{abs(exp10):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{mantissa}"
    if point >= len(mantissa):
        return f"{prefix}{mantissa}{'0' * (point - len(mantissa))}"
    return f"{prefix}{mantissa[:point]}.{mantissa[point:]}"


# Decimal notation plus the inf/nan spellings; no underscores or whitespace.
_DECIMAL_FLOAT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?|inf(?:inity)?)|nan", re.IGNORECASE
)


def parse_float(text: str) -> float:
    """float() plus overflow detection: "1e400" is a range error, not +Inf."""
    if not _DECIMAL_FLOAT.fullmatch(text):
        raise ValueError(f"parsing {text!r}: invalid syntax")
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        raise ValueRangeError(f"parsing {text!r}: value out of range")
    return value


def _coerce_float64(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Float64 expects float, got {type(value).__name__}")
    return float(value)


def _coerce_float32(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Float32 expects float, got {type(value).__name__}")
    return to_float32(float(value))


FLOAT32: Codec[float] = Codec(
    name="Float32",
    parse=lambda text: _coerce_float32(parse_float(text)),
    render=lambda value: format_float(value, bits=32),
    coerce=_coerce_float32,
)

FLOAT64: Codec[float] = Codec(
    name="Float64",
    parse=parse_float,
    render=format_float,
    coerce=_coerce_float64,
)


# ─────────────────────── Strings and bytes ───────────────────────


def _coerce_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected str, got {type(value).__name__}")
    return value


STR: Codec[str] = Codec(name="Str", parse=_identity, render=_identity, coerce=_coerce_str)


def _coerce_byte(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Byte expects int, got {type(value).__name__}")
    if not 0 <= value <= 0xFF:
        raise ValueRangeError(f"value {value} does not fit into a byte")
    return value


def parse_byte(text: str) -> int:
    """
    A single character is taken literally; anything longer must be a hex
    string of exactly one byte ("ff", "0a").
    """
    if len(text) == 1:
        return _coerce_byte(ord(text))
    decoded = bytes.fromhex(text)
    if len(decoded) != 1:
        raise ValueError(f"could not unmarshal text into byte: {decoded.hex()} does not fit into byte")
    return decoded[0]


BYTE: Codec[int] = Codec(
    name="Byte",
    parse=parse_byte,
    render=lambda value: f"{value:02x}",
    coerce=_coerce_byte,
)
