"""
Typed wrappers for the primitive value types.

Each class is a Loadable bound to one codec; all behaviour (text and JSON
codecs, range checks, None[<Type>] rendering) comes from the codec.

    >>> level = Int8.none()
    >>> level.set("128")
    Traceback (most recent call last):
    ...
    optionkit.errors.ValueRangeError: value 128 out of range for Int8 [-128, 127]
"""

from __future__ import annotations

from optionkit import codecs
from optionkit.loadable import Loadable


class Bool(Loadable[bool]):
    codec = codecs.BOOL

    def true(self) -> bool:
        """True iff the value is Some(True)."""
        return self.match(True)


class Int(Loadable[int]):
    codec = codecs.INT


class Int8(Loadable[int]):
    codec = codecs.INT8


class Int16(Loadable[int]):
    codec = codecs.INT16


class Int32(Loadable[int]):
    codec = codecs.INT32


class Int64(Loadable[int]):
    codec = codecs.INT64


class Uint(Loadable[int]):
    codec = codecs.UINT


class Uint8(Loadable[int]):
    codec = codecs.UINT8


class Uint16(Loadable[int]):
    codec = codecs.UINT16


class Uint32(Loadable[int]):
    codec = codecs.UINT32


class Uint64(Loadable[int]):
    codec = codecs.UINT64


class Float32(Loadable[float]):
    """Single-precision float: stored values are rounded to float32."""

    codec = codecs.FLOAT32


class Float64(Loadable[float]):
    codec = codecs.FLOAT64


class Str(Loadable[str]):
    codec = codecs.STR


class Byte(Loadable[int]):
    """One byte, rendered as two hex digits."""

    codec = codecs.BYTE
