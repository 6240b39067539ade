"""
Human duration strings in the Go layout: "300ms", "1h2m3.5s", "-1.5h".

Stored as datetime.timedelta, so resolution is one microsecond; sub-µs
components are truncated when parsed.
"""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from optionkit.errors import ValueRangeError

_NANOS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_MICROSECOND = timedelta(microseconds=1)
_US_PER_MS = 1_000
_US_PER_S = 1_000_000
_US_PER_MIN = 60 * _US_PER_S
_US_PER_HOUR = 60 * _US_PER_MIN


def parse_duration(text: str) -> timedelta:
    """
    Parse a signed sequence of decimal numbers with unit suffixes.

    Raises ValueError for malformed text and ValueRangeError when the
    result does not fit a timedelta.
    """
    rest = text
    negative = False
    if rest[:1] in ("+", "-"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    if not rest:
        raise ValueError(f"time: invalid duration {text!r}")

    nanos = Decimal(0)
    pos = 0
    while pos < len(rest):
        component = _COMPONENT.match(rest, pos)
        if component is None:
            raise ValueError(f"time: invalid duration {text!r}")
        try:
            nanos += Decimal(component.group(1)) * _NANOS[component.group(2)]
        except InvalidOperation as exc:
            raise ValueError(f"time: invalid duration {text!r}") from exc
        pos = component.end()

    micros = int(nanos) // 1_000
    try:
        return timedelta(microseconds=-micros if negative else micros)
    except OverflowError as exc:
        raise ValueRangeError(f"time: duration {text!r} out of range") from exc


def _decimal(amount: int, unit: int) -> str:
    """Render amount/unit with trailing fractional zeros trimmed."""
    whole, frac = divmod(amount, unit)
    if not frac:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{frac:0{width}d}".rstrip("0")


def format_duration(value: timedelta) -> str:
    """
    Render like Go's Duration.String.

        >>> format_duration(timedelta(milliseconds=300))
        '300ms'
        >>> format_duration(timedelta(hours=1))
        '1h0m0s'
    """
    micros = value // _MICROSECOND
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < _US_PER_S:
        if micros < _US_PER_MS:
            return f"{sign}{micros}µs"
        return f"{sign}{_decimal(micros, _US_PER_MS)}ms"

    hours, rem = divmod(micros, _US_PER_HOUR)
    minutes, rem = divmod(rem, _US_PER_MIN)
    text = f"{_decimal(rem, _US_PER_S)}s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return sign + text
