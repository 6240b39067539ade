"""
Option — a container that distinguishes "no value" from "a value".

An Option[T] is either Some(value) or None. Unlike a bare ``T | None`` it
can hold a legitimate ``None``-like zero value (0, "", False) and still say
whether anything was configured at all.

    ┌────────────┐  set / replace  ┌────────────┐
    │    None    │────────────────→│  Some(v)   │
    │            │←────────────────│            │
    └────────────┘  clear / unwrap └────────────┘

Design choices:
  - Options are mutable value objects: set/clear/transform change the
    instance in place, clone() gives an independent copy.
  - Equality across option-like values goes through the right-hand side's
    match(), so specialized wrappers (paths, floats) keep their own
    comparison rules.
  - Absent options store None internally; nothing reads it before checking
    presence.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Generic, Protocol, TypeVar, runtime_checkable

from optionkit.errors import NoneValueError

T = TypeVar("T")
U = TypeVar("U")

# Text tokens accepted as "no value" by every text codec. Case-sensitive.
NONE_TOKENS = frozenset({"None", "none", "null", "nil"})
NONE_TEXT = "None"


@runtime_checkable
class OptionLike(Protocol[T]):
    """
    Minimal read-only contract shared by Option and every typed wrapper.

    Anything implementing these four methods can take part in equal().
    """

    def is_some(self) -> bool: ...

    def is_none(self) -> bool: ...

    def get(self) -> T: ...

    def match(self, candidate: T) -> bool: ...


def _nested_json(value: Any) -> Any:
    """json.dumps hook for values that know their own JSON form."""
    marshal = getattr(value, "marshal_json", None)
    if marshal is None:
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
    return json.loads(marshal())


def equal(left: OptionLike[T], right: OptionLike[T]) -> bool:
    """
    Compare two option-like values.

    Both absent → True. Both present → ``right.match(left.get())``.
    Otherwise False. The concrete types do not need to agree.
    """
    if left.is_none() and right.is_none():
        return True
    if left.is_some() and right.is_some():
        return right.match(left.get())
    return False


class Option(Generic[T]):
    """
    Generic optional value.

    Usage:
        >>> port = Option.some(8080)
        >>> port.get()
        8080
        >>> Option.none().get_or(80)
        80
    """

    __slots__ = ("_inner", "_some")

    def __init__(self) -> None:
        self._inner: T | None = None
        self._some = False

    # ──────────────────────── Static Factories ────────────────────────

    @staticmethod
    def some(value: T) -> Option[T]:
        """Create an Option holding ``value``."""
        opt: Option[T] = Option()
        opt.set(value)
        return opt

    @staticmethod
    def none() -> Option[T]:
        """Create an absent Option."""
        return Option()

    @staticmethod
    def from_nullable(value: T | None) -> Option[T]:
        """
        Map ``None`` to an absent Option and anything else to Some(value).

        Useful at API boundaries that still speak ``T | None``.
        """
        if value is None:
            return Option.none()
        return Option.some(value)

    # ──────────────────────── Introspection ────────────────────────

    def is_some(self) -> bool:
        return self._some

    def is_none(self) -> bool:
        return not self._some

    def is_some_and(self, predicate: Callable[[T], bool]) -> bool:
        """True iff the Option is Some(x) and predicate(x) is true."""
        return self._some and predicate(self._inner)  # type: ignore[arg-type]

    # ──────────────────────── Extraction ────────────────────────

    def get(self) -> T:
        """Return the wrapped value. Raises NoneValueError when absent."""
        if not self._some:
            raise NoneValueError()
        return self._inner  # type: ignore[return-value]

    def get_or(self, default: T) -> T:
        return self._inner if self._some else default  # type: ignore[return-value]

    def get_or_else(self, fallback: Callable[[], T]) -> T:
        return self._inner if self._some else fallback()  # type: ignore[return-value]

    def get_or_insert(self, value: T) -> T:
        """Return the wrapped value, storing ``value`` first if absent."""
        self.default(value)
        return self.get()

    def unwrap(self) -> T:
        """Like get(), but the Option is absent afterwards either way."""
        try:
            return self.get()
        finally:
            self.clear()

    def unwrap_or(self, default: T) -> T:
        value = self.get_or(default)
        self.clear()
        return value

    def unwrap_or_else(self, fallback: Callable[[], T]) -> T:
        value = self.get_or_else(fallback)
        self.clear()
        return value

    # ──────────────────────── Mutation ────────────────────────

    def clear(self) -> None:
        self._inner = None
        self._some = False

    def set(self, value: T) -> None:
        self._inner = value
        self._some = True

    def replace(self, value: T) -> Option[T]:
        """Store ``value`` and return the previous state as a new Option."""
        previous = self.clone()
        self.set(value)
        return previous

    def default(self, value: T) -> bool:
        """Store ``value`` only if absent. Returns True when it was stored."""
        if self._some:
            return False
        self.set(value)
        return True

    def clear_if_match(self, candidate: T) -> None:
        """
        Clear the Option when it holds ``candidate``.

        Handy for "magic" values, e.g. a flag parser that reports 0 for
        an omitted integer flag.
        """
        if self.match(candidate):
            self.clear()

    def clone(self) -> Option[T]:
        copy: Option[T] = Option()
        copy._inner = self._inner
        copy._some = self._some
        return copy

    # ──────────────────────── Comparison ────────────────────────

    def match(self, candidate: T) -> bool:
        """True iff the Option is Some(x) and x == candidate."""
        return self._some and self._inner == candidate

    def eq(self, other: OptionLike[T]) -> bool:
        return equal(self, other)

    def and_(self, other: OptionLike[T]) -> OptionLike[T]:
        """Absent if self is absent, otherwise ``other``. Conceptually self && other."""
        return self if self.is_none() else other

    def or_(self, other: OptionLike[T]) -> OptionLike[T]:
        """self if present, otherwise ``other``. Conceptually self || other."""
        return self if self.is_some() else other

    # ──────────────────────── Transformations ────────────────────────

    def transform(self, fn: Callable[[T], T]) -> None:
        """
        Replace Some(x) with Some(fn(x)) in place. None stays None.

        If ``fn`` raises, the Option is left untouched and the error propagates.
        """
        if self._some:
            self.set(fn(self._inner))  # type: ignore[arg-type]

    def transform_or(self, fn: Callable[[T], T], backup: T) -> None:
        """Like transform(), but an absent Option is first filled with ``backup``."""
        self.default(backup)
        self.transform(fn)

    def binary_transform(self, second: T, fn: Callable[[T, T], T]) -> None:
        """Replace Some(x) with Some(fn(x, second)). None stays None."""
        if self._some:
            self.set(fn(self._inner, second))  # type: ignore[arg-type]

    def map(self, mapper: Callable[[T], U]) -> Option[U]:
        """Return a new Option holding mapper(x), or an absent Option."""
        if self._some:
            return Option.some(mapper(self._inner))  # type: ignore[arg-type]
        return Option.none()

    # ──────────────────────── JSON Codec ────────────────────────

    def marshal_json(self) -> str:
        """
        Absent → ``null``; present → json.dumps of the wrapped value.

        Option-like values nested inside encode through their own
        marshal_json(), so ``Some(Int(3))`` gives ``3``.
        """
        if not self._some:
            return "null"
        return json.dumps(self._inner, default=_nested_json)

    def unmarshal_json(self, data: str | bytes) -> None:
        """
        Load from JSON text. ``null`` clears the Option.

        Decoding errors from json.loads are raised unchanged.
        """
        value: Any = json.loads(data)
        if value is None:
            self.clear()
        else:
            self.set(value)

    # ──────────────────────── Dunder methods ────────────────────────

    def __bool__(self) -> bool:
        """Truthiness is presence: ``if port: ...`` runs only for Some."""
        return self._some

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptionLike):
            return NotImplemented
        return equal(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._some:
            return f"Some({self._inner!r})"
        return "None"
