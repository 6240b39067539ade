"""
Loadable — an Option plus a text/JSON codec, the building block for config values.

Every typed wrapper (Int8, Bool, Time, File, Cert, ...) is a Loadable with a
different Codec. The wrapper HOLDS an Option rather than extending it, and
exposes only the operations that make sense for a loadable value:

    Loadable[T]
      ├── _option : Option[T]      presence + value
      └── _codec  : Codec[T]       parse / render / coerce / JSON mapping

Text codec:
  - absent  → "None"
  - present → codec.render(value)
  - "None", "none", "null", "nil" are read back as absent (case-sensitive)
  - any other text goes through codec.parse; its exception is raised as-is

Subclasses normally only set the ``codec`` class attribute. Wrappers whose
codec depends on per-instance settings (Time) pass ``codec=`` to __init__.
"""

from __future__ import annotations

import json
from typing import Any, Callable, ClassVar, Generic, Self, TypeVar

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from optionkit.codecs import Codec
from optionkit.errors import NoneValueError
from optionkit.option import NONE_TEXT, NONE_TOKENS, Option, OptionLike, equal

T = TypeVar("T")


class Loadable(Generic[T]):
    """
    Generic optional value with a text and JSON codec.

        >>> port = Uint16.none()
        >>> port.set("8080")
        >>> port.get(), port.marshal_text()
        (8080, '8080')
    """

    codec: ClassVar[Codec[Any]]

    def __init__(self, option: Option[T] | None = None, *, codec: Codec[T] | None = None) -> None:
        self._codec: Codec[T] = codec if codec is not None else type(self).codec
        self._option: Option[T] = Option.none()
        if option is not None and option.is_some():
            self.replace(option.get())

    # ──────────────────────── Factories ────────────────────────

    @classmethod
    def some(cls, value: T, **kwargs: Any) -> Self:
        """Create a present wrapper. The value is checked by the codec."""
        return cls(Option.some(value), **kwargs)

    @classmethod
    def none(cls, **kwargs: Any) -> Self:
        """Create an absent wrapper."""
        return cls(None, **kwargs)

    @classmethod
    def from_nullable(cls, value: T | None, **kwargs: Any) -> Self:
        return cls(Option.from_nullable(value), **kwargs)

    def clone(self) -> Self:
        copy = object.__new__(type(self))
        copy.__dict__.update(self.__dict__)
        copy._option = self._option.clone()
        return copy

    # ──────────────────────── Option delegation ────────────────────────

    def type(self) -> str:
        """Stable type tag used in diagnostics and in None[<Type>]."""
        return self._codec.name

    def is_some(self) -> bool:
        return self._option.is_some()

    def is_none(self) -> bool:
        return self._option.is_none()

    def is_some_and(self, predicate: Callable[[T], bool]) -> bool:
        return self._option.is_some_and(predicate)

    def get(self) -> T:
        return self._option.get()

    def get_or(self, default: T) -> T:
        return self._option.get_or(default)

    def get_or_else(self, fallback: Callable[[], T]) -> T:
        return self._option.get_or_else(fallback)

    def unwrap(self) -> T:
        return self._option.unwrap()

    def clear(self) -> None:
        self._option.clear()

    def replace(self, value: T) -> Option[T]:
        """Store ``value`` after codec checks and return the previous state."""
        return self._option.replace(self._codec.coerce(value))

    def default(self, value: T) -> bool:
        if self.is_some():
            return False
        self.replace(value)
        return True

    def match(self, candidate: T) -> bool:
        """
        Compare against a bare value using the codec's normal form.

        A candidate the codec rejects (wrong type, out of range) never matches.
        """
        if self.is_none():
            return False
        try:
            normalized = self._codec.coerce(candidate)
        except (TypeError, ValueError):
            return False
        return self._option.match(normalized)

    def eq(self, other: OptionLike[T]) -> bool:
        return equal(self, other)

    def transform(self, fn: Callable[[T], T]) -> None:
        """Apply ``fn`` to a present value. The result is codec-checked."""
        if self.is_some():
            self.replace(fn(self.get()))

    def as_option(self) -> Option[T]:
        """Return an independent plain Option with the same state."""
        return self._option.clone()

    # ──────────────────────── Text codec ────────────────────────

    def set(self, text: str | bytes) -> None:
        """Flag-style setter: same as unmarshal_text."""
        self.unmarshal_text(text)

    def string(self) -> str:
        if self.is_none():
            return f"None[{self.type()}]"
        try:
            return self._codec.show(self.get())
        except (NoneValueError, TypeError, ValueError):
            return f"Error[{self.type()}]"

    def marshal_text(self) -> str:
        if self.is_none():
            return NONE_TEXT
        return self._codec.render(self.get())

    def unmarshal_text(self, text: str | bytes) -> None:
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        if text in NONE_TOKENS:
            self.clear()
            return
        self.replace(self._codec.parse(text))

    # ──────────────────────── JSON codec ────────────────────────

    def to_jsonable(self) -> Any:
        """JSON-compatible form: None when absent, codec.to_json(value) otherwise."""
        if self.is_none():
            return None
        return self._codec.to_json(self.get())

    def marshal_json(self) -> str:
        return json.dumps(self.to_jsonable())

    def unmarshal_json(self, data: str | bytes) -> None:
        """``null`` clears; anything else is decoded then codec-checked."""
        value = json.loads(data)
        if value is None:
            self.clear()
            return
        self.replace(self._codec.decode_json(value))

    # ──────────────────────── Pydantic integration ────────────────────────

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Let wrappers be used as pydantic / pydantic-settings field types.

        Strings go through set(), other values through replace(); the
        field serializes to its JSON form.
        """
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.to_jsonable(),
            ),
        )

    @classmethod
    def _validate(cls, value: Any) -> Self:
        if isinstance(value, cls):
            return value
        wrapper = cls.none()
        try:
            if isinstance(value, Loadable):
                if value.is_some():
                    wrapper.replace(value.get())
            elif isinstance(value, (str, bytes)):
                wrapper.set(value)
            elif value is not None:
                wrapper.replace(value)
        except TypeError as exc:
            # pydantic only reports ValueError/AssertionError as validation errors
            raise ValueError(str(exc)) from exc
        return wrapper

    # ──────────────────────── Dunder methods ────────────────────────

    def __str__(self) -> str:
        return self.string()

    def __bool__(self) -> bool:
        return self.is_some()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptionLike):
            return NotImplemented
        return equal(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._option!r})"
