"""
Time and Duration wrappers.

Time parsing tries a caller-supplied, ordered list of strptime formats.
The first format that parses wins; when every format fails, the error
from the LAST format is raised. The list is an explicit constructor
argument (defaulting to DEFAULT_TIME_FORMATS), never process-wide state.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Sequence

from optionkit.codecs import Codec
from optionkit.durations import format_duration, parse_duration
from optionkit.loadable import Loadable
from optionkit.option import Option

# Marshal form: RFC 3339 with microseconds ("2024-05-01T12:00:00.000000+05:30").
# %:z writes the colon; strptime's %z reads both forms back.
DEFAULT_DATA_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%:z"
# Display form for str(): "2024-05-01 12:00:00".
DEFAULT_STRING_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_TIME_FORMATS: tuple[str, ...] = (
    "%Y-%m-%dT%H:%M:%S.%f%z",  # RFC 3339 with fraction
    "%Y-%m-%dT%H:%M:%S%z",  # RFC 3339
    "%Y-%m-%dT%H:%M:%S.%f",  # naive ISO 8601 with fraction
    "%Y-%m-%dT%H:%M:%S",  # naive ISO 8601
    "%Y-%m-%d %H:%M:%S",  # date time
    "%a %b %d %H:%M:%S %Z %Y",  # Unix date
    "%a %b %d %H:%M:%S %z %Y",  # Ruby date
    "%d %b %y %H:%M %Z",  # RFC 822
    "%d %b %y %H:%M %z",  # RFC 822 with numeric zone
)


def parse_time(text: str, formats: Sequence[str]) -> datetime:
    """Return the first successful strptime over ``formats``, else raise the last error."""
    if not formats:
        raise ValueError("no time formats configured")
    error: ValueError | None = None
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError as exc:
            error = exc
    assert error is not None
    raise error


def _coerce_datetime(value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise TypeError(f"Time expects datetime, got {type(value).__name__}")
    return value


def _time_codec(formats: tuple[str, ...], string_format: str, data_format: str) -> Codec[datetime]:
    def from_json(value: Any) -> datetime:
        if not isinstance(value, str):
            raise TypeError(f"Time expects a JSON string, got {type(value).__name__}")
        return parse_time(value, formats)

    return Codec(
        name="Time",
        parse=lambda text: parse_time(text, formats),
        render=lambda value: value.strftime(data_format),
        display=lambda value: value.strftime(string_format),
        coerce=_coerce_datetime,
        to_json=lambda value: value.strftime(data_format),
        from_json=from_json,
    )


class Time(Loadable[datetime]):
    """
    Optional datetime.

        >>> t = Time.none(formats=("%d/%m/%Y",))
        >>> t.set("01/05/2024")
        >>> t.get()
        datetime.datetime(2024, 5, 1, 0, 0)
    """

    def __init__(
        self,
        option: Option[datetime] | None = None,
        *,
        formats: Sequence[str] = DEFAULT_TIME_FORMATS,
        string_format: str = DEFAULT_STRING_FORMAT,
        data_format: str = DEFAULT_DATA_FORMAT,
    ) -> None:
        self.formats: tuple[str, ...] = tuple(formats) or DEFAULT_TIME_FORMATS
        self.string_format = string_format or DEFAULT_STRING_FORMAT
        self.data_format = data_format or DEFAULT_DATA_FORMAT
        super().__init__(
            option,
            codec=_time_codec(self.formats, self.string_format, self.data_format),
        )

    def with_formats(self, *formats: str) -> Time:
        """Return a copy that parses with ``formats``. No formats → unchanged copy."""
        return Time(
            self.as_option(),
            formats=formats or self.formats,
            string_format=self.string_format,
            data_format=self.data_format,
        )


def _coerce_timedelta(value: Any) -> timedelta:
    if not isinstance(value, timedelta):
        raise TypeError(f"Duration expects timedelta, got {type(value).__name__}")
    return value


def _duration_from_json(value: Any) -> timedelta:
    if not isinstance(value, str):
        raise TypeError(f"Duration expects a JSON string, got {type(value).__name__}")
    return parse_duration(value)


DURATION: Codec[timedelta] = Codec(
    name="Duration",
    parse=parse_duration,
    render=format_duration,
    coerce=_coerce_timedelta,
    to_json=format_duration,
    from_json=_duration_from_json,
)


class Duration(Loadable[timedelta]):
    """Optional timedelta using Go duration text ("300ms", "1h30m")."""

    codec = DURATION
