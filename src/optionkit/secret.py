"""
Secret — a string option that never prints its value.

Human-facing renderings (str, repr, format, structlog) always show the
redaction marker. Machine-facing encodings (marshal_text, marshal_json,
pydantic serialization) carry the real value, so a Secret can still be
written to a config file or sent over the wire.
"""

from __future__ import annotations

from optionkit.codecs import STR, Codec
from optionkit.loadable import Loadable
from optionkit.primitives import Str

REDACTED = "***REDACTED***"

SECRET: Codec[str] = Codec(
    name="Secret",
    parse=STR.parse,
    render=STR.render,
    coerce=STR.coerce,
)


class Secret(Loadable[str]):
    codec = SECRET

    @classmethod
    def from_str(cls, source: Str) -> Secret:
        """
        Move the value out of ``source`` into a new Secret.

        ``source`` is cleared so the plain option cannot leak the value later.
        """
        secret = cls.none()
        if source.is_some():
            secret.replace(source.get())
            source.clear()
        return secret

    def string(self) -> str:
        return REDACTED

    def __repr__(self) -> str:
        return f"Secret({REDACTED})"

    def __format__(self, format_spec: str) -> str:
        return REDACTED

    def __structlog__(self) -> str:
        """Hook used by structlog's JSON renderer."""
        return REDACTED
