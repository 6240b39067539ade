"""
Error taxonomy — every exception the library raises on its own behalf.

Parser and filesystem errors from the standard library and from
cryptography are NOT wrapped: a bad integer still raises the ValueError
that int() produced, a missing file still raises FileNotFoundError.
The classes below cover only the situations the library itself detects.

    OptionError
    ├── NoneValueError          value extraction on an absent option
    │   └── PathUnsetError      filesystem call with no path configured
    ├── ValueRangeError         sized number does not fit its width
    ├── FilePermissionError     permission gate refused an operation
    └── PemDecodeError          malformed PEM armor or DER payload
        └── KeyParseError       key block could not be decoded

ValueRangeError and PemDecodeError also derive from ValueError, and
FilePermissionError from PermissionError, so callers that only know the
builtin hierarchy still catch them.
"""

from __future__ import annotations


class OptionError(Exception):
    """Base class for errors raised by optionkit."""


class NoneValueError(OptionError):
    """Raised when the value of an absent option is requested."""

    def __init__(self, message: str = "Attempted to get Option with None value") -> None:
        super().__init__(message)


class PathUnsetError(NoneValueError):
    """
    Raised by filesystem operations on a path option with no path set.

    Distinct from FileNotFoundError: this means "nothing configured",
    not "configured but missing".
    """

    def __init__(self, operation: str, kind: str = "File") -> None:
        super().__init__(f"{operation} failed: {kind} path was not set")
        self.operation = operation
        self.kind = kind


class ValueRangeError(OptionError, ValueError):
    """Raised when a parsed or assigned number overflows its declared width."""


class FilePermissionError(OptionError, PermissionError):
    """
    Raised when a credential file fails its permission policy.

    The message always names the expected octal mode.
    """

    def __init__(self, operation: str, path: str, expected_mode: int) -> None:
        super().__init__(
            f"{operation} failed for file {path}: expected file permissions {expected_mode:o}"
        )
        self.operation = operation
        self.path = path
        self.expected_mode = expected_mode


class PemDecodeError(OptionError, ValueError):
    """Raised when PEM armor or the DER inside a block cannot be decoded."""


class KeyParseError(PemDecodeError):
    """Raised when a key block is malformed, mislabeled, or of an unsupported algorithm."""
