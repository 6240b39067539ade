"""
optionkit — nullable configuration values with text and JSON codecs.

Option[T] tells "nothing configured" apart from a zero value. Typed
wrappers (Int8, Bool, Time, Duration, ...) add a text codec for flags and
environment variables, a JSON codec, and pydantic integration. File and
the PEM credential kinds (Cert, PubKey, PrivateKey) add filesystem access
guarded by a permission policy; Secret keeps values out of logs.
"""

from optionkit.credentials import (
    Cert,
    File,
    KeyAlgorithm,
    PemBlock,
    PrivateKey,
    PubKey,
    SecretFile,
    TlsIdentity,
)
from optionkit.errors import (
    FilePermissionError,
    KeyParseError,
    NoneValueError,
    OptionError,
    PathUnsetError,
    PemDecodeError,
    ValueRangeError,
)
from optionkit.loadable import Loadable
from optionkit.option import Option, OptionLike, equal
from optionkit.primitives import (
    Bool,
    Byte,
    Float32,
    Float64,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    Str,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
)
from optionkit.secret import Secret
from optionkit.temporal import Duration, Time

__version__ = "0.1.0"

__all__ = [
    "Bool",
    "Byte",
    "Cert",
    "Duration",
    "File",
    "FilePermissionError",
    "Float32",
    "Float64",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "KeyAlgorithm",
    "KeyParseError",
    "Loadable",
    "NoneValueError",
    "Option",
    "OptionError",
    "OptionLike",
    "PathUnsetError",
    "PemBlock",
    "PemDecodeError",
    "PrivateKey",
    "PubKey",
    "Secret",
    "SecretFile",
    "Str",
    "Time",
    "TlsIdentity",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "ValueRangeError",
    "equal",
]
