"""
File — a path option with filesystem proxies.

Every filesystem method checks presence first and raises PathUnsetError
when no path is configured, so callers can tell "nothing configured"
apart from FileNotFoundError ("configured, but missing"). Filesystem
errors themselves propagate unchanged.

The absolute form of the path is derived on demand (abs(), match()); the
stored text is exactly what the caller supplied.
"""

from __future__ import annotations

import os
import stat as stat_module
from pathlib import Path
from typing import IO, Any

from optionkit.codecs import STR, Codec
from optionkit.errors import PathUnsetError
from optionkit.loadable import Loadable
from optionkit.secret import Secret

SECRET_FILE_PERMS = 0o600
SECRET_FILE_PERMS_MASK = 0o177

PATH: Codec[str] = Codec(name="File", parse=STR.parse, render=STR.render, coerce=STR.coerce)


def file_mode(path: str | Path) -> int:
    """Permission bits of ``path`` (no file type bits)."""
    return stat_module.S_IMODE(os.stat(path).st_mode)


def perms_valid(mode: int, required: int, forbidden: int) -> bool:
    """All ``required`` bits set and no ``forbidden`` bit set."""
    return (mode & required) == required and (mode & forbidden) == 0


class File(Loadable[str]):
    """
    Optional filesystem path.

        >>> f = File.some("./config.toml")
        >>> f.match(os.path.abspath("config.toml"))
        True
    """

    codec = PATH

    def _path(self, operation: str) -> str:
        if self.is_none():
            raise PathUnsetError(operation, self.type())
        return self.get()

    def match(self, candidate: str) -> bool:
        """Compare absolute forms; any resolution failure means no match."""
        if self.is_none() or not isinstance(candidate, str):
            return False
        try:
            return os.path.abspath(self.get()) == os.path.abspath(candidate)
        except (OSError, ValueError):
            return False

    def abs(self) -> File:
        """Return a new File holding the absolute form of this path."""
        path = self._path("Abs")
        resolved = self.clone()
        resolved.clear()
        resolved.replace(os.path.abspath(path))
        return resolved

    def as_path(self) -> Path:
        return Path(self._path("AsPath"))

    def stat(self) -> os.stat_result:
        return self.as_path().stat()

    def exists(self) -> bool:
        """True when the path is set and something exists there."""
        return Path(self._path("Exists")).exists()

    def file_perms_valid(self, required: int, forbidden: int) -> bool:
        """
        Check the file mode against a permission policy.

        A stat failure raises; a policy mismatch simply returns False.
        """
        return perms_valid(file_mode(self._path("FilePermsValid")), required, forbidden)

    def set_file_perms(self, mode: int) -> None:
        Path(self._path("SetFilePerms")).chmod(mode)

    def open(self, mode: str = "rb") -> IO[Any]:
        return Path(self._path("Open")).open(mode)

    def create(self) -> IO[bytes]:
        """Open for writing, creating or truncating the file."""
        return Path(self._path("Create")).open("wb")

    def remove(self) -> None:
        Path(self._path("Remove")).unlink()

    def read_file(self) -> bytes:
        return Path(self._path("ReadFile")).read_bytes()

    def write_file(self, data: bytes, mode: int = 0o644) -> None:
        """Write ``data``, creating the file with ``mode`` when it does not exist."""
        with self.open_file(os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode) as handle:
            handle.write(data)

    def open_file(self, flags: int, mode: int = 0o666) -> IO[bytes]:
        """os.open with explicit flags and creation mode, wrapped as a binary file object."""
        fd = os.open(self._path("OpenFile"), flags, mode)
        writable = flags & (os.O_WRONLY | os.O_RDWR)
        if flags & os.O_RDWR:
            file_mode_text = "r+b"
        elif writable:
            file_mode_text = "ab" if flags & os.O_APPEND else "wb"
        else:
            file_mode_text = "rb"
        return os.fdopen(fd, file_mode_text)


class SecretFile(File):
    """
    A File holding secret material: policy 0600 required, 0177 forbidden.

    Reading returns a Secret so the content is redacted when printed.
    """

    codec = Codec(name="SecretFile", parse=STR.parse, render=STR.render, coerce=STR.coerce)

    @classmethod
    def from_file(cls, source: File) -> SecretFile:
        """Move the path out of ``source``; ``source`` is cleared."""
        secret = cls.none()
        if source.is_some():
            secret.replace(source.get())
            source.clear()
        return secret

    def file_perms_valid(
        self, required: int = SECRET_FILE_PERMS, forbidden: int = SECRET_FILE_PERMS_MASK
    ) -> bool:
        return super().file_perms_valid(required, forbidden)

    def open_file(self, flags: int, mode: int = SECRET_FILE_PERMS) -> IO[bytes]:
        return super().open_file(flags, mode)

    def write_file(self, data: bytes, mode: int = SECRET_FILE_PERMS) -> None:
        super().write_file(data, mode)

    def read_secret(self) -> Secret:
        return Secret.some(self.read_file().decode("utf-8"))
