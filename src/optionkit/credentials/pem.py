"""
PEM credentials — path options that read and write PEM-armored files.

A PemFile holds the ABSOLUTE path of a credential file; relative input is
resolved when it is stored. Nothing is cached: every read or write goes to
the filesystem, so callers see rotations and permission changes at once.

Each kind carries a permission policy, checked before any read:

    Kind          required   forbidden
    Cert          0600       0133
    PubKey        0644       0133
    PrivateKey    0600       0177

Writes do not refuse a file with a bad mode; they chmod it back to the
required bits first and log ``pem.permissions_repaired``.

Armor is handled by asn1crypto.pem, DER chains are split with
asn1crypto.parser, and certificates / keys are loaded with cryptography.
"""

from __future__ import annotations

import os
import re
import ssl
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

import structlog
from asn1crypto import parser, pem
from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from optionkit.codecs import STR, Codec
from optionkit.credentials.file import File, file_mode, perms_valid
from optionkit.credentials.keys import (
    PRIVATE_KEY,
    PRIVATE_KEY_LABELS,
    PUBLIC_KEY,
    PUBLIC_KEY_LABELS,
    PrivateKeyMaterial,
    PublicKeyMaterial,
    decode_private_key,
    decode_public_key,
    encode_private_key,
    encode_public_key,
    public_half,
)
from optionkit.errors import (
    FilePermissionError,
    KeyParseError,
    PathUnsetError,
    PemDecodeError,
)
from optionkit.loadable import Loadable

log = structlog.get_logger()

CERTIFICATE = "CERTIFICATE"

CERT_FILE_PERMS = 0o600
CERT_FILE_PERMS_MASK = 0o133
PUBLIC_KEY_FILE_PERMS = 0o644
PUBLIC_KEY_FILE_PERMS_MASK = 0o133
PRIVATE_KEY_FILE_PERMS = 0o600
PRIVATE_KEY_FILE_PERMS_MASK = 0o177

# A BEGIN line followed, on some later line, by the armor line that closes it.
_COMPLETE_BLOCK = re.compile(
    rb"^(?:-----|---- )BEGIN [A-Z0-9 ]+.*?^(?:-----|---- )", re.DOTALL | re.MULTILINE
)


@dataclass(frozen=True, slots=True)
class PemBlock:
    """One decoded PEM block: label, DER body and optional RFC 1421 headers."""

    type: str
    data: bytes
    headers: Mapping[str, str] = field(default_factory=dict)


# ─────────────────────── Block codec ───────────────────────


def decode_blocks(data: bytes) -> list[PemBlock]:
    """
    Decode every PEM block in ``data``, in file order.

    Text outside the blocks is ignored, and so is a trailing block that never
    reaches its END line: data without a complete block yields an empty list.
    A complete block with a malformed body raises PemDecodeError.
    """
    if not pem.detect(data) or _COMPLETE_BLOCK.search(data) is None:
        return []
    try:
        return [
            PemBlock(type=name, data=der, headers=dict(headers))
            for name, headers, der in pem.unarmor(data, multiple=True)
        ]
    except ValueError as exc:
        raise PemDecodeError(f"malformed PEM data: {exc}") from exc


def encode_block(block: PemBlock) -> bytes:
    try:
        return pem.armor(block.type, block.data, headers=dict(block.headers) or None)
    except (TypeError, ValueError) as exc:
        raise PemDecodeError(f"cannot encode PEM block {block.type!r}: {exc}") from exc


def split_der_chain(der: bytes) -> list[bytes]:
    """Split concatenated DER values into one byte string per top-level element."""
    chunks: list[bytes] = []
    rest = der
    while rest:
        try:
            _, _, _, header, contents, trailer = parser.parse(rest)
        except ValueError as exc:
            raise PemDecodeError(f"malformed DER data: {exc}") from exc
        size = len(header) + len(contents) + len(trailer)
        chunks.append(rest[:size])
        rest = rest[size:]
    return chunks


def certificates_from_blocks(blocks: Iterable[PemBlock]) -> list[x509.Certificate]:
    """Parse every CERTIFICATE block; a block may carry a concatenated chain."""
    certificates: list[x509.Certificate] = []
    for block in blocks:
        if block.type != CERTIFICATE:
            continue
        for chunk in split_der_chain(block.data):
            try:
                certificates.append(x509.load_der_x509_certificate(chunk))
            except ValueError as exc:
                raise PemDecodeError(f"failed to parse certificate: {exc}") from exc
    return certificates


def _absolute_path(value: Any) -> str:
    return os.path.abspath(STR.coerce(value))


def _pem_codec(name: str) -> Codec[str]:
    return Codec(name=name, parse=STR.parse, render=STR.render, coerce=_absolute_path)


# ─────────────────────── PemFile ───────────────────────


class PemFile(Loadable[str]):
    """
    Base class for PEM credential paths.

    Subclasses set ``codec``, ``required_perms`` and ``forbidden_perms``.
    """

    required_perms: ClassVar[int]
    forbidden_perms: ClassVar[int]

    def _path(self, operation: str) -> str:
        if self.is_none():
            raise PathUnsetError(operation, self.type())
        return self.get()

    @property
    def file(self) -> File:
        """A File view over the same path, for the plain filesystem proxies."""
        return File(self.as_option())

    def file_perms_valid(self) -> bool:
        return perms_valid(
            file_mode(self._path("FilePermsValid")), self.required_perms, self.forbidden_perms
        )

    def set_file_perms(self) -> None:
        Path(self._path("SetFilePerms")).chmod(self.required_perms)

    def read_blocks(self) -> list[PemBlock]:
        """Read and decode every block, after checking the permission policy."""
        path = self._path("ReadBlocks")
        if not self.file_perms_valid():
            raise FilePermissionError("ReadBlocks", path, self.required_perms)
        return self._load_blocks(path)

    def write_blocks(self, blocks: Sequence[PemBlock]) -> None:
        """
        Replace the file content with ``blocks``.

        A missing file is created with the required mode; an existing file
        with a bad mode is repaired first. Blocks are written in order and
        writing stops at the first block that cannot be encoded.
        """
        path = self._path("WriteBlocks")
        target = Path(path)
        if not target.exists():
            os.close(os.open(path, os.O_WRONLY | os.O_CREAT, self.required_perms))
            target.chmod(self.required_perms)
        elif not self.file_perms_valid():
            target.chmod(self.required_perms)
            log.warning(
                "pem.permissions_repaired",
                path=path,
                kind=self.type(),
                mode=f"{self.required_perms:o}",
            )
        with target.open("wb") as handle:
            for block in blocks:
                handle.write(encode_block(block))
        log.debug("pem.blocks_written", path=path, count=len(blocks))

    def _load_blocks(self, path: str) -> list[PemBlock]:
        blocks = decode_blocks(Path(path).read_bytes())
        log.debug("pem.blocks_read", path=path, kind=self.type(), count=len(blocks))
        return blocks


# ─────────────────────── Credential kinds ───────────────────────


class Cert(PemFile):
    """Certificate (chain) file."""

    codec = _pem_codec("Cert")
    required_perms = CERT_FILE_PERMS
    forbidden_perms = CERT_FILE_PERMS_MASK

    def read_certs(self) -> list[x509.Certificate]:
        return certificates_from_blocks(self.read_blocks())

    def write_certs(self, certs: Iterable[x509.Certificate]) -> None:
        self.write_blocks(
            [PemBlock(CERTIFICATE, cert.public_bytes(serialization.Encoding.DER)) for cert in certs]
        )


class PubKey(PemFile):
    """Public key file: PUBLIC KEY (SPKI) and RSA PUBLIC KEY (PKCS#1) blocks."""

    codec = _pem_codec("PubKey")
    required_perms = PUBLIC_KEY_FILE_PERMS
    forbidden_perms = PUBLIC_KEY_FILE_PERMS_MASK

    def read_public_keys(self) -> list[PublicKeyMaterial]:
        """
        Decode every public key block, best effort.

        Blocks that fail to decode are skipped as long as at least one key
        decodes; when none does, the last decode error is raised. A file
        with no key blocks at all yields an empty list.
        """
        keys: list[PublicKeyMaterial] = []
        error: KeyParseError | None = None
        for block in self.read_blocks():
            if block.type not in PUBLIC_KEY_LABELS:
                continue
            try:
                keys.append(decode_public_key(block.type, block.data))
            except KeyParseError as exc:
                log.warning(
                    "pem.public_key_skipped",
                    path=self.get(),
                    block_type=block.type,
                    error=str(exc),
                )
                error = exc
        if not keys and error is not None:
            raise error
        return keys

    def write_public_keys(self, keys: Iterable[PublicKeyMaterial]) -> None:
        self.write_blocks([PemBlock(PUBLIC_KEY, encode_public_key(key)) for key in keys])


class PrivateKey(PemFile):
    """Private key file: PKCS#8, PKCS#1 RSA or SEC 1 EC blocks, unencrypted."""

    codec = _pem_codec("PrivateKey")
    required_perms = PRIVATE_KEY_FILE_PERMS
    forbidden_perms = PRIVATE_KEY_FILE_PERMS_MASK

    def read_private_key(self) -> PrivateKeyMaterial:
        """Return the first private key block that decodes."""
        error: KeyParseError | None = None
        for block in self.read_blocks():
            if block.type not in PRIVATE_KEY_LABELS:
                continue
            try:
                return decode_private_key(block.type, block.data)
            except KeyParseError as exc:
                log.warning(
                    "pem.private_key_skipped",
                    path=self.get(),
                    block_type=block.type,
                    error=str(exc),
                )
                error = exc
        if error is not None:
            raise error
        raise KeyParseError(f"no private key block found in {self.get()}")

    def write_private_key(self, key: PrivateKeyMaterial) -> None:
        """Write ``key`` as a single unencrypted PKCS#8 PRIVATE KEY block."""
        self.write_blocks([PemBlock(PRIVATE_KEY, encode_private_key(key))])

    def read_cert(self, cert: Cert) -> TlsIdentity:
        """
        Load a TLS identity from ``cert`` and this key.

        The key file's own policy is enforced even though the key is read
        last; the certificate file's policy is not applied here. The leaf
        certificate must carry the public half of this key.
        """
        key_path = self._path("ReadCert")
        if not self.file_perms_valid():
            raise FilePermissionError("ReadCert", key_path, self.required_perms)
        cert_path = cert._path("ReadCert")

        chain = certificates_from_blocks(cert._load_blocks(cert_path))
        if not chain:
            raise PemDecodeError(f"no certificate found in {cert_path}")
        material = self.read_private_key()

        try:
            leaf_key = chain[0].public_key().public_bytes(
                serialization.Encoding.DER,
                serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        except (ValueError, UnsupportedAlgorithm) as exc:
            raise KeyParseError(f"unsupported certificate public key: {exc}") from exc
        if leaf_key != encode_public_key(public_half(material)):
            raise KeyParseError(
                f"private key {key_path} does not match certificate {cert_path}"
            )
        return TlsIdentity(
            cert_path=cert_path,
            key_path=key_path,
            certificates=tuple(chain),
            private_key=material,
        )


@dataclass(frozen=True, slots=True)
class TlsIdentity:
    """A certificate chain paired with its private key."""

    cert_path: str
    key_path: str
    certificates: tuple[x509.Certificate, ...]
    private_key: PrivateKeyMaterial = field(repr=False)

    @property
    def leaf(self) -> x509.Certificate:
        return self.certificates[0]

    def ssl_context(self, purpose: ssl.Purpose = ssl.Purpose.CLIENT_AUTH) -> ssl.SSLContext:
        """
        Build an SSLContext presenting this identity.

        The default purpose gives a server-side context; pass
        ``ssl.Purpose.SERVER_AUTH`` for a client presenting a certificate.
        """
        context = ssl.create_default_context(purpose)
        context.load_cert_chain(certfile=self.cert_path, keyfile=self.key_path)
        return context
