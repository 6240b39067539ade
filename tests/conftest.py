"""
Shared test fixtures and helpers for the optionkit test suite.

Builds throw-away keys and self-signed certificates with cryptography and
writes them as PEM files under tmp_path with an explicit file mode.
"""

from __future__ import annotations

import datetime
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog
from asn1crypto import pem
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from cryptography.x509.oid import NameOID

type PrivateKeyObject = rsa.RSAPrivateKey | ec.EllipticCurvePrivateKey | ed25519.Ed25519PrivateKey


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """
    Restore structlog defaults after each test.

    configure_structlog() turns on cache_logger_on_first_use; capture_logs()
    only sees loggers that were not cached under another configuration.
    """
    yield
    structlog.reset_defaults()


@pytest.fixture(scope="session")
def rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def ed25519_key() -> ed25519.Ed25519PrivateKey:
    return ed25519.Ed25519PrivateKey.generate()


def build_certificate(
    key: PrivateKeyObject,
    common_name: str = "optionkit test",
    issuer_key: PrivateKeyObject | None = None,
    issuer_name: str | None = None,
) -> x509.Certificate:
    """
    Build a certificate for ``key``.

    Self-signed unless ``issuer_key`` is given. RSA and EC issuers sign
    with SHA-256; Ed25519 issuers sign without a separate digest.
    """
    signer = issuer_key or key
    subject = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    issuer = x509.Name(
        [x509.NameAttribute(NameOID.COMMON_NAME, issuer_name or common_name)]
    )
    now = datetime.datetime.now(datetime.UTC)
    builder = (
        x509.CertificateBuilder()
        .subject_name(subject)
        .issuer_name(issuer)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
    )
    algorithm = None if isinstance(signer, ed25519.Ed25519PrivateKey) else hashes.SHA256()
    return builder.sign(signer, algorithm)


@pytest.fixture(scope="session")
def rsa_cert(rsa_key: rsa.RSAPrivateKey) -> x509.Certificate:
    return build_certificate(rsa_key)


def cert_pem(*certs: x509.Certificate) -> bytes:
    return b"".join(cert.public_bytes(serialization.Encoding.PEM) for cert in certs)


def private_key_pem(
    key: PrivateKeyObject,
    fmt: serialization.PrivateFormat = serialization.PrivateFormat.PKCS8,
) -> bytes:
    return key.private_bytes(serialization.Encoding.PEM, fmt, serialization.NoEncryption())


def public_key_pem(
    key: PrivateKeyObject,
    fmt: serialization.PublicFormat = serialization.PublicFormat.SubjectPublicKeyInfo,
) -> bytes:
    return key.public_key().public_bytes(serialization.Encoding.PEM, fmt)


def armored(label: str, body: bytes) -> bytes:
    """A PEM block with an arbitrary label around ``body``."""
    return pem.armor(label, body)


@pytest.fixture()
def write_pem(tmp_path: Path) -> Callable[[str, bytes, int], Path]:
    """
    Return a helper that writes ``data`` to tmp_path/name with ``mode``.

    The mode is applied with chmod so the process umask does not interfere.
    """

    def _write(name: str, data: bytes, mode: int = 0o600) -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        os.chmod(path, mode)
        return path

    return _write
