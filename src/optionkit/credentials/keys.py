"""
Key material — a closed set of algorithm variants and their DER codecs.

Decoding a PUBLIC/PRIVATE KEY block yields exactly one of four variants:

    RSA       rsa.RSAPublicKey / rsa.RSAPrivateKey
    ECDSA     ec.EllipticCurvePublicKey / ec.EllipticCurvePrivateKey
    Ed25519   ed25519.Ed25519PublicKey / ed25519.Ed25519PrivateKey
    ECDH      x25519.X25519PublicKey / x25519.X25519PrivateKey

Anything else cryptography can load (DSA, Ed448, X448, DH) is rejected with
KeyParseError. Every function that consumes material matches exhaustively
over the variants, with assert_never on the fall-through.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import ClassVar, assert_never

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa, x25519
from cryptography.hazmat.primitives.asymmetric.types import (
    PrivateKeyTypes,
    PublicKeyTypes,
)

from optionkit.errors import KeyParseError

# PEM block labels
PUBLIC_KEY = "PUBLIC KEY"
RSA_PUBLIC_KEY = "RSA PUBLIC KEY"
PRIVATE_KEY = "PRIVATE KEY"
RSA_PRIVATE_KEY = "RSA PRIVATE KEY"
EC_PRIVATE_KEY = "EC PRIVATE KEY"

PUBLIC_KEY_LABELS = frozenset({PUBLIC_KEY, RSA_PUBLIC_KEY})
PRIVATE_KEY_LABELS = frozenset({PRIVATE_KEY, RSA_PRIVATE_KEY, EC_PRIVATE_KEY})


@unique
class KeyAlgorithm(Enum):
    RSA = "RSA"
    ECDSA = "ECDSA"
    ED25519 = "Ed25519"
    ECDH = "ECDH"


# ─────────────────────── Public key variants ───────────────────────


@dataclass(frozen=True, slots=True)
class RsaPublic:
    key: rsa.RSAPublicKey
    algorithm: ClassVar[KeyAlgorithm] = KeyAlgorithm.RSA


@dataclass(frozen=True, slots=True)
class EcdsaPublic:
    key: ec.EllipticCurvePublicKey
    algorithm: ClassVar[KeyAlgorithm] = KeyAlgorithm.ECDSA


@dataclass(frozen=True, slots=True)
class Ed25519Public:
    key: ed25519.Ed25519PublicKey
    algorithm: ClassVar[KeyAlgorithm] = KeyAlgorithm.ED25519


@dataclass(frozen=True, slots=True)
class EcdhPublic:
    key: x25519.X25519PublicKey
    algorithm: ClassVar[KeyAlgorithm] = KeyAlgorithm.ECDH


PublicKeyMaterial = RsaPublic | EcdsaPublic | Ed25519Public | EcdhPublic


# ─────────────────────── Private key variants ───────────────────────


@dataclass(frozen=True, slots=True)
class RsaPrivate:
    key: rsa.RSAPrivateKey
    algorithm: ClassVar[KeyAlgorithm] = KeyAlgorithm.RSA


@dataclass(frozen=True, slots=True)
class EcdsaPrivate:
    key: ec.EllipticCurvePrivateKey
    algorithm: ClassVar[KeyAlgorithm] = KeyAlgorithm.ECDSA


@dataclass(frozen=True, slots=True)
class Ed25519Private:
    key: ed25519.Ed25519PrivateKey
    algorithm: ClassVar[KeyAlgorithm] = KeyAlgorithm.ED25519


@dataclass(frozen=True, slots=True)
class EcdhPrivate:
    key: x25519.X25519PrivateKey
    algorithm: ClassVar[KeyAlgorithm] = KeyAlgorithm.ECDH


PrivateKeyMaterial = RsaPrivate | EcdsaPrivate | Ed25519Private | EcdhPrivate


# ─────────────────────── Wrapping cryptography keys ───────────────────────


def public_key_material(key: PublicKeyTypes) -> PublicKeyMaterial:
    """Tag a cryptography public key with its variant; unsupported → KeyParseError."""
    match key:
        case rsa.RSAPublicKey():
            return RsaPublic(key)
        case ec.EllipticCurvePublicKey():
            return EcdsaPublic(key)
        case ed25519.Ed25519PublicKey():
            return Ed25519Public(key)
        case x25519.X25519PublicKey():
            return EcdhPublic(key)
        case _:
            raise KeyParseError(f"unsupported public key type: {type(key).__name__}")


def private_key_material(key: PrivateKeyTypes) -> PrivateKeyMaterial:
    """Tag a cryptography private key with its variant; unsupported → KeyParseError."""
    match key:
        case rsa.RSAPrivateKey():
            return RsaPrivate(key)
        case ec.EllipticCurvePrivateKey():
            return EcdsaPrivate(key)
        case ed25519.Ed25519PrivateKey():
            return Ed25519Private(key)
        case x25519.X25519PrivateKey():
            return EcdhPrivate(key)
        case _:
            raise KeyParseError(f"unsupported private key type: {type(key).__name__}")


# ─────────────────────── DER decoding ───────────────────────


def decode_public_key(label: str, der: bytes) -> PublicKeyMaterial:
    """
    Decode the DER body of a public key block.

    ``PUBLIC KEY`` holds a SubjectPublicKeyInfo; ``RSA PUBLIC KEY`` holds a
    PKCS#1 structure and must yield an RSA key.
    """
    if label not in PUBLIC_KEY_LABELS:
        raise KeyParseError(f"unexpected PEM block type for a public key: {label}")
    try:
        key = serialization.load_der_public_key(der)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise KeyParseError(f"failed to parse {label}: {exc}") from exc
    material = public_key_material(key)
    if label == RSA_PUBLIC_KEY and not isinstance(material, RsaPublic):
        raise KeyParseError(f"{label} block does not contain an RSA key")
    return material


def decode_private_key(label: str, der: bytes) -> PrivateKeyMaterial:
    """
    Decode the DER body of an unencrypted private key block.

    ``PRIVATE KEY`` is PKCS#8, ``RSA PRIVATE KEY`` is PKCS#1 and
    ``EC PRIVATE KEY`` is SEC 1. The labelled forms must match the algorithm.
    """
    if label not in PRIVATE_KEY_LABELS:
        raise KeyParseError(f"unexpected PEM block type for a private key: {label}")
    try:
        key = serialization.load_der_private_key(der, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyParseError(f"failed to parse {label}: {exc}") from exc
    material = private_key_material(key)
    if label == RSA_PRIVATE_KEY and not isinstance(material, RsaPrivate):
        raise KeyParseError(f"{label} block does not contain an RSA key")
    if label == EC_PRIVATE_KEY and not isinstance(material, EcdsaPrivate):
        raise KeyParseError(f"{label} block does not contain an EC key")
    return material


# ─────────────────────── DER encoding ───────────────────────


def encode_public_key(material: PublicKeyMaterial) -> bytes:
    """SubjectPublicKeyInfo DER for any supported public key."""
    match material:
        case RsaPublic(key) | EcdsaPublic(key) | Ed25519Public(key) | EcdhPublic(key):
            return key.public_bytes(
                serialization.Encoding.DER,
                serialization.PublicFormat.SubjectPublicKeyInfo,
            )
        case _:
            assert_never(material)


def encode_private_key(material: PrivateKeyMaterial) -> bytes:
    """Unencrypted PKCS#8 DER for any supported private key."""
    match material:
        case RsaPrivate(key) | EcdsaPrivate(key) | Ed25519Private(key) | EcdhPrivate(key):
            return key.private_bytes(
                serialization.Encoding.DER,
                serialization.PrivateFormat.PKCS8,
                serialization.NoEncryption(),
            )
        case _:
            assert_never(material)


def public_half(material: PrivateKeyMaterial) -> PublicKeyMaterial:
    match material:
        case RsaPrivate(key):
            return RsaPublic(key.public_key())
        case EcdsaPrivate(key):
            return EcdsaPublic(key.public_key())
        case Ed25519Private(key):
            return Ed25519Public(key.public_key())
        case EcdhPrivate(key):
            return EcdhPublic(key.public_key())
        case _:
            assert_never(material)
