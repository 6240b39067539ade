"""
Credential files — plain paths, secret files and PEM certificates/keys.
"""

from optionkit.credentials.file import File, SecretFile
from optionkit.credentials.keys import KeyAlgorithm, PrivateKeyMaterial, PublicKeyMaterial
from optionkit.credentials.pem import Cert, PemBlock, PemFile, PrivateKey, PubKey, TlsIdentity

__all__ = [
    "Cert",
    "File",
    "KeyAlgorithm",
    "PemBlock",
    "PemFile",
    "PrivateKey",
    "PrivateKeyMaterial",
    "PubKey",
    "PublicKeyMaterial",
    "SecretFile",
    "TlsIdentity",
]
