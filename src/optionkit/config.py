"""
Configuration — credential paths loaded from environment/.env.

Uses pydantic-settings with the option wrappers as field types, so an
unset variable gives an absent option rather than a validation error:

    OPTIONKIT_CERT=/etc/tls/server.crt
    OPTIONKIT_PRIVATE_KEY=/etc/tls/server.key
    OPTIONKIT_LOG_LEVEL=DEBUG

Paths are stored in absolute form as soon as they are loaded. The literal
values "None", "none", "null" and "nil" also mean "not configured".
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from optionkit.credentials.pem import Cert, PrivateKey, PubKey

# Resolve the .env file relative to the project root (two levels above this file),
# so settings load correctly regardless of the working directory at runtime.
_ENV_FILE = Path(__file__).parent.parent.parent / ".env"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class CredentialSettings(BaseSettings):
    """
    Credential files checked by ``optionkit-check``.

    Load order (highest priority first):
      1. Environment variables prefixed with OPTIONKIT_
      2. .env file
      3. Default values (every credential absent)
    """

    model_config = SettingsConfigDict(
        env_prefix="OPTIONKIT_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    cert: Cert = Field(default_factory=Cert.none, description="Certificate chain file")
    public_key: PubKey = Field(default_factory=PubKey.none, description="Public key file")
    private_key: PrivateKey = Field(
        default_factory=PrivateKey.none, description="Private key file"
    )
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names, case-insensitively."""
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}, got {value!r}")
        return level
