"""
Unit tests for CredentialSettings — option fields loaded from the environment.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from optionkit.config import CredentialSettings

_VARS = ("OPTIONKIT_CERT", "OPTIONKIT_PUBLIC_KEY", "OPTIONKIT_PRIVATE_KEY", "OPTIONKIT_LOG_LEVEL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


class TestCredentialSettings:
    def test_defaults_are_absent(self) -> None:
        """
        GIVEN no OPTIONKIT_ variables
        WHEN settings are loaded
        THEN every credential is absent and the log level is INFO.
        """
        settings = CredentialSettings(_env_file=None)
        assert settings.cert.is_none()
        assert settings.public_key.is_none()
        assert settings.private_key.is_none()
        assert settings.log_level == "INFO"

    def test_paths_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """
        GIVEN OPTIONKIT_CERT and OPTIONKIT_PRIVATE_KEY
        WHEN settings are loaded
        THEN those options are present and the public key is absent.
        """
        monkeypatch.setenv("OPTIONKIT_CERT", str(tmp_path / "server.crt"))
        monkeypatch.setenv("OPTIONKIT_PRIVATE_KEY", str(tmp_path / "server.key"))
        settings = CredentialSettings(_env_file=None)
        assert settings.cert.get() == str(tmp_path / "server.crt")
        assert settings.private_key.get() == str(tmp_path / "server.key")
        assert settings.public_key.is_none()

    def test_relative_path_is_resolved(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        """
        GIVEN a relative OPTIONKIT_PUBLIC_KEY
        WHEN settings are loaded
        THEN the path is stored in absolute form.
        """
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("OPTIONKIT_PUBLIC_KEY", "keys/app.pub")
        settings = CredentialSettings(_env_file=None)
        assert settings.public_key.get() == str(tmp_path / "keys" / "app.pub")

    def test_none_token_means_absent(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """
        GIVEN OPTIONKIT_CERT=null
        WHEN settings are loaded
        THEN the certificate option is absent.
        """
        monkeypatch.setenv("OPTIONKIT_CERT", "null")
        assert CredentialSettings(_env_file=None).cert.is_none()

    def test_env_file(self, tmp_path: Path) -> None:
        """
        GIVEN a .env file with a path and a lower-case log level
        WHEN settings are loaded from it
        THEN the path is set and the level is upper-cased.
        """
        env_file = tmp_path / ".env"
        env_file.write_text(f"OPTIONKIT_CERT={tmp_path / 'c.pem'}\nOPTIONKIT_LOG_LEVEL=debug\n")
        settings = CredentialSettings(_env_file=env_file)
        assert settings.cert.get() == str(tmp_path / "c.pem")
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """
        GIVEN an unknown log level
        WHEN settings are loaded
        THEN ValidationError names the allowed levels.
        """
        monkeypatch.setenv("OPTIONKIT_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError, match="log_level must be one of"):
            CredentialSettings(_env_file=None)

    def test_init_kwargs(self, tmp_path: Path) -> None:
        """
        GIVEN a path passed as a keyword argument
        WHEN settings are built
        THEN the option matches that path.
        """
        settings = CredentialSettings(_env_file=None, cert=str(tmp_path / "x.pem"))
        assert settings.cert.match(str(tmp_path / "x.pem"))

    def test_dump(self, tmp_path: Path) -> None:
        """
        GIVEN settings with only a certificate
        WHEN dumped
        THEN the certificate is a path and the private key is None.
        """
        settings = CredentialSettings(_env_file=None, cert=str(tmp_path / "x.pem"))
        dumped = settings.model_dump()
        assert dumped["cert"] == str(tmp_path / "x.pem")
        assert dumped["private_key"] is None
