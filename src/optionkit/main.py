"""
Entry point — checks the configured credential files.

For every credential set in the environment:
  1. Verify its permission policy
  2. Decode its PEM content
  3. When both a certificate and a private key are set, verify they pair up

Exits 0 when every configured credential passes, 1 otherwise (including a
configuration error). Nothing configured is not a failure.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable

import structlog

from optionkit import __version__
from optionkit.config import CredentialSettings
from optionkit.credentials.pem import PemFile, PrivateKey
from optionkit.errors import OptionError

log = structlog.get_logger()


def configure_structlog(log_level: str = "INFO") -> None:
    """Configure structlog for colored, human-readable console output."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _check(name: str, credential: PemFile, decode: Callable[[], int]) -> bool:
    """Run one credential's decode step; OS and decode errors count as a failure."""
    if credential.is_none():
        log.debug("credentials.skipped", credential=name)
        return True
    try:
        count = decode()
    except (OptionError, OSError) as e:
        log.error("credentials.invalid", credential=name, path=credential.get(), error=str(e))
        return False
    log.info("credentials.valid", credential=name, path=credential.get(), count=count)
    return True


def _read_one(private_key: PrivateKey) -> int:
    private_key.read_private_key()
    return 1


def check_credentials(settings: CredentialSettings) -> bool:
    """Check every configured credential; return True when all pass."""
    results = [
        _check("cert", settings.cert, lambda: len(settings.cert.read_certs())),
        _check(
            "public_key",
            settings.public_key,
            lambda: len(settings.public_key.read_public_keys()),
        ),
        _check("private_key", settings.private_key, lambda: _read_one(settings.private_key)),
    ]

    if settings.cert.is_some() and settings.private_key.is_some():
        try:
            identity = settings.private_key.read_cert(settings.cert)
        except (OptionError, OSError) as e:
            log.error(
                "credentials.pair_invalid",
                cert=settings.cert.get(),
                private_key=settings.private_key.get(),
                error=str(e),
            )
            results.append(False)
        else:
            log.info(
                "credentials.pair_valid",
                subject=identity.leaf.subject.rfc4514_string(),
                chain_length=len(identity.certificates),
                algorithm=identity.private_key.algorithm.value,
            )
            results.append(True)

    passed = all(results)
    log.info("credentials.checked", passed=passed, failures=results.count(False))
    return passed


def main() -> None:
    """Load settings, check credentials and exit with the result."""
    try:
        settings = CredentialSettings()
    except Exception as e:
        print(f"FATAL: Configuration error — {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    configure_structlog(settings.log_level)
    log.info("app.starting", version=__version__, log_level=settings.log_level)

    if not check_credentials(settings):
        sys.exit(1)


if __name__ == "__main__":
    main()
