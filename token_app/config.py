"""
Configuration for the token service.

Follows Flask's class-based configuration pattern: a shared ``Config`` base
class holds defaults read from environment variables, and the
``DevelopmentConfig``, ``TestingConfig`` and ``ProductionConfig`` profiles
override only what differs.  ``get_config`` resolves the profile by name or
from ``FLASK_ENV``.

Asymmetric private keys are not class attributes.  ``load_signing_keys``
reads them when the application is created: one RSA key and one EC key per
curve (P-256, P-384, P-521), each given inline or as a file path.

Key Concepts Demonstrated:
- Inheritance-based configuration hierarchy
- Environment variable overrides with sensible defaults
- Signing key material per algorithm (HMAC secret, RSA key, EC key per curve)
"""

from __future__ import annotations

import os
from pathlib import Path

from .errors import ConfigurationError


# Config setting for each asymmetric signing key; ECDSA needs one key per curve.
SIGNING_KEY_SETTINGS = (
    "JWT_RSA_PRIVATE_KEY",
    "JWT_EC_P256_PRIVATE_KEY",
    "JWT_EC_P384_PRIVATE_KEY",
    "JWT_EC_P521_PRIVATE_KEY",
)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


def _read_signing_key(setting: str) -> str | None:
    """
    Read one signing key PEM, given inline as ``<setting>`` or as a file at ``<setting>_PATH``.

    An inline PEM beats the file. A key nobody configured comes back as
    ``None``, and signing only fails later if an algorithm needs it.
    """
    inline_pem = os.environ.get(setting, "").strip()
    if inline_pem:
        return inline_pem

    pem_file = os.environ.get(f"{setting}_PATH", "").strip()
    if not pem_file:
        return None
    try:
        return Path(pem_file).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"{setting}_PATH points at '{pem_file}', which cannot be read."
        ) from exc


def _signing_key_configured(setting: str) -> bool:
    return any(os.environ.get(name, "").strip() for name in (setting, f"{setting}_PATH"))


def load_signing_keys(*, testing: bool) -> dict[str, str | None]:
    """
    Collect the asymmetric private keys, keyed by config setting name.

    The test profile takes a key from ``TEST_<setting>`` (or its ``_PATH``)
    whenever that is set, and falls back to ``<setting>`` otherwise. The
    choice is made key by key.

    Returns:
        One entry per name in ``SIGNING_KEY_SETTINGS``; unset keys map to ``None``.
    """
    keys: dict[str, str | None] = {}
    for setting in SIGNING_KEY_SETTINGS:
        source = setting
        if testing and _signing_key_configured(f"TEST_{setting}"):
            source = f"TEST_{setting}"
        keys[setting] = _read_signing_key(source)
    return keys


class Config:
    """
    Base configuration shared by all environments.

    Every setting can be controlled via an environment variable so that
    container orchestrators can inject secrets at deploy time.
    """

    # Shared secret for the HMAC algorithms; empty means HMAC is unavailable
    JWT_SECURITY_KEY: str = os.environ.get("JWT_SECURITY_KEY", "")
    JWT_ISSUER: str = os.environ.get("JWT_ISSUER", "token-service")
    JWT_AUDIENCE: str = os.environ.get("JWT_AUDIENCE", "token-service-clients")
    # Minutes a newly issued token remains valid
    JWT_LIFETIME_MINUTES: int = int(os.environ.get("JWT_LIFETIME_MINUTES", "60"))
    # Reject unknown algorithms instead of falling back to HS256
    JWT_STRICT_ALGORITHMS: bool = _env_flag("JWT_STRICT_ALGORITHMS")
    REFRESH_TOKEN_BYTES: int = int(os.environ.get("REFRESH_TOKEN_BYTES", "64"))


class DevelopmentConfig(Config):
    """
    Configuration for local development.

    Supplies an obviously insecure HMAC secret when none is set so the
    service starts without extra setup.
    """

    DEBUG: bool = True
    TESTING: bool = False
    JWT_SECURITY_KEY: str = os.environ.get(
        "JWT_SECURITY_KEY",
        "token-service-dev-secret-change-in-production-0123456789abcdef0123456789",
    )


class TestingConfig(Config):
    """
    Configuration for the automated test suite.

    Reads ``TEST_``-prefixed overrides so test runs never pick up
    development or production secrets by accident.
    """

    DEBUG: bool = True
    TESTING: bool = True
    JWT_SECURITY_KEY: str = os.environ.get(
        "TEST_JWT_SECURITY_KEY",
        "token-service-test-secret-0123456789abcdef0123456789abcdef0123456789",
    )
    JWT_ISSUER: str = os.environ.get("TEST_JWT_ISSUER", "token-service-test")
    JWT_AUDIENCE: str = os.environ.get("TEST_JWT_AUDIENCE", "token-service-test-clients")
    JWT_LIFETIME_MINUTES: int = int(os.environ.get("TEST_JWT_LIFETIME_MINUTES", "15"))


class ProductionConfig(Config):
    """
    Configuration for production deployments.

    No defaults for secrets: ``JWT_SECURITY_KEY`` and the private keys
    must come from the environment.
    """

    DEBUG: bool = False
    TESTING: bool = False


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Resolve a configuration class by environment name.

    Args:
        env: One of ``"development"``, ``"testing"``, or
            ``"production"``.  When ``None``, the ``FLASK_ENV``
            environment variable is consulted, falling back to
            ``"development"`` if unset.

    Returns:
        The configuration class (not an instance).  Falls back to
        ``DevelopmentConfig`` for unrecognised names.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
