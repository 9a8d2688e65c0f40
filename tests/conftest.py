"""
Shared pytest fixtures for the token service test suite.

Provides the Flask application and client for HTTP-level tests, plus
``JwtOptions``, a frozen clock and a ready ``TokenIssuer`` for tests that
exercise the issuance core directly.

Key Concepts Demonstrated:
- Fixture scoping (session vs. function) for performance and isolation
- Environment variable overrides set before the app is imported
- Injecting a fixed clock for deterministic token content
"""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import datetime

import pytest

from tests.helpers import (
    FIXED_NOW,
    TEST_AUDIENCE,
    TEST_EC_KEYS,
    TEST_ISSUER,
    TEST_LIFETIME_MINUTES,
    TEST_RSA_PRIVATE_KEY,
    TEST_SECURITY_KEY,
)

# Set testing environment before importing the app
os.environ["FLASK_ENV"] = "testing"
os.environ["TEST_JWT_SECURITY_KEY"] = TEST_SECURITY_KEY
os.environ["TEST_JWT_ISSUER"] = TEST_ISSUER
os.environ["TEST_JWT_AUDIENCE"] = TEST_AUDIENCE
os.environ["TEST_JWT_LIFETIME_MINUTES"] = str(TEST_LIFETIME_MINUTES)
os.environ["TEST_JWT_RSA_PRIVATE_KEY"] = TEST_RSA_PRIVATE_KEY
os.environ["TEST_JWT_EC_P256_PRIVATE_KEY"] = TEST_EC_KEYS["ES256"][0]
os.environ["TEST_JWT_EC_P384_PRIVATE_KEY"] = TEST_EC_KEYS["ES384"][0]
os.environ["TEST_JWT_EC_P521_PRIVATE_KEY"] = TEST_EC_KEYS["ES512"][0]

from token_app import create_app
from token_app.jwt import JwtOptions, TokenIssuer


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def app():
    """
    Provide the Flask application instance for the entire test session.

    Created once with the 'testing' config and reused across all tests.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """Provide a Flask test client scoped to a single test function."""
    with app.test_client() as test_client:
        yield test_client


# -----------------------------------------------------------------------------
# Issuance Core Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def options() -> JwtOptions:
    """Provide options carrying an HMAC secret, an RSA key and one EC key per curve."""
    return JwtOptions(
        security_key=TEST_SECURITY_KEY,
        issuer=TEST_ISSUER,
        audience=TEST_AUDIENCE,
        lifetime_minutes=TEST_LIFETIME_MINUTES,
        rsa_private_key=TEST_RSA_PRIVATE_KEY,
        ec_p256_private_key=TEST_EC_KEYS["ES256"][0],
        ec_p384_private_key=TEST_EC_KEYS["ES384"][0],
        ec_p521_private_key=TEST_EC_KEYS["ES512"][0],
    )


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Provide a clock frozen at ``FIXED_NOW``."""
    return lambda: FIXED_NOW


@pytest.fixture
def issuer(options, fixed_clock) -> TokenIssuer:
    """Provide a ``TokenIssuer`` bound to the frozen clock."""
    return TokenIssuer(options, clock=fixed_clock)
