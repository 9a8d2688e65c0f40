"""Test helper functions and key material shared across the token test suites."""

from __future__ import annotations

import base64
import json
from datetime import datetime, timezone
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa


TEST_SECURITY_KEY = "unit-test-hmac-secret-0123456789abcdef0123456789abcdef0123456789abcd"
TEST_ISSUER = "token-service-test"
TEST_AUDIENCE = "token-service-test-clients"
TEST_LIFETIME_MINUTES = 15
FIXED_NOW = datetime(2030, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _pem_pair(private_key: Any) -> tuple[str, str]:
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


def generate_rsa_key_pair() -> tuple[str, str]:
    """Generate an in-memory RSA private/public key pair as PEM strings."""
    return _pem_pair(rsa.generate_private_key(public_exponent=65537, key_size=2048))


def generate_ec_key_pair(curve: ec.EllipticCurve | None = None) -> tuple[str, str]:
    """Generate an in-memory EC private/public key pair as PEM strings."""
    return _pem_pair(ec.generate_private_key(curve or ec.SECP256R1()))


# Stable for one Python process: generated once on import, reused everywhere in tests.
TEST_RSA_PRIVATE_KEY, TEST_RSA_PUBLIC_KEY = generate_rsa_key_pair()

# ES256/ES384/ES512 each sign with the matching curve.
TEST_EC_KEYS: dict[str, tuple[str, str]] = {
    "ES256": generate_ec_key_pair(ec.SECP256R1()),
    "ES384": generate_ec_key_pair(ec.SECP384R1()),
    "ES512": generate_ec_key_pair(ec.SECP521R1()),
}


def b64url_decode(segment: str) -> bytes:
    """Decode one unpadded base64url token segment."""
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def split_token(token: str) -> tuple[str, str, str]:
    """Split a compact token into its header, payload and signature segments."""
    header, payload, signature = token.split(".")
    return header, payload, signature


def decode_segment(segment: str) -> dict[str, Any]:
    """Decode a header or payload segment into a dict."""
    return json.loads(b64url_decode(segment))
