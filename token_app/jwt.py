"""
JWT issuance for the token service.

Turns an ordered list of claims and a selected signature algorithm into a
compact, signed JWS string (``header.payload.signature``).  Issuance is a
pure computation: the only inputs are the claims, the algorithm, the
``JwtOptions`` and the current UTC time.  Nothing is persisted.

Token structure:
    - header  -- ``alg`` (short JWA name) and ``typ`` (``"JWT"``).
    - payload -- the supplied claims in order (a repeated claim type
      becomes a JSON array of its values), followed by the registered
      claims ``nbf``, ``exp``, ``iat``, ``iss`` and ``aud``.  Registered
      claims take precedence over supplied claims with the same name.

Key material is chosen per algorithm.  HMAC variants sign with the UTF-8
bytes of the shared ``security_key``; RSA / RSA-PSS variants sign with the
configured RSA private key, and each ECDSA variant with the EC private key
on its own curve (P-256, P-384, P-521).  Keys are derived on every call and
never cached.

Key Concepts Demonstrated:
- Descriptor-then-encode issuance with PyJWT
- Per-family signing key resolution with ``cryptography``
- Injectable UTC clock for deterministic tokens
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from .algorithms import (
    DEFAULT_ALGORITHM,
    Algorithm,
    KeyFamily,
    header_algorithm,
    key_family,
    resolve,
    select_algorithm,
)
from .claims import Claim, assemble
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class JwtOptions:
    """
    Issuance settings consumed by ``TokenIssuer``.

    ``security_key`` is only required for HMAC algorithms, and the PEM
    private keys only for their own family; each is checked when an
    algorithm needing it is used.
    """

    security_key: str | None
    issuer: str
    audience: str
    lifetime_minutes: int
    rsa_private_key: str | None = None
    ec_p256_private_key: str | None = None
    ec_p384_private_key: str | None = None
    ec_p521_private_key: str | None = None

    def __post_init__(self) -> None:
        # bool is an int subclass but never a meaningful lifetime
        if isinstance(self.lifetime_minutes, bool) or not isinstance(
            self.lifetime_minutes, int
        ):
            raise ConfigurationError("lifetime_minutes must be an integer")
        if self.lifetime_minutes <= 0:
            raise ConfigurationError("lifetime_minutes must be positive")
        if not isinstance(self.issuer, str):
            raise ConfigurationError("issuer must be a string")
        if not isinstance(self.audience, str):
            raise ConfigurationError("audience must be a string")

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> JwtOptions:
        """
        Build options from a Flask-style configuration mapping.

        Reads ``JWT_SECURITY_KEY``, ``JWT_ISSUER``, ``JWT_AUDIENCE``,
        ``JWT_LIFETIME_MINUTES``, ``JWT_RSA_PRIVATE_KEY`` and the per-curve
        ``JWT_EC_P256_PRIVATE_KEY``, ``JWT_EC_P384_PRIVATE_KEY`` and
        ``JWT_EC_P521_PRIVATE_KEY``.

        Raises:
            ConfigurationError: If the lifetime is missing or not an integer.
        """
        raw_lifetime = config.get("JWT_LIFETIME_MINUTES")
        try:
            lifetime = int(raw_lifetime)
        except (TypeError, ValueError):
            raise ConfigurationError(
                "JWT_LIFETIME_MINUTES must be an integer",
                details={"value": repr(raw_lifetime)},
            ) from None
        return cls(
            security_key=config.get("JWT_SECURITY_KEY"),
            issuer=config.get("JWT_ISSUER", ""),
            audience=config.get("JWT_AUDIENCE", ""),
            lifetime_minutes=lifetime,
            rsa_private_key=config.get("JWT_RSA_PRIVATE_KEY") or None,
            ec_p256_private_key=config.get("JWT_EC_P256_PRIVATE_KEY") or None,
            ec_p384_private_key=config.get("JWT_EC_P384_PRIVATE_KEY") or None,
            ec_p521_private_key=config.get("JWT_EC_P521_PRIVATE_KEY") or None,
        )


@dataclass(frozen=True)
class SigningCredentials:
    """A signing key paired with the canonical algorithm identifier."""

    key: Any
    algorithm: str


@dataclass(frozen=True)
class TokenDescriptor:
    """Everything needed to encode one token; lives for a single call."""

    issuer: str
    audience: str
    subject: tuple[Claim, ...]
    issued_at: datetime
    expires: datetime
    signing_credentials: SigningCredentials

    def header(self) -> dict[str, str]:
        return {"alg": header_algorithm(self.signing_credentials.algorithm), "typ": "JWT"}

    def payload(self) -> dict[str, Any]:
        """Build the payload with supplied claims first, registered claims last."""
        payload: dict[str, Any] = {}
        for claim in self.subject:
            if claim.type not in payload:
                payload[claim.type] = claim.value
            elif isinstance(payload[claim.type], list):
                payload[claim.type].append(claim.value)
            else:
                payload[claim.type] = [payload[claim.type], claim.value]

        # Epoch seconds per RFC 7519 NumericDate
        issued_at = int(self.issued_at.timestamp())
        payload["nbf"] = issued_at
        payload["exp"] = int(self.expires.timestamp())
        payload["iat"] = issued_at
        payload["iss"] = self.issuer
        payload["aud"] = self.audience
        return payload


# ECDSA algorithm -> (JwtOptions field, config setting, required curve)
_EC_SIGNING_KEYS: dict[Algorithm, tuple[str, str, type[ec.EllipticCurve]]] = {
    Algorithm.ECDSA_SHA256: ("ec_p256_private_key", "JWT_EC_P256_PRIVATE_KEY", ec.SECP256R1),
    Algorithm.ECDSA_SHA384: ("ec_p384_private_key", "JWT_EC_P384_PRIVATE_KEY", ec.SECP384R1),
    Algorithm.ECDSA_SHA512: ("ec_p521_private_key", "JWT_EC_P521_PRIVATE_KEY", ec.SECP521R1),
}


def _load_private_key(pem: str | None, setting: str, expected_type: type) -> Any:
    """Load a PEM private key named by *setting* and check it is an *expected_type*."""
    if not pem or not pem.strip():
        raise ConfigurationError(f"{setting} is required for this algorithm")
    try:
        key = serialization.load_pem_private_key(pem.encode("utf-8"), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ConfigurationError(f"{setting} is not a usable PEM private key") from exc

    if not isinstance(key, expected_type):
        raise ConfigurationError(f"{setting} holds the wrong kind of key")
    return key


def resolve_signing_key(options: JwtOptions, algorithm: Algorithm) -> Any:
    """
    Derive the signing key for *algorithm* from *options*.

    HMAC uses the shared secret, RSA and RSA-PSS the RSA key, and each
    ECDSA variant the EC key on its own curve.

    Raises:
        ConfigurationError: If the key material for the algorithm is
            missing, unusable, or on the wrong curve.
    """
    family = key_family(algorithm)
    if family is KeyFamily.SYMMETRIC:
        if not options.security_key or not options.security_key.strip():
            raise ConfigurationError("JWT_SECURITY_KEY is required for HMAC algorithms")
        return options.security_key.encode("utf-8")
    if family is KeyFamily.RSA:
        return _load_private_key(
            options.rsa_private_key, "JWT_RSA_PRIVATE_KEY", rsa.RSAPrivateKey
        )

    field, setting, curve = _EC_SIGNING_KEYS[algorithm]
    key = _load_private_key(getattr(options, field), setting, ec.EllipticCurvePrivateKey)
    if not isinstance(key.curve, curve):
        raise ConfigurationError(
            f"{setting} is on curve {key.curve.name}, {algorithm.value} needs {curve.name}"
        )
    return key


class TokenIssuer:
    """
    Issue signed JWTs from claims using configured ``JwtOptions``.

    Args:
        options: Issuer, audience, lifetime and key material.
        clock: Zero-argument callable returning the current aware UTC
            ``datetime``.  Defaults to the system clock.
        strict_algorithms: Raise ``UnsupportedAlgorithmError`` for
            unrecognised algorithms instead of falling back to HS256.
    """

    def __init__(
        self,
        options: JwtOptions,
        *,
        clock: Callable[[], datetime] | None = None,
        strict_algorithms: bool = False,
    ) -> None:
        self.options = options
        self.clock = clock or _utc_now
        self.strict_algorithms = strict_algorithms

    def build_descriptor(
        self, claims: Iterable[Claim], algorithm: Any = DEFAULT_ALGORITHM
    ) -> TokenDescriptor:
        """Resolve key, algorithm and expiry into a ``TokenDescriptor``."""
        selected = select_algorithm(algorithm, strict=self.strict_algorithms)
        key = resolve_signing_key(self.options, selected)
        identifier = resolve(selected)

        now = self.clock().astimezone(timezone.utc)
        return TokenDescriptor(
            issuer=self.options.issuer,
            audience=self.options.audience,
            subject=tuple(claims),
            issued_at=now,
            expires=now + timedelta(minutes=self.options.lifetime_minutes),
            signing_credentials=SigningCredentials(key=key, algorithm=identifier),
        )

    def issue(
        self, claims: Iterable[Claim] = (), algorithm: Any = DEFAULT_ALGORITHM
    ) -> str:
        """
        Issue a signed compact JWT.

        Called without arguments it issues an HS256 token with no
        supplied claims.

        Args:
            claims: Ordered claims to embed in the payload.
            algorithm: An ``Algorithm`` member or its JWA value.

        Returns:
            A compact JWS string (``header.payload.signature``).

        Raises:
            ConfigurationError: If the key for the algorithm's family is
                missing or unusable.
            UnsupportedAlgorithmError: If strict mode is on and the
                algorithm is unrecognised.
        """
        descriptor = self.build_descriptor(claims, algorithm)
        header = descriptor.header()
        try:
            token = jwt.encode(
                descriptor.payload(),
                descriptor.signing_credentials.key,
                algorithm=header["alg"],
                headers={"typ": header["typ"]},
            )
        except jwt.InvalidKeyError as exc:
            raise ConfigurationError(
                f"Signing key rejected for {header['alg']}: {exc}"
            ) from exc
        logger.debug(
            "Issued %s token with %d claim(s)", header["alg"], len(descriptor.subject)
        )
        return token


def create_token(
    claims: Iterable[Any],
    algorithm: Any,
    options: JwtOptions,
) -> str:
    """Assemble *claims* and issue a token in one call."""
    return TokenIssuer(options).issue(assemble(claims), algorithm)
