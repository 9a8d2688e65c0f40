"""
Signature algorithm registry.

Maps the closed set of supported signature algorithms to the canonical
identifiers expected by downstream verifiers.  Canonical identifiers are the
XML-DSig algorithm URIs; the compact token header carries the matching short
JWA name (``HS256``, ``RS384``, ...), obtained with ``header_algorithm``.

Unrecognised selectors resolve to HMAC-SHA-256 through the explicit
``DEFAULT_ALGORITHM`` arm unless strict resolution is requested, in which
case ``UnsupportedAlgorithmError`` is raised.
"""

from __future__ import annotations

import enum
import logging
from typing import Any

from .errors import UnsupportedAlgorithmError

logger = logging.getLogger(__name__)


class Algorithm(enum.Enum):
    """Supported signature algorithms, valued by their JWA names."""

    HMAC_SHA256 = "HS256"
    HMAC_SHA384 = "HS384"
    HMAC_SHA512 = "HS512"
    RSA_SHA256 = "RS256"
    RSA_SHA384 = "RS384"
    RSA_SHA512 = "RS512"
    RSA_PSS_SHA256 = "PS256"
    RSA_PSS_SHA384 = "PS384"
    ECDSA_SHA256 = "ES256"
    ECDSA_SHA384 = "ES384"
    ECDSA_SHA512 = "ES512"


class KeyFamily(enum.Enum):
    """Kind of key material an algorithm signs with."""

    SYMMETRIC = "symmetric"
    RSA = "rsa"
    EC = "ec"


DEFAULT_ALGORITHM = Algorithm.HMAC_SHA256

_XMLDSIG_MORE = "http://www.w3.org/2001/04/xmldsig-more#"
_XMLDSIG_MORE_2007 = "http://www.w3.org/2007/05/xmldsig-more#"

ALGORITHM_IDENTIFIERS: dict[Algorithm, str] = {
    Algorithm.HMAC_SHA256: _XMLDSIG_MORE + "hmac-sha256",
    Algorithm.HMAC_SHA384: _XMLDSIG_MORE + "hmac-sha384",
    Algorithm.HMAC_SHA512: _XMLDSIG_MORE + "hmac-sha512",
    Algorithm.RSA_SHA256: _XMLDSIG_MORE + "rsa-sha256",
    Algorithm.RSA_SHA384: _XMLDSIG_MORE + "rsa-sha384",
    Algorithm.RSA_SHA512: _XMLDSIG_MORE + "rsa-sha512",
    Algorithm.ECDSA_SHA256: _XMLDSIG_MORE + "ecdsa-sha256",
    Algorithm.ECDSA_SHA384: _XMLDSIG_MORE + "ecdsa-sha384",
    Algorithm.ECDSA_SHA512: _XMLDSIG_MORE + "ecdsa-sha512",
    Algorithm.RSA_PSS_SHA256: _XMLDSIG_MORE_2007 + "sha256-rsa-MGF1",
    Algorithm.RSA_PSS_SHA384: _XMLDSIG_MORE_2007 + "sha384-rsa-MGF1",
}

# Outbound map: canonical identifier -> ``alg`` value written to the header.
_HEADER_ALGORITHMS: dict[str, str] = {
    identifier: algorithm.value
    for algorithm, identifier in ALGORITHM_IDENTIFIERS.items()
}

_KEY_FAMILIES: dict[Algorithm, KeyFamily] = {
    Algorithm.HMAC_SHA256: KeyFamily.SYMMETRIC,
    Algorithm.HMAC_SHA384: KeyFamily.SYMMETRIC,
    Algorithm.HMAC_SHA512: KeyFamily.SYMMETRIC,
    Algorithm.RSA_SHA256: KeyFamily.RSA,
    Algorithm.RSA_SHA384: KeyFamily.RSA,
    Algorithm.RSA_SHA512: KeyFamily.RSA,
    Algorithm.RSA_PSS_SHA256: KeyFamily.RSA,
    Algorithm.RSA_PSS_SHA384: KeyFamily.RSA,
    Algorithm.ECDSA_SHA256: KeyFamily.EC,
    Algorithm.ECDSA_SHA384: KeyFamily.EC,
    Algorithm.ECDSA_SHA512: KeyFamily.EC,
}


def select_algorithm(algorithm: Any, *, strict: bool = False) -> Algorithm:
    """
    Coerce *algorithm* into an ``Algorithm`` member.

    Accepts a member or a member's JWA value (``"RS256"``).  Anything else
    takes the default arm and becomes ``DEFAULT_ALGORITHM``.

    Raises:
        UnsupportedAlgorithmError: If *strict* is set and *algorithm* is
            not recognised.
    """
    if isinstance(algorithm, Algorithm):
        return algorithm
    try:
        return Algorithm(algorithm)
    except ValueError:
        if strict:
            raise UnsupportedAlgorithmError(
                f"Unsupported signature algorithm: {algorithm!r}",
                details={"algorithm": repr(algorithm)},
            ) from None
        logger.debug(
            "Unrecognised algorithm %r, falling back to %s",
            algorithm,
            DEFAULT_ALGORITHM.value,
        )
        return DEFAULT_ALGORITHM


def resolve(algorithm: Any, *, strict: bool = False) -> str:
    """
    Return the canonical identifier for *algorithm*.

    Args:
        algorithm: An ``Algorithm`` member or its JWA string value.
        strict: Raise instead of falling back on unrecognised input.

    Returns:
        The XML-DSig URI identifying the algorithm.
    """
    return ALGORITHM_IDENTIFIERS[select_algorithm(algorithm, strict=strict)]


def header_algorithm(identifier: str) -> str:
    """Map a canonical identifier to the short JWA name used in the header."""
    try:
        return _HEADER_ALGORITHMS[identifier]
    except KeyError:
        raise UnsupportedAlgorithmError(
            f"No header name for algorithm identifier: {identifier!r}"
        ) from None


def key_family(algorithm: Algorithm) -> KeyFamily:
    """Return the key family *algorithm* signs with."""
    return _KEY_FAMILIES[algorithm]
