"""
Opaque refresh token generation.

Refresh tokens are pure entropy: ``size_bytes`` bytes read from the
operating system CSPRNG, encoded as standard base64 with padding.  They carry
no claims and no expiry; any lifetime tracking belongs to whoever stores
them.
"""

from __future__ import annotations

import base64
import random
from collections.abc import Iterator
from contextlib import contextmanager

from .errors import EntropySourceError

DEFAULT_REFRESH_TOKEN_BYTES = 64


@contextmanager
def entropy_source() -> Iterator[random.SystemRandom]:
    """
    Acquire an OS-backed random source for the duration of one call.

    ``SystemRandom`` reads from ``os.urandom``; platform failures surface as
    ``EntropySourceError`` and never degrade to a non-cryptographic
    generator.
    """
    source = random.SystemRandom()
    try:
        yield source
    except (OSError, NotImplementedError) as exc:
        raise EntropySourceError(details={"reason": str(exc)}) from exc


def generate_refresh_token(size_bytes: int = DEFAULT_REFRESH_TOKEN_BYTES) -> str:
    """
    Generate a base64-encoded refresh token of *size_bytes* random bytes.

    Args:
        size_bytes: Number of random bytes; ``0`` yields an empty string.

    Returns:
        The standard-alphabet, padded base64 encoding of the bytes.

    Raises:
        ValueError: If *size_bytes* is negative or not an integer.
        EntropySourceError: If the OS random source is unavailable.
    """
    if isinstance(size_bytes, bool) or not isinstance(size_bytes, int):
        raise ValueError("size_bytes must be an integer")
    if size_bytes < 0:
        raise ValueError("size_bytes must not be negative")

    with entropy_source() as source:
        raw = source.randbytes(size_bytes)
    return base64.b64encode(raw).decode("ascii")
