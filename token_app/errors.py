"""
Error taxonomy for token issuance.

Every failure raised by the issuance core derives from
``TokenServiceError`` and carries a stable machine-readable ``code`` next to
the human-readable message.  Errors are terminal for the call that raised
them: no partial token is ever returned.
"""

from __future__ import annotations

from typing import Any


class TokenServiceError(Exception):
    """Base exception for the token service."""

    status_code = 500

    def __init__(
        self, code: str, message: str, details: dict[str, Any] | None = None
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON error envelope used by the HTTP layer."""
        body: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class ConfigurationError(TokenServiceError):
    """Signing key material, lifetime, issuer or audience is missing or invalid."""

    def __init__(
        self,
        message: str = "Invalid token configuration",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__("CONFIGURATION_ERROR", message, details)


class UnsupportedAlgorithmError(TokenServiceError):
    """Raised only when strict algorithm resolution is enabled."""

    status_code = 400

    def __init__(
        self,
        message: str = "Unsupported signature algorithm",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__("UNSUPPORTED_ALGORITHM", message, details)


class EntropySourceError(TokenServiceError):
    """The operating system CSPRNG could not supply random bytes."""

    def __init__(
        self,
        message: str = "Secure random source unavailable",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__("ENTROPY_SOURCE_ERROR", message, details)
