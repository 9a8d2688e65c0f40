"""
Token service API endpoints.

A thin HTTP layer over the issuance core.  All routes are mounted on the
``token_api`` blueprint and served under the ``/api/token`` URL prefix by
the application factory.  Nothing here verifies or stores tokens.

Endpoints:
    GET  /health   -- Liveness / readiness probe for orchestration tools.
    POST /issue    -- Issue a signed JWT from claims and an algorithm.
    POST /refresh  -- Generate an opaque refresh token.

Key Concepts Demonstrated:
- Blueprint-based route organisation
- Translating domain errors into consistent JSON error responses
- Input shape validation before calling into the core
"""

from __future__ import annotations

import os
from typing import Any

from flask import Blueprint, Response, current_app, jsonify, request

from ..algorithms import DEFAULT_ALGORITHM
from ..claims import assemble
from ..errors import TokenServiceError
from ..jwt import TokenIssuer
from ..refresh import generate_refresh_token

api_bp = Blueprint("token_api", __name__)

# Upper bound for caller-requested refresh token sizes over HTTP
MAX_REFRESH_TOKEN_BYTES = 1024


# =====================================================================
# Helper Functions
# =====================================================================


def _json_error(message: str, status_code: int) -> tuple[Response, int]:
    """Build the ``{"error": "..."}`` envelope shared by every endpoint."""
    return jsonify({"error": message}), status_code


def _issuer() -> TokenIssuer:
    return current_app.extensions["token_issuer"]


def _request_object() -> dict[str, Any] | None:
    """
    Return the JSON request body as a dict, or None if it is not an object.

    A missing or unparseable body counts as an empty object.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


@api_bp.errorhandler(TokenServiceError)
def handle_token_service_error(error: TokenServiceError) -> tuple[Response, int]:
    """
    Translate core failures into JSON responses.

    Configuration and entropy failures are server-side problems (500);
    a rejected algorithm in strict mode is the caller's (400).
    """
    if error.status_code >= 500:
        current_app.logger.error("Token service failure: %s (%s)", error.message, error.code)
    return jsonify(error.to_dict()), error.status_code


# =====================================================================
# API Endpoints
# =====================================================================


@api_bp.route("/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """
    Liveness / readiness health-check endpoint.

    Returns:
        A 200 JSON response with ``status``, ``service``, and
        ``environment`` fields.
    """
    return jsonify(
        {
            "status": "healthy",
            "service": "token",
            "environment": os.getenv("ENVIRONMENT", "unknown"),
        }
    ), 200


@api_bp.route("/issue", methods=["POST"])
def issue() -> tuple[Response, int]:
    """
    Issue a signed JWT.

    Expects an optional JSON body ``{"claims": [{"type", "value"}, ...],
    "algorithm": "HS256"}``.  Both fields default: no claims and HS256.

    Returns:
        200 with ``token`` on success.
        400 if the body is not an object, ``claims`` is not a list of
        string type/value objects, or the algorithm is rejected in
        strict mode.
        500 if signing key material is missing.
    """
    data = _request_object()
    if data is None:
        return _json_error("request body must be a JSON object", 400)
    raw_claims = data.get("claims", [])
    if not isinstance(raw_claims, list):
        return _json_error("'claims' must be a list", 400)
    if not all(isinstance(entry, dict) for entry in raw_claims):
        return _json_error("each claim must be an object with 'type' and 'value'", 400)
    # The core passes content through unchecked; over HTTP claims are strings
    for entry in raw_claims:
        if not all(isinstance(entry.get(field, ""), str) for field in ("type", "value")):
            return _json_error("claim 'type' and 'value' must be strings", 400)

    try:
        claims = assemble(raw_claims)
    except ValueError as exc:
        return _json_error(str(exc), 400)

    algorithm = data.get("algorithm", DEFAULT_ALGORITHM)
    token = _issuer().issue(claims, algorithm)
    return jsonify({"token": token}), 200


@api_bp.route("/refresh", methods=["POST"])
def refresh() -> tuple[Response, int]:
    """
    Generate an opaque refresh token.

    Accepts an optional JSON body ``{"size": <bytes>}``; the default size
    comes from ``REFRESH_TOKEN_BYTES``.

    Returns:
        200 with ``refresh_token`` on success.
        400 if the body is not an object or ``size`` is not an integer in
        range.
        500 if the secure random source is unavailable.
    """
    data = _request_object()
    if data is None:
        return _json_error("request body must be a JSON object", 400)
    size = data.get("size", current_app.config["REFRESH_TOKEN_BYTES"])
    if isinstance(size, bool) or not isinstance(size, int):
        return _json_error("'size' must be an integer", 400)
    if not 0 <= size <= MAX_REFRESH_TOKEN_BYTES:
        return _json_error(
            f"'size' must be between 0 and {MAX_REFRESH_TOKEN_BYTES}", 400
        )

    return jsonify({"refresh_token": generate_refresh_token(size)}), 200
