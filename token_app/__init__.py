"""
Token service package and Flask application factory.

The issuance core (``algorithms``, ``claims``, ``jwt``, ``refresh``) is a
plain library with no Flask dependency.  ``create_app`` wraps it in a small
HTTP service whose configuration profile is chosen at runtime, so tests and
deployments each get the settings they need.

Key Concepts Demonstrated:
- Application factory pattern (create_app)
- Blueprint-based route registration
- Validating issuance settings once at startup
"""

from __future__ import annotations

import logging

from flask import Flask

from .algorithms import Algorithm, resolve
from .claims import Claim, assemble
from .config import get_config, load_signing_keys
from .errors import (
    ConfigurationError,
    EntropySourceError,
    TokenServiceError,
    UnsupportedAlgorithmError,
)
from .jwt import JwtOptions, TokenIssuer, create_token
from .refresh import generate_refresh_token

__all__ = [
    "Algorithm",
    "Claim",
    "ConfigurationError",
    "EntropySourceError",
    "JwtOptions",
    "TokenIssuer",
    "TokenServiceError",
    "UnsupportedAlgorithmError",
    "assemble",
    "create_app",
    "create_token",
    "generate_refresh_token",
    "resolve",
]

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the token service Flask application.

    Args:
        config_name: The configuration environment to load (e.g.
            ``"development"``, ``"testing"``, ``"production"``).  When
            ``None``, the value is resolved from the ``FLASK_ENV``
            environment variable, defaulting to ``"development"``.

    Returns:
        A configured :class:`~flask.Flask` application with a
        ``TokenIssuer`` stored under ``app.extensions["token_issuer"]``.

    Raises:
        ConfigurationError: If the issuance settings are invalid.
    """
    app = Flask(__name__)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    app.config.update(load_signing_keys(testing=bool(app.config.get("TESTING"))))

    logger.info("Creating token service app with config: %s", config_class.__name__)

    app.extensions["token_issuer"] = TokenIssuer(
        JwtOptions.from_config(app.config),
        strict_algorithms=bool(app.config.get("JWT_STRICT_ALGORITHMS")),
    )

    # Imported here so the blueprint sees a fully initialised package
    from .routes.api import api_bp

    app.register_blueprint(api_bp, url_prefix="/api/token")
    return app
