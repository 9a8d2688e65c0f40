"""WSGI entry point for the token service."""

import os

from token_app import create_app

app = create_app(os.getenv("FLASK_ENV", "production"))
