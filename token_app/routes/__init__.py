"""HTTP routes for the token service."""
