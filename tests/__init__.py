"""
Test suite for the token service.

This package contains:
- unit/: issuance core tests with no HTTP layer
- integration/: API tests through the Flask test client
- contracts/: response shape checks against contracts/token_openapi.yaml
"""
