"""
API test package for the token service.

Tests use the Flask test client and cover:
- Token issuance through the HTTP layer
- Input validation testing
- Error translation from the issuance core
"""
