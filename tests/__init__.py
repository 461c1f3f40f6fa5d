# eccrypto Test Suite
"""
Test suite including:
- Unit tests (keys, signatures, key agreement, primitives)
- ECIES round trips and composition checks
- Security tests (tampering, invalid inputs)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
