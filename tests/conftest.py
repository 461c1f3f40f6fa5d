# eccrypto test fixtures

import pytest

import eccrypto


@pytest.fixture
def alice():
    """Random (private_key, public_key) pair."""
    private_key = eccrypto.generate_private()
    return private_key, eccrypto.get_public(private_key)


@pytest.fixture
def bob():
    """Random (private_key, public_key) pair."""
    private_key = eccrypto.generate_private()
    return private_key, eccrypto.get_public(private_key)
