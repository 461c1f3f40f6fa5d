"""
Secure random source.
"""

import secrets

from ..constants import PRIVATE_KEY_SIZE
from .curve import is_valid_scalar


def random_bytes(size: int) -> bytes:
    """Return ``size`` cryptographically secure random bytes."""
    return secrets.token_bytes(size)


def generate_private() -> bytes:
    """
    Generate a random secp256k1 private key.

    Retries on the negligible chance of drawing 0 or a value >= n.

    Returns:
        32 random bytes forming a valid scalar
    """
    while True:
        private_key = random_bytes(PRIVATE_KEY_SIZE)
        if is_valid_scalar(private_key):
            return private_key
