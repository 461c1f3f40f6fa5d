"""
Input checks run as the first step of every public operation.

Each helper normalizes a bytes-like value to ``bytes`` and raises
InvalidInput (or InvalidKey) instead of coercing anything.
"""

from typing import Any

from .constants import (
    PRIVATE_KEY_SIZE,
    PUBLIC_KEY_SIZE,
    UNCOMPRESSED_PREFIX,
    MIN_MESSAGE_SIZE,
    MAX_MESSAGE_SIZE,
    IV_SIZE,
    MAC_SIZE,
)
from .errors import InvalidInput, InvalidKey


def as_bytes(value: Any, name: str) -> bytes:
    """
    Convert a bytes-like value to bytes.

    Args:
        value: bytes, bytearray or memoryview
        name: Field name used in the error message

    Returns:
        Immutable copy of the value

    Raises:
        InvalidInput: If value is not bytes-like
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise InvalidInput(f"{name} must be bytes, got {type(value).__name__}")


def require_private_key(private_key: Any) -> bytes:
    """Check a raw 32-byte private key."""
    if not isinstance(private_key, (bytes, bytearray, memoryview)):
        raise InvalidKey("Bad private key")
    private_key = bytes(private_key)
    if len(private_key) != PRIVATE_KEY_SIZE:
        raise InvalidKey("Bad private key")
    return private_key


def require_public_key(public_key: Any) -> bytes:
    """Check a 65-byte uncompressed public key (prefix 0x04)."""
    public_key = as_bytes(public_key, "public key")
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise InvalidInput("Bad public key")
    if public_key[0] != UNCOMPRESSED_PREFIX:
        raise InvalidInput("Bad public key")
    return public_key


def require_message(message: Any) -> bytes:
    """Check a message for sign/verify: 1..32 bytes."""
    message = as_bytes(message, "message")
    if len(message) < MIN_MESSAGE_SIZE:
        raise InvalidInput("Message should not be empty")
    if len(message) > MAX_MESSAGE_SIZE:
        raise InvalidInput("Message is too long")
    return message


def require_size(value: Any, size: int, name: str) -> bytes:
    """Check a fixed-size field such as an IV or MAC."""
    value = as_bytes(value, name)
    if len(value) != size:
        raise InvalidInput(f"Bad {name}: expected {size} bytes, got {len(value)}")
    return value


def require_iv(iv: Any) -> bytes:
    return require_size(iv, IV_SIZE, "IV")


def require_mac(mac: Any) -> bytes:
    return require_size(mac, MAC_SIZE, "MAC")
