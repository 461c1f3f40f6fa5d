"""
Exception hierarchy.

Callers can tell malformed input (InvalidInput) apart from failed
authentication (BadSignature, BadMac). Every error derives from
EccryptoError so a single except clause can catch all of them.
"""


class EccryptoError(Exception):
    """Base class for all eccrypto errors."""


class InvalidInput(EccryptoError, ValueError):
    """Wrong-length or malformed key, message, signature or envelope field."""


class InvalidKey(InvalidInput):
    """Private key has the wrong size or is not a valid scalar."""


class BadSignature(EccryptoError):
    """ECDSA verification failed."""

    def __init__(self, message: str = "Bad signature"):
        super().__init__(message)


class BadMac(EccryptoError):
    """HMAC over the envelope did not match; nothing was decrypted."""

    def __init__(self, message: str = "Bad MAC"):
        super().__init__(message)


class DecryptionFailed(EccryptoError):
    """Symmetric decryption failed after the MAC was accepted."""


class PrimitiveUnavailable(EccryptoError, RuntimeError):
    """A required primitive is not supported by the active backend."""
