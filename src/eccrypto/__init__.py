# eccrypto
"""
ECIES and ECDSA over secp256k1.

- get_public / get_public_compressed / generate_private (synchronous)
- sign / verify (ECDSA, DER, low-S)
- derive (ECDH, unpadded X coordinate)
- encrypt / decrypt (ECIES: ECDH + SHA-512 + AES-256-CBC + HMAC-SHA256)

Envelope format: [iv (16) | ephem_public_key (65) | ciphertext | mac (32)]

Usage:
    >>> import asyncio, eccrypto
    >>> private_key = eccrypto.generate_private()
    >>> public_key = eccrypto.get_public(private_key)
    >>> envelope = asyncio.run(eccrypto.encrypt(public_key, b"msg"))
    >>> asyncio.run(eccrypto.decrypt(private_key, envelope))
    b'msg'
"""

import logging

from .engine import (
    Ecies,
    split_key,
    generate_private,
    get_public,
    get_public_compressed,
    sign,
    verify,
    derive,
    encrypt,
    decrypt,
)
from .envelope import Envelope
from .errors import (
    EccryptoError,
    InvalidInput,
    InvalidKey,
    BadSignature,
    BadMac,
    DecryptionFailed,
    PrimitiveUnavailable,
)
from .primitives import CryptographyBackend

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Ecies',
    'Envelope',
    'CryptographyBackend',
    'split_key',
    'generate_private',
    'get_public',
    'get_public_compressed',
    'sign',
    'verify',
    'derive',
    'encrypt',
    'decrypt',
    'EccryptoError',
    'InvalidInput',
    'InvalidKey',
    'BadSignature',
    'BadMac',
    'DecryptionFailed',
    'PrimitiveUnavailable',
]

__version__ = "1.0.0"
