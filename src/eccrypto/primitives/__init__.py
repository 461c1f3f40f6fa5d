# Primitive Providers
"""
External primitives composed by the ECIES engine:
- secure random bytes (secrets)
- secp256k1 key derivation, ECDH and ECDSA (cryptography)
- SHA-512, AES-256-CBC, HMAC-SHA256 (cryptography)
"""

from .backend import CryptographyBackend
from .curve import Secp256k1, int_to_bytes, is_low_s, normalize_signature
from .rng import random_bytes, generate_private
from .symmetric import AESCBCCipher, sha512, hmac_sha256_sign, hmac_sha256_verify

__all__ = [
    'CryptographyBackend',
    'Secp256k1',
    'int_to_bytes',
    'is_low_s',
    'normalize_signature',
    'random_bytes',
    'generate_private',
    'AESCBCCipher',
    'sha512',
    'hmac_sha256_sign',
    'hmac_sha256_verify',
]
