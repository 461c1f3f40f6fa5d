"""
Symmetric Primitives

- SHA-512 for key expansion
- AES-256-CBC with PKCS#7 padding
- HMAC-SHA256 with constant-time verification
"""

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, hmac, padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.backends import default_backend

from ..constants import AES_KEY_SIZE, IV_SIZE
from ..errors import DecryptionFailed, InvalidInput, PrimitiveUnavailable


# Constants
BLOCK_SIZE_BITS = algorithms.AES.block_size  # 128


def sha512(data: bytes) -> bytes:
    """One-shot SHA-512 digest (64 bytes)."""
    digest = hashes.Hash(hashes.SHA512(), backend=default_backend())
    digest.update(data)
    return digest.finalize()


class AESCBCCipher:
    """
    AES-256-CBC encryption with PKCS#7 padding.

    Provides confidentiality only; callers must authenticate the
    ciphertext separately (see HMAC below).
    """

    def __init__(self, key: bytes):
        """
        Initialize with encryption key.

        Args:
            key: 256-bit (32-byte) key
        """
        if len(key) != AES_KEY_SIZE:
            raise InvalidInput(f"Key must be {AES_KEY_SIZE} bytes")
        self._key = key

    def _cipher(self, iv: bytes) -> Cipher:
        if len(iv) != IV_SIZE:
            raise InvalidInput(f"IV must be {IV_SIZE} bytes")
        try:
            return Cipher(algorithms.AES(self._key), modes.CBC(iv), backend=default_backend())
        except UnsupportedAlgorithm as exc:
            raise PrimitiveUnavailable("AES-CBC is not supported by this backend") from exc

    def encrypt(self, iv: bytes, plaintext: bytes) -> bytes:
        """
        Pad and encrypt.

        Args:
            iv: 16-byte initialization vector
            plaintext: Data to encrypt (any length, including empty)

        Returns:
            Ciphertext, a non-empty multiple of 16 bytes
        """
        padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext) + padder.finalize()

        encryptor = self._cipher(iv).encryptor()
        return encryptor.update(padded) + encryptor.finalize()

    def decrypt(self, iv: bytes, ciphertext: bytes) -> bytes:
        """
        Decrypt and strip padding.

        Raises:
            DecryptionFailed: If the ciphertext is not whole blocks or the
                padding is invalid
        """
        decryptor = self._cipher(iv).decryptor()
        unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
        try:
            padded = decryptor.update(ciphertext) + decryptor.finalize()
            return unpadder.update(padded) + unpadder.finalize()
        except ValueError as exc:
            raise DecryptionFailed("AES-CBC decryption failed") from exc


def hmac_sha256_sign(key: bytes, data: bytes) -> bytes:
    """Compute a 32-byte HMAC-SHA256 tag."""
    h = hmac.HMAC(key, hashes.SHA256(), backend=default_backend())
    h.update(data)
    return h.finalize()


def hmac_sha256_verify(key: bytes, data: bytes, tag: bytes) -> bool:
    """Constant-time comparison of an HMAC-SHA256 tag."""
    h = hmac.HMAC(key, hashes.SHA256(), backend=default_backend())
    h.update(data)
    try:
        h.verify(tag)
    except InvalidSignature:
        return False
    return True
