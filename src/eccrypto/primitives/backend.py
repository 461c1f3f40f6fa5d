"""
Primitive Backend

Bundles the four capabilities the ECIES engine composes:
- secure random bytes
- secp256k1 (key derivation, ECDH, ECDSA)
- SHA-512
- AES-256-CBC and HMAC-SHA256

CryptographyBackend is the default, in-process provider built on the
``cryptography`` package. Any object with the same methods can be handed
to the engine instead; its methods may also be coroutines, for providers
that run out of process.
"""

import logging
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import algorithms, modes
from cryptography.hazmat.backends import default_backend

from ..constants import AES_KEY_SIZE, IV_SIZE
from ..errors import PrimitiveUnavailable
from .curve import CURVE, Secp256k1
from .rng import random_bytes, generate_private
from .symmetric import AESCBCCipher, sha512, hmac_sha256_sign, hmac_sha256_verify


logger = logging.getLogger(__name__)


class CryptographyBackend:
    """
    Default primitive provider (OpenSSL via ``cryptography``).

    Stateless apart from a cached availability probe.
    """

    name = "cryptography"

    def __init__(self):
        self._curve = Secp256k1()
        self._missing: Optional[str] = None
        self._probed = False

    # -- availability -----------------------------------------------------

    def _probe(self) -> Optional[str]:
        """Return the name of the first unsupported primitive, or None."""
        openssl = default_backend()
        if not openssl.elliptic_curve_supported(CURVE):
            return "secp256k1"
        if not openssl.hash_supported(hashes.SHA512()):
            return "SHA-512"
        if not openssl.hmac_supported(hashes.SHA256()):
            return "HMAC-SHA256"
        cipher = algorithms.AES(b"\x00" * AES_KEY_SIZE)
        if not openssl.cipher_supported(cipher, modes.CBC(b"\x00" * IV_SIZE)):
            return "AES-256-CBC"
        return None

    def check_available(self) -> None:
        """
        Ensure every primitive the ECIES pipeline needs is usable.

        Raises:
            PrimitiveUnavailable: Naming the missing primitive
        """
        if not self._probed:
            self._missing = self._probe()
            self._probed = True
            logger.debug("backend %s probed, missing=%s", self.name, self._missing)
        if self._missing is not None:
            raise PrimitiveUnavailable(f"{self._missing} is not available in backend {self.name}")

    # -- random -----------------------------------------------------------

    def random_bytes(self, size: int) -> bytes:
        return random_bytes(size)

    def generate_private(self) -> bytes:
        return generate_private()

    # -- curve ------------------------------------------------------------

    def get_public(self, private_key: bytes, compressed: bool = False) -> bytes:
        return self._curve.public_key(private_key, compressed=compressed)

    def ecdh(self, private_key: bytes, public_key: bytes) -> bytes:
        return self._curve.ecdh(private_key, public_key)

    def sign(self, private_key: bytes, message: bytes) -> bytes:
        return self._curve.sign(private_key, message)

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        return self._curve.verify(public_key, message, signature)

    # -- hash / symmetric -------------------------------------------------

    def sha512(self, data: bytes) -> bytes:
        return sha512(data)

    def aes_cbc_encrypt(self, iv: bytes, key: bytes, data: bytes) -> bytes:
        return AESCBCCipher(key).encrypt(iv, data)

    def aes_cbc_decrypt(self, iv: bytes, key: bytes, data: bytes) -> bytes:
        return AESCBCCipher(key).decrypt(iv, data)

    def hmac_sha256_sign(self, key: bytes, data: bytes) -> bytes:
        return hmac_sha256_sign(key, data)

    def hmac_sha256_verify(self, key: bytes, data: bytes, tag: bytes) -> bool:
        return hmac_sha256_verify(key, data, tag)
