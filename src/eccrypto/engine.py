"""
ECIES Engine

Implements ECIES over secp256k1 with:
- ECDH key agreement (ephemeral sender key)
- SHA-512 key expansion, split into AES key || MAC key
- AES-256-CBC encryption
- HMAC-SHA256 over iv || ephemeral public key || ciphertext

plus raw ECDSA sign/verify and public-key derivation.

Security features:
- Encryption and MAC keys always come from the same SHA-512 digest,
  first half and second half respectively
- MAC is verified before any decryption is attempted
- Signatures are canonical (low-S)
- Every input is length-checked before cryptographic work starts

Every operation except get_public is a coroutine. Backends may be
synchronous (run inline, or in an executor if one is given) or
asynchronous (awaited).
"""

import asyncio
import functools
import inspect
import logging
from dataclasses import replace
from concurrent.futures import Executor
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from .constants import (
    AES_KEY_SIZE,
    IV_SIZE,
    KDF_OUTPUT_SIZE,
    PUBLIC_KEY_SIZE,
    UNCOMPRESSED_PREFIX,
)
from .envelope import Envelope
from .errors import BadMac, BadSignature, InvalidInput, InvalidKey
from .primitives import CryptographyBackend
from .validation import (
    as_bytes,
    require_iv,
    require_mac,
    require_message,
    require_private_key,
    require_public_key,
    require_size,
)


logger = logging.getLogger(__name__)


async def _maybe_await(x: Any) -> Any:
    return await x if inspect.isawaitable(x) else x


def split_key(digest: bytes) -> Tuple[bytes, bytes]:
    """
    Split a 64-byte SHA-512 digest into (encryption_key, mac_key).

    Bytes [0, 32) are the AES key, bytes [32, 64) the HMAC key.

    Raises:
        InvalidInput: If the digest is not 64 bytes
    """
    if len(digest) != KDF_OUTPUT_SIZE:
        raise InvalidInput(f"Key material must be {KDF_OUTPUT_SIZE} bytes, got {len(digest)}")
    return digest[:AES_KEY_SIZE], digest[AES_KEY_SIZE:]


class Ecies:
    """
    ECIES engine over secp256k1.

    Holds no key material. The backend and executor are fixed at
    construction; nothing else is stored.

    Example:
        engine = Ecies()
        private_key = engine.generate_private()
        public_key = engine.get_public(private_key)

        envelope = await engine.encrypt(public_key, b"Hello Bob!")
        plaintext = await engine.decrypt(private_key, envelope)
    """

    def __init__(self, backend: Any = None, executor: Optional[Executor] = None):
        """
        Initialize the engine.

        Args:
            backend: Primitive provider, CryptographyBackend if None
            executor: Run synchronous primitives in this executor instead
                of inline on the event loop
        """
        self._backend = backend if backend is not None else CryptographyBackend()
        self._executor = executor

    @property
    def backend(self) -> Any:
        return self._backend

    async def _call(self, func: Callable, *args: Any) -> Any:
        """Invoke a backend primitive and wait for its result."""
        if self._executor is not None and not inspect.iscoroutinefunction(func):
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(self._executor, functools.partial(func, *args))
        else:
            result = func(*args)
        return await _maybe_await(result)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def generate_private(self) -> bytes:
        """Generate a random valid 32-byte private key."""
        return self._backend.generate_private()

    def get_public(self, private_key: bytes) -> bytes:
        """
        Derive the uncompressed public key.

        Synchronous; requires a backend whose get_public is synchronous.

        Args:
            private_key: 32-byte private key

        Returns:
            65-byte public key (0x04 || X || Y)

        Raises:
            InvalidKey: If the private key is not 32 bytes or not a valid scalar
        """
        private_key = require_private_key(private_key)
        return self._sync_public(private_key, False)

    def get_public_compressed(self, private_key: bytes) -> bytes:
        """Derive the 33-byte compressed public key."""
        private_key = require_private_key(private_key)
        return self._sync_public(private_key, True)

    def _sync_public(self, private_key: bytes, compressed: bool) -> bytes:
        result = self._backend.get_public(private_key, compressed)
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise TypeError(
                f"get_public needs a synchronous backend; {type(self._backend).__name__} returned an awaitable"
            )
        return result

    # ------------------------------------------------------------------
    # Signatures
    # ------------------------------------------------------------------

    async def sign(self, private_key: bytes, message: bytes) -> bytes:
        """
        Sign a 1..32 byte message (normally a digest).

        Returns:
            DER-encoded, low-S ECDSA signature

        Raises:
            InvalidInput: Bad private key or message length
        """
        private_key = require_private_key(private_key)
        message = require_message(message)
        signature = await self._call(self._backend.sign, private_key, message)
        logger.debug("signed %d-byte message", len(message))
        return signature

    async def verify(self, public_key: bytes, message: bytes, signature: bytes) -> None:
        """
        Verify an ECDSA signature.

        Raises:
            InvalidInput: Malformed public key, message or signature type
            BadSignature: If the signature does not verify
        """
        public_key = require_public_key(public_key)
        message = require_message(message)
        signature = as_bytes(signature, "signature")
        if not await self._call(self._backend.verify, public_key, message, signature):
            raise BadSignature()

    # ------------------------------------------------------------------
    # Key agreement
    # ------------------------------------------------------------------

    async def derive(self, private_key_a: bytes, public_key_b: bytes) -> bytes:
        """
        ECDH between a private key and a peer public key.

        Returns:
            X coordinate of the shared point, big-endian, not zero-padded

        Raises:
            InvalidInput: Bad key lengths, prefix, or point not on the curve
        """
        private_key_a = require_private_key(private_key_a)
        public_key_b = require_public_key(public_key_b)
        return await self._call(self._backend.ecdh, private_key_a, public_key_b)

    async def _derive_keys(self, private_key: bytes, public_key: bytes) -> Tuple[bytes, bytes]:
        """ECDH -> SHA-512 -> (encryption_key, mac_key)."""
        px = await self._call(self._backend.ecdh, private_key, public_key)
        digest = await self._call(self._backend.sha512, px)
        return split_key(digest)

    # ------------------------------------------------------------------
    # ECIES
    # ------------------------------------------------------------------

    async def encrypt(self, public_key_to: bytes, message: bytes,
                      ephem_private_key: Optional[bytes] = None,
                      iv: Optional[bytes] = None) -> Envelope:
        """
        Encrypt a message to a public key.

        Args:
            public_key_to: Recipient's 65-byte public key
            message: Plaintext of any length
            ephem_private_key: Fixed ephemeral key (tests only); random if None
            iv: Fixed 16-byte IV (tests only); random if None

        Returns:
            Envelope with iv, ephem_public_key, ciphertext and mac

        Raises:
            PrimitiveUnavailable: If the backend lacks a required primitive
            InvalidInput: Bad recipient key, option lengths or message type
        """
        await self._call(self._backend.check_available)
        public_key_to = require_public_key(public_key_to)
        message = as_bytes(message, "message")

        if ephem_private_key is None:
            ephem_private_key = await self._call(self._backend.generate_private)
        else:
            ephem_private_key = require_private_key(ephem_private_key)
        ephem_public_key = await self._call(self._backend.get_public, ephem_private_key)

        encryption_key, mac_key = await self._derive_keys(ephem_private_key, public_key_to)

        if iv is None:
            iv = await self._call(self._backend.random_bytes, IV_SIZE)
        else:
            iv = require_iv(iv)

        ciphertext = await self._call(self._backend.aes_cbc_encrypt, iv, encryption_key, message)
        unsigned = Envelope(iv, ephem_public_key, ciphertext, b"")
        mac = await self._call(self._backend.hmac_sha256_sign, mac_key, unsigned.data_to_mac())

        logger.debug("encrypted %d-byte message into %d-byte ciphertext",
                     len(message), len(ciphertext))
        return replace(unsigned, mac=mac)

    async def decrypt(self, private_key: bytes,
                      envelope: Union[Envelope, Mapping[str, Any]]) -> bytes:
        """
        Authenticate and decrypt an envelope.

        The MAC is checked before decryption; an altered envelope never
        reaches the cipher.

        Args:
            private_key: Recipient's 32-byte private key
            envelope: Envelope, or a mapping with the same fields

        Returns:
            Decrypted plaintext

        Raises:
            PrimitiveUnavailable: If the backend lacks a required primitive
            InvalidInput: Bad private key or wrongly sized envelope fields
            BadMac: If the envelope fails authentication
            DecryptionFailed: If the cipher rejects an authenticated ciphertext
        """
        await self._call(self._backend.check_available)
        private_key = require_private_key(private_key)
        envelope = Envelope.coerce(envelope)
        iv = require_iv(envelope.iv)
        ephem_public_key = require_size(
            envelope.ephem_public_key, PUBLIC_KEY_SIZE, "ephemeral public key"
        )
        ciphertext = as_bytes(envelope.ciphertext, "ciphertext")
        mac = require_mac(envelope.mac)
        envelope = Envelope(iv, ephem_public_key, ciphertext, mac)

        # A correctly sized ephemeral key that is not a curve point can
        # only come from tampering
        if ephem_public_key[0] != UNCOMPRESSED_PREFIX:
            raise BadMac()
        try:
            encryption_key, mac_key = await self._derive_keys(private_key, ephem_public_key)
        except InvalidKey:
            raise
        except InvalidInput as exc:
            raise BadMac() from exc

        if not await self._call(self._backend.hmac_sha256_verify, mac_key, envelope.data_to_mac(), mac):
            raise BadMac()

        plaintext = await self._call(self._backend.aes_cbc_decrypt, iv, encryption_key, ciphertext)
        logger.debug("decrypted %d-byte ciphertext", len(ciphertext))
        return plaintext


# Stateless default instance behind the module-level functions
_default_engine = Ecies()


def generate_private() -> bytes:
    """Generate a random valid 32-byte private key."""
    return _default_engine.generate_private()


def get_public(private_key: bytes) -> bytes:
    """65-byte uncompressed public key for a 32-byte private key."""
    return _default_engine.get_public(private_key)


def get_public_compressed(private_key: bytes) -> bytes:
    """33-byte compressed public key for a 32-byte private key."""
    return _default_engine.get_public_compressed(private_key)


async def sign(private_key: bytes, message: bytes) -> bytes:
    return await _default_engine.sign(private_key, message)


async def verify(public_key: bytes, message: bytes, signature: bytes) -> None:
    await _default_engine.verify(public_key, message, signature)


async def derive(private_key_a: bytes, public_key_b: bytes) -> bytes:
    return await _default_engine.derive(private_key_a, public_key_b)


async def encrypt(public_key_to: bytes, message: bytes,
                  ephem_private_key: Optional[bytes] = None,
                  iv: Optional[bytes] = None) -> Envelope:
    return await _default_engine.encrypt(public_key_to, message,
                                         ephem_private_key=ephem_private_key, iv=iv)


async def decrypt(private_key: bytes,
                  envelope: Union[Envelope, Mapping[str, Any]]) -> bytes:
    return await _default_engine.decrypt(private_key, envelope)


# Self-test when run directly
if __name__ == "__main__":
    async def _selftest():
        print("ECIES Engine Test")
        print("=" * 70)

        bob_private = generate_private()
        bob_public = get_public(bob_private)
        print(f"  Bob public key: {bob_public.hex()[:64]}...")

        message = b"Hello Bob! This is a secure message from Alice."
        envelope = await encrypt(bob_public, message)
        print(f"  Envelope size: {len(envelope.to_bytes())} bytes")

        decrypted = await decrypt(bob_private, envelope)
        print(f"  Round trip: {'PASS' if decrypted == message else 'FAIL'}")

        signature = await sign(bob_private, b"\x01" * 32)
        await verify(bob_public, b"\x01" * 32, signature)
        print("  Signature: PASS")

    asyncio.run(_selftest())
