"""
Security tests for the ECIES engine.

Tests specifically for security-related scenarios:
- Single-bit tampering of every envelope field
- MAC checked strictly before decryption
- Padding failures after a valid MAC
- Missing primitives
"""

import hashlib
import hmac

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

import eccrypto
from eccrypto import (
    BadMac,
    CryptographyBackend,
    DecryptionFailed,
    Ecies,
    Envelope,
    InvalidInput,
    PrimitiveUnavailable,
)
from tests.vectors import G, scalar


EPHEM = b"\x07" * 32
IV = b"\x09" * 16


def flip(data: bytes, byte_pos: int, bit_pos: int) -> bytes:
    modified = bytearray(data)
    modified[byte_pos] ^= (1 << bit_pos)
    return bytes(modified)


def replace(envelope: Envelope, **fields) -> Envelope:
    values = {
        "iv": envelope.iv,
        "ephem_public_key": envelope.ephem_public_key,
        "ciphertext": envelope.ciphertext,
        "mac": envelope.mac,
    }
    values.update(fields)
    return Envelope(**values)


class RecordingBackend(CryptographyBackend):
    """CryptographyBackend that records which primitives were called."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def ecdh(self, private_key, public_key):
        self.calls.append("ecdh")
        return super().ecdh(private_key, public_key)

    def hmac_sha256_verify(self, key, data, tag):
        self.calls.append("hmac_sha256_verify")
        return super().hmac_sha256_verify(key, data, tag)

    def aes_cbc_decrypt(self, iv, key, data):
        self.calls.append("aes_cbc_decrypt")
        return super().aes_cbc_decrypt(iv, key, data)


class MissingCurveBackend(RecordingBackend):
    """Backend whose OpenSSL build lacks secp256k1."""

    def _probe(self):
        return "secp256k1"


@pytest_asyncio.fixture
async def sealed(bob):
    """(bob_private, envelope) for a short message."""
    bob_private, bob_public = bob
    envelope = await eccrypto.encrypt(bob_public, b"Sensitive data!")
    return bob_private, envelope


class TestTampering:
    """Any single-bit change to an envelope must raise BadMac."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field", ["iv", "ephem_public_key", "ciphertext", "mac"])
    async def test_single_bit_flip(self, bob, field):
        bob_private, bob_public = bob
        envelope = await eccrypto.encrypt(bob_public, b"Sensitive data!")
        original = getattr(envelope, field)

        for byte_pos in range(len(original)):
            for bit_pos in range(8):
                tampered = replace(envelope, **{field: flip(original, byte_pos, bit_pos)})
                with pytest.raises(BadMac):
                    await eccrypto.decrypt(bob_private, tampered)

    @pytest.mark.asyncio
    async def test_wrong_recipient(self, alice, bob):
        """Decrypting with another private key fails authentication."""
        alice_private, _ = alice
        _, bob_public = bob
        envelope = await eccrypto.encrypt(bob_public, b"for bob only")

        with pytest.raises(BadMac):
            await eccrypto.decrypt(alice_private, envelope)

    @pytest.mark.asyncio
    async def test_truncated_ciphertext(self, bob):
        bob_private, bob_public = bob
        envelope = await eccrypto.encrypt(bob_public, b"x" * 40)

        for length in (0, 16, len(envelope.ciphertext) - 1):
            with pytest.raises(BadMac):
                await eccrypto.decrypt(bob_private, replace(envelope, ciphertext=envelope.ciphertext[:length]))

    @pytest.mark.asyncio
    async def test_swapped_ephemeral_key(self, bob):
        """Substituting a different valid ephemeral key fails authentication."""
        bob_private, bob_public = bob
        envelope = await eccrypto.encrypt(bob_public, b"x")
        other = eccrypto.get_public(eccrypto.generate_private())

        with pytest.raises(BadMac):
            await eccrypto.decrypt(bob_private, replace(envelope, ephem_public_key=other))

    def test_bad_mac_is_not_invalid_input(self):
        assert not issubclass(BadMac, InvalidInput)


class TestAuthenticateThenDecrypt:
    """The cipher is never invoked on unauthenticated data."""

    @pytest.mark.asyncio
    async def test_no_decryption_on_bad_mac(self, sealed):
        bob_private, envelope = sealed
        backend = RecordingBackend()
        engine = Ecies(backend=backend)

        with pytest.raises(BadMac):
            await engine.decrypt(bob_private, replace(envelope, mac=flip(envelope.mac, 0, 0)))

        assert backend.calls == ["ecdh", "hmac_sha256_verify"]

    @pytest.mark.asyncio
    async def test_no_work_on_invalid_ephemeral_point(self, sealed):
        bob_private, envelope = sealed
        backend = RecordingBackend()
        engine = Ecies(backend=backend)
        off_curve = b"\x04" + b"\x01" * 64

        with pytest.raises(BadMac):
            await engine.decrypt(bob_private, replace(envelope, ephem_public_key=off_curve))

        assert "hmac_sha256_verify" not in backend.calls
        assert "aes_cbc_decrypt" not in backend.calls

    @pytest.mark.asyncio
    async def test_order_on_success(self, sealed):
        bob_private, envelope = sealed
        backend = RecordingBackend()

        assert await Ecies(backend=backend).decrypt(bob_private, envelope) == b"Sensitive data!"
        assert backend.calls == ["ecdh", "hmac_sha256_verify", "aes_cbc_decrypt"]


def authenticated_envelope(ciphertext: bytes) -> Envelope:
    """Envelope to G with a valid MAC over an arbitrary ciphertext."""
    ephem_public_key = eccrypto.get_public(EPHEM)
    # EPHEM * G, then the X coordinate of that point
    px = ephem_public_key[1:33].lstrip(b"\x00")
    key_material = hashlib.sha512(px).digest()
    mac = hmac.new(key_material[32:], IV + ephem_public_key + ciphertext, hashlib.sha256).digest()
    return Envelope(IV, ephem_public_key, ciphertext, mac)


def raw_aes_encrypt(data: bytes) -> bytes:
    """AES-CBC without padding under the key authenticated_envelope derives."""
    px = eccrypto.get_public(EPHEM)[1:33].lstrip(b"\x00")
    encryption_key = hashlib.sha512(px).digest()[:32]
    encryptor = Cipher(algorithms.AES(encryption_key), modes.CBC(IV)).encryptor()
    return encryptor.update(data) + encryptor.finalize()


class TestDecryptionFailed:
    """Cipher-level failures after a valid MAC raise DecryptionFailed."""

    @pytest.mark.asyncio
    async def test_helper_matches_encrypt(self):
        """The helper builds the same envelope encrypt() does."""
        envelope = await eccrypto.encrypt(G, b"test", ephem_private_key=EPHEM, iv=IV)
        assert authenticated_envelope(envelope.ciphertext) == envelope

    @pytest.mark.asyncio
    async def test_bad_padding(self):
        envelope = authenticated_envelope(raw_aes_encrypt(b"\x00" * 16))

        with pytest.raises(DecryptionFailed):
            await eccrypto.decrypt(scalar(1), envelope)

    @pytest.mark.asyncio
    async def test_partial_block(self):
        envelope = authenticated_envelope(b"\x00" * 15)

        with pytest.raises(DecryptionFailed):
            await eccrypto.decrypt(scalar(1), envelope)

    def test_distinct_from_bad_mac(self):
        assert not issubclass(DecryptionFailed, BadMac)


class TestPrimitiveUnavailable:
    """Missing primitives fail before any computation."""

    @pytest.mark.asyncio
    async def test_encrypt(self, bob):
        _, bob_public = bob
        backend = MissingCurveBackend()

        with pytest.raises(PrimitiveUnavailable, match="secp256k1"):
            await Ecies(backend=backend).encrypt(bob_public, b"x")
        assert backend.calls == []

    @pytest.mark.asyncio
    async def test_decrypt(self, sealed):
        bob_private, envelope = sealed
        backend = MissingCurveBackend()

        with pytest.raises(PrimitiveUnavailable):
            await Ecies(backend=backend).decrypt(bob_private, envelope)
        assert backend.calls == []

    def test_default_backend_available(self):
        CryptographyBackend().check_available()

    def test_is_runtime_error(self):
        assert issubclass(PrimitiveUnavailable, RuntimeError)
