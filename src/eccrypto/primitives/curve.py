"""
secp256k1 Curve Operations

Thin layer over ``cryptography``'s elliptic curve support:
- raw 32-byte scalars -> key objects
- uncompressed / compressed point encoding
- ECDH returning the X coordinate without padding
- ECDSA over a caller-supplied digest, normalized to low-S, DER-encoded

Errors from ``cryptography`` are translated to eccrypto errors here so
nothing above this layer needs to know about them.
"""

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    decode_dss_signature,
    encode_dss_signature,
)
from cryptography.hazmat.backends import default_backend

from ..constants import (
    CURVE_ORDER,
    HALF_CURVE_ORDER,
    MAX_MESSAGE_SIZE,
)
from ..errors import InvalidInput, InvalidKey, PrimitiveUnavailable


# Constants
CURVE = ec.SECP256K1()
# Messages are already digests; the hash here only fixes the expected length
DIGEST_ALGORITHM = ec.ECDSA(Prehashed(hashes.SHA256()))


def int_to_bytes(value: int) -> bytes:
    """
    Minimal big-endian encoding of a non-negative integer.

    Zero encodes as a single zero byte. No left padding is applied, so a
    value below 2**248 yields fewer than 32 bytes.
    """
    length = max(1, (value.bit_length() + 7) // 8)
    return value.to_bytes(length, "big")


def is_valid_scalar(private_key: bytes) -> bool:
    """Check 0 < k < n for a raw private key."""
    value = int.from_bytes(private_key, "big")
    return 0 < value < CURVE_ORDER


def load_private_key(private_key: bytes) -> ec.EllipticCurvePrivateKey:
    """
    Build a private key object from a raw big-endian scalar.

    Scalars at or above n are reduced modulo n.

    Raises:
        InvalidKey: If the scalar is zero modulo the curve order
        PrimitiveUnavailable: If the OpenSSL build lacks secp256k1
    """
    value = int.from_bytes(private_key, "big") % CURVE_ORDER
    if value == 0:
        raise InvalidKey("Bad private key")
    try:
        return ec.derive_private_key(value, CURVE, default_backend())
    except UnsupportedAlgorithm as exc:
        raise PrimitiveUnavailable("secp256k1 is not supported by this backend") from exc
    except ValueError as exc:
        raise InvalidKey("Bad private key") from exc


def load_public_key(public_key: bytes) -> ec.EllipticCurvePublicKey:
    """
    Parse an encoded point.

    Raises:
        InvalidInput: If the bytes do not encode a point on secp256k1
    """
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(CURVE, public_key)
    except UnsupportedAlgorithm as exc:
        raise PrimitiveUnavailable("secp256k1 is not supported by this backend") from exc
    except ValueError as exc:
        raise InvalidInput("Bad public key") from exc


def to_digest(message: bytes) -> bytes:
    """
    Left-pad a 1..32 byte message to 32 bytes.

    The integer value of the digest is unchanged, which is what ECDSA
    signs, so short messages sign the same as their padded form.
    """
    return message.rjust(MAX_MESSAGE_SIZE, b"\x00")


def normalize_signature(signature: bytes) -> bytes:
    """Rewrite a DER signature into canonical low-S form."""
    r, s = decode_dss_signature(signature)
    if s > HALF_CURVE_ORDER:
        s = CURVE_ORDER - s
    return encode_dss_signature(r, s)


def is_low_s(signature: bytes) -> bool:
    _, s = decode_dss_signature(signature)
    return s <= HALF_CURVE_ORDER


class Secp256k1:
    """
    Stateless secp256k1 engine.

    All methods take and return raw bytes. Instances hold no key material
    and can be shared freely.
    """

    def public_key(self, private_key: bytes, compressed: bool = False) -> bytes:
        """
        Compute private_key * G.

        Args:
            private_key: 32-byte scalar
            compressed: Return the 33-byte SEC1 form instead of 65 bytes

        Returns:
            Encoded public point
        """
        key = load_private_key(private_key)
        point_format = (
            serialization.PublicFormat.CompressedPoint
            if compressed
            else serialization.PublicFormat.UncompressedPoint
        )
        return key.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=point_format
        )

    def ecdh(self, private_key: bytes, public_key: bytes) -> bytes:
        """
        ECDH shared secret.

        Returns the X coordinate of private_key * public_key as a minimal
        big-endian byte string (leading zero bytes removed).
        """
        key = load_private_key(private_key)
        peer = load_public_key(public_key)
        shared_x = key.exchange(ec.ECDH(), peer)
        return int_to_bytes(int.from_bytes(shared_x, "big"))

    def sign(self, private_key: bytes, message: bytes) -> bytes:
        """Sign a digest; the result is DER in low-S form."""
        key = load_private_key(private_key)
        signature = key.sign(to_digest(message), DIGEST_ALGORITHM)
        return normalize_signature(signature)

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """
        Verify a DER signature over a digest.

        Returns:
            True if valid, False otherwise (including unparseable DER)
        """
        peer = load_public_key(public_key)
        try:
            peer.verify(signature, to_digest(message), DIGEST_ALGORITHM)
        except InvalidSignature:
            return False
        return True
