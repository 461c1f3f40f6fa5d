"""
Sizes and curve parameters shared across the package.
"""

# Key sizes
PRIVATE_KEY_SIZE = 32           # secp256k1 scalar
PUBLIC_KEY_SIZE = 65            # 0x04 || X || Y
UNCOMPRESSED_PREFIX = 0x04

# Signing
MIN_MESSAGE_SIZE = 1
MAX_MESSAGE_SIZE = 32           # messages are digests, never longer than the order

# ECIES
IV_SIZE = 16                    # AES block size
AES_KEY_SIZE = 32               # 256 bits
MAC_KEY_SIZE = 32
MAC_SIZE = 32                   # HMAC-SHA256 tag
KDF_OUTPUT_SIZE = AES_KEY_SIZE + MAC_KEY_SIZE  # SHA-512 digest

# Smallest serialized envelope: empty ciphertext is never produced, but
# from_bytes only needs the fixed fields to be present
ENVELOPE_OVERHEAD = IV_SIZE + PUBLIC_KEY_SIZE + MAC_SIZE

# secp256k1 group order
CURVE_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
HALF_CURVE_ORDER = CURVE_ORDER // 2
