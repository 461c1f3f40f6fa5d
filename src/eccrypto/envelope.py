"""
ECIES envelope value object.

Wire format (no length prefixes):
    [iv (16) | ephem_public_key (65) | ciphertext (variable) | mac (32)]

The MAC covers everything before it: iv || ephem_public_key || ciphertext.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Union

from .constants import ENVELOPE_OVERHEAD, IV_SIZE, PUBLIC_KEY_SIZE, MAC_SIZE
from .errors import InvalidInput
from .validation import as_bytes


@dataclass(frozen=True)
class Envelope:
    """
    Output of ECIES encryption.

    Immutable once produced; every field is raw bytes.
    """
    iv: bytes                 # 16 bytes
    ephem_public_key: bytes   # 65 bytes, uncompressed
    ciphertext: bytes         # Variable length, multiple of 16
    mac: bytes                # 32 bytes, HMAC-SHA256

    def data_to_mac(self) -> bytes:
        """Bytes authenticated by the MAC."""
        return self.iv + self.ephem_public_key + self.ciphertext

    def to_bytes(self) -> bytes:
        """Serialize as iv || ephem_public_key || ciphertext || mac."""
        return self.data_to_mac() + self.mac

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Envelope':
        """
        Deserialize from bytes.

        Raises:
            InvalidInput: If data is too short to hold the fixed fields
        """
        data = as_bytes(data, "envelope")
        if len(data) < ENVELOPE_OVERHEAD:
            raise InvalidInput(
                f"Envelope too short: {len(data)} bytes, need at least {ENVELOPE_OVERHEAD}"
            )
        offset = 0

        iv = data[offset:offset + IV_SIZE]
        offset += IV_SIZE

        ephem_public_key = data[offset:offset + PUBLIC_KEY_SIZE]
        offset += PUBLIC_KEY_SIZE

        ciphertext = data[offset:len(data) - MAC_SIZE]
        mac = data[len(data) - MAC_SIZE:]

        return cls(iv, ephem_public_key, ciphertext, mac)

    def to_hex(self) -> str:
        """Serialize to hex string."""
        return self.to_bytes().hex()

    @classmethod
    def from_hex(cls, hex_str: str) -> 'Envelope':
        """Deserialize from hex string."""
        try:
            data = bytes.fromhex(hex_str)
        except (TypeError, ValueError) as exc:
            raise InvalidInput("Envelope is not valid hex") from exc
        return cls.from_bytes(data)

    @classmethod
    def from_mapping(cls, fields: Mapping[str, Any]) -> 'Envelope':
        """
        Build from a dict with iv, ephem_public_key (or ephemPublicKey),
        ciphertext and mac.
        """
        ephem = fields.get("ephem_public_key", fields.get("ephemPublicKey"))
        try:
            return cls(
                iv=as_bytes(fields["iv"], "iv"),
                ephem_public_key=as_bytes(ephem, "ephemeral public key"),
                ciphertext=as_bytes(fields["ciphertext"], "ciphertext"),
                mac=as_bytes(fields["mac"], "mac"),
            )
        except KeyError as exc:
            raise InvalidInput(f"Envelope is missing field {exc.args[0]!r}") from exc

    @classmethod
    def coerce(cls, value: Union['Envelope', Mapping[str, Any]]) -> 'Envelope':
        """Accept an Envelope or a mapping of its fields."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        raise InvalidInput(f"Expected an Envelope, got {type(value).__name__}")
