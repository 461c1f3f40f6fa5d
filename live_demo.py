#!/usr/bin/env python
"""
╔══════════════════════════════════════════════════════════════════════════════╗
║                          ECCRYPTO LIVE DEMO                                   ║
╚══════════════════════════════════════════════════════════════════════════════╝

This script walks through eccrypto step by step:
- Key generation and public key derivation
- ECDH shared secret agreement
- ECDSA signatures (low-S, DER)
- ECIES encryption and decryption
- Tamper detection
"""

import asyncio
import hashlib

import eccrypto
from eccrypto import BadMac, BadSignature, Envelope


def print_header(title):
    """Print a formatted section header"""
    print("\n" + "═" * 70)
    print(f"  {title}")
    print("═" * 70)


def print_step(step_num, description):
    """Print a numbered step"""
    print(f"\n  [{step_num}] {description}")


def pause(message="Press ENTER to continue..."):
    """Pause for presenter to explain"""
    print(f"\n  [PAUSE] {message}")
    input()


async def main():

    print("\n" * 2)
    print("╔" + "═" * 68 + "╗")
    print("║" + "ECCRYPTO - ECIES OVER SECP256K1".center(68) + "║")
    print("╚" + "═" * 68 + "╝")

    pause("Press ENTER to begin the demonstration...")

    print_header("PART 1: KEYS")

    print_step(1, "Generating key pairs for Alice and Bob")
    alice_private = eccrypto.generate_private()
    alice_public = eccrypto.get_public(alice_private)
    bob_private = eccrypto.generate_private()
    bob_public = eccrypto.get_public(bob_private)
    print(f"      Alice public key: {alice_public.hex()[:64]}...")
    print(f"      Bob public key:   {bob_public.hex()[:64]}...")
    print(f"      Compressed (Bob): {eccrypto.get_public_compressed(bob_private).hex()}")

    print_step(2, "Deriving the ECDH shared secret on both sides")
    alice_secret = await eccrypto.derive(alice_private, bob_public)
    bob_secret = await eccrypto.derive(bob_private, alice_public)
    print(f"      Alice: {alice_secret.hex()}")
    print(f"      Bob:   {bob_secret.hex()}")
    print(f"      Match: {'✓' if alice_secret == bob_secret else '✗'}")

    pause()

    print_header("PART 2: SIGNATURES")

    msg = hashlib.sha256(b"I owe Bob 10 coins").digest()
    print_step(3, "Alice signs SHA-256(message)")
    signature = await eccrypto.sign(alice_private, msg)
    print(f"      Signature (DER, low-S): {signature.hex()}")

    print_step(4, "Bob verifies the signature")
    await eccrypto.verify(alice_public, msg, signature)
    print("      ✓ Signature valid")

    print_step(5, "Mallory changes the amount")
    forged = hashlib.sha256(b"I owe Bob 1000 coins").digest()
    try:
        await eccrypto.verify(alice_public, forged, signature)
        print("      ✗ Forgery accepted!")
    except BadSignature:
        print("      ✓ Forgery rejected (BadSignature)")

    pause()

    print_header("PART 3: ECIES")

    plaintext = b"Hello Bob! This is a secure message from Alice."
    print_step(6, "Alice encrypts to Bob's public key")
    envelope = await eccrypto.encrypt(bob_public, plaintext)
    print(f"      IV:              {envelope.iv.hex()}")
    print(f"      Ephemeral key:   {envelope.ephem_public_key.hex()[:64]}...")
    print(f"      Ciphertext:      {envelope.ciphertext.hex()[:64]}...")
    print(f"      MAC:             {envelope.mac.hex()}")
    print(f"      Wire size:       {len(envelope.to_bytes())} bytes")

    print_step(7, "Bob decrypts")
    decrypted = await eccrypto.decrypt(bob_private, Envelope.from_bytes(envelope.to_bytes()))
    print(f"      {decrypted.decode()}")

    print_step(8, "Mallory flips one bit of the ciphertext")
    tampered = bytearray(envelope.to_bytes())
    tampered[16 + 65] ^= 0x01
    try:
        await eccrypto.decrypt(bob_private, Envelope.from_bytes(bytes(tampered)))
        print("      ✗ Tampered message accepted!")
    except BadMac:
        print("      ✓ Tampering detected before decryption (BadMac)")

    print_header("DEMO COMPLETE")


if __name__ == "__main__":
    asyncio.run(main())
