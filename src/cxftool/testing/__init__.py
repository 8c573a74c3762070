"""Test utilities for cxftool.

WARNING: The mock cipher in this module is for TESTING ONLY.
It is NOT an implementation of HPKE.

The credential exchange protocol encrypts the export document with HPKE
to the importer's public key. MockPayloadCipher instead encrypts with a
symmetric key both sides already share, which is enough to exercise
ExportResponse.seal() and ExportResponse.open() in:
- Unit tests
- Interop fixtures that need a sealed payload

DO NOT use this mock to protect real credential exports.
"""

from __future__ import annotations

import logging

from Cryptodome.Cipher import AES
from Cryptodome.Random import get_random_bytes

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
TAG_SIZE = 16


class MockPayloadCipher:
    """AES-256-GCM stand-in for an HPKE context.

    Ciphertext layout is nonce (12) + tag (16) + ciphertext.

    WARNING: This is for TESTING ONLY. See module docstring for details.

    Example:
        >>> cipher = MockPayloadCipher(key=bytes(32))
        >>> cipher.decrypt(cipher.encrypt(b"payload"))
        b'payload'
    """

    def __init__(self, key: bytes | None = None) -> None:
        """Initialize with a key.

        Args:
            key: 32-byte AES key (random if omitted)
        """
        if key is None:
            key = get_random_bytes(32)
        if len(key) != 32:
            raise ValueError(f"Key must be 32 bytes, got {len(key)}")
        self._key = key

    def encrypt(self, plaintext: bytes) -> bytes:
        cipher = AES.new(self._key, AES.MODE_GCM, nonce=get_random_bytes(NONCE_SIZE))
        ciphertext, tag = cipher.encrypt_and_digest(plaintext)
        return bytes(cipher.nonce) + tag + ciphertext

    def decrypt(self, ciphertext: bytes) -> bytes:
        """Decrypt and verify a payload from encrypt().

        Raises:
            ValueError: If the payload is truncated or fails authentication
        """
        if len(ciphertext) < NONCE_SIZE + TAG_SIZE:
            raise ValueError(f"Payload too short: {len(ciphertext)} bytes")

        nonce = ciphertext[:NONCE_SIZE]
        tag = ciphertext[NONCE_SIZE : NONCE_SIZE + TAG_SIZE]
        body = ciphertext[NONCE_SIZE + TAG_SIZE :]

        cipher = AES.new(self._key, AES.MODE_GCM, nonce=nonce)
        try:
            plaintext = cipher.decrypt_and_verify(body, tag)
        except ValueError as e:
            raise ValueError("Payload decryption failed - wrong key or corrupted data") from e

        logger.debug("Decrypted payload (%d bytes)", len(plaintext))
        return plaintext

    def __repr__(self) -> str:
        """Return string representation (hides key)."""
        return f"MockPayloadCipher(<{len(self._key)} byte key>)"


__all__ = ["MockPayloadCipher"]
