"""Integrity hashes for file attachments.

A file credential records the SHA-256 of the decrypted file content so
the importer can check the attachment it unpacked is the one described.
"""

from __future__ import annotations

import hmac

from Cryptodome.Hash import SHA256

SHA256_DIGEST_SIZE = 32


def sha256(data: bytes) -> bytes:
    """Compute the SHA-256 digest of data.

    Args:
        data: Bytes to hash

    Returns:
        32-byte digest
    """
    return SHA256.new(data).digest()


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """Compare two byte strings without leaking where they differ.

    Args:
        a: First value
        b: Second value

    Returns:
        True if the values are equal
    """
    return hmac.compare_digest(a, b)


def verify_sha256(data: bytes, expected: bytes) -> bool:
    """Check data against an expected SHA-256 digest."""
    if len(expected) != SHA256_DIGEST_SIZE:
        return False
    return constant_time_compare(sha256(data), expected)
