"""Security-sensitive helpers for cxftool.

This module contains the hashing and comparison code used to check
file attachments against their integrity hashes.
"""

from .integrity import (
    SHA256_DIGEST_SIZE,
    constant_time_compare,
    sha256,
    verify_sha256,
)

__all__ = [
    "SHA256_DIGEST_SIZE",
    "constant_time_compare",
    "sha256",
    "verify_sha256",
]
