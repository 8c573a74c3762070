"""Byte-sequence codecs used for identifiers and secrets.

CXF carries every opaque byte value as text:
- B64Url: unpadded base64url (RFC 4648 section 5) for ids, keys, hashes
- Base32: unpadded base32 (RFC 4648 section 6) for TOTP secrets

Producers in the wild disagree about padding and case, so decoding is
lenient about those, but encoding always emits the canonical unpadded
form. Anything outside the alphabet is rejected rather than skipped.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

from Cryptodome.Random import get_random_bytes

from .exceptions import NotB64UrlEncodedError, NotBase32EncodedError

_B64URL_SYMBOLS = re.compile(r"[A-Za-z0-9_-]*")
_BASE32_SYMBOLS = re.compile(r"[A-Z2-7]*")

# Remainders that no whole number of bytes can produce
_B64URL_INVALID_REMAINDERS = frozenset({1})
_BASE32_INVALID_REMAINDERS = frozenset({1, 3, 6})


def _as_bytes(data: bytes | bytearray | memoryview) -> bytes:
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"expected bytes, got {type(data).__name__}")


@dataclass(frozen=True, slots=True)
class B64Url:
    """Opaque bytes that travel as unpadded base64url text.

    Equality and hashing are defined over the decoded bytes, so two
    B64Url values decoded from padded and unpadded text are equal.

    Attributes:
        data: The decoded bytes
    """

    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _as_bytes(self.data))

    @classmethod
    def decode(cls, text: str) -> B64Url:
        """Decode base64url text, tolerating trailing padding.

        Args:
            text: Base64url encoded string (padded or unpadded)

        Returns:
            B64Url holding the decoded bytes

        Raises:
            NotB64UrlEncodedError: If the text has characters outside the
                base64url alphabet or an impossible length
        """
        if not isinstance(text, str):
            raise NotB64UrlEncodedError()
        stripped = text.rstrip("=")
        if (
            not _B64URL_SYMBOLS.fullmatch(stripped)
            or len(stripped) % 4 in _B64URL_INVALID_REMAINDERS
        ):
            raise NotB64UrlEncodedError()
        padded = stripped + "=" * (-len(stripped) % 4)
        try:
            return cls(base64.urlsafe_b64decode(padded))
        except (binascii.Error, ValueError) as e:
            raise NotB64UrlEncodedError() from e

    @classmethod
    def random(cls, size: int = 16) -> B64Url:
        """Generate a random machine identifier.

        Args:
            size: Number of random bytes (CXF ids are at most 64)

        Returns:
            New B64Url with cryptographically random content
        """
        if not 0 < size <= 64:
            raise ValueError("Identifier size must be between 1 and 64 bytes")
        return cls(get_random_bytes(size))

    def encode(self) -> str:
        """Encode as unpadded base64url."""
        return base64.urlsafe_b64encode(self.data).rstrip(b"=").decode("ascii")

    def __str__(self) -> str:
        return self.encode()

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True, slots=True)
class Base32:
    """Opaque bytes that travel as unpadded base32 text.

    Used for TOTP shared secrets, which users often copy with lowercase
    letters, spaces between groups, or trailing padding.

    Attributes:
        data: The decoded bytes
    """

    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", _as_bytes(self.data))

    @classmethod
    def decode(cls, text: str) -> Base32:
        """Decode base32 text.

        Case is normalized, whitespace is ignored and trailing padding is
        stripped. Every other character must belong to the alphabet.

        Args:
            text: Base32 encoded string

        Returns:
            Base32 holding the decoded bytes

        Raises:
            NotBase32EncodedError: If the text isn't valid base32
        """
        if not isinstance(text, str) or not text.isascii():
            raise NotBase32EncodedError()
        normalized = "".join(text.split()).upper().rstrip("=")
        if (
            not _BASE32_SYMBOLS.fullmatch(normalized)
            or len(normalized) % 8 in _BASE32_INVALID_REMAINDERS
        ):
            raise NotBase32EncodedError()
        padded = normalized + "=" * (-len(normalized) % 8)
        try:
            return cls(base64.b32decode(padded))
        except (binascii.Error, ValueError) as e:
            raise NotBase32EncodedError() from e

    def encode(self) -> str:
        """Encode as unpadded base32."""
        return base64.b32encode(self.data).rstrip(b"=").decode("ascii")

    def __str__(self) -> str:
        return self.encode()

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        # TOTP seeds are secrets
        return f"Base32(<{len(self.data)} bytes>)"
