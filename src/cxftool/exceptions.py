"""Custom exception hierarchy for cxftool.

This module provides a rich exception hierarchy for better error handling
and user feedback. All exceptions inherit from CxfError.

Exception Hierarchy:
    CxfError (base)
    ├── DecodeError
    │   ├── FormatError
    │   │   ├── InvalidJsonError
    │   │   ├── MissingFieldError
    │   │   ├── InvalidTypeError
    │   │   ├── InvalidValueError
    │   │   └── FieldTypeMismatchError
    │   └── EncodingError
    │       ├── NotB64UrlEncodedError
    │       ├── NotBase32EncodedError
    │       └── TimestampError
    │           ├── InvalidTimestampError
    │           └── InvalidIso8601Error
    ├── SerializationError
    ├── DanglingReferenceError
    └── ProtocolError
        ├── UnsupportedVersionError
        ├── IncompatibleHpkeParametersError
        ├── MissingImporterKeyError
        ├── IncorrectImporterKeyEncodingError
        └── PayloadError

Unknown credential types, extension names and enum values are never errors.
They decode to "unknown" values that preserve the original data.

Security Note:
    Exception messages never include field values. They name the location
    of the problem (see CxfError.path) without echoing secrets.
"""

from __future__ import annotations

from typing import Any

PathSegment = str | int


def format_path(path: list[PathSegment]) -> str:
    """Render a decode path as ``accounts[0].items[2].title``."""
    rendered = ""
    for segment in path:
        if isinstance(segment, int):
            rendered += f"[{segment}]"
        elif rendered:
            rendered += f".{segment}"
        else:
            rendered = segment
    return rendered


def json_kind(value: Any) -> str:
    """Name the JSON kind of a decoded value, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class CxfError(Exception):
    """Base exception for all cxftool errors.

    All exceptions raised by cxftool inherit from this class,
    making it easy to catch all library-specific errors.

    Attributes:
        message: Description of the problem without location
        path: Keys and list indices leading to the offending value
    """

    def __init__(self, message: str = "", *, path: list[PathSegment] | None = None) -> None:
        self.message = message
        self.path: list[PathSegment] = list(path or [])
        super().__init__(message)

    @property
    def location(self) -> str:
        """The offending location, e.g. ``accounts[0].items[1].id``."""
        return format_path(self.path)

    def __str__(self) -> str:
        if self.path:
            return f"{self.location}: {self.message}"
        return self.message


# --- Decode Errors ---


class DecodeError(CxfError):
    """Error while turning JSON into the CXF object graph.

    Raised for malformed or inconsistent data in known fields. The whole
    document fails to decode unless the caller opted into skipping
    invalid items.
    """


class FormatError(DecodeError):
    """Document structure doesn't match the CXF schema.

    Covers missing keys, wrong JSON types and values that do not parse.
    """


class InvalidJsonError(FormatError):
    """Payload isn't valid UTF-8 JSON."""

    def __init__(self, message: str = "Invalid JSON payload") -> None:
        super().__init__(message)


class MissingFieldError(FormatError):
    """A required key is absent or null."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"missing required field {field_name!r}")


class InvalidTypeError(FormatError):
    """A value has the wrong JSON kind (e.g. boolean where a string is expected)."""

    def __init__(self, expected: str, actual: Any) -> None:
        self.expected = expected
        self.actual = json_kind(actual)
        super().__init__(f"expected {expected}, found {self.actual}")


class InvalidValueError(FormatError):
    """A value has the right JSON kind but does not parse.

    For example a year-month written as ``2025/02`` or a boolean
    field holding ``"yes"``.
    """


class FieldTypeMismatchError(FormatError):
    """An editable field's ``fieldType`` disagrees with its value type."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"fieldType {actual!r} does not match value type {expected!r}"
        )


# --- Encoding Errors ---


class EncodingError(DecodeError):
    """Error in a textual codec (base64url, base32, timestamps)."""


class NotB64UrlEncodedError(EncodingError):
    """Data isn't base64url encoded."""

    def __init__(self, message: str = "Data isn't base64url encoded") -> None:
        super().__init__(message)


class NotBase32EncodedError(EncodingError):
    """Data isn't base32 encoded."""

    def __init__(self, message: str = "Data isn't base32 encoded") -> None:
        super().__init__(message)


class TimestampError(EncodingError):
    """Timestamp cannot be decoded."""


class InvalidTimestampError(TimestampError):
    """Epoch integer is outside the representable range."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"invalid timestamp: {value}")


class InvalidIso8601Error(TimestampError):
    """Timestamp string is not an RFC 3339 date-time with an offset."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"invalid ISO8601: {reason}")


# --- Encode Errors ---


class SerializationError(CxfError):
    """Failed to serialize a document.

    Raised when the graph holds content that cannot be written as UTF-8
    JSON (for example lone surrogates in a string).
    """


# --- Graph Errors ---


class DanglingReferenceError(CxfError):
    """A LinkedItem doesn't resolve to an item in the export.

    This is only raised when the caller asks for strict resolution:
    partial exports legitimately contain references to items that
    were not included.
    """

    def __init__(self, message: str = "Linked item not found in export") -> None:
        super().__init__(message)


# --- Protocol Errors ---


class ProtocolError(CxfError):
    """Error at the export/import protocol boundary."""


class UnsupportedVersionError(ProtocolError):
    """The exchange uses a protocol version this library doesn't support."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"Unsupported protocol version: {version}")


class IncompatibleHpkeParametersError(ProtocolError):
    """None of the importer's HPKE parameter sets are supported."""

    def __init__(
        self, message: str = "No compatible HPKE parameters offered by importer"
    ) -> None:
        super().__init__(message)


class MissingImporterKeyError(ProtocolError):
    """The selected HPKE parameters carry no importer public key."""

    def __init__(self, message: str = "Importer did not provide a public key") -> None:
        super().__init__(message)


class IncorrectImporterKeyEncodingError(ProtocolError):
    """The importer public key is not a JSON Web Key object."""

    def __init__(self, message: str = "Importer public key is not a JWK object") -> None:
        super().__init__(message)


class PayloadError(ProtocolError):
    """The encrypted payload could not be opened.

    The message stays generic to avoid leaking details about the key
    material involved.
    """

    def __init__(self, message: str = "Failed to decrypt export payload") -> None:
        super().__init__(message)
