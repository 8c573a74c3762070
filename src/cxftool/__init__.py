"""cxftool - A Python library for Credential Exchange Format (CXF) documents.

This library provides a typed API for reading and writing the JSON
documents credential managers exchange when migrating a user's vault.
It prioritizes lossless round trips:
- Unknown credential types, extensions and enum values are preserved
- Unknown keys on known objects are written back unchanged
- Timestamps and encoded bytes are normalized on output

Example:
    from cxftool import Export, ImportOptions

    export = Export.open("export.json", ImportOptions(skip_invalid_items=True))
    for item in export.find_items(credential_type="basic-auth"):
        print(item.title)

    for issue in export.validate():
        print(issue)
    export.save("normalized.json")
"""

__version__ = "0.1.0"

from .encoding import B64Url, Base32
from .exceptions import (
    CxfError,
    DanglingReferenceError,
    DecodeError,
    EncodingError,
    FieldTypeMismatchError,
    FormatError,
    IncompatibleHpkeParametersError,
    IncorrectImporterKeyEncodingError,
    InvalidIso8601Error,
    InvalidJsonError,
    InvalidTimestampError,
    InvalidTypeError,
    InvalidValueError,
    MissingFieldError,
    MissingImporterKeyError,
    NotB64UrlEncodedError,
    NotBase32EncodedError,
    PayloadError,
    ProtocolError,
    SerializationError,
    TimestampError,
    UnsupportedVersionError,
)
from .export import Export, ExportSettings, ImportOptions, ValidationIssue
from .models import (
    Account,
    Collection,
    Credential,
    EditableField,
    Header,
    Item,
    LinkedItem,
    SharedExtension,
    UnknownCredential,
    UnknownExtension,
    Version,
)
from .protocol import (
    ErrorResponse,
    ExportRequest,
    ExportResponse,
    HpkeParameters,
    PayloadCipher,
    ProtocolVersion,
)

__all__ = [
    # Core classes
    "Export",
    "ExportSettings",
    "ImportOptions",
    "ValidationIssue",
    "B64Url",
    "Base32",
    # Document graph
    "Account",
    "Collection",
    "Credential",
    "EditableField",
    "Header",
    "Item",
    "LinkedItem",
    "SharedExtension",
    "UnknownCredential",
    "UnknownExtension",
    "Version",
    # Protocol
    "ErrorResponse",
    "ExportRequest",
    "ExportResponse",
    "HpkeParameters",
    "PayloadCipher",
    "ProtocolVersion",
    # Exceptions
    "CxfError",
    "DanglingReferenceError",
    "DecodeError",
    "EncodingError",
    "FieldTypeMismatchError",
    "FormatError",
    "IncompatibleHpkeParametersError",
    "IncorrectImporterKeyEncodingError",
    "InvalidIso8601Error",
    "InvalidJsonError",
    "InvalidTimestampError",
    "InvalidTypeError",
    "InvalidValueError",
    "MissingFieldError",
    "MissingImporterKeyError",
    "NotB64UrlEncodedError",
    "NotBase32EncodedError",
    "PayloadError",
    "ProtocolError",
    "SerializationError",
    "TimestampError",
    "UnsupportedVersionError",
]
