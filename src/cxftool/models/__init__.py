"""Data models for CXF export documents.

This module provides typed Python classes for everything an export
document contains: the header graph, credentials, editable fields and
extensions. Importing it registers every known credential type.
"""

from .credential import Credential, UnknownCredential, credential_types, decode_credential
from .document import CustomFieldsCredential, FileCredential, NoteCredential
from .enums import (
    AndroidAppHashAlgorithm,
    FieldType,
    OpenEnum,
    OpenIntEnum,
    OTPHashAlgorithm,
    SharingAccessorPermission,
    SharingAccessorType,
    WifiNetworkSecurityType,
)
from .extensions import (
    Extension,
    SharedExtension,
    SharingAccessor,
    UnknownExtension,
    decode_extension,
)
from .fields import (
    EditableField,
    EditableFieldBoolean,
    EditableFieldConcealedString,
    EditableFieldCountryCode,
    EditableFieldDate,
    EditableFieldEmail,
    EditableFieldNumber,
    EditableFieldRecord,
    EditableFieldString,
    EditableFieldSubdivisionCode,
    EditableFieldUnknown,
    EditableFieldWifiNetworkSecurityType,
    EditableFieldYearMonth,
)
from .header import CURRENT_VERSION, Account, Collection, Header, Item, Version
from .identity import (
    AddressCredential,
    CreditCardCredential,
    DriversLicenseCredential,
    IdentityDocumentCredential,
    PassportCredential,
    PersonNameCredential,
)
from .login import (
    ApiKeyCredential,
    BasicAuthCredential,
    GeneratedPasswordCredential,
    SshKeyCredential,
    TotpCredential,
    WifiCredential,
)
from .passkey import (
    Fido2Extensions,
    Fido2HmacSecret,
    Fido2LargeBlob,
    Fido2SupplementalKeys,
    PasskeyCredential,
)
from .reference import ItemReferenceCredential, LinkedItem
from .scope import AndroidAppCertificateFingerprint, AndroidAppIdCredential, CredentialScope
from .wire import DecodeContext, DecodeIssue, ExtensionDecoder, WireModel

__all__ = [
    # Document graph
    "CURRENT_VERSION",
    "Account",
    "Collection",
    "Header",
    "Item",
    "LinkedItem",
    "Version",
    "CredentialScope",
    "AndroidAppIdCredential",
    "AndroidAppCertificateFingerprint",
    # Credentials
    "Credential",
    "UnknownCredential",
    "credential_types",
    "decode_credential",
    "AddressCredential",
    "ApiKeyCredential",
    "BasicAuthCredential",
    "CreditCardCredential",
    "CustomFieldsCredential",
    "DriversLicenseCredential",
    "FileCredential",
    "GeneratedPasswordCredential",
    "IdentityDocumentCredential",
    "ItemReferenceCredential",
    "NoteCredential",
    "PassportCredential",
    "PasskeyCredential",
    "PersonNameCredential",
    "SshKeyCredential",
    "TotpCredential",
    "WifiCredential",
    "Fido2Extensions",
    "Fido2HmacSecret",
    "Fido2LargeBlob",
    "Fido2SupplementalKeys",
    # Editable fields
    "EditableField",
    "EditableFieldRecord",
    "EditableFieldBoolean",
    "EditableFieldConcealedString",
    "EditableFieldCountryCode",
    "EditableFieldDate",
    "EditableFieldEmail",
    "EditableFieldNumber",
    "EditableFieldString",
    "EditableFieldSubdivisionCode",
    "EditableFieldUnknown",
    "EditableFieldWifiNetworkSecurityType",
    "EditableFieldYearMonth",
    # Extensions
    "Extension",
    "SharedExtension",
    "SharingAccessor",
    "UnknownExtension",
    "decode_extension",
    # Enumerations
    "OpenEnum",
    "OpenIntEnum",
    "AndroidAppHashAlgorithm",
    "FieldType",
    "OTPHashAlgorithm",
    "SharingAccessorPermission",
    "SharingAccessorType",
    "WifiNetworkSecurityType",
    # Wire mapping
    "DecodeContext",
    "DecodeIssue",
    "ExtensionDecoder",
    "WireModel",
]
