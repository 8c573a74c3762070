"""Login credentials: passwords, one-time codes, keys and networks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..encoding import B64Url, Base32
from .credential import Credential
from .enums import OTPHashAlgorithm
from .fields import (
    BOOLEAN_FIELD,
    CONCEALED_FIELD,
    DATE_FIELD,
    STRING_FIELD,
    WIFI_SECURITY_FIELD,
    EditableField,
    EditableFieldBoolean,
    EditableFieldConcealedString,
    EditableFieldDate,
    EditableFieldString,
    EditableFieldWifiNetworkSecurityType,
)
from .wire import B64URL, BASE32, STR, U8, EnumCodec, optional, required


@dataclass(frozen=True, kw_only=True)
class BasicAuthCredential(Credential):
    """Username and password for a website or service.

    Where the credential applies is set by the item's scope.
    """

    TYPE: ClassVar[str] = "basic-auth"

    username: EditableField[EditableFieldString] | None = optional(STRING_FIELD)
    password: EditableField[EditableFieldConcealedString] | None = optional(CONCEALED_FIELD)


@dataclass(frozen=True, kw_only=True)
class TotpCredential(Credential):
    """Shared secret of a time-based one-time password generator (RFC 6238).

    Attributes:
        secret: The shared secret
        period: Seconds each code is valid for
        digits: Length of a generated code
        algorithm: HMAC hash algorithm
        username: Account name shown by authenticator apps
        issuer: Service name shown by authenticator apps
    """

    TYPE: ClassVar[str] = "totp"

    secret: Base32 = required(BASE32)
    period: int = required(U8)
    digits: int = required(U8)
    username: str | None = optional(STR)
    algorithm: OTPHashAlgorithm = required(EnumCodec(OTPHashAlgorithm))
    issuer: str | None = optional(STR)


@dataclass(frozen=True, kw_only=True)
class SshKeyCredential(Credential):
    """An SSH private key.

    Attributes:
        key_type: Key algorithm, e.g. ``ssh-ed25519``
        private_key: PKCS#8 DER encoded private key
    """

    TYPE: ClassVar[str] = "ssh-key"

    key_type: str = required(STR)
    private_key: B64Url = required(B64URL)
    key_comment: str | None = optional(STR)
    creation_date: EditableField[EditableFieldDate] | None = optional(DATE_FIELD)
    expiry_date: EditableField[EditableFieldDate] | None = optional(DATE_FIELD)
    key_generation_source: EditableField[EditableFieldString] | None = optional(STRING_FIELD)


@dataclass(frozen=True, kw_only=True)
class ApiKeyCredential(Credential):
    TYPE: ClassVar[str] = "api-key"

    key: EditableField[EditableFieldConcealedString] | None = optional(CONCEALED_FIELD)
    username: EditableField[EditableFieldString] | None = optional(STRING_FIELD)
    key_type: EditableField[EditableFieldString] | None = optional(STRING_FIELD)
    url: EditableField[EditableFieldString] | None = optional(STRING_FIELD)
    valid_from: EditableField[EditableFieldDate] | None = optional(DATE_FIELD)
    expiry_date: EditableField[EditableFieldDate] | None = optional(DATE_FIELD)


@dataclass(frozen=True, kw_only=True)
class GeneratedPasswordCredential(Credential):
    """A password generated by the exporter but not yet tied to an account."""

    TYPE: ClassVar[str] = "generated-password"

    password: str = required(STR)

    def __repr__(self) -> str:
        return "GeneratedPasswordCredential(password=<hidden>)"


@dataclass(frozen=True, kw_only=True)
class WifiCredential(Credential):
    TYPE: ClassVar[str] = "wifi"

    ssid: EditableField[EditableFieldString] | None = optional(STRING_FIELD)
    network_security_type: EditableField[EditableFieldWifiNetworkSecurityType] | None = (
        optional(WIFI_SECURITY_FIELD)
    )
    passphrase: EditableField[EditableFieldConcealedString] | None = optional(CONCEALED_FIELD)
    hidden: EditableField[EditableFieldBoolean] | None = optional(BOOLEAN_FIELD)
