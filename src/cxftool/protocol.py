"""Messages of the credential exchange protocol.

The importer sends an ExportRequest listing the HPKE parameters it can
decrypt with. The exporter answers with an ExportResponse carrying the
encrypted export document, or with an ErrorResponse.

HPKE itself isn't implemented here. Encryption goes through a
PayloadCipher supplied by the caller, so this module only produces and
consumes the plaintext document on either side of it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol

from .encoding import B64Url
from .exceptions import (
    CxfError,
    DecodeError,
    IncompatibleHpkeParametersError,
    IncorrectImporterKeyEncodingError,
    MissingImporterKeyError,
    PayloadError,
    UnsupportedVersionError,
)
from .export import Export, ImportOptions
from .models import Credential
from .models.enums import OpenEnum, OpenIntEnum
from .models.wire import (
    B64URL,
    RAW,
    STR,
    U8_MAX,
    EnumCodec,
    ListCodec,
    ModelCodec,
    WireModel,
    listing,
    optional,
    required,
)

logger = logging.getLogger(__name__)


class PayloadCipher(Protocol):
    """Encrypts and decrypts the export payload (HPKE in practice)."""

    def encrypt(self, plaintext: bytes) -> bytes: ...
    def decrypt(self, ciphertext: bytes) -> bytes: ...


# --- Enumerations ---


class ProtocolVersion(OpenIntEnum):
    V0 = 0


class CredentialType(OpenEnum):
    """Credential kinds an importer can ask for."""

    BASIC_AUTH = "basic-auth"
    PASSKEY = "passkey"
    TOTP = "totp"
    CREDIT_CARD = "credit-card"
    NOTE = "note"
    FILE = "file"
    SSH_KEY = "ssh-key"
    ADDRESS = "address"
    DRIVERS_LICENSE = "drivers-license"
    IDENTITY_DOCUMENT = "identity-document"
    PASSPORT = "passport"
    PERSON_NAME = "person-name"
    API_KEY = "api-key"
    GENERATED_PASSWORD = "generated-password"
    ITEM_REFERENCE = "item-reference"
    CUSTOM_FIELDS = "custom-fields"
    WIFI = "wifi"


class KnownExtension(OpenEnum):
    SHARED = "shared"


class HpkeMode(OpenEnum):
    BASE = "base"
    PSK = "psk"
    AUTH = "auth"
    AUTH_PSK = "auth-psk"


class HpkeKem(OpenIntEnum):
    """HPKE key encapsulation mechanism (RFC 9180 registry)."""

    RESERVED = 0x0000
    DHKEM_P256 = 0x0010
    DHKEM_P384 = 0x0011
    DHKEM_P521 = 0x0012
    DHKEM_CP256 = 0x0013
    DHKEM_CP384 = 0x0014
    DHKEM_CP521 = 0x0015
    DHKEM_SECP256K1 = 0x0016
    DHKEM_X25519 = 0x0020
    DHKEM_X448 = 0x0021
    X25519_KYBER768_DRAFT00 = 0x0030


class HpkeKdf(OpenIntEnum):
    RESERVED = 0x0000
    HKDF_SHA256 = 0x0001
    HKDF_SHA384 = 0x0002
    HKDF_SHA512 = 0x0003


class HpkeAead(OpenIntEnum):
    RESERVED = 0x0000
    AES_128_GCM = 0x0001
    AES_256_GCM = 0x0002
    CHACHA20_POLY1305 = 0x0003
    EXPORT_ONLY = 0xFFFF


class ErrorCode(OpenEnum):
    USER_CANCELED = "user-canceled"
    INCOMPATIBLE_HPKE_PARAMETERS = "incompatible-hpke-parameters"
    MISSING_IMPORTER_KEY = "missing-importer-key"
    INCORRECT_IMPORTER_KEY_ENCODING = "incorrect-importer-key-encoding"
    UNSUPPORTED_VERSION = "unsupported-version"
    INVALID_JSON = "invalid-json"
    FORBIDDEN_ACTION = "forbidden-action"


VERSION = EnumCodec(ProtocolVersion, maximum=U8_MAX)


# --- Messages ---


@dataclass(frozen=True, kw_only=True, eq=False)
class HpkeParameters(WireModel):
    """One HPKE configuration.

    Two parameter sets are equal when their algorithms match; the
    ephemeral ``key`` is ignored.

    Attributes:
        mode: HPKE mode
        kem: Key encapsulation mechanism
        kdf: Key derivation function
        aead: AEAD cipher
        key: Importer public key as a JSON Web Key
    """

    mode: HpkeMode = required(EnumCodec(HpkeMode))
    kem: HpkeKem = required(EnumCodec(HpkeKem))
    kdf: HpkeKdf = required(EnumCodec(HpkeKdf))
    aead: HpkeAead = required(EnumCodec(HpkeAead))
    key: dict[str, Any] | None = optional(RAW)

    def _algorithms(self) -> tuple[str, int, int, int]:
        return (self.mode.value, int(self.kem), int(self.kdf), int(self.aead))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HpkeParameters):
            return NotImplemented
        return self._algorithms() == other._algorithms()

    def __hash__(self) -> int:
        return hash(self._algorithms())


@dataclass(frozen=True, kw_only=True)
class ExportRequest(WireModel):
    """Sent by the importer to start an export.

    Attributes:
        version: Protocol version
        hpke: HPKE parameter sets the importer accepts, preferred first
        importer: Relying party id of the importer
        credential_types: Credential kinds wanted (None means all)
        known_extensions: Extensions the importer understands
    """

    SUPPORTED_VERSIONS: ClassVar[frozenset[ProtocolVersion]] = frozenset(
        {ProtocolVersion.V0}
    )

    version: ProtocolVersion = required(VERSION)
    hpke: list[HpkeParameters] = listing(
        ModelCodec(HpkeParameters), omit_empty=False, required=True
    )
    importer: str = required(STR)
    credential_types: list[CredentialType] | None = optional(
        ListCodec(EnumCodec(CredentialType))
    )
    known_extensions: list[KnownExtension] | None = optional(
        ListCodec(EnumCodec(KnownExtension))
    )

    def ensure_supported(self) -> None:
        """Check the request's protocol version.

        Raises:
            UnsupportedVersionError: If the version isn't supported
        """
        if self.version not in self.SUPPORTED_VERSIONS:
            raise UnsupportedVersionError(int(self.version))

    def select_hpke(self, supported: Iterable[HpkeParameters]) -> HpkeParameters:
        """Pick the importer's most preferred parameters the exporter supports.

        Args:
            supported: Parameter sets the exporter can encrypt with

        Returns:
            The importer's parameter set, including its public key

        Raises:
            IncompatibleHpkeParametersError: If nothing matches
            MissingImporterKeyError: If the match carries no public key
            IncorrectImporterKeyEncodingError: If the key isn't a JWK object
        """
        supported = list(supported)
        for offered in self.hpke:
            if offered in supported:
                if offered.key is None:
                    raise MissingImporterKeyError()
                if not isinstance(offered.key, dict) or "kty" not in offered.key:
                    raise IncorrectImporterKeyEncodingError()
                logger.debug(
                    "Selected HPKE parameters mode=%s kem=%#06x kdf=%#06x aead=%#06x",
                    offered.mode.value,
                    int(offered.kem),
                    int(offered.kdf),
                    int(offered.aead),
                )
                return offered
        raise IncompatibleHpkeParametersError()

    def accepts(self, credential: Credential) -> bool:
        """Whether the importer asked for this kind of credential."""
        if self.credential_types is None:
            return True
        return any(t.value == credential.type_tag for t in self.credential_types)

    def accepts_extension(self, name: str) -> bool:
        """Whether the importer understands the named extension."""
        if self.known_extensions is None:
            return False
        return any(e.value == name for e in self.known_extensions)


@dataclass(frozen=True, kw_only=True)
class ExportResponse(WireModel):
    """Sent by the exporter with the encrypted export document.

    Attributes:
        version: Protocol version
        hpke: Parameters used to encrypt the payload
        exporter: Relying party id of the exporter
        payload: The encrypted export document
    """

    version: ProtocolVersion = required(VERSION)
    hpke: HpkeParameters = required(ModelCodec(HpkeParameters))
    exporter: str = required(STR)
    payload: B64Url = required(B64URL)

    @classmethod
    def seal(
        cls,
        export: Export,
        hpke: HpkeParameters,
        exporter: str,
        cipher: PayloadCipher,
        version: ProtocolVersion = ProtocolVersion.V0,
    ) -> ExportResponse:
        """Encrypt an export into a response.

        Args:
            export: The document to send
            hpke: Parameters chosen with ExportRequest.select_hpke()
            exporter: Relying party id of the exporter
            cipher: Encrypts the serialized document
            version: Protocol version

        Returns:
            New ExportResponse
        """
        plaintext = export.to_bytes()
        payload = B64Url(cipher.encrypt(plaintext))
        logger.info(
            "Sealed export of %d bytes for %d account(s)", len(plaintext), len(export.accounts)
        )
        return cls(version=version, hpke=hpke, exporter=exporter, payload=payload)

    def open(self, cipher: PayloadCipher, options: ImportOptions | None = None) -> Export:
        """Decrypt and decode the payload.

        Args:
            cipher: Decrypts the payload
            options: Import options for the document

        Returns:
            The export document

        Raises:
            PayloadError: If decryption fails
            DecodeError: If the decrypted document is malformed
        """
        try:
            plaintext = cipher.decrypt(bytes(self.payload))
        except (ValueError, KeyError) as e:
            raise PayloadError() from e
        return Export.loads(plaintext, options)


@dataclass(frozen=True, kw_only=True)
class ErrorResponse(WireModel):
    """Sent instead of an ExportResponse when the export can't proceed."""

    version: ProtocolVersion = required(VERSION)
    error: ErrorCode = required(EnumCodec(ErrorCode))

    @classmethod
    def for_exception(
        cls, exc: CxfError, version: ProtocolVersion = ProtocolVersion.V0
    ) -> ErrorResponse:
        """Build the response reporting a library error.

        Args:
            exc: The error that stopped the export
            version: Protocol version

        Returns:
            New ErrorResponse

        Raises:
            ValueError: If no error code describes the exception
        """
        for exc_type, code in _ERROR_CODES:
            if isinstance(exc, exc_type):
                return cls(version=version, error=code)
        raise ValueError(f"No error code for {type(exc).__name__}")


_ERROR_CODES: list[tuple[type[CxfError], ErrorCode]] = [
    (UnsupportedVersionError, ErrorCode.UNSUPPORTED_VERSION),
    (IncompatibleHpkeParametersError, ErrorCode.INCOMPATIBLE_HPKE_PARAMETERS),
    (MissingImporterKeyError, ErrorCode.MISSING_IMPORTER_KEY),
    (IncorrectImporterKeyEncodingError, ErrorCode.INCORRECT_IMPORTER_KEY_ENCODING),
    (DecodeError, ErrorCode.INVALID_JSON),
]
