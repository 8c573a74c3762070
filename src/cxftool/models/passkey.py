"""WebAuthn passkeys and their FIDO2 extension state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..encoding import B64Url
from .credential import Credential
from .wire import B64URL, BOOL, STR, U64, ModelCodec, WireModel, optional, required


@dataclass(frozen=True, kw_only=True)
class Fido2HmacSecret(WireModel):
    """State of the ``hmac-secret`` extension.

    Attributes:
        alias: Algorithm alias, e.g. ``HMAC-SHA256``
        hmac_secret: The credential's HMAC secret
    """

    alias: str = required(STR)
    hmac_secret: B64Url = required(B64URL)

    def __repr__(self) -> str:
        return f"Fido2HmacSecret(alias={self.alias!r}, hmac_secret=<hidden>)"


@dataclass(frozen=True, kw_only=True)
class Fido2LargeBlob(WireModel):
    """Contents of the ``largeBlob`` extension.

    Attributes:
        size: Uncompressed size of the blob
        alg: Compression algorithm, e.g. ``deflate``
        data: The compressed blob
    """

    size: int = required(U64)
    alg: str = required(STR)
    data: B64Url = required(B64URL)


@dataclass(frozen=True, kw_only=True)
class Fido2SupplementalKeys(WireModel):
    device: bool | None = optional(BOOL)
    provider: bool | None = optional(BOOL)


@dataclass(frozen=True, kw_only=True)
class Fido2Extensions(WireModel):
    """FIDO2 extension data that must move with a passkey."""

    hmac_secret: Fido2HmacSecret | None = optional(ModelCodec(Fido2HmacSecret))
    cred_blob: B64Url | None = optional(B64URL)
    large_blob: Fido2LargeBlob | None = optional(ModelCodec(Fido2LargeBlob))
    payments: bool | None = optional(BOOL)
    supplemental_keys: Fido2SupplementalKeys | None = optional(
        ModelCodec(Fido2SupplementalKeys)
    )


@dataclass(frozen=True, kw_only=True)
class PasskeyCredential(Credential):
    """A WebAuthn public key credential.

    Attributes:
        credential_id: Credential id as seen by the relying party
        rp_id: Relying party id, e.g. ``example.com``
        username: User name known to the relying party
        user_display_name: Display name known to the relying party
        user_handle: Relying party's user id
        key: PKCS#8 DER encoded private key
        fido2_extensions: Authenticator extension state
    """

    TYPE: ClassVar[str] = "passkey"

    credential_id: B64Url = required(B64URL)
    rp_id: str = required(STR)
    username: str = required(STR)
    user_display_name: str = required(STR)
    user_handle: B64Url = required(B64URL)
    key: B64Url = required(B64URL)
    fido2_extensions: Fido2Extensions | None = optional(ModelCodec(Fido2Extensions))

    def __repr__(self) -> str:
        return (
            f"PasskeyCredential(rp_id={self.rp_id!r}, username={self.username!r}, "
            f"credential_id={self.credential_id!s})"
        )
