"""Credential scope: where an item's credentials may be used."""

from __future__ import annotations

from dataclasses import dataclass

from ..encoding import B64Url
from .enums import AndroidAppHashAlgorithm
from .wire import (
    B64URL,
    STR,
    EnumCodec,
    ModelCodec,
    WireModel,
    listing,
    optional,
    required,
)


@dataclass(frozen=True, kw_only=True)
class AndroidAppCertificateFingerprint(WireModel):
    """Hash of an Android app's signing certificate.

    Attributes:
        fingerprint: The certificate hash
        hash_algorithm: Algorithm that produced the hash
    """

    fingerprint: B64Url = required(B64URL)
    hash_algorithm: AndroidAppHashAlgorithm = required(EnumCodec(AndroidAppHashAlgorithm))


@dataclass(frozen=True, kw_only=True)
class AndroidAppIdCredential(WireModel):
    """An Android app the credentials belong to.

    Attributes:
        bundle_id: Application id, e.g. ``com.example.app``
        certificate: Expected signing certificate
        name: Display name of the app
    """

    bundle_id: str = required(STR)
    certificate: AndroidAppCertificateFingerprint | None = optional(
        ModelCodec(AndroidAppCertificateFingerprint)
    )
    name: str | None = optional(STR)


@dataclass(frozen=True, kw_only=True)
class CredentialScope(WireModel):
    """Restricts an item's credentials to some websites and apps.

    Attributes:
        urls: Website URLs
        android_apps: Android applications
    """

    urls: list[str] = listing(STR, omit_empty=False)
    android_apps: list[AndroidAppIdCredential] = listing(
        ModelCodec(AndroidAppIdCredential), omit_empty=False
    )
