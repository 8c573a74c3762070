"""Open enumerations for CXF.

Every enumeration in CXF is open: a newer exporter may emit a value that
an older importer has never heard of. These enums accept such values as
pseudo-members instead of raising, so the raw tag survives a decode and
encodes back unchanged.

    >>> OTPHashAlgorithm("sha1") is OTPHashAlgorithm.SHA1
    True
    >>> algo = OTPHashAlgorithm("sha3-256")
    >>> algo.is_known, algo.value
    (False, 'sha3-256')
"""

from __future__ import annotations

from enum import IntEnum, StrEnum

UNKNOWN_MEMBER_NAME = "UNKNOWN"


class OpenEnum(StrEnum):
    """String enum that tolerates values it does not know.

    Unknown values become pseudo-members named ``UNKNOWN`` that compare
    equal to their raw string.
    """

    @classmethod
    def _missing_(cls, value: object) -> OpenEnum | None:
        if not isinstance(value, str):
            return None
        member = str.__new__(cls, value)
        member._name_ = UNKNOWN_MEMBER_NAME
        member._value_ = value
        return member

    @property
    def is_known(self) -> bool:
        """Whether this value is one of the declared members."""
        return self._value_ in type(self)._value2member_map_


class OpenIntEnum(IntEnum):
    """Integer enum that tolerates values it does not know.

    Only non-negative integers are accepted as pseudo-members; range
    limits (u8, u16) are enforced by the wire codec.
    """

    @classmethod
    def _missing_(cls, value: object) -> OpenIntEnum | None:
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            return None
        member = int.__new__(cls, value)
        member._name_ = UNKNOWN_MEMBER_NAME
        member._value_ = value
        return member

    @property
    def is_known(self) -> bool:
        """Whether this value is one of the declared members."""
        return self._value_ in type(self)._value2member_map_


class FieldType(OpenEnum):
    """The ``fieldType`` tag of an editable field."""

    STRING = "string"
    CONCEALED_STRING = "concealed-string"
    EMAIL = "email"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    YEAR_MONTH = "year-month"
    WIFI_NETWORK_SECURITY_TYPE = "wifi-network-security-type"
    SUBDIVISION_CODE = "subdivision-code"
    COUNTRY_CODE = "country-code"


class OTPHashAlgorithm(OpenEnum):
    """Hash algorithm of a TOTP generator."""

    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"


class AndroidAppHashAlgorithm(OpenEnum):
    """Hash algorithm of an Android signing certificate fingerprint."""

    SHA256 = "sha256"
    SHA1 = "sha1"


class WifiNetworkSecurityType(OpenEnum):
    """Security protocol of a Wi-Fi network."""

    UNSECURED = "unsecured"
    WPA_PERSONAL = "wpa-personal"
    WPA2_PERSONAL = "wpa2-personal"
    WPA3_PERSONAL = "wpa3-personal"
    WEP = "wep"


class SharingAccessorType(OpenEnum):
    """Kind of principal a sharing accessor describes.

    Importers must ignore accessors whose type is unknown.
    """

    USER = "user"
    GROUP = "group"


class SharingAccessorPermission(OpenEnum):
    """Access level granted to a sharing accessor.

    Importers must ignore unknown permissions.
    """

    READ = "read"
    READ_SECRET = "readSecret"
    UPDATE = "update"
    CREATE = "create"
    DELETE = "delete"
    SHARE = "share"
    MANAGE = "manage"
