"""Tests for open enumerations."""

import pytest

from cxftool.models import (
    FieldType,
    OTPHashAlgorithm,
    SharingAccessorPermission,
    WifiNetworkSecurityType,
)
from cxftool.protocol import HpkeAead, HpkeKem, ProtocolVersion


class TestOpenEnum:
    """Tests for string enums that accept unknown values."""

    def test_known_value(self) -> None:
        """Test that known values return the declared member."""
        assert FieldType("string") is FieldType.STRING
        assert FieldType.STRING.is_known

    def test_unknown_value(self) -> None:
        """Test that unknown values become pseudo-members."""
        algorithm = OTPHashAlgorithm("sha3-256")

        assert isinstance(algorithm, OTPHashAlgorithm)
        assert not algorithm.is_known
        assert algorithm.value == "sha3-256"
        assert algorithm == "sha3-256"

    def test_case_sensitive(self) -> None:
        """Test that a differently cased value isn't the known member."""
        assert not SharingAccessorPermission("readsecret").is_known
        assert SharingAccessorPermission("readSecret") is SharingAccessorPermission.READ_SECRET

    def test_non_string_rejected(self) -> None:
        """Test that non-strings still raise."""
        with pytest.raises(ValueError):
            WifiNetworkSecurityType(3)

    def test_wire_values(self) -> None:
        """Test the kebab-case wire values."""
        assert FieldType.CONCEALED_STRING.value == "concealed-string"
        assert FieldType.WIFI_NETWORK_SECURITY_TYPE.value == "wifi-network-security-type"
        assert WifiNetworkSecurityType.WPA2_PERSONAL.value == "wpa2-personal"


class TestOpenIntEnum:
    """Tests for integer enums that accept unknown values."""

    def test_known_value(self) -> None:
        """Test that known values return the declared member."""
        assert HpkeKem(0x0020) is HpkeKem.DHKEM_X25519
        assert ProtocolVersion(0) is ProtocolVersion.V0

    def test_unknown_value(self) -> None:
        """Test that unknown values become pseudo-members."""
        kem = HpkeKem(0x0099)

        assert not kem.is_known
        assert kem == 0x0099
        assert int(kem) == 0x0099

    def test_negative_rejected(self) -> None:
        """Test that negative values still raise."""
        with pytest.raises(ValueError):
            HpkeAead(-1)

    def test_bool_rejected(self) -> None:
        """Test that booleans aren't taken as integers."""
        with pytest.raises(ValueError):
            ProtocolVersion(True)

    def test_export_only(self) -> None:
        """Test the u16 maximum AEAD id."""
        assert HpkeAead(0xFFFF) is HpkeAead.EXPORT_ONLY
