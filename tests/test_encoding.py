"""Tests for base64url/base32 byte codecs and timestamps."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from cxftool import timestamp
from cxftool.encoding import B64Url, Base32
from cxftool.exceptions import (
    InvalidIso8601Error,
    InvalidTimestampError,
    InvalidTypeError,
    NotB64UrlEncodedError,
    NotBase32EncodedError,
)

NOV_14_2023 = datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)


class TestB64Url:
    """Tests for the B64Url codec."""

    def test_decode_unpadded(self) -> None:
        """Test decoding canonical unpadded base64url."""
        assert B64Url.decode("ZmllbGQx").data == b"field1"

    def test_padding_is_tolerated(self) -> None:
        """Test that padded and unpadded text decode to the same bytes."""
        padded = B64Url.decode("ZmllbGQxMg==")
        unpadded = B64Url.decode("ZmllbGQxMg")

        assert padded == unpadded
        assert padded.data == b"field12"

    def test_encode_is_unpadded(self) -> None:
        """Test that encoding never emits padding."""
        assert B64Url(b"field12").encode() == "ZmllbGQxMg"
        assert str(B64Url(b"field12")) == "ZmllbGQxMg"

    def test_urlsafe_alphabet(self) -> None:
        """Test that '-' and '_' are used instead of '+' and '/'."""
        value = B64Url(b"\xfb\xff")
        assert value.encode() == "-_8"
        assert B64Url.decode("-_8") == value

    def test_standard_alphabet_rejected(self) -> None:
        """Test that characters outside the url-safe alphabet fail."""
        with pytest.raises(NotB64UrlEncodedError):
            B64Url.decode("+/8")

    def test_impossible_length_rejected(self) -> None:
        """Test that a single leftover character fails."""
        with pytest.raises(NotB64UrlEncodedError):
            B64Url.decode("Zm9vY")

    def test_whitespace_rejected(self) -> None:
        """Test that whitespace isn't silently skipped."""
        with pytest.raises(NotB64UrlEncodedError):
            B64Url.decode("Zm9v YmFy")

    def test_empty(self) -> None:
        """Test that the empty string is empty bytes."""
        assert B64Url.decode("").data == b""
        assert B64Url(b"").encode() == ""

    def test_bytes_and_len(self) -> None:
        """Test bytes() and len() conversions."""
        value = B64Url(bytearray(b"abc"))
        assert bytes(value) == b"abc"
        assert len(value) == 3

    def test_hashable(self) -> None:
        """Test that values can be used as dict keys."""
        ids = {B64Url(b"a"): 1}
        assert ids[B64Url.decode("YQ==")] == 1

    def test_random(self) -> None:
        """Test random id generation."""
        first = B64Url.random()
        second = B64Url.random()

        assert len(first) == 16
        assert first != second

    def test_random_size_bounds(self) -> None:
        """Test that ids can't exceed 64 bytes."""
        assert len(B64Url.random(64)) == 64
        with pytest.raises(ValueError):
            B64Url.random(65)
        with pytest.raises(ValueError):
            B64Url.random(0)


class TestBase32:
    """Tests for the Base32 codec."""

    def test_decode(self) -> None:
        """Test decoding a typical TOTP secret."""
        assert Base32.decode("JBSWY3DPEHPK3PXP").data == b"Hello!\xde\xad\xbe\xef"

    def test_lowercase_and_spaces(self) -> None:
        """Test that secrets copied in groups and lowercase still decode."""
        assert Base32.decode("jbsw y3dp ehpk 3pxp") == Base32.decode("JBSWY3DPEHPK3PXP")

    def test_padding_stripped(self) -> None:
        """Test that trailing padding is accepted and not re-emitted."""
        value = Base32.decode("MZXW6===")
        assert value.data == b"foo"
        assert value.encode() == "MZXW6"

    def test_invalid_symbol(self) -> None:
        """Test that digits outside 2-7 are rejected."""
        with pytest.raises(NotBase32EncodedError):
            Base32.decode("JBSWY3D1")

    def test_non_ascii(self) -> None:
        """Test that non-ASCII text is rejected."""
        with pytest.raises(NotBase32EncodedError):
            Base32.decode("JBSWY3DÉ")

    def test_repr_hides_secret(self) -> None:
        """Test that repr doesn't reveal the secret."""
        value = Base32.decode("JBSWY3DPEHPK3PXP")
        assert "JBSW" not in repr(value)
        assert "Hello" not in repr(value)


class TestTimestamp:
    """Tests for flexible timestamp decoding."""

    def test_decode_unix(self) -> None:
        """Test decoding integer seconds."""
        assert timestamp.decode(1700000000) == NOV_14_2023

    def test_decode_rfc3339(self) -> None:
        """Test decoding a Zulu date-time string."""
        assert timestamp.decode("2023-11-14T22:13:20Z") == NOV_14_2023

    def test_decode_offset(self) -> None:
        """Test that offsets are normalized to UTC."""
        decoded = timestamp.decode("2023-11-15T00:13:20+02:00")
        assert decoded == NOV_14_2023
        assert decoded.utcoffset() == timedelta(0)

    def test_both_shapes_encode_identically(self) -> None:
        """Test that output is always the UNIX integer."""
        from_int = timestamp.encode(timestamp.decode(1700000000))
        from_text = timestamp.encode(timestamp.decode("2023-11-14T22:13:20Z"))
        assert from_int == from_text == 1700000000

    def test_encode_naive_as_utc(self) -> None:
        """Test that naive datetimes are taken as UTC."""
        assert timestamp.encode(datetime(2023, 11, 14, 22, 13, 20)) == 1700000000

    def test_encode_other_zone(self) -> None:
        """Test encoding an aware datetime in another zone."""
        moment = NOV_14_2023.astimezone(timezone(timedelta(hours=-5)))
        assert timestamp.encode(moment) == 1700000000

    def test_missing_offset(self) -> None:
        """Test that a local time without offset is rejected."""
        with pytest.raises(InvalidIso8601Error):
            timestamp.decode("2023-11-14T22:13:20")

    @pytest.mark.parametrize(
        "text",
        [
            "2023-11-14t22:13:20z",
            "2023-11-14 22:13:20Z",
            "2023-11-14T22:13:20.000Z",
            "2023-11-14T22:13:20.123456789Z",
            "2023-11-14T17:13:20-05:00",
        ],
    )
    def test_rfc3339_variants(self, text: str) -> None:
        """Test the separator, case, fraction and offset forms RFC 3339 allows."""
        assert timestamp.encode(timestamp.decode(text)) == 1700000000

    def test_leap_second(self) -> None:
        """Test that a leap second encodes like the second before it."""
        decoded = timestamp.decode("2016-12-31T23:59:60Z")
        assert timestamp.encode(decoded) == timestamp.encode(
            timestamp.decode("2016-12-31T23:59:59Z")
        )

    @pytest.mark.parametrize(
        "text",
        [
            "20231114T221320Z",
            "2023-W46-2T22:13:20Z",
            "2023-11-14T22Z",
            "2023-11-14T22:13Z",
            "2023-11-14",
            "2023-11-14T22:13:20+0200",
            "2023-11-14T22:13:20+24:00",
            "2023-13-14T22:13:20Z",
            "2023-11-14T22:13:20.Z",
            " 2023-11-14T22:13:20Z",
            "0000-01-01T00:00:00Z",
        ],
    )
    def test_not_rfc3339(self, text: str) -> None:
        """Test that other ISO 8601 shapes and out-of-range parts are rejected."""
        with pytest.raises(InvalidIso8601Error):
            timestamp.decode(text)

    def test_garbage_string(self) -> None:
        """Test that unparseable text is rejected."""
        with pytest.raises(InvalidIso8601Error):
            timestamp.decode("last tuesday")

    def test_out_of_range(self) -> None:
        """Test that absurd integers are rejected."""
        with pytest.raises(InvalidTimestampError):
            timestamp.decode(10**20)

    @pytest.mark.parametrize("value", [True, 1.5, None, [1700000000]])
    def test_wrong_kind(self, value: object) -> None:
        """Test that other JSON kinds are rejected."""
        with pytest.raises(InvalidTypeError):
            timestamp.decode(value)

    def test_optional(self) -> None:
        """Test that the optional helpers map null to None."""
        assert timestamp.decode_optional(None) is None
        assert timestamp.encode_optional(None) is None
        assert timestamp.encode_optional(NOV_14_2023) == 1700000000
