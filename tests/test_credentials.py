"""Tests for credential decoding, dispatch and encoding."""

import hashlib
from typing import Any

import pytest

from cxftool.encoding import B64Url, Base32
from cxftool.exceptions import (
    FieldTypeMismatchError,
    InvalidTypeError,
    InvalidValueError,
    MissingFieldError,
    NotBase32EncodedError,
)
from cxftool.models import (
    BasicAuthCredential,
    CreditCardCredential,
    CustomFieldsCredential,
    EditableField,
    EditableFieldBoolean,
    EditableFieldConcealedString,
    EditableFieldString,
    EditableFieldUnknown,
    EditableFieldYearMonth,
    FileCredential,
    GeneratedPasswordCredential,
    ItemReferenceCredential,
    LinkedItem,
    NoteCredential,
    OTPHashAlgorithm,
    PasskeyCredential,
    TotpCredential,
    UnknownCredential,
    WifiCredential,
    credential_types,
    decode_credential,
)

BASIC_AUTH = {
    "type": "basic-auth",
    "username": {"fieldType": "string", "value": "alice"},
    "password": {"fieldType": "concealed-string", "value": "hunter2"},
}

TOTP = {
    "type": "totp",
    "secret": "JBSWY3DPEHPK3PXP",
    "period": 30,
    "digits": 6,
    "algorithm": "sha1",
    "issuer": "Example",
}

PASSKEY = {
    "type": "passkey",
    "credentialId": "Y3JlZDE",
    "rpId": "example.com",
    "username": "alice",
    "userDisplayName": "Alice",
    "userHandle": "dXNlcjE",
    "key": "a2V5MQ",
    "fido2Extensions": {
        "hmacSecret": {"alias": "default", "hmacSecret": "c2VjcmV0"},
        "credBlob": "YmxvYg",
        "largeBlob": {"size": 4, "alg": "deflate", "data": "ZGF0YQ"},
        "payments": False,
        "supplementalKeys": {"device": True},
    },
}


class TestDispatch:
    """Tests for type-tag dispatch."""

    def test_known_type(self) -> None:
        """Test that a known tag decodes to its class."""
        credential = decode_credential(BASIC_AUTH)

        assert isinstance(credential, BasicAuthCredential)
        assert credential.type_tag == "basic-auth"
        assert credential.is_known
        assert credential.username.value == "alice"
        assert isinstance(credential.password.value, EditableFieldConcealedString)

    def test_unknown_type_preserved(self) -> None:
        """Test that an unknown tag keeps every key."""
        data = {"type": "future-kind", "payload": {"a": 1}, "list": [1, 2]}
        credential = decode_credential(data)

        assert isinstance(credential, UnknownCredential)
        assert credential.ty == "future-kind"
        assert not credential.is_known
        assert credential.content == {"payload": {"a": 1}, "list": [1, 2]}
        assert credential.to_dict() == data

    def test_missing_type(self) -> None:
        """Test that the type tag is required."""
        with pytest.raises(MissingFieldError) as exc_info:
            decode_credential({"username": {"fieldType": "string", "value": "a"}})
        assert exc_info.value.path == ["type"]

    def test_non_string_type(self) -> None:
        """Test that the type tag must be a string."""
        with pytest.raises(InvalidTypeError) as exc_info:
            decode_credential({"type": 7})
        assert exc_info.value.path == ["type"]

    def test_not_an_object(self) -> None:
        """Test that a credential must be an object."""
        with pytest.raises(InvalidTypeError):
            decode_credential("basic-auth")

    def test_registry(self) -> None:
        """Test that every standard credential type is registered."""
        expected = {
            "address",
            "api-key",
            "basic-auth",
            "credit-card",
            "custom-fields",
            "drivers-license",
            "file",
            "generated-password",
            "identity-document",
            "item-reference",
            "note",
            "passkey",
            "passport",
            "person-name",
            "ssh-key",
            "totp",
            "wifi",
        }
        assert set(credential_types()) == expected

    def test_unknown_keys_on_known_type(self) -> None:
        """Test that extra keys on a known credential are kept."""
        data = {**BASIC_AUTH, "x-strength": 3}
        credential = decode_credential(data)

        assert credential.unknown_fields == {"x-strength": 3}
        assert credential.to_dict() == data


class TestBasicAuth:
    """Tests for basic-auth credentials."""

    def test_round_trip(self) -> None:
        """Test that decoding then encoding is lossless."""
        assert decode_credential(BASIC_AUTH).to_dict() == BASIC_AUTH

    def test_all_optional(self) -> None:
        """Test that an empty basic-auth credential is valid."""
        credential = decode_credential({"type": "basic-auth"})
        assert credential.username is None
        assert credential.to_dict() == {"type": "basic-auth"}

    def test_type_written_first(self) -> None:
        """Test that the tag leads the encoded object."""
        credential = BasicAuthCredential(
            password=EditableField(EditableFieldConcealedString("pw"))
        )
        assert list(credential.to_dict()) == ["type", "password"]

    def test_username_must_be_string_field(self) -> None:
        """Test that a concealed username is a mismatch."""
        data = {"type": "basic-auth", "username": {"fieldType": "concealed-string", "value": "a"}}

        with pytest.raises(FieldTypeMismatchError) as exc_info:
            decode_credential(data)

        assert exc_info.value.location == "username.fieldType"


class TestTotp:
    """Tests for TOTP credentials."""

    def test_round_trip(self) -> None:
        """Test that decoding then encoding is lossless."""
        credential = decode_credential(TOTP)

        assert isinstance(credential, TotpCredential)
        assert credential.secret == Base32(b"Hello!\xde\xad\xbe\xef")
        assert credential.algorithm is OTPHashAlgorithm.SHA1
        assert credential.to_dict() == TOTP

    def test_unknown_algorithm_preserved(self) -> None:
        """Test that a future hash algorithm survives."""
        data = {**TOTP, "algorithm": "sha3-256"}
        credential = decode_credential(data)

        assert not credential.algorithm.is_known
        assert credential.to_dict() == data

    def test_secret_normalized(self) -> None:
        """Test that a grouped lowercase secret is written canonically."""
        credential = decode_credential({**TOTP, "secret": "jbsw y3dp ehpk 3pxp"})
        assert credential.to_dict()["secret"] == "JBSWY3DPEHPK3PXP"

    def test_invalid_secret(self) -> None:
        """Test that a non-base32 secret is rejected."""
        with pytest.raises(NotBase32EncodedError) as exc_info:
            decode_credential({**TOTP, "secret": "not base32!"})
        assert exc_info.value.path == ["secret"]

    def test_digits_out_of_range(self) -> None:
        """Test that digits must fit in a byte."""
        with pytest.raises(InvalidValueError):
            decode_credential({**TOTP, "digits": 300})

    def test_missing_algorithm(self) -> None:
        """Test that the algorithm is required."""
        data = dict(TOTP)
        del data["algorithm"]
        with pytest.raises(MissingFieldError):
            decode_credential(data)


class TestPasskey:
    """Tests for passkey credentials."""

    def test_round_trip(self) -> None:
        """Test that decoding then encoding is lossless."""
        credential = decode_credential(PASSKEY)

        assert isinstance(credential, PasskeyCredential)
        assert credential.user_handle == B64Url(b"user1")
        assert credential.fido2_extensions.large_blob.size == 4
        assert credential.fido2_extensions.payments is False
        assert credential.to_dict() == PASSKEY

    def test_repr_hides_key(self) -> None:
        """Test that repr doesn't print key material."""
        text = repr(decode_credential(PASSKEY))
        assert "a2V5MQ" not in text
        assert "example.com" in text

    def test_missing_key(self) -> None:
        """Test that the private key is required."""
        data = dict(PASSKEY)
        del data["key"]
        with pytest.raises(MissingFieldError) as exc_info:
            decode_credential(data)
        assert exc_info.value.path == ["key"]


class TestIdentity:
    """Tests for identity credentials."""

    def test_credit_card(self) -> None:
        """Test a credit card with a year-month expiry."""
        data = {
            "type": "credit-card",
            "number": {"fieldType": "concealed-string", "value": "4111111111111111"},
            "fullName": {"fieldType": "string", "value": "Alice Example"},
            "expiryDate": {"fieldType": "year-month", "value": "2027-08"},
        }
        credential = decode_credential(data)

        assert isinstance(credential, CreditCardCredential)
        assert credential.expiry_date.value == EditableFieldYearMonth(2027, 8)
        assert credential.to_dict() == data

    def test_credit_card_bad_expiry(self) -> None:
        """Test that a slash-separated expiry is rejected."""
        data = {
            "type": "credit-card",
            "expiryDate": {"fieldType": "year-month", "value": "2027/08"},
        }
        with pytest.raises(InvalidValueError) as exc_info:
            decode_credential(data)
        assert exc_info.value.path == ["expiryDate", "value"]

    def test_address(self) -> None:
        """Test an address with subdivision and country codes."""
        data = {
            "type": "address",
            "streetAddress": {"fieldType": "string", "value": "1 Main St"},
            "territory": {"fieldType": "subdivision-code", "value": "US-CA"},
            "country": {"fieldType": "country-code", "value": "US"},
        }
        assert decode_credential(data).to_dict() == data

    def test_passport_dates(self) -> None:
        """Test a passport with date fields."""
        data = {
            "type": "passport",
            "passportNumber": {"fieldType": "string", "value": "X1234567"},
            "birthDate": {"fieldType": "date", "value": "1990-01-31"},
        }
        assert decode_credential(data).to_dict() == data


class TestDocuments:
    """Tests for notes, files and custom fields."""

    def test_note(self) -> None:
        """Test a note round trip."""
        data = {"type": "note", "content": {"fieldType": "string", "value": "remember"}}
        credential = decode_credential(data)

        assert isinstance(credential, NoteCredential)
        assert credential.to_dict() == data

    def test_note_requires_content(self) -> None:
        """Test that a note without content is invalid."""
        with pytest.raises(MissingFieldError):
            decode_credential({"type": "note"})

    def test_file_for_content(self) -> None:
        """Test describing a file from its content."""
        credential = FileCredential.for_content("notes.txt", b"hello")

        assert credential.decrypted_size == 5
        assert bytes(credential.integrity_hash) == hashlib.sha256(b"hello").digest()
        assert credential.verify(b"hello")
        assert not credential.verify(b"hellp")
        assert not credential.verify(b"hello!")

    def test_file_round_trip(self) -> None:
        """Test that a file credential encodes with camelCase keys."""
        credential = FileCredential.for_content("a.bin", b"\x00\x01", id=B64Url(b"file1"))
        data = credential.to_dict()

        assert data["id"] == "ZmlsZTE"
        assert data["decryptedSize"] == 2
        assert decode_credential(data) == credential

    def test_custom_fields(self) -> None:
        """Test custom fields of mixed and unknown types."""
        data = {
            "type": "custom-fields",
            "label": "Extras",
            "fields": [
                {"fieldType": "string", "value": "a", "label": "A"},
                {"fieldType": "boolean", "value": "true"},
                {"fieldType": "color", "value": "#000"},
            ],
        }
        credential = decode_credential(data)

        assert isinstance(credential, CustomFieldsCredential)
        assert isinstance(credential.fields[0].value, EditableFieldString)
        assert credential.fields[1].value == EditableFieldBoolean(True)
        assert isinstance(credential.fields[2].value, EditableFieldUnknown)
        assert credential.to_dict() == data

    def test_custom_fields_requires_list(self) -> None:
        """Test that the fields key is required."""
        with pytest.raises(MissingFieldError):
            decode_credential({"type": "custom-fields"})

    def test_custom_fields_error_path(self) -> None:
        """Test that a bad field is located by index."""
        data = {
            "type": "custom-fields",
            "fields": [
                {"fieldType": "string", "value": "ok"},
                {"fieldType": "number", "value": "lots"},
            ],
        }
        with pytest.raises(InvalidValueError) as exc_info:
            decode_credential(data)
        assert exc_info.value.path == ["fields", 1, "value"]


class TestOtherCredentials:
    """Tests for the remaining credential kinds."""

    def test_item_reference(self) -> None:
        """Test an item reference round trip."""
        data = {"type": "item-reference", "reference": {"item": "aXRlbTE", "account": "YWNjMQ"}}
        credential = decode_credential(data)

        assert isinstance(credential, ItemReferenceCredential)
        assert credential.reference == LinkedItem(item=B64Url(b"item1"), account=B64Url(b"acc1"))
        assert credential.to_dict() == data

    def test_wifi(self) -> None:
        """Test a Wi-Fi credential round trip."""
        data: dict[str, Any] = {
            "type": "wifi",
            "ssid": {"fieldType": "string", "value": "HomeNet"},
            "networkSecurityType": {
                "fieldType": "wifi-network-security-type",
                "value": "wpa2-personal",
            },
            "hidden": {"fieldType": "boolean", "value": "true"},
        }
        credential = decode_credential(data)

        assert isinstance(credential, WifiCredential)
        assert credential.hidden.value
        assert credential.to_dict() == data

    def test_generated_password_repr(self) -> None:
        """Test that repr of a generated password hides it."""
        credential = GeneratedPasswordCredential(password="s3cret")
        assert "s3cret" not in repr(credential)
        assert credential.to_dict() == {"type": "generated-password", "password": "s3cret"}

    def test_ssh_key(self) -> None:
        """Test an SSH key with editable date fields."""
        data = {
            "type": "ssh-key",
            "keyType": "ssh-ed25519",
            "privateKey": "a2V5MQ",
            "keyComment": "alice@laptop",
            "creationDate": {"fieldType": "date", "value": "2024-01-15"},
        }
        assert decode_credential(data).to_dict() == data

    def test_api_key(self) -> None:
        """Test an API key round trip."""
        data = {
            "type": "api-key",
            "key": {"fieldType": "concealed-string", "value": "sk-123"},
            "url": {"fieldType": "string", "value": "https://api.example.com"},
        }
        assert decode_credential(data).to_dict() == data
