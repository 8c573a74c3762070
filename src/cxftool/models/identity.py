"""Identity credentials: addresses, payment cards and official documents.

Every attribute is an optional editable field; an exporter writes only
what the user filled in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from .credential import Credential
from .fields import (
    CONCEALED_FIELD,
    COUNTRY_FIELD,
    DATE_FIELD,
    STRING_FIELD,
    SUBDIVISION_FIELD,
    YEAR_MONTH_FIELD,
    EditableField,
    EditableFieldConcealedString,
    EditableFieldCountryCode,
    EditableFieldDate,
    EditableFieldString,
    EditableFieldSubdivisionCode,
    EditableFieldYearMonth,
)
from .wire import optional

StringField = EditableField[EditableFieldString]
DateField = EditableField[EditableFieldDate]


@dataclass(frozen=True, kw_only=True)
class AddressCredential(Credential):
    TYPE: ClassVar[str] = "address"

    street_address: StringField | None = optional(STRING_FIELD)
    postal_code: StringField | None = optional(STRING_FIELD)
    city: StringField | None = optional(STRING_FIELD)
    territory: EditableField[EditableFieldSubdivisionCode] | None = optional(
        SUBDIVISION_FIELD
    )
    country: EditableField[EditableFieldCountryCode] | None = optional(COUNTRY_FIELD)
    tel: StringField | None = optional(STRING_FIELD)


@dataclass(frozen=True, kw_only=True)
class CreditCardCredential(Credential):
    """A payment card.

    Attributes:
        number: Card number
        verification_number: CVV / CVC
        expiry_date: Last valid month
        valid_from: First valid month
    """

    TYPE: ClassVar[str] = "credit-card"

    number: EditableField[EditableFieldConcealedString] | None = optional(CONCEALED_FIELD)
    full_name: StringField | None = optional(STRING_FIELD)
    card_type: StringField | None = optional(STRING_FIELD)
    verification_number: EditableField[EditableFieldConcealedString] | None = optional(
        CONCEALED_FIELD
    )
    pin: EditableField[EditableFieldConcealedString] | None = optional(CONCEALED_FIELD)
    expiry_date: EditableField[EditableFieldYearMonth] | None = optional(YEAR_MONTH_FIELD)
    valid_from: EditableField[EditableFieldYearMonth] | None = optional(YEAR_MONTH_FIELD)


@dataclass(frozen=True, kw_only=True)
class DriversLicenseCredential(Credential):
    TYPE: ClassVar[str] = "drivers-license"

    full_name: StringField | None = optional(STRING_FIELD)
    birth_date: DateField | None = optional(DATE_FIELD)
    issue_date: DateField | None = optional(DATE_FIELD)
    expiry_date: DateField | None = optional(DATE_FIELD)
    issuing_authority: StringField | None = optional(STRING_FIELD)
    territory: EditableField[EditableFieldSubdivisionCode] | None = optional(
        SUBDIVISION_FIELD
    )
    country: EditableField[EditableFieldCountryCode] | None = optional(COUNTRY_FIELD)
    license_number: StringField | None = optional(STRING_FIELD)
    license_class: StringField | None = optional(STRING_FIELD)


@dataclass(frozen=True, kw_only=True)
class IdentityDocumentCredential(Credential):
    """A national id card or similar document."""

    TYPE: ClassVar[str] = "identity-document"

    issuing_country: EditableField[EditableFieldCountryCode] | None = optional(
        COUNTRY_FIELD
    )
    document_number: StringField | None = optional(STRING_FIELD)
    identification_number: StringField | None = optional(STRING_FIELD)
    nationality: StringField | None = optional(STRING_FIELD)
    full_name: StringField | None = optional(STRING_FIELD)
    birth_date: DateField | None = optional(DATE_FIELD)
    birth_place: StringField | None = optional(STRING_FIELD)
    sex: StringField | None = optional(STRING_FIELD)
    issue_date: DateField | None = optional(DATE_FIELD)
    expiry_date: DateField | None = optional(DATE_FIELD)
    issuing_authority: StringField | None = optional(STRING_FIELD)


@dataclass(frozen=True, kw_only=True)
class PassportCredential(Credential):
    TYPE: ClassVar[str] = "passport"

    issuing_country: EditableField[EditableFieldCountryCode] | None = optional(
        COUNTRY_FIELD
    )
    passport_type: StringField | None = optional(STRING_FIELD)
    passport_number: StringField | None = optional(STRING_FIELD)
    national_identification_number: StringField | None = optional(STRING_FIELD)
    nationality: StringField | None = optional(STRING_FIELD)
    full_name: StringField | None = optional(STRING_FIELD)
    birth_date: DateField | None = optional(DATE_FIELD)
    birth_place: StringField | None = optional(STRING_FIELD)
    sex: StringField | None = optional(STRING_FIELD)
    issue_date: DateField | None = optional(DATE_FIELD)
    expiry_date: DateField | None = optional(DATE_FIELD)
    issuing_authority: StringField | None = optional(STRING_FIELD)


@dataclass(frozen=True, kw_only=True)
class PersonNameCredential(Credential):
    """A person's name split into its parts.

    Attributes:
        title: Honorific, e.g. ``Dr.``
        given_informal: Nickname
        given2: Middle name
        surname_prefix: e.g. ``van``
        surname2: Second surname
        credentials: Post-nominal letters, e.g. ``PhD``
        generation: e.g. ``Jr.``
    """

    TYPE: ClassVar[str] = "person-name"

    title: StringField | None = optional(STRING_FIELD)
    given: StringField | None = optional(STRING_FIELD)
    given_informal: StringField | None = optional(STRING_FIELD)
    given2: StringField | None = optional(STRING_FIELD)
    surname_prefix: StringField | None = optional(STRING_FIELD)
    surname: StringField | None = optional(STRING_FIELD)
    surname2: StringField | None = optional(STRING_FIELD)
    credentials: StringField | None = optional(STRING_FIELD)
    generation: StringField | None = optional(STRING_FIELD)
