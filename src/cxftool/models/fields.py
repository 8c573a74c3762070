"""Editable fields: typed, labeled values inside credentials.

On the wire an editable field carries its value next to a ``fieldType``
tag:

    {"id": "ZmllbGQx", "fieldType": "boolean", "value": "true", "label": "Admin"}

In Python the tag isn't stored. Each value class knows its own
FIELD_TYPE, so EditableField[EditableFieldBoolean] can only ever be
written with ``"fieldType": "boolean"``. Reading goes through two
separate steps: the JSON object is parsed into an EditableFieldRecord,
then the record is validated against the expected value class. A tag
that disagrees with the expected class is a decode error.

Every value is a string on the wire, including numbers and booleans.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, ClassVar, Generic, TypeVar

from ..encoding import B64Url
from ..exceptions import FieldTypeMismatchError, InvalidValueError
from .enums import FieldType, WifiNetworkSecurityType
from .extensions import EXTENSION, encode_extension
from .wire import (
    B64URL,
    RAW,
    STR,
    Codec,
    DecodeContext,
    EnumCodec,
    WireModel,
    expect_str,
    listing,
    optional,
    required,
)

logger = logging.getLogger(__name__)

V = TypeVar("V")

_NUMBER_PATTERN = re.compile(r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?")
_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_DIGITS = re.compile(r"[0-9]+")

YEAR_MAX = 0xFFFF


# --- Value types ---


class _TextValue(str):
    """Base for values that are plain strings on the wire."""

    FIELD_TYPE: ClassVar[FieldType]

    @property
    def field_type(self) -> FieldType:
        return self.FIELD_TYPE

    @classmethod
    def from_wire(cls, raw: Any) -> _TextValue:
        return cls(expect_str(raw))

    def to_wire(self) -> str:
        return str(self)

    def __eq__(self, other: object) -> bool:
        # Same text under a different tag is a different value
        if isinstance(other, _TextValue) and type(other) is not type(self):
            return False
        return str.__eq__(self, other)

    def __ne__(self, other: object) -> bool:
        return not self == other

    __hash__ = str.__hash__

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str.__repr__(self)})"


class EditableFieldString(_TextValue):
    FIELD_TYPE = FieldType.STRING


class EditableFieldConcealedString(_TextValue):
    """A secret string (password, PIN, card number)."""

    FIELD_TYPE = FieldType.CONCEALED_STRING

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<{len(self)} chars>)"


class EditableFieldEmail(_TextValue):
    FIELD_TYPE = FieldType.EMAIL


class EditableFieldSubdivisionCode(_TextValue):
    """ISO 3166-2 subdivision code, e.g. ``US-CA``."""

    FIELD_TYPE = FieldType.SUBDIVISION_CODE


class EditableFieldCountryCode(_TextValue):
    """ISO 3166-1 alpha-2 country code, e.g. ``US``."""

    FIELD_TYPE = FieldType.COUNTRY_CODE


class EditableFieldNumber(float):
    """A decimal number, written as a string.

    Integral values are written without a fraction (``"5"``, not ``"5.0"``).
    NaN and infinities cannot be represented.
    """

    FIELD_TYPE: ClassVar[FieldType] = FieldType.NUMBER

    def __new__(cls, value: float | int | str = 0.0) -> EditableFieldNumber:
        number = float.__new__(cls, value)
        if not math.isfinite(number):
            raise ValueError("Number fields must be finite")
        return number

    @property
    def field_type(self) -> FieldType:
        return self.FIELD_TYPE

    @classmethod
    def from_wire(cls, raw: Any) -> EditableFieldNumber:
        text = expect_str(raw)
        if not _NUMBER_PATTERN.fullmatch(text):
            raise InvalidValueError("invalid number")
        try:
            return cls(text)
        except (ValueError, OverflowError) as e:
            raise InvalidValueError("invalid number") from e

    def to_wire(self) -> str:
        if self.is_integer():
            return str(int(self))
        return repr(float(self))

    def __repr__(self) -> str:
        return f"EditableFieldNumber({float(self)!r})"


@dataclass(frozen=True, slots=True)
class EditableFieldBoolean:
    """A boolean, written as the string ``"true"`` or ``"false"``.

    Attributes:
        value: The boolean value
    """

    FIELD_TYPE: ClassVar[FieldType] = FieldType.BOOLEAN

    value: bool

    @property
    def field_type(self) -> FieldType:
        return self.FIELD_TYPE

    @classmethod
    def from_wire(cls, raw: Any) -> EditableFieldBoolean:
        """Parse ``"true"``/``"false"``, ignoring case and surrounding whitespace."""
        text = expect_str(raw).strip().lower()
        if text == "true":
            return cls(True)
        if text == "false":
            return cls(False)
        raise InvalidValueError("invalid boolean, expected 'true' or 'false'")

    def to_wire(self) -> str:
        return "true" if self.value else "false"

    def __bool__(self) -> bool:
        return self.value


class EditableFieldDate(date):
    """A calendar date, written as ``YYYY-MM-DD``."""

    FIELD_TYPE: ClassVar[FieldType] = FieldType.DATE

    @property
    def field_type(self) -> FieldType:
        return self.FIELD_TYPE

    @classmethod
    def from_date(cls, value: date) -> EditableFieldDate:
        return cls(value.year, value.month, value.day)

    @classmethod
    def from_wire(cls, raw: Any) -> EditableFieldDate:
        text = expect_str(raw)
        if not _DATE_PATTERN.fullmatch(text):
            raise InvalidValueError("invalid date, expected YYYY-MM-DD")
        try:
            parsed = date.fromisoformat(text)
        except ValueError as e:
            raise InvalidValueError("invalid date, expected YYYY-MM-DD") from e
        return cls.from_date(parsed)

    def to_wire(self) -> str:
        return self.isoformat()

    def __repr__(self) -> str:
        return f"EditableFieldDate({self.isoformat()!r})"


@dataclass(frozen=True, slots=True)
class EditableFieldYearMonth:
    """A month of a year, written as ``YYYY-MM`` (e.g. card expiry).

    Attributes:
        year: Year, 0 to 65535
        month: Month number, 1 to 12
    """

    FIELD_TYPE: ClassVar[FieldType] = FieldType.YEAR_MONTH

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 0 <= self.year <= YEAR_MAX:
            raise ValueError(f"Year must be between 0 and {YEAR_MAX}")
        if not 1 <= self.month <= 12:
            raise ValueError("Month must be between 1 and 12")

    @property
    def field_type(self) -> FieldType:
        return self.FIELD_TYPE

    @classmethod
    def from_wire(cls, raw: Any) -> EditableFieldYearMonth:
        text = expect_str(raw)
        year_text, separator, month_text = text.partition("-")
        if not _DIGITS.fullmatch(year_text):
            raise InvalidValueError("missing year")
        if not separator or not _DIGITS.fullmatch(month_text):
            raise InvalidValueError("invalid month")
        year, month = int(year_text), int(month_text)
        if year > YEAR_MAX:
            raise InvalidValueError("missing year")
        if not 1 <= month <= 12:
            raise InvalidValueError("invalid month")
        return cls(year, month)

    def to_wire(self) -> str:
        return f"{self.year:04}-{self.month:02}"


@dataclass(frozen=True, slots=True)
class EditableFieldWifiNetworkSecurityType:
    """Security protocol of a Wi-Fi network.

    Attributes:
        security_type: The protocol; unrecognized values are preserved
    """

    FIELD_TYPE: ClassVar[FieldType] = FieldType.WIFI_NETWORK_SECURITY_TYPE

    security_type: WifiNetworkSecurityType

    def __post_init__(self) -> None:
        if not isinstance(self.security_type, WifiNetworkSecurityType):
            object.__setattr__(
                self, "security_type", WifiNetworkSecurityType(self.security_type)
            )

    @property
    def field_type(self) -> FieldType:
        return self.FIELD_TYPE

    @classmethod
    def from_wire(cls, raw: Any) -> EditableFieldWifiNetworkSecurityType:
        return cls(WifiNetworkSecurityType(expect_str(raw)))

    def to_wire(self) -> str:
        return self.security_type.value


@dataclass(frozen=True, slots=True)
class EditableFieldUnknown:
    """Value of a field whose ``fieldType`` this library doesn't know.

    Attributes:
        field_type: The unrecognized tag
        raw: The original JSON value
    """

    field_type: FieldType
    raw: Any

    def to_wire(self) -> Any:
        return self.raw


# Value classes by wire tag
VALUE_TYPES: dict[FieldType, type] = {
    value_type.FIELD_TYPE: value_type
    for value_type in (
        EditableFieldString,
        EditableFieldConcealedString,
        EditableFieldEmail,
        EditableFieldNumber,
        EditableFieldBoolean,
        EditableFieldDate,
        EditableFieldYearMonth,
        EditableFieldWifiNetworkSecurityType,
        EditableFieldSubdivisionCode,
        EditableFieldCountryCode,
    )
}


# --- Wire record ---


@dataclass(frozen=True, kw_only=True)
class EditableFieldRecord(WireModel):
    """An editable field exactly as it appears on the wire, not yet validated.

    Attributes:
        field_type: The ``fieldType`` tag
        value: The raw JSON value
        id: Optional field id
        label: Optional display label
        extensions: Decoded extensions
    """

    id: B64Url | None = optional(B64URL)
    field_type: FieldType = required(EnumCodec(FieldType))
    value: Any = required(RAW)
    label: str | None = optional(STR)
    extensions: list[Any] = listing(EXTENSION)

    def validate(self, value_type: type[V], context: DecodeContext) -> V:
        """Check the tag against the expected value class and decode the value.

        Raises:
            FieldTypeMismatchError: If ``fieldType`` isn't the class's tag
            DecodeError: If the value doesn't parse
        """
        expected = value_type.FIELD_TYPE  # type: ignore[attr-defined]
        if self.field_type != expected:
            with context.at("fieldType"):
                raise FieldTypeMismatchError(expected.value, self.field_type.value)
        with context.at("value"):
            return value_type.from_wire(self.value)  # type: ignore[attr-defined]


# --- Editable field ---


@dataclass(frozen=True)
class EditableField(Generic[V]):
    """A typed value with an optional id, label and extensions.

    Example:
        >>> username = EditableField(EditableFieldString("alice"), label="Username")
        >>> username.to_dict()
        {'fieldType': 'string', 'value': 'alice', 'label': 'Username'}

    Attributes:
        value: One of the EditableField* value classes
        id: Optional machine id (at most 64 bytes)
        label: Optional display label
        extensions: Extensions attached to the field
        unknown_fields: Unrecognized keys, preserved verbatim
    """

    value: V
    id: B64Url | None = None
    label: str | None = None
    extensions: list[Any] = field(default_factory=list)
    unknown_fields: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def field_type(self) -> FieldType:
        """The ``fieldType`` tag, derived from the value."""
        return self.value.field_type  # type: ignore[attr-defined]

    @classmethod
    def from_dict(
        cls,
        data: Any,
        value_type: type[V],
        context: DecodeContext | None = None,
    ) -> EditableField[V]:
        """Decode a field whose value class is known in advance.

        Args:
            data: Decoded JSON value
            value_type: Expected value class, e.g. EditableFieldString
            context: Decode state

        Returns:
            Validated EditableField

        Raises:
            FieldTypeMismatchError: If ``fieldType`` disagrees with value_type
            DecodeError: If the object is malformed
        """
        if context is None:
            context = DecodeContext()
        record = EditableFieldRecord.from_dict(data, context)
        return cls._from_record(record, record.validate(value_type, context))

    @classmethod
    def from_dict_any(
        cls, data: Any, context: DecodeContext | None = None
    ) -> EditableField[Any]:
        """Decode a field, picking the value class from its ``fieldType``.

        Unknown tags decode to EditableFieldUnknown instead of failing.
        """
        if context is None:
            context = DecodeContext()
        record = EditableFieldRecord.from_dict(data, context)
        value_type = VALUE_TYPES.get(record.field_type)
        if value_type is None:
            logger.debug("Preserving field of unknown type %r", record.field_type.value)
            return cls._from_record(
                record, EditableFieldUnknown(record.field_type, record.value)
            )
        return cls._from_record(record, record.validate(value_type, context))

    @classmethod
    def _from_record(cls, record: EditableFieldRecord, value: Any) -> EditableField[Any]:
        return cls(
            value=value,
            id=record.id,
            label=record.label,
            extensions=record.extensions,
            unknown_fields=record.unknown_fields,
        )

    def to_dict(self) -> dict[str, Any]:
        """Encode as ``{id?, fieldType, value, label?, extensions?}``."""
        data: dict[str, Any] = {}
        if self.id is not None:
            data["id"] = self.id.encode()
        data["fieldType"] = self.field_type.value
        data["value"] = self.value.to_wire()  # type: ignore[attr-defined]
        if self.label is not None:
            data["label"] = self.label
        if self.extensions:
            data["extensions"] = [encode_extension(e) for e in self.extensions]
        for key, value in self.unknown_fields.items():
            data.setdefault(key, value)
        return data


# --- Codecs ---


class EditableFieldCodec(Codec):
    """Codec for an editable field of one value class."""

    def __init__(self, value_type: type) -> None:
        self.value_type = value_type

    def decode(self, value: Any, context: DecodeContext) -> EditableField[Any]:
        return EditableField.from_dict(value, self.value_type, context)

    def encode(self, value: EditableField[Any]) -> dict[str, Any]:
        return value.to_dict()


class AnyEditableFieldCodec(Codec):
    """Codec for an editable field of any value class."""

    def decode(self, value: Any, context: DecodeContext) -> EditableField[Any]:
        return EditableField.from_dict_any(value, context)

    def encode(self, value: EditableField[Any]) -> dict[str, Any]:
        return value.to_dict()


STRING_FIELD = EditableFieldCodec(EditableFieldString)
CONCEALED_FIELD = EditableFieldCodec(EditableFieldConcealedString)
EMAIL_FIELD = EditableFieldCodec(EditableFieldEmail)
NUMBER_FIELD = EditableFieldCodec(EditableFieldNumber)
BOOLEAN_FIELD = EditableFieldCodec(EditableFieldBoolean)
DATE_FIELD = EditableFieldCodec(EditableFieldDate)
YEAR_MONTH_FIELD = EditableFieldCodec(EditableFieldYearMonth)
WIFI_SECURITY_FIELD = EditableFieldCodec(EditableFieldWifiNetworkSecurityType)
SUBDIVISION_FIELD = EditableFieldCodec(EditableFieldSubdivisionCode)
COUNTRY_FIELD = EditableFieldCodec(EditableFieldCountryCode)
ANY_FIELD = AnyEditableFieldCodec()
