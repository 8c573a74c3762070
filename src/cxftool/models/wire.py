"""JSON wire mapping shared by all CXF models.

Models are frozen dataclasses. Each serialized attribute is declared with
a codec in its field metadata (see required(), optional(), listing()),
and WireModel turns the declarations into from_dict()/to_dict():

    @dataclass(frozen=True)
    class LinkedItem(WireModel):
        item: B64Url = required(B64URL)
        account: B64Url | None = optional(B64URL)

Wire names default to the camelCase form of the attribute name. JSON keys
a model doesn't declare are kept in ``unknown_fields`` and written back
on encode, so data from newer format versions isn't lost.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import MISSING, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, TypeVar

from .. import timestamp
from ..encoding import B64Url, Base32
from ..exceptions import (
    CxfError,
    DecodeError,
    InvalidTypeError,
    InvalidValueError,
    MissingFieldError,
    PathSegment,
    format_path,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="WireModel")

# Decodes a raw extension object into a caller-defined value (or None to decline)
ExtensionDecoder = Callable[[dict[str, Any]], Any]

U8_MAX = 0xFF
U16_MAX = 0xFFFF
U64_MAX = 0xFFFF_FFFF_FFFF_FFFF


@dataclass(slots=True)
class DecodeIssue:
    """A part of the document that was skipped during a tolerant import.

    Attributes:
        path: Location of the skipped value
        error: The error that caused it to be skipped
    """

    path: list[PathSegment]
    error: DecodeError

    @property
    def location(self) -> str:
        return format_path(self.path)

    def __str__(self) -> str:
        return f"{self.location}: {self.error.message}"


@dataclass
class DecodeContext:
    """State carried through a single decode.

    Attributes:
        extension_decoder: Caller hook for extensions this library doesn't know
        skip_invalid_items: Record invalid items as issues instead of failing
        issues: Items skipped so far
    """

    extension_decoder: ExtensionDecoder | None = None
    skip_invalid_items: bool = False
    issues: list[DecodeIssue] = field(default_factory=list)
    _location: list[PathSegment] = field(default_factory=list, repr=False)

    @contextmanager
    def at(self, segment: PathSegment) -> Iterator[None]:
        """Descend into a key or index while decoding.

        Errors raised inside the block are stamped with the full path
        the first time they pass through.
        """
        self._location.append(segment)
        try:
            yield
        except CxfError as e:
            if not e.path:
                e.path = list(self._location)
            raise
        finally:
            self._location.pop()

    def report(self, error: DecodeError) -> None:
        """Record a skipped value."""
        issue = DecodeIssue(path=list(error.path), error=error)
        logger.warning("Skipping invalid entry at %s: %s", issue.location, error.message)
        self.issues.append(issue)


# --- JSON kind checks ---


def expect_object(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise InvalidTypeError("object", value)
    return value


def expect_list(value: Any) -> list[Any]:
    if not isinstance(value, list):
        raise InvalidTypeError("array", value)
    return value


def expect_str(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidTypeError("string", value)
    return value


def expect_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidTypeError("boolean", value)
    return value


def expect_int(value: Any, minimum: int = 0, maximum: int = U64_MAX) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidTypeError("integer", value)
    if not minimum <= value <= maximum:
        raise InvalidValueError(f"integer {value} out of range [{minimum}, {maximum}]")
    return value


def camel_case(name: str) -> str:
    """Convert a snake_case attribute name into its camelCase wire name."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


# --- Codecs ---


class Codec:
    """Converts one attribute between its JSON and Python representations."""

    def decode(self, value: Any, context: DecodeContext) -> Any:
        raise NotImplementedError

    def encode(self, value: Any) -> Any:
        raise NotImplementedError


class StrCodec(Codec):
    def decode(self, value: Any, context: DecodeContext) -> str:
        return expect_str(value)

    def encode(self, value: str) -> str:
        return value


class BoolCodec(Codec):
    def decode(self, value: Any, context: DecodeContext) -> bool:
        return expect_bool(value)

    def encode(self, value: bool) -> bool:
        return value


class IntCodec(Codec):
    def __init__(self, minimum: int = 0, maximum: int = U64_MAX) -> None:
        self.minimum = minimum
        self.maximum = maximum

    def decode(self, value: Any, context: DecodeContext) -> int:
        return expect_int(value, self.minimum, self.maximum)

    def encode(self, value: int) -> int:
        return value


class B64UrlCodec(Codec):
    def decode(self, value: Any, context: DecodeContext) -> B64Url:
        return B64Url.decode(expect_str(value))

    def encode(self, value: B64Url) -> str:
        return value.encode()


class Base32Codec(Codec):
    def decode(self, value: Any, context: DecodeContext) -> Base32:
        return Base32.decode(expect_str(value))

    def encode(self, value: Base32) -> str:
        return value.encode()


class TimestampCodec(Codec):
    def decode(self, value: Any, context: DecodeContext) -> datetime:
        return timestamp.decode(value)

    def encode(self, value: datetime) -> int:
        return timestamp.encode(value)


class EnumCodec(Codec):
    """Codec for OpenEnum / OpenIntEnum values."""

    def __init__(self, enum_type: type[Enum], maximum: int = U16_MAX) -> None:
        self.enum_type = enum_type
        self.maximum = maximum

    def decode(self, value: Any, context: DecodeContext) -> Enum:
        if issubclass(self.enum_type, int):
            raw: Any = expect_int(value, 0, self.maximum)
        else:
            raw = expect_str(value)
        try:
            return self.enum_type(raw)
        except ValueError as e:
            raise InvalidValueError(f"invalid {self.enum_type.__name__}") from e

    def encode(self, value: Enum) -> Any:
        return value.value


class RawCodec(Codec):
    """Passes arbitrary JSON through untouched."""

    def decode(self, value: Any, context: DecodeContext) -> Any:
        return value

    def encode(self, value: Any) -> Any:
        return value


class ModelCodec(Codec):
    """Codec for a nested WireModel.

    A model that nests itself passes a function returning its class,
    since the class doesn't exist yet while its fields are declared.
    """

    def __init__(
        self, model_type: type[WireModel] | Callable[[], type[WireModel]]
    ) -> None:
        self._model_type = model_type

    @property
    def model_type(self) -> type[WireModel]:
        if isinstance(self._model_type, type):
            return self._model_type
        return self._model_type()

    def decode(self, value: Any, context: DecodeContext) -> WireModel:
        return self.model_type.from_dict(value, context)

    def encode(self, value: WireModel) -> dict[str, Any]:
        return value.to_dict()


class ListCodec(Codec):
    """Codec for a JSON array whose elements share one codec."""

    def __init__(self, inner: Codec) -> None:
        self.inner = inner

    def decode(self, value: Any, context: DecodeContext) -> list[Any]:
        decoded = []
        for index, element in enumerate(expect_list(value)):
            with context.at(index):
                decoded.append(self.inner.decode(element, context))
        return decoded

    def encode(self, value: list[Any]) -> list[Any]:
        return [self.inner.encode(element) for element in value]


class SkippingListCodec(ListCodec):
    """ListCodec that can drop invalid elements.

    When the context has skip_invalid_items set, an element that fails
    to decode is reported on the context and left out instead of failing
    the whole document.
    """

    def decode(self, value: Any, context: DecodeContext) -> list[Any]:
        decoded = []
        for index, element in enumerate(expect_list(value)):
            try:
                with context.at(index):
                    decoded.append(self.inner.decode(element, context))
            except DecodeError as e:
                if not context.skip_invalid_items:
                    raise
                context.report(e)
        return decoded


STR = StrCodec()
BOOL = BoolCodec()
U64 = IntCodec()
U8 = IntCodec(maximum=U8_MAX)
B64URL = B64UrlCodec()
BASE32 = Base32Codec()
TIMESTAMP = TimestampCodec()
RAW = RawCodec()


# --- Field declarations ---


def required(codec: Codec, *, name: str | None = None) -> Any:
    """Declare a key that must be present and non-null."""
    return field(metadata={"codec": codec, "wire_name": name, "omit_empty": False})


def optional(codec: Codec, *, name: str | None = None) -> Any:
    """Declare a key that may be absent or null (decoded as None)."""
    return field(
        default=None,
        metadata={"codec": codec, "wire_name": name, "omit_empty": False},
    )


def listing(
    codec: Codec,
    *,
    name: str | None = None,
    omit_empty: bool = True,
    required: bool = False,
    skip_invalid: bool = False,
) -> Any:
    """Declare a JSON array attribute.

    Args:
        codec: Codec for each element
        name: Wire name override
        omit_empty: Leave the key out on encode when the list is empty
        required: Fail decode when the key is missing
        skip_invalid: Allow a tolerant decode to drop invalid elements
    """
    list_codec = SkippingListCodec(codec) if skip_invalid else ListCodec(codec)
    metadata = {"codec": list_codec, "wire_name": name, "omit_empty": omit_empty}
    if required:
        return field(metadata=metadata)
    return field(default_factory=list, metadata=metadata)


def _is_required(f: dataclasses.Field[Any]) -> bool:
    return f.default is MISSING and f.default_factory is MISSING


# --- Models ---


@dataclass(frozen=True)
class WireModel:
    """Base class for dataclasses with a JSON object representation.

    Attributes:
        unknown_fields: Keys this model doesn't declare, preserved verbatim
    """

    # Keys consumed by a discriminator rather than a declared field
    RESERVED_KEYS: ClassVar[frozenset[str]] = frozenset()

    unknown_fields: dict[str, Any] = field(
        default_factory=dict, kw_only=True, repr=False, hash=False
    )

    @classmethod
    def wire_fields(cls) -> Iterator[tuple[dataclasses.Field[Any], str, Codec]]:
        """Yield (field, wire name, codec) for each serialized attribute."""
        for f in dataclasses.fields(cls):
            codec = f.metadata.get("codec")
            if codec is None:
                continue
            yield f, f.metadata.get("wire_name") or camel_case(f.name), codec

    @classmethod
    def from_dict(
        cls: type[M], data: Any, context: DecodeContext | None = None
    ) -> M:
        """Decode a model from a parsed JSON object.

        Args:
            data: Decoded JSON value
            context: Decode state (a fresh one is used if omitted)

        Returns:
            New model instance

        Raises:
            DecodeError: If a declared field is missing or malformed
        """
        if context is None:
            context = DecodeContext()
        return cls(**cls._decode_fields(expect_object(data), context))

    @classmethod
    def _decode_fields(
        cls, data: dict[str, Any], context: DecodeContext
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        known = set(cls.RESERVED_KEYS)
        for f, name, codec in cls.wire_fields():
            known.add(name)
            value = data.get(name)
            if value is None:
                if _is_required(f):
                    with context.at(name):
                        raise MissingFieldError(name)
                continue
            with context.at(name):
                kwargs[f.name] = codec.decode(value, context)
        kwargs["unknown_fields"] = {
            key: value for key, value in data.items() if key not in known
        }
        return kwargs

    def to_dict(self) -> dict[str, Any]:
        """Encode as a JSON-ready dictionary, omitting absent optionals."""
        data: dict[str, Any] = {}
        for f, name, codec in self.wire_fields():
            value = getattr(self, f.name)
            if value is None:
                continue
            if f.metadata.get("omit_empty") and not value:
                continue
            data[name] = codec.encode(value)
        for key, value in self.unknown_fields.items():
            data.setdefault(key, value)
        return data
