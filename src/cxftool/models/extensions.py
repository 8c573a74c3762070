"""Extensions attached to accounts, collections, items and fields.

An extension is a JSON object tagged by ``name``. This library knows the
standard ``shared`` extension; anything else is offered to a caller
supplied decoder (see ImportOptions.extension_decoder) and, if that
declines, kept as raw JSON so it survives the round trip.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, ClassVar

from ..encoding import B64Url
from ..exceptions import CxfError
from .enums import SharingAccessorPermission, SharingAccessorType
from .wire import (
    B64URL,
    STR,
    Codec,
    DecodeContext,
    EnumCodec,
    ModelCodec,
    WireModel,
    listing,
    required,
)

logger = logging.getLogger(__name__)


class Extension:
    """Base class for extension values.

    Objects returned by an external extension decoder don't have to
    inherit from this class, but must provide ``to_dict()``.
    """

    def to_dict(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True, kw_only=True)
class SharingAccessor(WireModel):
    """A user or group an entity is shared with.

    Attributes:
        accessor_type: Kind of principal (``type`` on the wire)
        account_id: Id of the principal's account
        name: Display name of the principal
        permissions: Access granted to the principal
    """

    accessor_type: SharingAccessorType = required(
        EnumCodec(SharingAccessorType), name="type"
    )
    account_id: B64Url = required(B64URL)
    name: str = required(STR)
    permissions: list[SharingAccessorPermission] = listing(
        EnumCodec(SharingAccessorPermission), omit_empty=False
    )

    @property
    def effective_permissions(self) -> list[SharingAccessorPermission]:
        """Permissions this library understands, in their original order."""
        return [p for p in self.permissions if p.is_known]


@dataclass(frozen=True, kw_only=True)
class SharedExtension(WireModel, Extension):
    """The ``shared`` extension: who else can access the entity.

    Attributes:
        accessors: Principals the entity is shared with
    """

    NAME: ClassVar[str] = "shared"
    RESERVED_KEYS: ClassVar[frozenset[str]] = frozenset({"name"})

    accessors: list[SharingAccessor] = listing(
        ModelCodec(SharingAccessor), omit_empty=False
    )

    @property
    def name(self) -> str:
        return self.NAME

    def effective_accessors(self) -> list[SharingAccessor]:
        """Accessors an importer should act on.

        Accessors of an unknown type are dropped, unknown permissions are
        removed, and an accessor left with no permissions is dropped too
        rather than treated as a zero-permission grant.

        Returns:
            Accessors with only their known permissions
        """
        effective = []
        for accessor in self.accessors:
            if not accessor.accessor_type.is_known:
                continue
            permissions = accessor.effective_permissions
            if not permissions:
                continue
            if len(permissions) != len(accessor.permissions):
                accessor = dataclasses.replace(accessor, permissions=permissions)
            effective.append(accessor)
        return effective

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.NAME, **super().to_dict()}


@dataclass(frozen=True, slots=True)
class UnknownExtension(Extension):
    """An extension nothing could decode, kept verbatim.

    Attributes:
        content: The original JSON value
    """

    content: Any

    @property
    def name(self) -> str | None:
        if isinstance(self.content, dict) and isinstance(self.content.get("name"), str):
            return self.content["name"]
        return None

    def to_dict(self) -> Any:
        return self.content


def decode_extension(data: Any, context: DecodeContext | None = None) -> Any:
    """Decode one extension.

    Args:
        data: Decoded JSON value
        context: Decode state holding the external extension decoder

    Returns:
        SharedExtension, an object from the external decoder, or
        UnknownExtension

    Raises:
        DecodeError: If a ``shared`` extension has an invalid payload
    """
    if context is None:
        context = DecodeContext()
    if isinstance(data, dict) and data.get("name") == SharedExtension.NAME:
        return SharedExtension.from_dict(data, context)

    if context.extension_decoder is not None and isinstance(data, dict):
        try:
            decoded = context.extension_decoder(data)
        except (CxfError, ValueError, KeyError, TypeError) as e:
            logger.warning("Extension decoder failed on %r: %s", data.get("name"), e)
            decoded = None
        if decoded is not None:
            return decoded

    unknown = UnknownExtension(data)
    logger.debug("Preserving unknown extension %r", unknown.name)
    return unknown


def encode_extension(extension: Any) -> Any:
    """Encode any extension value back to JSON."""
    return extension.to_dict()


class ExtensionCodec(Codec):
    def decode(self, value: Any, context: DecodeContext) -> Any:
        return decode_extension(value, context)

    def encode(self, value: Any) -> Any:
        return encode_extension(value)


EXTENSION = ExtensionCodec()
