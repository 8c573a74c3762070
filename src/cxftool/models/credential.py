"""Credential base class and the ``type``-tagged decoder.

Each credential kind is a WireModel subclass declaring its wire tag in
TYPE. Subclasses register themselves when defined, so decode_credential()
can dispatch on the tag. A tag nobody registered decodes to
UnknownCredential, which keeps every sibling key and writes them back
unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar

from ..exceptions import MissingFieldError
from .wire import Codec, DecodeContext, WireModel, expect_object, expect_str

logger = logging.getLogger(__name__)

# Known credential classes by wire tag
_REGISTRY: dict[str, type[Credential]] = {}


@dataclass(frozen=True, kw_only=True)
class Credential(WireModel):
    """Base class for all credentials.

    Subclasses set TYPE to their kebab-case wire tag.
    """

    TYPE: ClassVar[str] = ""
    RESERVED_KEYS: ClassVar[frozenset[str]] = frozenset({"type"})

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        tag = cls.__dict__.get("TYPE")
        if tag:
            _REGISTRY[tag] = cls

    @property
    def type_tag(self) -> str:
        """The ``type`` discriminator written for this credential."""
        return self.TYPE

    @property
    def is_known(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type_tag, **super().to_dict()}


@dataclass(frozen=True, kw_only=True)
class UnknownCredential(Credential):
    """A credential whose ``type`` this library doesn't know.

    Attributes:
        ty: The unrecognized tag
        content: Every other key of the original object
    """

    ty: str
    content: dict[str, Any] = field(default_factory=dict)

    @property
    def type_tag(self) -> str:
        return self.ty

    @property
    def is_known(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.ty, **self.content}


def credential_types() -> dict[str, type[Credential]]:
    """Known credential classes by wire tag."""
    return dict(_REGISTRY)


def decode_credential(data: Any, context: DecodeContext | None = None) -> Credential:
    """Decode one credential, dispatching on its ``type`` tag.

    Args:
        data: Decoded JSON value
        context: Decode state

    Returns:
        The matching Credential subclass, or UnknownCredential

    Raises:
        MissingFieldError: If ``type`` is absent
        InvalidTypeError: If ``type`` isn't a string
        DecodeError: If a known credential has an invalid payload
    """
    if context is None:
        context = DecodeContext()
    data = expect_object(data)
    with context.at("type"):
        tag = data.get("type")
        if tag is None:
            raise MissingFieldError("type")
        expect_str(tag)

    credential_class = _REGISTRY.get(tag)
    if credential_class is None:
        logger.debug("Preserving credential of unknown type %r", tag)
        return UnknownCredential(
            ty=tag, content={k: v for k, v in data.items() if k != "type"}
        )
    return credential_class.from_dict(data, context)


class CredentialCodec(Codec):
    def decode(self, value: Any, context: DecodeContext) -> Credential:
        return decode_credential(value, context)

    def encode(self, value: Credential) -> dict[str, Any]:
        return value.to_dict()


CREDENTIAL = CredentialCodec()
