"""References between items."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from ..encoding import B64Url
from .credential import Credential
from .wire import B64URL, ModelCodec, WireModel, optional, required


@dataclass(frozen=True, kw_only=True)
class LinkedItem(WireModel):
    """A weak reference to an item, possibly in another account.

    A reference doesn't have to resolve: a partial export may mention
    items it doesn't include. See Export.resolve().

    Attributes:
        item: Id of the referenced item
        account: Id of the owning account, if not the referring one
    """

    item: B64Url = required(B64URL)
    account: B64Url | None = optional(B64URL)


@dataclass(frozen=True, kw_only=True)
class ItemReferenceCredential(Credential):
    """Points at another item holding related credentials."""

    TYPE: ClassVar[str] = "item-reference"

    reference: LinkedItem = required(ModelCodec(LinkedItem))
