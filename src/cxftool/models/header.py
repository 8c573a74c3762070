"""The export document graph: header, accounts, collections and items.

    Header
    └── Account
        ├── Collection ──(LinkedItem)──> Item
        │   └── Collection ...
        └── Item
            └── Credential

Accounts own their items and collections. Collections refer to items
through LinkedItem instead of embedding them, because a shared
collection may list items owned by another account.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..encoding import B64Url
from .credential import CREDENTIAL, Credential
from .extensions import EXTENSION
from .reference import LinkedItem
from .scope import CredentialScope
from .wire import (
    B64URL,
    BOOL,
    STR,
    TIMESTAMP,
    U8,
    ModelCodec,
    WireModel,
    listing,
    optional,
    required,
)


@dataclass(frozen=True, kw_only=True)
class Version(WireModel):
    """Format version of an export document.

    Attributes:
        major: Incremented for incompatible changes
        minor: Incremented for backwards compatible additions
    """

    major: int = required(U8)
    minor: int = required(U8)

    def is_compatible_with(self, other: Version) -> bool:
        """Whether documents of this version can be read by code for ``other``."""
        return self.major == other.major

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


CURRENT_VERSION = Version(major=1, minor=0)


@dataclass(frozen=True, kw_only=True)
class Item(WireModel):
    """A single entry in a credential manager.

    Attributes:
        id: Unique id within the account
        title: Display title
        creation_at: Creation time
        modified_at: Last modification time
        subtitle: Secondary display text
        favorite: Whether the user marked it as a favorite
        scope: Websites and apps the credentials apply to
        credentials: Credentials of any kind, known or not
        tags: User-defined tags
        extensions: Extensions attached to the item
    """

    id: B64Url = required(B64URL)
    creation_at: datetime | None = optional(TIMESTAMP)
    modified_at: datetime | None = optional(TIMESTAMP)
    title: str = required(STR)
    subtitle: str | None = optional(STR)
    favorite: bool | None = optional(BOOL)
    scope: CredentialScope | None = optional(ModelCodec(CredentialScope))
    credentials: list[Credential] = listing(CREDENTIAL, omit_empty=False, required=True)
    tags: list[str] = listing(STR)
    extensions: list[Any] = listing(EXTENSION)


@dataclass(frozen=True, kw_only=True)
class Collection(WireModel):
    """A folder-like grouping of items.

    Attributes:
        id: Unique id within the account
        title: Display title
        items: References to the items in the collection
        sub_collections: Nested collections
        extensions: Extensions attached to the collection
    """

    id: B64Url = required(B64URL)
    creation_at: datetime | None = optional(TIMESTAMP)
    modified_at: datetime | None = optional(TIMESTAMP)
    title: str = required(STR)
    subtitle: str | None = optional(STR)
    items: list[LinkedItem] = listing(ModelCodec(LinkedItem), omit_empty=False)
    sub_collections: list[Collection] = listing(ModelCodec(lambda: Collection))
    extensions: list[Any] = listing(EXTENSION)

    def walk(self) -> list[Collection]:
        """This collection and all nested collections, depth first."""
        collections = [self]
        for child in self.sub_collections:
            collections.extend(child.walk())
        return collections


@dataclass(frozen=True, kw_only=True)
class Account(WireModel):
    """A user account of the exporting provider.

    Attributes:
        id: Unique id of the account
        username: Account user name
        email: Account email address
        full_name: The user's full name
        collections: Top-level collections
        items: Items owned by the account
        extensions: Extensions attached to the account
    """

    id: B64Url = required(B64URL)
    username: str = required(STR)
    email: str = required(STR)
    full_name: str | None = optional(STR)
    collections: list[Collection] = listing(ModelCodec(Collection), omit_empty=False)
    items: list[Item] = listing(ModelCodec(Item), omit_empty=False, skip_invalid=True)
    extensions: list[Any] = listing(EXTENSION)

    def find_item(self, item_id: B64Url) -> Item | None:
        """Find an item owned by this account."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def iter_collections(self) -> list[Collection]:
        """All collections of the account, nested ones included."""
        collections = []
        for collection in self.collections:
            collections.extend(collection.walk())
        return collections


@dataclass(frozen=True, kw_only=True)
class Header(WireModel):
    """Top-level object of an export document.

    Attributes:
        version: Format version
        exporter_rp_id: Relying party id of the exporting provider
        exporter_display_name: Display name of the exporting provider
        timestamp: When the export was made
        accounts: Exported accounts
    """

    version: Version = required(ModelCodec(Version))
    exporter_rp_id: str = required(STR)
    exporter_display_name: str = required(STR)
    timestamp: datetime = required(TIMESTAMP)
    accounts: list[Account] = listing(ModelCodec(Account), omit_empty=False, required=True)
