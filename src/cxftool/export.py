"""High-level API for CXF export documents.

This module provides the main interface for working with export documents:
- Creating an export from accounts
- Loading and validating documents from JSON
- Searching items and resolving item references
- Writing documents back to JSON
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .encoding import B64Url
from .exceptions import (
    DanglingReferenceError,
    InvalidJsonError,
    PathSegment,
    SerializationError,
    format_path,
)
from .models import (
    CURRENT_VERSION,
    Account,
    Collection,
    Credential,
    EditableField,
    Header,
    Item,
    ItemReferenceCredential,
    LinkedItem,
    SharedExtension,
    SharingAccessor,
    Version,
)
from .models.wire import DecodeContext, DecodeIssue, ExtensionDecoder

logger = logging.getLogger(__name__)

# Machine ids are opaque but bounded
MAX_ID_LENGTH = 64

IdLike = B64Url | bytes | str


@dataclass
class ExportSettings:
    """Settings for writing an export document.

    Attributes:
        exporter_rp_id: Relying party id of the exporting provider
        exporter_display_name: Display name of the exporting provider
        version: Format version written in the header
        indent: JSON indentation (None for compact output)
    """

    exporter_rp_id: str
    exporter_display_name: str
    version: Version = CURRENT_VERSION
    indent: int | None = None


@dataclass
class ImportOptions:
    """Options for reading an export document.

    Attributes:
        extension_decoder: Called with each extension object this library
            doesn't know. Return a value with ``to_dict()``, or None to keep
            the raw JSON.
        skip_invalid_items: Skip items that fail to decode and record them
            in Export.issues instead of failing the whole document
    """

    extension_decoder: ExtensionDecoder | None = None
    skip_invalid_items: bool = False


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A consistency problem found by Export.validate().

    Attributes:
        path: Location of the problem in the document
        message: Description of the problem
    """

    path: list[PathSegment]
    message: str

    @property
    def location(self) -> str:
        return format_path(self.path)

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


def _as_id(value: IdLike) -> B64Url:
    if isinstance(value, B64Url):
        return value
    if isinstance(value, str):
        return B64Url.decode(value)
    return B64Url(value)


def _reject_constant(name: str) -> Any:
    raise InvalidJsonError(f"Invalid JSON payload: {name} is not allowed")


class Export:
    """An export document and the operations on it.

    The graph is immutable: build it once with Export.create() or load it
    with Export.loads() / Export.open().

    Example usage:
        # Build an export
        export = Export.create(
            accounts=[account],
            settings=ExportSettings("exporter.example.com", "Example Exporter"),
        )
        export.save("export.json")

        # Read one back, skipping items that fail to decode
        export = Export.open("export.json", ImportOptions(skip_invalid_items=True))
        for issue in export.issues:
            print(issue)
        for item in export.iter_items():
            print(item.title)
    """

    def __init__(
        self,
        header: Header,
        settings: ExportSettings | None = None,
        issues: list[DecodeIssue] | None = None,
    ) -> None:
        """Initialize an export.

        Usually you should use Export.create() or Export.loads() instead.

        Args:
            header: The document graph
            settings: Output settings (derived from the header if omitted)
            issues: Items skipped while decoding
        """
        self._header = header
        self._settings = settings or ExportSettings(
            exporter_rp_id=header.exporter_rp_id,
            exporter_display_name=header.exporter_display_name,
            version=header.version,
        )
        self._issues = list(issues or [])
        self._filepath: Path | None = None

    @property
    def header(self) -> Header:
        """The document graph."""
        return self._header

    @property
    def settings(self) -> ExportSettings:
        return self._settings

    @property
    def accounts(self) -> list[Account]:
        return self._header.accounts

    @property
    def version(self) -> Version:
        return self._header.version

    @property
    def timestamp(self) -> datetime:
        return self._header.timestamp

    @property
    def issues(self) -> list[DecodeIssue]:
        """Items skipped during a tolerant import."""
        return list(self._issues)

    @property
    def filepath(self) -> Path | None:
        """Get the file path (if opened from or saved to a file)."""
        return self._filepath

    # --- Creating exports ---

    @classmethod
    def create(
        cls,
        accounts: Iterable[Account],
        settings: ExportSettings,
        timestamp: datetime | None = None,
    ) -> Export:
        """Create an export document.

        Args:
            accounts: Accounts to export
            settings: Exporter identity and output settings
            timestamp: Export time (defaults to now)

        Returns:
            New Export instance
        """
        if timestamp is None:
            timestamp = datetime.now(UTC).replace(microsecond=0)
        header = Header(
            version=settings.version,
            exporter_rp_id=settings.exporter_rp_id,
            exporter_display_name=settings.exporter_display_name,
            timestamp=timestamp,
            accounts=list(accounts),
        )
        return cls(header, settings=settings)

    # --- Loading exports ---

    @classmethod
    def from_dict(cls, data: Any, options: ImportOptions | None = None) -> Export:
        """Build an export from an already parsed JSON document.

        Args:
            data: Parsed JSON value
            options: Import options

        Returns:
            Export instance

        Raises:
            DecodeError: If the document is malformed
        """
        options = options or ImportOptions()
        context = DecodeContext(
            extension_decoder=options.extension_decoder,
            skip_invalid_items=options.skip_invalid_items,
        )
        header = Header.from_dict(data, context)
        if not header.version.is_compatible_with(CURRENT_VERSION):
            logger.warning(
                "Export format %s differs from supported %s; unknown data is preserved",
                header.version,
                CURRENT_VERSION,
            )
        if context.issues:
            logger.warning("Skipped %d invalid item(s) during import", len(context.issues))
        return cls(header, issues=context.issues)

    @classmethod
    def loads(
        cls, data: str | bytes, options: ImportOptions | None = None
    ) -> Export:
        """Parse an export from JSON text or UTF-8 bytes.

        Args:
            data: JSON document
            options: Import options

        Returns:
            Export instance

        Raises:
            InvalidJsonError: If the data isn't valid UTF-8 JSON
            DecodeError: If the document is malformed
        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            try:
                text = bytes(data).decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidJsonError("Invalid JSON payload: not valid UTF-8") from e
        else:
            text = data
        try:
            parsed = json.loads(text, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise InvalidJsonError(
                f"Invalid JSON payload: {e.msg} (line {e.lineno}, column {e.colno})"
            ) from e
        return cls.from_dict(parsed, options)

    @classmethod
    def open(cls, filepath: str | Path, options: ImportOptions | None = None) -> Export:
        """Open an export document file.

        Args:
            filepath: Path to the JSON file
            options: Import options

        Returns:
            Export instance

        Raises:
            FileNotFoundError: If file doesn't exist
            DecodeError: If the document is malformed
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Export file not found: {filepath}")

        export = cls.loads(filepath.read_bytes(), options)
        export._filepath = filepath
        logger.info(
            "Opened export from %s (%d accounts, %d items)",
            filepath,
            len(export.accounts),
            sum(1 for _ in export.iter_items()),
        )
        return export

    # --- Writing exports ---

    def to_dict(self) -> dict[str, Any]:
        """Encode the document as a JSON-ready dictionary."""
        return self._header.to_dict()

    def to_json(self, indent: int | None = None) -> str:
        """Serialize the document to JSON text.

        Args:
            indent: Indentation (defaults to the settings' indent)

        Raises:
            SerializationError: If the graph holds values JSON can't represent
        """
        if indent is None:
            indent = self._settings.indent
        try:
            return json.dumps(
                self.to_dict(), ensure_ascii=False, allow_nan=False, indent=indent
            )
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize export: {e}") from e

    def to_bytes(self) -> bytes:
        """Serialize the document to UTF-8 JSON.

        Raises:
            SerializationError: If the document can't be encoded
        """
        text = self.to_json()
        try:
            return text.encode("utf-8")
        except UnicodeEncodeError as e:
            raise SerializationError("Export contains text that is not valid UTF-8") from e

    def save(self, filepath: str | Path | None = None) -> None:
        """Save the document to a file.

        Args:
            filepath: Path to save to (uses original path if not specified)

        Raises:
            ValueError: If no filepath specified and export wasn't opened from file
        """
        if filepath:
            self._filepath = Path(filepath)
        elif self._filepath is None:
            raise ValueError("No filepath specified and export wasn't opened from file")

        self._filepath.write_bytes(self.to_bytes())
        logger.info("Saved export to %s", self._filepath)

    # --- Search operations ---

    def iter_accounts(self) -> Iterator[Account]:
        yield from self._header.accounts

    def iter_items(self, account: Account | None = None) -> Iterator[Item]:
        """Iterate over items.

        Args:
            account: Only this account's items (default: all accounts)

        Yields:
            Item objects
        """
        accounts = [account] if account is not None else self._header.accounts
        for owner in accounts:
            yield from owner.items

    def iter_collections(self, account: Account | None = None) -> Iterator[Collection]:
        """Iterate over collections, nested ones included."""
        accounts = [account] if account is not None else self._header.accounts
        for owner in accounts:
            yield from owner.iter_collections()

    def find_account(self, account_id: IdLike) -> Account | None:
        """Find an account by id."""
        account_id = _as_id(account_id)
        for account in self._header.accounts:
            if account.id == account_id:
                return account
        return None

    def find_item(
        self, item_id: IdLike, account_id: IdLike | None = None
    ) -> Item | None:
        """Find an item by id.

        Args:
            item_id: Item id (B64Url, raw bytes or base64url text)
            account_id: Only look in this account

        Returns:
            The item, or None if not found
        """
        item_id = _as_id(item_id)
        if account_id is not None:
            account = self.find_account(account_id)
            return account.find_item(item_id) if account else None
        for account in self._header.accounts:
            item = account.find_item(item_id)
            if item is not None:
                return item
        return None

    def find_items(
        self,
        title: str | None = None,
        tags: list[str] | None = None,
        credential_type: str | None = None,
    ) -> list[Item]:
        """Find items matching criteria.

        Args:
            title: Match items with this title
            tags: Match items with all these tags
            credential_type: Match items holding a credential with this tag

        Returns:
            List of matching items
        """
        matches = []
        for item in self.iter_items():
            if title is not None and item.title != title:
                continue
            if tags is not None and not all(tag in item.tags for tag in tags):
                continue
            if credential_type is not None and not any(
                c.type_tag == credential_type for c in item.credentials
            ):
                continue
            matches.append(item)
        return matches

    # --- References ---

    def resolve(
        self, link: LinkedItem, account: Account, strict: bool = False
    ) -> Item | None:
        """Resolve a LinkedItem found in ``account``.

        Without ``link.account`` the item is looked up in the referring
        account, otherwise in the named account of this export.

        Args:
            link: The reference
            account: Account the reference appears in
            strict: Raise instead of returning None

        Returns:
            The referenced item, or None if it isn't in the export

        Raises:
            DanglingReferenceError: If strict and the item isn't found
        """
        owner: Account | None = account
        if link.account is not None and link.account != account.id:
            owner = self.find_account(link.account)
        item = owner.find_item(link.item) if owner is not None else None
        if item is None and strict:
            raise DanglingReferenceError(f"Linked item {link.item} not found in export")
        return item

    def iter_links(self) -> Iterator[tuple[Account, list[PathSegment], LinkedItem]]:
        """Yield every item reference with its owning account and location.

        Covers collection members and item-reference credentials.
        """
        for a, account in enumerate(self._header.accounts):
            base: list[PathSegment] = ["accounts", a]
            for c, collection in enumerate(account.collections):
                yield from self._collection_links(
                    account, collection, [*base, "collections", c]
                )
            for i, item in enumerate(account.items):
                for k, credential in enumerate(item.credentials):
                    if isinstance(credential, ItemReferenceCredential):
                        path = [*base, "items", i, "credentials", k, "reference"]
                        yield account, path, credential.reference

    def _collection_links(
        self, account: Account, collection: Collection, path: list[PathSegment]
    ) -> Iterator[tuple[Account, list[PathSegment], LinkedItem]]:
        for index, link in enumerate(collection.items):
            yield account, [*path, "items", index], link
        for index, child in enumerate(collection.sub_collections):
            yield from self._collection_links(
                account, child, [*path, "subCollections", index]
            )

    def dangling_references(self) -> list[tuple[Account, LinkedItem]]:
        """References whose item isn't part of this export."""
        return [
            (account, link)
            for account, _, link in self.iter_links()
            if self.resolve(link, account) is None
        ]

    # --- Validation ---

    def validate(self) -> list[ValidationIssue]:
        """Check the graph for problems that decoding doesn't catch.

        Reports dangling references, ids longer than 64 bytes and
        duplicate item ids within an account. None of these prevent
        reading or writing the document.

        Returns:
            List of issues (empty if the export is consistent)
        """
        issues = []
        for account, path, link in self.iter_links():
            if self.resolve(link, account) is None:
                issues.append(ValidationIssue(path, "linked item not found in export"))

        for path, value in self._iter_ids():
            if len(value) > MAX_ID_LENGTH:
                issues.append(
                    ValidationIssue(path, f"id longer than {MAX_ID_LENGTH} bytes")
                )

        for a, account in enumerate(self._header.accounts):
            seen: set[B64Url] = set()
            for i, item in enumerate(account.items):
                if item.id in seen:
                    issues.append(
                        ValidationIssue(["accounts", a, "items", i, "id"], "duplicate item id")
                    )
                seen.add(item.id)

        logger.debug("Validation found %d issue(s)", len(issues))
        return issues

    def _iter_ids(self) -> Iterator[tuple[list[PathSegment], B64Url]]:
        for a, account in enumerate(self._header.accounts):
            base: list[PathSegment] = ["accounts", a]
            yield [*base, "id"], account.id
            for c, collection in enumerate(account.collections):
                yield from self._collection_ids(collection, [*base, "collections", c])
            for i, item in enumerate(account.items):
                item_path: list[PathSegment] = [*base, "items", i]
                yield [*item_path, "id"], item.id
                for k, credential in enumerate(item.credentials):
                    yield from _credential_ids(
                        credential, [*item_path, "credentials", k]
                    )

    def _collection_ids(
        self, collection: Collection, path: list[PathSegment]
    ) -> Iterator[tuple[list[PathSegment], B64Url]]:
        yield [*path, "id"], collection.id
        for index, child in enumerate(collection.sub_collections):
            yield from self._collection_ids(child, [*path, "subCollections", index])

    # --- Sharing ---

    @staticmethod
    def effective_accessors(entity: Account | Collection | Item) -> list[SharingAccessor]:
        """Accessors an importer should honor for an account, collection or item.

        Combines all ``shared`` extensions of the entity, dropping
        accessors of unknown type and accessors left without known
        permissions.
        """
        accessors = []
        for extension in entity.extensions:
            if isinstance(extension, SharedExtension):
                accessors.extend(extension.effective_accessors())
        return accessors

    def __str__(self) -> str:
        item_count = sum(1 for _ in self.iter_items())
        name = self._header.exporter_display_name
        return f'Export: "{name}" ({len(self.accounts)} accounts, {item_count} items)'


def _credential_ids(
    credential: Credential, path: list[PathSegment]
) -> Iterator[tuple[list[PathSegment], B64Url]]:
    for f, name, _ in credential.wire_fields():
        value = getattr(credential, f.name)
        if isinstance(value, B64Url) and name == "id":
            yield [*path, "id"], value
            continue
        candidates = value if isinstance(value, list) else [value]
        for index, candidate in enumerate(candidates):
            if isinstance(candidate, EditableField) and candidate.id is not None:
                field_path = [*path, name, index] if isinstance(value, list) else [*path, name]
                yield [*field_path, "id"], candidate.id
