"""Document credentials: notes, files and free-form custom fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from ..encoding import B64Url
from ..security import sha256, verify_sha256
from .credential import Credential
from .extensions import EXTENSION
from .fields import ANY_FIELD, STRING_FIELD, EditableField, EditableFieldString
from .wire import B64URL, STR, U64, listing, optional, required


@dataclass(frozen=True, kw_only=True)
class NoteCredential(Credential):
    TYPE: ClassVar[str] = "note"

    content: EditableField[EditableFieldString] = required(STRING_FIELD)


@dataclass(frozen=True, kw_only=True)
class FileCredential(Credential):
    """Metadata of a file attached to an item.

    The file content travels separately; this credential describes it.

    Attributes:
        id: Id of the file in the export archive
        name: File name
        decrypted_size: Size of the content in bytes
        integrity_hash: SHA-256 of the content
    """

    TYPE: ClassVar[str] = "file"

    id: B64Url = required(B64URL)
    name: str = required(STR)
    decrypted_size: int = required(U64)
    integrity_hash: B64Url = required(B64URL)

    @classmethod
    def for_content(
        cls, name: str, content: bytes, id: B64Url | None = None
    ) -> FileCredential:
        """Describe a file, computing its size and integrity hash.

        Args:
            name: File name
            content: The decrypted file content
            id: File id (random if not given)

        Returns:
            New FileCredential
        """
        return cls(
            id=id or B64Url.random(),
            name=name,
            decrypted_size=len(content),
            integrity_hash=B64Url(sha256(content)),
        )

    def verify(self, content: bytes) -> bool:
        """Check content against the recorded size and hash."""
        if len(content) != self.decrypted_size:
            return False
        return verify_sha256(content, bytes(self.integrity_hash))


@dataclass(frozen=True, kw_only=True)
class CustomFieldsCredential(Credential):
    """A group of user-defined fields of any type.

    Attributes:
        id: Optional id of the group
        label: Optional display label of the group
        fields: The fields, each carrying its own ``fieldType``
        extensions: Extensions attached to the group
    """

    TYPE: ClassVar[str] = "custom-fields"

    id: B64Url | None = optional(B64URL)
    label: str | None = optional(STR)
    fields: list[EditableField[Any]] = listing(ANY_FIELD, omit_empty=False, required=True)
    extensions: list[Any] = listing(EXTENSION)
