"""Document aggregate: identity metadata plus an immutable content tree.

A Document is what a store hands back after persisting a content tree. Its
``address`` is derived from ``content`` and is checked whenever a Document is
constructed or loaded; there is no way to change the content of an existing
Document. To derive a new one, copy the tree into a ``ContentTreeBuilder``.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator

from docgraph.content import (
    Content,
    ContentAddress,
    ContentGroup,
    ContentGroups,
    compute_address,
    content_exists,
    find_content,
    find_group,
    readable_address,
    require_content,
    require_group,
    to_canonical_string,
)
from docgraph.exceptions import AddressMismatchError


class Certificate(BaseModel):
    """Attestation of a document by a certifier.

    Reserved for the relationship layer; documents created here carry none.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    certifier: str
    notes: str = ""
    certified_at: datetime


class Document(BaseModel):
    """Persisted, content-addressed document.

    Attributes:
        id: Store-assigned identifier, unique and increasing within a scope.
        creator: Opaque reference to whoever created the document. Not interpreted.
        content: The content tree.
        address: SHA-256 content address of ``content``.
        created_at: UTC time of first persistence.
        certificates: Reserved extension point, always empty here.

    Example:
        >>> doc = Document.assemble(id=1, creator="alice", content=tree)
        >>> doc.require_content("details", "title").value.value
        'Hello'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int = Field(ge=1)
    creator: str
    content: ContentGroups
    address: ContentAddress
    created_at: datetime
    certificates: tuple[Certificate, ...] = ()

    @field_validator("address", mode="before")
    @classmethod
    def parse_address(cls, v: Any) -> Any:
        if isinstance(v, str):
            return bytes.fromhex(v)
        return v

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v.astimezone(UTC)

    @model_validator(mode="after")
    def _check_address(self) -> "Document":
        self.verify()
        return self

    @field_serializer("address", when_used="json")
    def serialize_address(self, v: bytes) -> str:
        return v.hex()

    @classmethod
    def assemble(
        cls,
        *,
        id: int,
        creator: str,
        content: ContentGroups,
        created_at: datetime | None = None,
        certificates: tuple[Certificate, ...] = (),
    ) -> "Document":
        """Build a Document, deriving its address from ``content``."""
        return cls(
            id=id,
            creator=creator,
            content=content,
            address=compute_address(content),
            created_at=created_at or datetime.now(UTC),
            certificates=certificates,
        )

    def verify(self) -> None:
        """Recompute the address from content and compare with the stored one.

        Raises:
            AddressMismatchError: On disagreement. This means corrupted storage
                or a change of hashing/canonical format and must not be ignored.
        """
        actual = compute_address(self.content)
        if actual != self.address:
            raise AddressMismatchError(
                "fatal error: provided and indexed hash does not match newly generated hash: "
                f"stored={readable_address(self.address)} computed={readable_address(actual)}",
                expected=self.address,
                actual=actual,
            )

    @property
    def address_hex(self) -> str:
        return readable_address(self.address)

    def to_canonical_string(self) -> str:
        return to_canonical_string(self.content)

    def get_group(self, group_label: str) -> tuple[int, ContentGroup] | None:
        return find_group(self.content, group_label)

    def require_group(self, group_label: str) -> ContentGroup:
        return require_group(self.content, group_label)

    def get_content(self, group_label: str, content_label: str) -> tuple[int, Content] | None:
        return find_content(self.content, group_label, content_label)

    def require_content(self, group_label: str, content_label: str) -> Content:
        return require_content(self.content, group_label, content_label)

    def content_exists(self, group_label: str, content_label: str) -> bool:
        return content_exists(self.content, group_label, content_label)


__all__ = ["Certificate", "Document"]
