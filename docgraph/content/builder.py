"""Mutable working copies of content trees.

Persisted documents are immutable. To "edit" one, copy its tree into a
``ContentTreeBuilder``, change the copy, then hand ``build()`` to
``DocumentRepository.get_or_create`` to obtain the new (or deduplicated)
document.

Example:
    >>> builder = ContentTreeBuilder.from_document(doc)
    >>> builder.upsert("details", Content.of("title", "World"))
    >>> new_doc = await repository.get_or_create(creator, builder.build())
"""

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from docgraph.exceptions import GroupNotFoundError

from .accessors import find_group, require_group, upsert
from .model import CONTENT_GROUP_LABEL, Content, ContentGroups

if TYPE_CHECKING:
    from docgraph.documents.document import Document


class ContentTreeBuilder:
    """Editable list-of-lists copy of a content tree."""

    def __init__(self, groups: Iterable[Iterable[Content]] = ()) -> None:
        self.groups: list[list[Content]] = [list(group) for group in groups]

    @classmethod
    def from_groups(cls, groups: Sequence[Sequence[Content]]) -> "ContentTreeBuilder":
        return cls(groups)

    @classmethod
    def from_document(cls, document: "Document") -> "ContentTreeBuilder":
        """Copy a document's tree; the document itself is untouched."""
        return cls(document.content)

    def add_group(self, group_label: str | None = None, *contents: Content) -> list[Content]:
        """Append a new group, named with the reserved label when ``group_label`` is given."""
        group: list[Content] = []
        if group_label is not None:
            group.append(Content.of(CONTENT_GROUP_LABEL, group_label))
        group.extend(contents)
        self.groups.append(group)
        return group

    def group(self, group_label: str) -> list[Content]:
        """Return the named mutable group. Raises GroupNotFoundError if absent."""
        return require_group(self.groups, group_label)

    def upsert(self, group_label: str, content: Content, *, create_group: bool = False) -> None:
        """Upsert ``content`` into the named group.

        With ``create_group`` a missing group is appended first instead of
        raising GroupNotFoundError.
        """
        found = find_group(self.groups, group_label)
        if found is not None:
            group = found[1]
        elif create_group:
            group = self.add_group(group_label)
        else:
            raise GroupNotFoundError(group_label)
        upsert(group, content)

    def build(self) -> ContentGroups:
        """Freeze the current state into an immutable tree."""
        return tuple(tuple(group) for group in self.groups)

    def __len__(self) -> int:
        return len(self.groups)


__all__ = ["ContentTreeBuilder"]
