"""Content items, content groups and content trees.

A ``Content`` is one labeled scalar value. A content group is an ordered tuple
of Content, and a content tree (``ContentGroups``) is an ordered tuple of
groups: the complete payload of a document. Order is significant at both
levels.

The JSON form of a Content item pairs the label with a ``[kind, payload]``
array, matching the ledger ABI layout used by existing content files::

    {"label": "title", "value": ["string", "Hello"]}
"""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, field_serializer, field_validator

from docgraph.exceptions import ContentValidationError

from .value import AnyScalar, ScalarValue, Utf8Str, to_scalar

CONTENT_GROUP_LABEL = "content_group_label"
"""Reserved label whose string value names the group that carries it."""


class Content(BaseModel):
    """Immutable labeled scalar value.

    Two Content items are equal when both label and value (kind and payload)
    are equal.

    Example:
        >>> Content.of("title", "Hello")
        >>> Content(label="votes", value=Int64Value(value=3))
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    label: Utf8Str
    value: ScalarValue

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: Any) -> Any:
        """Accept the ``[kind, payload]`` pair form alongside ``{"kind": ..., "value": ...}``."""
        if isinstance(v, (list, tuple)):
            if len(v) != 2:
                raise ValueError(f"value pair must have exactly 2 elements, got {len(v)}")
            return {"kind": v[0], "value": v[1]}
        return v

    @field_serializer("value", when_used="json")
    def serialize_value(self, v: AnyScalar) -> list[Any]:
        """Serialize the value as a ``[kind, payload]`` pair."""
        return [str(v.kind), v.model_dump(mode="json")["value"]]

    @classmethod
    def of(cls, label: str, value: Any) -> "Content":
        """Build a Content item, inferring the scalar kind from a plain Python value."""
        return cls(label=label, value=to_scalar(value))


ContentGroup = tuple[Content, ...]
"""Ordered sequence of Content items; one named section of a document."""

ContentGroups = tuple[ContentGroup, ...]
"""Ordered sequence of content groups; the full payload of a document."""

_content_groups_adapter: TypeAdapter[ContentGroups] = TypeAdapter(ContentGroups)


def rollup(item: Content | Sequence[Content]) -> ContentGroups:
    """Wrap a single Content item or a single group into a one-group tree."""
    if isinstance(item, Content):
        return ((item,),)
    return (tuple(item),)


def as_content_groups(tree: Content | Sequence[Content] | Sequence[Sequence[Content]]) -> ContentGroups:
    """Normalize a tree, a single group or a single Content item into an immutable tree.

    Raises:
        ContentValidationError: If the input mixes groups and Content items.
    """
    if isinstance(tree, Content):
        return rollup(tree)
    items = list(tree)
    if items and all(isinstance(item, Content) for item in items):
        return rollup(items)  # type: ignore[arg-type]
    groups: list[ContentGroup] = []
    for group in items:
        if isinstance(group, Content) or not all(isinstance(c, Content) for c in group):
            raise ContentValidationError("content tree must be a sequence of groups of Content items")
        groups.append(tuple(group))
    return tuple(groups)


def content_groups_from_json(data: Any) -> ContentGroups:
    """Validate JSON-decoded data into a content tree.

    Accepts either the bare list of groups or an object carrying it under
    ``content_groups`` (the layout of document creation files).
    """
    if isinstance(data, dict):
        if "content_groups" not in data:
            raise ContentValidationError("expected a 'content_groups' key")
        data = data["content_groups"]
    return _content_groups_adapter.validate_python(data)


def content_groups_to_json(tree: ContentGroups) -> list[list[dict[str, Any]]]:
    """Dump a content tree to JSON-compatible lists of ``{"label", "value"}`` objects."""
    return _content_groups_adapter.dump_python(tree, mode="json")


__all__ = [
    "CONTENT_GROUP_LABEL",
    "Content",
    "ContentGroup",
    "ContentGroups",
    "as_content_groups",
    "content_groups_from_json",
    "content_groups_to_json",
    "rollup",
]
