"""Label-based navigation into content trees.

Groups are found by the string value of their reserved ``content_group_label``
item; Content is found by label within a group. All lookups are linear scans
and the first match wins. The helpers accept any sequence of sequences, so they
work on frozen document trees and on mutable builder copies alike; the returned
group is the same object held by the tree.
"""

from collections.abc import Sequence
from typing import TypeVar

from docgraph.exceptions import ContentNotFoundError, GroupNotFoundError, InvalidReservedLabelTypeError

from .model import CONTENT_GROUP_LABEL, Content
from .value import ScalarKind

_G = TypeVar("_G", bound=Sequence[Content])


def _reserved_name(content: Content) -> str:
    if content.value.kind != ScalarKind.STRING:
        raise InvalidReservedLabelTypeError(f"fatal error: {CONTENT_GROUP_LABEL} must be a string, got {content.value.kind}")
    return content.value.value  # type: ignore[return-value]


def group_name(group: Sequence[Content]) -> str | None:
    """Return the value of the group's first reserved-label item, or None.

    Raises:
        InvalidReservedLabelTypeError: If that item is not a string.
    """
    for content in group:
        if content.label == CONTENT_GROUP_LABEL:
            return _reserved_name(content)
    return None


def find_group(tree: Sequence[_G], group_label: str) -> tuple[int, _G] | None:
    """Find the first group named ``group_label``.

    Every reserved-label item inspected along the way must hold a string;
    a non-string one aborts the scan.

    Returns:
        ``(index, group)`` or None when no group matches.

    Raises:
        InvalidReservedLabelTypeError: On a non-string reserved-label item.
    """
    for index, group in enumerate(tree):
        for content in group:
            if content.label == CONTENT_GROUP_LABEL and _reserved_name(content) == group_label:
                return index, group
    return None


def require_group(tree: Sequence[_G], group_label: str) -> _G:
    """Like find_group, but raises GroupNotFoundError on a miss."""
    found = find_group(tree, group_label)
    if found is None:
        raise GroupNotFoundError(group_label)
    return found[1]


def find_content(tree: Sequence[Sequence[Content]], group_label: str, content_label: str) -> tuple[int, Content] | None:
    """Find the first Content labeled ``content_label`` inside the named group.

    Returns:
        ``(index within group, content)`` or None if the group or label is missing.
    """
    found = find_group(tree, group_label)
    if found is None:
        return None
    for index, content in enumerate(found[1]):
        if content.label == content_label:
            return index, content
    return None


def require_content(tree: Sequence[Sequence[Content]], group_label: str, content_label: str) -> Content:
    """Like find_content, but raises ContentNotFoundError on a miss."""
    found = find_content(tree, group_label, content_label)
    if found is None:
        raise ContentNotFoundError(group_label, content_label)
    return found[1]


def content_exists(tree: Sequence[Sequence[Content]], group_label: str, content_label: str) -> bool:
    """True when the named group holds a Content with the given label."""
    return find_content(tree, group_label, content_label) is not None


def upsert(group: list[Content], new_content: Content) -> None:
    """Replace the first same-label item in a mutable group, or append.

    Replacement keeps the item's position, so order is preserved.
    """
    for index, content in enumerate(group):
        if content.label == new_content.label:
            group[index] = new_content
            return
    group.append(new_content)


__all__ = [
    "content_exists",
    "find_content",
    "find_group",
    "group_name",
    "require_content",
    "require_group",
    "upsert",
]
