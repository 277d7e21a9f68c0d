"""Canonical serialization of content trees.

The canonical form is the hash input for content addresses, so it must be
byte-for-byte stable across calls, processes and library upgrades:

    tree    := "[" group ("," group)* "]"     (empty tree: "[]")
    group   := "[" content ("," content)* "]" (empty group: "[]")
    content := "{" json(label) ":[" json(kind) "," payload "]}"

Payload tokens are produced per kind. Strings are JSON-escaped and quoted, so
the integer ``5`` renders as ``5`` and the string ``"5"`` as ``"5"``; the kind
tag disambiguates the remaining cases (a name versus a string with the same
text, for example). Nothing here relies on ``str()`` of pydantic models.
"""

import json
from collections.abc import Sequence

from .model import Content
from .value import AnyScalar, ScalarKind


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def canonical_value(value: AnyScalar) -> str:
    """Render a scalar value as ``[<kind>,<payload>]``.

    Raises:
        TypeError: If the value carries an unknown kind tag.
    """
    kind = value.kind
    if kind == ScalarKind.STRING:
        payload = _quote(value.value)  # type: ignore[arg-type]
    elif kind == ScalarKind.INT64:
        payload = str(int(value.value))  # type: ignore[arg-type]
    elif kind == ScalarKind.ASSET:
        payload = _quote(str(value.value))
    elif kind == ScalarKind.TIME_POINT:
        # microsecond precision, always UTC
        payload = _quote(value.value.replace(tzinfo=None).isoformat(timespec="microseconds") + "Z")  # type: ignore[union-attr]
    elif kind == ScalarKind.CHECKSUM256:
        payload = _quote(value.value.hex())  # type: ignore[union-attr]
    elif kind == ScalarKind.NAME:
        payload = _quote(value.value)  # type: ignore[arg-type]
    elif kind == ScalarKind.BOOL:
        payload = "true" if value.value else "false"
    else:
        raise TypeError(f"unknown scalar kind: {kind!r}")
    return f"[{_quote(str(kind))},{payload}]"


def canonical_content(content: Content) -> str:
    """Render one Content item."""
    return "{" + _quote(content.label) + ":" + canonical_value(content.value) + "}"


def canonical_group(group: Sequence[Content]) -> str:
    """Render one content group, preserving item order."""
    return "[" + ",".join(canonical_content(content) for content in group) + "]"


def to_canonical_string(tree: Sequence[Sequence[Content]]) -> str:
    """Render a content tree, preserving group order."""
    return "[" + ",".join(canonical_group(group) for group in tree) + "]"


def serialize(tree: Sequence[Sequence[Content]]) -> bytes:
    """Canonical UTF-8 bytes of a content tree; the input to address hashing."""
    return to_canonical_string(tree).encode("utf-8")


__all__ = [
    "canonical_content",
    "canonical_group",
    "canonical_value",
    "serialize",
    "to_canonical_string",
]
