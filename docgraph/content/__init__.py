"""Content model, canonical serialization and content addressing.

Provides scalar values, Content items, content trees, the canonical serializer
whose output is hashed into a content address, and label-based accessors.
"""

from ._types import ContentAddress, StoreScope
from .accessors import content_exists, find_content, find_group, group_name, require_content, require_group, upsert
from .builder import ContentTreeBuilder
from .canonical import serialize, to_canonical_string
from .hashing import ADDRESS_ALGORITHM, ADDRESS_FORMAT_VERSION, compute_address, is_content_address, parse_address, readable_address
from .model import (
    CONTENT_GROUP_LABEL,
    Content,
    ContentGroup,
    ContentGroups,
    as_content_groups,
    content_groups_from_json,
    content_groups_to_json,
    rollup,
)
from .value import (
    Asset,
    AssetValue,
    BoolValue,
    Checksum256Value,
    Int64Value,
    NameValue,
    ScalarKind,
    ScalarValue,
    StringValue,
    TimePointValue,
    to_scalar,
)

__all__ = [
    "ADDRESS_ALGORITHM",
    "ADDRESS_FORMAT_VERSION",
    "Asset",
    "AssetValue",
    "BoolValue",
    "CONTENT_GROUP_LABEL",
    "Checksum256Value",
    "Content",
    "ContentAddress",
    "ContentGroup",
    "ContentGroups",
    "ContentTreeBuilder",
    "Int64Value",
    "NameValue",
    "ScalarKind",
    "ScalarValue",
    "StoreScope",
    "StringValue",
    "TimePointValue",
    "as_content_groups",
    "compute_address",
    "content_exists",
    "content_groups_from_json",
    "content_groups_to_json",
    "find_content",
    "find_group",
    "group_name",
    "is_content_address",
    "parse_address",
    "readable_address",
    "require_content",
    "require_group",
    "rollup",
    "serialize",
    "to_canonical_string",
    "to_scalar",
    "upsert",
]
