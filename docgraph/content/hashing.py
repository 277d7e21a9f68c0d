"""Content address computation.

A content address is the SHA-256 digest of a tree's canonical serialization.
The algorithm and canonical format are versioned together: any change to
either must bump ``ADDRESS_FORMAT_VERSION``, since stored documents are
re-hashed on load and would otherwise fail verification.
"""

import hashlib
import re
from collections.abc import Sequence
from typing import Any

from ._types import ContentAddress
from .canonical import serialize
from .model import Content

ADDRESS_ALGORITHM = "sha256"
ADDRESS_FORMAT_VERSION = 1
ADDRESS_LENGTH = 32

_HEX_ADDRESS_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def compute_address(tree: Sequence[Sequence[Content]]) -> ContentAddress:
    """Compute the 32-byte content address of a tree. Pure and deterministic."""
    return ContentAddress(hashlib.sha256(serialize(tree)).digest())


def readable_address(address: bytes) -> str:
    """Lowercase hex form of an address, used in messages, file names and the CLI."""
    return address.hex()


def parse_address(text: str) -> ContentAddress:
    """Parse a hex address (case-insensitive).

    Raises:
        ValueError: If the text is not 64 hex characters.
    """
    normalized = text.strip().lower()
    if not _HEX_ADDRESS_PATTERN.match(normalized):
        raise ValueError(f"not a content address: {text!r}")
    return ContentAddress(bytes.fromhex(normalized))


def is_content_address(value: Any) -> bool:
    """True for 32 raw bytes or a 64-character hex string."""
    if isinstance(value, bytes):
        return len(value) == ADDRESS_LENGTH
    if isinstance(value, str):
        return bool(_HEX_ADDRESS_PATTERN.match(value.strip().lower()))
    return False


__all__ = [
    "ADDRESS_ALGORITHM",
    "ADDRESS_FORMAT_VERSION",
    "ADDRESS_LENGTH",
    "compute_address",
    "is_content_address",
    "parse_address",
    "readable_address",
]
