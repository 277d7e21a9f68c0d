"""Domain-specific types for the content system."""

from typing import NewType

ContentAddress = NewType("ContentAddress", bytes)
"""32-byte SHA-256 digest of a content tree's canonical serialization."""

StoreScope = NewType("StoreScope", str)
"""Namespace within which document ids and addresses are unique."""

__all__ = ["ContentAddress", "StoreScope"]
