"""Exception hierarchy for docgraph.

Two disjoint families are defined here. ``DocGraphError`` covers recoverable
conditions (missing documents, duplicate inserts, failed label lookups) that
callers are expected to handle. ``DocumentIntegrityError`` covers broken data
invariants and does not inherit from ``DocGraphError``, so a handler written for
ordinary failures never swallows a corruption signal.
"""


class DocGraphError(Exception):
    """Base exception for all recoverable docgraph errors."""


class ContentValidationError(DocGraphError):
    """Raised when a Python value cannot be mapped to a scalar value kind."""


class DocumentNotFoundError(DocGraphError):
    """Raised when a document id or address is absent from the store."""


class DuplicateDocumentError(DocGraphError):
    """Raised when a strict create hits an address that is already stored."""

    def __init__(self, message: str, address: bytes) -> None:
        super().__init__(message)
        self.address = address


class LookupFailedError(DocGraphError):
    """Base exception for failed label-based lookups."""


class GroupNotFoundError(LookupFailedError):
    """Raised when no content group carries the requested name."""

    def __init__(self, group_label: str) -> None:
        super().__init__(f"content group not found: {group_label!r}")
        self.group_label = group_label


class ContentNotFoundError(LookupFailedError):
    """Raised when a group has no content with the requested label."""

    def __init__(self, group_label: str, content_label: str) -> None:
        super().__init__(f"content not found: group={group_label!r} label={content_label!r}")
        self.group_label = group_label
        self.content_label = content_label


class DocumentIntegrityError(Exception):
    """Base exception for fatal data invariant violations. Never retry or ignore."""


class InvalidReservedLabelTypeError(DocumentIntegrityError):
    """Raised when the reserved group-name content holds a non-string value."""


class AddressMismatchError(DocumentIntegrityError):
    """Raised when a stored address disagrees with the address recomputed from content."""

    def __init__(self, message: str, expected: bytes, actual: bytes) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual
