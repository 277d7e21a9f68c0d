"""Document aggregate: content tree plus store-assigned identity metadata."""

from .document import Certificate, Document

__all__ = ["Certificate", "Document"]
