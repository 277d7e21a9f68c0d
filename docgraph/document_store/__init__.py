"""Document store protocol, backends and the content-addressed repository."""

from .factory import create_document_store, create_repository
from .protocol import DocumentStore, get_document_store, set_document_store
from .repository import DocumentRepository

__all__ = [
    "DocumentRepository",
    "DocumentStore",
    "create_document_store",
    "create_repository",
    "get_document_store",
    "set_document_store",
]
