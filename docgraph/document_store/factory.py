"""Factory functions for creating document stores and repositories from settings."""

from pathlib import Path

from docgraph.content import StoreScope
from docgraph.settings import Settings

from .protocol import DocumentStore
from .repository import DocumentRepository


def create_document_store(settings: Settings) -> DocumentStore:
    """Create a DocumentStore based on settings.

    Selects LocalDocumentStore when docgraph_store_path is configured,
    otherwise falls back to MemoryDocumentStore.

    Backends are imported lazily to avoid circular imports.
    """
    if settings.docgraph_store_path:
        from docgraph.document_store.local import LocalDocumentStore

        return LocalDocumentStore(Path(settings.docgraph_store_path))

    from docgraph.document_store.memory import MemoryDocumentStore

    return MemoryDocumentStore()


def create_repository(settings: Settings, scope: str | None = None, *, store: DocumentStore | None = None) -> DocumentRepository:
    """Create a DocumentRepository over ``store`` (or a new store from settings).

    ``scope`` defaults to settings.docgraph_default_scope.
    """
    return DocumentRepository(
        store if store is not None else create_document_store(settings),
        StoreScope(scope or settings.docgraph_default_scope),
    )
