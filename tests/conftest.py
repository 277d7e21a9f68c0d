"""Common test fixtures for docgraph tests."""

import pytest

from docgraph.content import CONTENT_GROUP_LABEL, Content, ContentGroups, StoreScope
from docgraph.document_store import DocumentRepository, set_document_store
from docgraph.document_store.memory import MemoryDocumentStore


@pytest.fixture(autouse=True)
def _reset_store():
    """Reset the document store singleton after each test."""
    yield
    set_document_store(None)


@pytest.fixture
def details_tree() -> ContentGroups:
    """One named group: the tree used throughout the dedup scenario."""
    return (
        (
            Content.of(CONTENT_GROUP_LABEL, "details"),
            Content.of("title", "Hello"),
        ),
    )


@pytest.fixture
def memory_store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def repository(memory_store: MemoryDocumentStore) -> DocumentRepository:
    return DocumentRepository(memory_store, StoreScope("test"))
