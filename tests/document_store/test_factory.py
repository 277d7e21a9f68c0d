"""Tests for store and repository factories."""

from pathlib import Path

from docgraph.document_store import DocumentRepository, create_document_store, create_repository
from docgraph.document_store.local import LocalDocumentStore
from docgraph.document_store.memory import MemoryDocumentStore
from docgraph.settings import Settings


def _settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)  # type: ignore[call-arg]


class TestCreateDocumentStore:
    def test_memory_when_no_path(self):
        assert isinstance(create_document_store(_settings(docgraph_store_path="")), MemoryDocumentStore)

    def test_local_when_path_set(self, tmp_path: Path):
        store = create_document_store(_settings(docgraph_store_path=str(tmp_path)))
        assert isinstance(store, LocalDocumentStore)
        assert store.base_path == tmp_path


class TestCreateRepository:
    def test_default_scope(self):
        repository = create_repository(_settings(docgraph_default_scope="main"))
        assert isinstance(repository, DocumentRepository)
        assert repository.scope == "main"
        assert isinstance(repository.store, MemoryDocumentStore)

    def test_explicit_scope_and_store(self):
        store = MemoryDocumentStore()
        repository = create_repository(_settings(), "other", store=store)
        assert repository.scope == "other"
        assert repository.store is store
