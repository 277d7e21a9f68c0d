"""Tests for DocumentRepository: create, dedup, load and verification."""

import asyncio

import pytest

from docgraph.content import CONTENT_GROUP_LABEL, Content, ContentGroups, ContentTreeBuilder, StoreScope, compute_address
from docgraph.document_store import DocumentRepository
from docgraph.document_store.memory import MemoryDocumentStore
from docgraph.documents import Document
from docgraph.exceptions import AddressMismatchError, DocumentNotFoundError, DuplicateDocumentError


class TestGetOrCreate:
    @pytest.mark.asyncio
    async def test_edit_then_dedup_scenario(self, repository: DocumentRepository, details_tree: ContentGroups):
        first = await repository.get_or_create("alice", details_tree)
        assert first.id == 1

        again = await repository.get_or_create("alice", details_tree)
        assert again.id == 1
        assert again.address == first.address

        builder = ContentTreeBuilder.from_document(first)
        builder.upsert("details", Content.of("title", "World"))
        edited = await repository.get_or_create("alice", builder.build())

        assert edited.id == 2
        assert edited.address != first.address
        assert edited.require_content("details", "title").value.value == "World"
        assert first.require_content("details", "title").value.value == "Hello"
        assert await repository.count() == 2

    @pytest.mark.asyncio
    async def test_hit_keeps_stored_creator(self, repository: DocumentRepository, details_tree: ContentGroups):
        original = await repository.get_or_create("alice", details_tree)
        hit = await repository.get_or_create("bob", details_tree)
        assert hit.creator == "alice"
        assert hit.created_at == original.created_at
        assert hit.content == details_tree

    @pytest.mark.asyncio
    async def test_accepts_single_group_and_single_content(self, repository: DocumentRepository):
        item = Content.of("title", "Hello")
        from_content = await repository.get_or_create("alice", item)
        from_group = await repository.get_or_create("alice", [item])
        assert from_content.id == from_group.id
        assert from_content.content == ((item,),)

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_document(self, repository: DocumentRepository, details_tree: ContentGroups):
        results = await asyncio.gather(*(repository.get_or_create(f"user{i}", details_tree) for i in range(5)))
        assert {doc.id for doc in results} == {1}
        assert await repository.count() == 1

    @pytest.mark.asyncio
    async def test_lost_race_returns_stored_document(self, details_tree: ContentGroups):
        scope = StoreScope("race")
        winner = Document.assemble(id=7, creator="other-process", content=details_tree)

        class _RacingStore(MemoryDocumentStore):
            """Reports the address as absent until the insert collides."""

            async def get_by_address(self, scope, address):
                if not self.raced:
                    return None
                return await super().get_by_address(scope, address)

            async def has_address(self, scope, address):
                return False

            async def insert(self, scope, document):
                self.raced = True
                await super().insert(scope, winner)
                return await super().insert(scope, document)

        store = _RacingStore()
        store.raced = False
        result = await DocumentRepository(store, scope).get_or_create("me", details_tree)
        assert result.id == 7
        assert result.creator == "other-process"


class TestCreate:
    @pytest.mark.asyncio
    async def test_assigns_increasing_ids(self, repository: DocumentRepository):
        a = await repository.create("alice", Content.of("n", 1))
        b = await repository.create("alice", Content.of("n", 2))
        assert (a.id, b.id) == (1, 2)
        assert a.address == compute_address(((Content.of("n", 1),),))

    @pytest.mark.asyncio
    async def test_duplicate_raises(self, repository: DocumentRepository, details_tree: ContentGroups):
        doc = await repository.create("alice", details_tree)
        with pytest.raises(DuplicateDocumentError) as exc_info:
            await repository.create("alice", details_tree)
        assert exc_info.value.address == doc.address
        assert await repository.count() == 1

    @pytest.mark.asyncio
    async def test_duplicate_after_get_or_create(self, repository: DocumentRepository, details_tree: ContentGroups):
        await repository.get_or_create("alice", details_tree)
        with pytest.raises(DuplicateDocumentError):
            await repository.create("alice", details_tree)

    @pytest.mark.asyncio
    async def test_scopes_do_not_collide(self, memory_store: MemoryDocumentStore, details_tree: ContentGroups):
        one = DocumentRepository(memory_store, StoreScope("one"))
        two = DocumentRepository(memory_store, StoreScope("two"))
        a = await one.create("alice", details_tree)
        b = await two.create("alice", details_tree)
        assert a.id == b.id == 1
        assert a.address == b.address


class TestLoad:
    @pytest.mark.asyncio
    async def test_by_id_address_and_hex(self, repository: DocumentRepository, details_tree: ContentGroups):
        doc = await repository.create("alice", details_tree)
        assert (await repository.load(doc.id)).address == doc.address
        assert (await repository.load(doc.id)).content == details_tree
        assert (await repository.load_by_address(doc.address)).content == details_tree
        assert (await repository.load(str(doc.id))).id == doc.id
        assert (await repository.load(doc.address)).id == doc.id
        assert (await repository.load(doc.address_hex)).id == doc.id
        assert (await repository.load(doc.address_hex.upper())).id == doc.id

    @pytest.mark.asyncio
    async def test_missing_id(self, repository: DocumentRepository):
        with pytest.raises(DocumentNotFoundError):
            await repository.load(42)

    @pytest.mark.asyncio
    async def test_missing_address(self, repository: DocumentRepository):
        with pytest.raises(DocumentNotFoundError):
            await repository.load_by_address(compute_address(((Content.of("x", "y"),),)))

    @pytest.mark.asyncio
    async def test_bad_key(self, repository: DocumentRepository):
        with pytest.raises(ValueError, match="not a document id"):
            await repository.load("not-a-key")
        with pytest.raises(TypeError):
            await repository.load(True)

    @pytest.mark.asyncio
    async def test_load_last(self, repository: DocumentRepository, details_tree: ContentGroups):
        with pytest.raises(DocumentNotFoundError):
            await repository.load_last()
        await repository.create("alice", details_tree)
        second = await repository.create("alice", Content.of(CONTENT_GROUP_LABEL, "other"))
        assert (await repository.load_last()).id == second.id

    @pytest.mark.asyncio
    async def test_exists(self, repository: DocumentRepository, details_tree: ContentGroups):
        address = compute_address(details_tree)
        assert await repository.exists(address) is False
        await repository.create("alice", details_tree)
        assert await repository.exists(address) is True

    @pytest.mark.asyncio
    async def test_stale_index_is_fatal(self, memory_store: MemoryDocumentStore, details_tree: ContentGroups):
        scope = StoreScope("test")
        repository = DocumentRepository(memory_store, scope)
        doc = await repository.create("alice", details_tree)
        other = await repository.create("alice", Content.of("x", 1))
        # Point the first address at the second document
        memory_store._table(scope).by_address[doc.address] = other.id
        with pytest.raises(AddressMismatchError) as exc_info:
            await repository.load_by_address(doc.address)
        assert exc_info.value.expected == doc.address
        assert exc_info.value.actual == other.address

    @pytest.mark.asyncio
    async def test_tampered_document_is_fatal(self, memory_store: MemoryDocumentStore, details_tree: ContentGroups):
        scope = StoreScope("test")
        repository = DocumentRepository(memory_store, scope)
        doc = await repository.create("alice", details_tree)
        tampered = Document.model_construct(**{**dict(doc), "content": ((Content.of("title", "Evil"),),)})
        memory_store._table(scope).documents[doc.id] = tampered
        with pytest.raises(AddressMismatchError):
            await repository.load(doc.id)
