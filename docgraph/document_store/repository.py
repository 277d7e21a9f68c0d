"""Content-addressed create, load and dedup on top of a DocumentStore backend.

``DocumentRepository`` binds a backend to one scope and owns the rules the
backends do not: address computation, strict versus dedup insertion, and
address verification on every load.

Writes within a scope are serialized by an ``asyncio.Lock`` shared by every
repository over the same backend and scope, so the existence check and the
insert for an address never interleave with another writer in this process.
Backends additionally enforce address uniqueness themselves; a duplicate
reported by the backend during ``get_or_create`` (a writer in another process
won the race) is resolved by returning the stored document.
"""

import asyncio
import weakref
from collections.abc import Sequence
from datetime import UTC, datetime

from docgraph.content import Content, ContentAddress, ContentGroups, StoreScope, as_content_groups, compute_address, is_content_address, parse_address, readable_address
from docgraph.documents import Document
from docgraph.exceptions import AddressMismatchError, DocumentIntegrityError, DocumentNotFoundError, DuplicateDocumentError
from docgraph.logging import get_pipeline_logger

from .protocol import DocumentStore

logger = get_pipeline_logger(__name__)

TreeInput = ContentGroups | Sequence[Sequence[Content]] | Sequence[Content] | Content

_scope_locks: "weakref.WeakKeyDictionary[object, dict[str, asyncio.Lock]]" = weakref.WeakKeyDictionary()


def _scope_lock(store: DocumentStore, scope: StoreScope) -> asyncio.Lock:
    return _scope_locks.setdefault(store, {}).setdefault(scope, asyncio.Lock())


class DocumentRepository:
    """Create, load and deduplicate documents within one store scope.

    Example:
        >>> repo = DocumentRepository(MemoryDocumentStore(), StoreScope("docs"))
        >>> doc = await repo.get_or_create("alice", tree)
        >>> again = await repo.get_or_create("bob", tree)
        >>> assert again.id == doc.id and again.creator == "alice"
    """

    def __init__(self, store: DocumentStore, scope: StoreScope) -> None:
        self._store = store
        self._scope = scope

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def scope(self) -> StoreScope:
        return self._scope

    async def create(self, creator: str, tree: TreeInput) -> Document:
        """Persist a new document for ``tree``.

        Use this where an existing identical document indicates a bug or a
        replay; use get_or_create for ordinary "ensure this content exists".

        Raises:
            DuplicateDocumentError: If a document with the same address exists.
        """
        content = as_content_groups(tree)
        async with _scope_lock(self._store, self._scope):
            return await self._create_locked(creator, content, compute_address(content))

    async def get_or_create(self, creator: str, tree: TreeInput) -> Document:
        """Return the stored document for ``tree``, creating it if absent.

        On a hit, the result carries the stored id, creator, creation time and
        certificates, joined with the caller's tree (identical to the stored
        one, since the addresses match). The caller's ``creator`` is ignored
        on a hit.
        """
        content = as_content_groups(tree)
        address = compute_address(content)
        async with _scope_lock(self._store, self._scope):
            existing = await self._store.get_by_address(self._scope, address)
            if existing is None:
                try:
                    return await self._create_locked(creator, content, address)
                except DuplicateDocumentError:
                    existing = await self._store.get_by_address(self._scope, address)
                    if existing is None:
                        raise
                    logger.info(f"Concurrent insert of {readable_address(address)[:12]}... detected, using stored document")
        logger.debug(f"Dedup hit: document {existing.id} ({readable_address(address)[:12]}...) in scope '{self._scope}'")
        return Document(
            id=existing.id,
            creator=existing.creator,
            content=content,
            address=address,
            created_at=existing.created_at,
            certificates=existing.certificates,
        )

    async def load(self, key: int | bytes | str) -> Document:
        """Load by id (``int``) or address (32 bytes or 64 hex characters).

        Raises:
            DocumentNotFoundError: If nothing is stored under the key.
            AddressMismatchError: If the stored content no longer hashes to its address.
        """
        if isinstance(key, bool):
            raise TypeError("document key must be an id or an address, not bool")
        if isinstance(key, int):
            return await self.load_by_id(key)
        if is_content_address(key):
            address = parse_address(key) if isinstance(key, str) else ContentAddress(key)
            return await self.load_by_address(address)
        if isinstance(key, str) and key.strip().isdigit():
            return await self.load_by_id(int(key))
        raise ValueError(f"not a document id or content address: {key!r}")

    async def load_by_id(self, document_id: int) -> Document:
        document = await self._store.get_by_id(self._scope, document_id)
        if document is None:
            raise DocumentNotFoundError(f"document not found: id={document_id} scope={self._scope!r}")
        return self._verified(document)

    async def load_by_address(self, address: ContentAddress) -> Document:
        document = await self._store.get_by_address(self._scope, address)
        if document is None:
            raise DocumentNotFoundError(f"document not found: {readable_address(address)}")
        verified = self._verified(document)
        if verified.address != address:
            logger.error(f"Address index for {readable_address(address)} points at document {verified.id} with another address")
            raise AddressMismatchError(
                f"fatal error: index entry {readable_address(address)} resolves to {verified.address_hex}",
                expected=address,
                actual=verified.address,
            )
        return verified

    async def load_last(self) -> Document:
        """Load the most recently created document in the scope."""
        document = await self._store.get_last(self._scope)
        if document is None:
            raise DocumentNotFoundError(f"no documents in scope {self._scope!r}")
        return self._verified(document)

    async def exists(self, address: ContentAddress) -> bool:
        """Check the address index without loading the document."""
        return await self._store.has_address(self._scope, address)

    async def count(self) -> int:
        return await self._store.count(self._scope)

    async def _create_locked(self, creator: str, content: ContentGroups, address: ContentAddress) -> Document:
        if await self._store.has_address(self._scope, address):
            raise DuplicateDocumentError(f"document exists already: {readable_address(address)}", address=address)
        document_id = await self._store.generate_id(self._scope)
        document = Document(
            id=document_id,
            creator=creator,
            content=content,
            address=address,
            created_at=datetime.now(UTC),
        )
        stored = await self._store.insert(self._scope, document)
        logger.info(f"Created document {stored.id} ({readable_address(address)[:12]}...) in scope '{self._scope}'")
        return stored

    def _verified(self, document: Document) -> Document:
        try:
            document.verify()
        except DocumentIntegrityError:
            logger.error(f"Address verification failed for document {document.id} in scope '{self._scope}'")
            raise
        return document


__all__ = ["DocumentRepository", "TreeInput"]
