"""Document store protocol and singleton management.

Defines the keyed-table contract every storage backend implements: id
generation, insert into a primary table with a unique secondary index on
content address, and lookups by id or address. Dedup and verification logic
lives in ``DocumentRepository``, not in backends.
"""

from typing import Protocol, runtime_checkable

from docgraph.content import ContentAddress, StoreScope
from docgraph.documents import Document


@runtime_checkable
class DocumentStore(Protocol):
    """Protocol for document storage backends.

    Implementations: LocalDocumentStore (filesystem), MemoryDocumentStore (testing).
    """

    async def generate_id(self, scope: StoreScope) -> int:
        """Reserve the next id in the scope. Ids start at 1 and only increase."""
        ...

    async def insert(self, scope: StoreScope, document: Document) -> Document:
        """Persist a document. Raises DuplicateDocumentError if its address is already indexed."""
        ...

    async def get_by_id(self, scope: StoreScope, document_id: int) -> Document | None:
        """Fetch by primary id, or None."""
        ...

    async def get_by_address(self, scope: StoreScope, address: ContentAddress) -> Document | None:
        """Fetch through the address index, or None."""
        ...

    async def has_address(self, scope: StoreScope, address: ContentAddress) -> bool:
        """Check the address index without loading the document."""
        ...

    async def get_last(self, scope: StoreScope) -> Document | None:
        """Fetch the document with the highest id in the scope, or None."""
        ...

    async def count(self, scope: StoreScope) -> int:
        """Number of documents in the scope."""
        ...


_document_store: DocumentStore | None = None


def get_document_store() -> DocumentStore | None:
    """Get the process-global document store singleton."""
    return _document_store


def set_document_store(store: DocumentStore | None) -> None:
    """Set the process-global document store singleton."""
    global _document_store
    _document_store = store
