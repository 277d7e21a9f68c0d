"""In-memory document store for testing.

Simple dict-based storage implementing the full DocumentStore protocol.
Not for production use: all data is lost when the process exits.
"""

from dataclasses import dataclass, field

from docgraph.content import ContentAddress, StoreScope, readable_address
from docgraph.documents import Document
from docgraph.exceptions import DuplicateDocumentError


@dataclass
class _ScopeTable:
    documents: dict[int, Document] = field(default_factory=dict)  # id -> Document, insertion ordered
    by_address: dict[bytes, int] = field(default_factory=dict)  # address -> id
    last_id: int = 0


class MemoryDocumentStore:
    """Dict-based document store for unit tests.

    Storage layout: one table per scope, holding documents by id plus a unique
    address index.
    """

    def __init__(self) -> None:
        self._scopes: dict[str, _ScopeTable] = {}

    def _table(self, scope: StoreScope) -> _ScopeTable:
        return self._scopes.setdefault(scope, _ScopeTable())

    def _existing(self, scope: StoreScope) -> _ScopeTable | None:
        """Table for reads; unknown scopes are not created."""
        return self._scopes.get(scope)

    async def generate_id(self, scope: StoreScope) -> int:
        table = self._table(scope)
        table.last_id += 1
        return table.last_id

    async def insert(self, scope: StoreScope, document: Document) -> Document:
        """Store the document. Rejects an indexed address or a reused id."""
        table = self._table(scope)
        if document.address in table.by_address:
            raise DuplicateDocumentError(
                f"document exists already: {readable_address(document.address)}",
                address=document.address,
            )
        if document.id in table.documents:
            raise ValueError(f"document id {document.id} already used in scope {scope!r}")
        table.documents[document.id] = document
        table.by_address[document.address] = document.id
        table.last_id = max(table.last_id, document.id)
        return document

    async def get_by_id(self, scope: StoreScope, document_id: int) -> Document | None:
        table = self._existing(scope)
        return table.documents.get(document_id) if table is not None else None

    async def get_by_address(self, scope: StoreScope, address: ContentAddress) -> Document | None:
        table = self._existing(scope)
        if table is None:
            return None
        document_id = table.by_address.get(address)
        if document_id is None:
            return None
        return table.documents.get(document_id)

    async def has_address(self, scope: StoreScope, address: ContentAddress) -> bool:
        table = self._existing(scope)
        return table is not None and address in table.by_address

    async def get_last(self, scope: StoreScope) -> Document | None:
        table = self._existing(scope)
        if table is None or not table.documents:
            return None
        return table.documents[max(table.documents)]

    async def count(self, scope: StoreScope) -> int:
        table = self._existing(scope)
        return len(table.documents) if table is not None else 0
