"""docgraph - content-addressed document store.

Models structured, typed content as an immutable tree of labeled scalar
values, derives a SHA-256 content address from the tree's canonical
serialization, and deduplicates stored documents by that address.

Quick Start:
    >>> from docgraph import Content, ContentTreeBuilder, DocumentRepository, StoreScope
    >>> from docgraph.document_store.memory import MemoryDocumentStore
    >>>
    >>> builder = ContentTreeBuilder()
    >>> builder.add_group("details", Content.of("title", "Hello"))
    >>> repo = DocumentRepository(MemoryDocumentStore(), StoreScope("docs"))
    >>> doc = await repo.get_or_create("alice", builder.build())

Environment Variables:
    - DOCGRAPH_STORE_PATH: Filesystem store directory (in-memory when unset)
    - DOCGRAPH_DEFAULT_SCOPE: Scope used when none is given
    - DOCGRAPH_LOG_LEVEL: Log level for docgraph loggers
"""

from .content import (
    CONTENT_GROUP_LABEL,
    Asset,
    Content,
    ContentAddress,
    ContentGroup,
    ContentGroups,
    ContentTreeBuilder,
    ScalarKind,
    StoreScope,
    compute_address,
    content_exists,
    find_content,
    find_group,
    readable_address,
    require_content,
    require_group,
    rollup,
    serialize,
    upsert,
)
from .document_store import DocumentRepository, DocumentStore, create_document_store, create_repository
from .documents import Certificate, Document
from .exceptions import (
    AddressMismatchError,
    ContentNotFoundError,
    DocGraphError,
    DocumentIntegrityError,
    DocumentNotFoundError,
    DuplicateDocumentError,
    GroupNotFoundError,
    InvalidReservedLabelTypeError,
)
from .logging import get_pipeline_logger, setup_logging
from .logging import get_pipeline_logger as get_logger
from .settings import settings

__version__ = "0.1.0"

__all__ = [
    # Config/Settings
    "settings",
    # Logging
    "get_logger",
    "get_pipeline_logger",
    "setup_logging",
    # Content
    "Asset",
    "CONTENT_GROUP_LABEL",
    "Content",
    "ContentAddress",
    "ContentGroup",
    "ContentGroups",
    "ContentTreeBuilder",
    "ScalarKind",
    "StoreScope",
    "compute_address",
    "content_exists",
    "find_content",
    "find_group",
    "readable_address",
    "require_content",
    "require_group",
    "rollup",
    "serialize",
    "upsert",
    # Documents
    "Certificate",
    "Document",
    "DocumentRepository",
    "DocumentStore",
    "create_document_store",
    "create_repository",
    # Errors
    "AddressMismatchError",
    "ContentNotFoundError",
    "DocGraphError",
    "DocumentIntegrityError",
    "DocumentNotFoundError",
    "DuplicateDocumentError",
    "GroupNotFoundError",
    "InvalidReservedLabelTypeError",
]
