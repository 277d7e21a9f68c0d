"""Local filesystem document store.

Layout:
    {base_path}/{scope}/documents/{id}.json   <- full document JSON
    {base_path}/{scope}/index/{address hex}   <- id of the document with that address
    {base_path}/{scope}/sequence              <- last generated id

The address index is the uniqueness constraint: index entries are created with
exclusive-create semantics, so two writers racing on one address cannot both
succeed, even across processes.
"""

import asyncio
import json
import os
import threading
from pathlib import Path
from typing import Any

from docgraph.content import ADDRESS_ALGORITHM, ADDRESS_FORMAT_VERSION, ContentAddress, StoreScope, readable_address
from docgraph.documents import Document
from docgraph.exceptions import DocumentIntegrityError, DuplicateDocumentError
from docgraph.logging import get_pipeline_logger

logger = get_pipeline_logger(__name__)

ID_WIDTH = 12


class LocalDocumentStore:
    """Filesystem-backed document store.

    Write order (document before index) ensures crash safety: an index entry
    never points at a missing document file. Blocking I/O runs in a worker
    thread under one lock per store instance.
    """

    def __init__(self, base_path: Path | None = None) -> None:
        self._base_path = base_path or Path.cwd()
        self._lock = threading.Lock()

    @property
    def base_path(self) -> Path:
        """Root directory for all stored scopes."""
        return self._base_path

    async def generate_id(self, scope: StoreScope) -> int:
        return await asyncio.to_thread(self._generate_id_sync, scope)

    async def insert(self, scope: StoreScope, document: Document) -> Document:
        """Write a document and its index entry. Raises DuplicateDocumentError on an indexed address."""
        await asyncio.to_thread(self._insert_sync, scope, document)
        return document

    async def get_by_id(self, scope: StoreScope, document_id: int) -> Document | None:
        return await asyncio.to_thread(self._get_by_id_sync, scope, document_id)

    async def get_by_address(self, scope: StoreScope, address: ContentAddress) -> Document | None:
        return await asyncio.to_thread(self._get_by_address_sync, scope, address)

    async def has_address(self, scope: StoreScope, address: ContentAddress) -> bool:
        return await asyncio.to_thread(self._index_path(scope, address).exists)

    async def get_last(self, scope: StoreScope) -> Document | None:
        return await asyncio.to_thread(self._get_last_sync, scope)

    async def count(self, scope: StoreScope) -> int:
        return await asyncio.to_thread(lambda: len(self._document_ids(scope)))

    # --- Sync implementation (called via asyncio.to_thread) ---

    def _scope_path(self, scope: StoreScope) -> Path:
        if not scope:
            raise ValueError("scope must not be empty")
        if ".." in scope:
            raise ValueError(f"scope contains path traversal '..': {scope!r}")
        if "\\" in scope or "/" in scope:
            raise ValueError(f"scope contains a path separator: {scope!r}")
        resolved = (self._base_path / scope).resolve()
        if not resolved.is_relative_to(self._base_path.resolve()):
            raise ValueError(f"scope escapes base path: {scope!r}")
        return self._base_path / scope

    def _document_path(self, scope: StoreScope, document_id: int) -> Path:
        return self._scope_path(scope) / "documents" / f"{document_id:0{ID_WIDTH}d}.json"

    def _index_path(self, scope: StoreScope, address: bytes) -> Path:
        return self._scope_path(scope) / "index" / readable_address(address)

    def _document_ids(self, scope: StoreScope) -> list[int]:
        doc_dir = self._scope_path(scope) / "documents"
        if not doc_dir.is_dir():
            return []
        return sorted(int(path.stem) for path in doc_dir.glob("*.json") if path.stem.isdigit())

    def _generate_id_sync(self, scope: StoreScope) -> int:
        with self._lock:
            scope_path = self._scope_path(scope)
            scope_path.mkdir(parents=True, exist_ok=True)
            sequence_path = scope_path / "sequence"
            last_id = 0
            if sequence_path.exists():
                last_id = int(sequence_path.read_text(encoding="utf-8").strip() or 0)
            existing = self._document_ids(scope)
            if existing and existing[-1] > last_id:
                logger.warning(f"Sequence for scope '{scope}' is behind stored documents, advancing to {existing[-1]}")
                last_id = existing[-1]
            next_id = last_id + 1
            _write_atomic(sequence_path, str(next_id))
            return next_id

    def _insert_sync(self, scope: StoreScope, document: Document) -> None:
        with self._lock:
            doc_path = self._document_path(scope, document.id)
            index_path = self._index_path(scope, document.address)
            if index_path.exists():
                raise DuplicateDocumentError(
                    f"document exists already: {readable_address(document.address)}",
                    address=document.address,
                )
            if doc_path.exists():
                raise ValueError(f"document id {document.id} already used in scope {scope!r}")
            doc_path.parent.mkdir(parents=True, exist_ok=True)
            index_path.parent.mkdir(parents=True, exist_ok=True)

            record = {
                "algorithm": ADDRESS_ALGORITHM,
                "format_version": ADDRESS_FORMAT_VERSION,
                "document": document.model_dump(mode="json"),
            }
            _write_atomic(doc_path, json.dumps(record, indent=2, ensure_ascii=False))

            # Index entry last: exclusive create is the atomic insert-if-absent
            try:
                with open(index_path, "x", encoding="utf-8") as f:
                    f.write(str(document.id))
            except FileExistsError:
                doc_path.unlink(missing_ok=True)
                raise DuplicateDocumentError(
                    f"document exists already: {readable_address(document.address)}",
                    address=document.address,
                ) from None
        logger.debug(f"Wrote document {document.id} ({document.address_hex[:12]}...) to scope '{scope}'")

    def _get_by_id_sync(self, scope: StoreScope, document_id: int) -> Document | None:
        doc_path = self._document_path(scope, document_id)
        if not doc_path.exists():
            return None
        return self._read_document(doc_path)

    def _get_by_address_sync(self, scope: StoreScope, address: ContentAddress) -> Document | None:
        index_path = self._index_path(scope, address)
        try:
            raw_id = index_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        if not raw_id.isdigit():
            logger.warning(f"Index entry {index_path} is unreadable, ignoring")
            return None
        return self._get_by_id_sync(scope, int(raw_id))

    def _get_last_sync(self, scope: StoreScope) -> Document | None:
        ids = self._document_ids(scope)
        if not ids:
            return None
        return self._get_by_id_sync(scope, ids[-1])

    @staticmethod
    def _read_document(doc_path: Path) -> Document | None:
        """Read a document file. Unparseable files are logged and treated as absent."""
        record = _read_json(doc_path)
        if record is None:
            return None
        algorithm = record.get("algorithm")
        version = record.get("format_version")
        if algorithm != ADDRESS_ALGORITHM or version != ADDRESS_FORMAT_VERSION:
            raise DocumentIntegrityError(
                f"fatal error: {doc_path} was written with address format {algorithm}/v{version}, "
                f"expected {ADDRESS_ALGORITHM}/v{ADDRESS_FORMAT_VERSION}"
            )
        document = record.get("document")
        if not isinstance(document, dict):
            logger.warning(f"Document file {doc_path} has no document object, ignoring")
            return None
        return Document.model_validate(document)


def _read_json(path: Path) -> dict[str, Any] | None:
    """Read a JSON object from a file, returning None on decode or I/O errors or a non-object."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to read {path}: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Expected a JSON object in {path}, got {type(data).__name__}")
        return None
    return data


def _write_atomic(path: Path, text: str) -> None:
    tmp_path = path.with_name(f".{path.name}.tmp")
    tmp_path.write_text(text, encoding="utf-8")
    os.replace(tmp_path, path)
