"""CLI tool for hashing, creating and inspecting content-addressed documents.

Content files are JSON, either a bare list of groups or an object with a
``content_groups`` key::

    {"content_groups": [[
        {"label": "content_group_label", "value": ["string", "details"]},
        {"label": "title", "value": ["string", "Hello"]}
    ]]}

The store is chosen by settings (DOCGRAPH_STORE_PATH); ``--store`` overrides it.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from docgraph.content import ContentGroups, compute_address, content_groups_from_json, readable_address
from docgraph.document_store import DocumentRepository, DocumentStore, create_document_store, get_document_store, set_document_store
from docgraph.document_store.local import LocalDocumentStore
from docgraph.documents import Document
from docgraph.exceptions import DocGraphError
from docgraph.settings import settings


def _read_content_file(path: Path) -> ContentGroups:
    """Load and validate a content-groups JSON file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DocGraphError(f"{path}: invalid JSON: {e}") from e
    except OSError as e:
        raise DocGraphError(f"{path}: {e.strerror or e}") from e
    try:
        return content_groups_from_json(data)
    except ValidationError as e:
        raise DocGraphError(f"{path}: invalid content groups: {e}") from e


def _resolve_store(args: argparse.Namespace) -> DocumentStore:
    if args.store is not None:
        return LocalDocumentStore(args.store)
    store = get_document_store()
    if store is None:
        store = create_document_store(settings)
        set_document_store(store)
    return store


def _repository(args: argparse.Namespace) -> DocumentRepository:
    return DocumentRepository(_resolve_store(args), args.scope or settings.docgraph_default_scope)


def _document_json(document: Document) -> dict[str, Any]:
    return document.model_dump(mode="json")


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_hash(args: argparse.Namespace) -> int:
    """Print the content address of a content file without touching the store."""
    tree = _read_content_file(args.file)
    print(readable_address(compute_address(tree)))
    return 0


def _cmd_create(args: argparse.Namespace) -> int:
    """Get-or-create (or strictly create) the document for a content file."""
    tree = _read_content_file(args.file)
    repository = _repository(args)
    if args.strict:
        document = asyncio.run(repository.create(args.creator, tree))
    else:
        document = asyncio.run(repository.get_or_create(args.creator, tree))
    print(f"{document.id}\t{document.address_hex}")
    return 0


def _cmd_show(args: argparse.Namespace) -> int:
    """Print a stored document by id or address."""
    document = asyncio.run(_repository(args).load(args.key))
    print(json.dumps(_document_json(document), indent=2, ensure_ascii=False))
    return 0


def _cmd_last(args: argparse.Namespace) -> int:
    """Print the most recently created document."""
    document = asyncio.run(_repository(args).load_last())
    print(json.dumps(_document_json(document), indent=2, ensure_ascii=False))
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for document operations."""
    parser = argparse.ArgumentParser(prog="docgraph", description="Content-addressed document store CLI")
    parser.add_argument("--store", type=Path, default=None, help="Filesystem store directory (overrides DOCGRAPH_STORE_PATH)")
    parser.add_argument("--scope", default=None, help="Store scope (defaults to DOCGRAPH_DEFAULT_SCOPE)")
    subparsers = parser.add_subparsers(dest="command")

    # hash
    hash_parser = subparsers.add_parser("hash", help="Print the content address of a content file")
    hash_parser.add_argument("file", type=Path, help="Content groups JSON file")

    # create
    create_parser = subparsers.add_parser("create", help="Store a content file as a document")
    create_parser.add_argument("file", type=Path, help="Content groups JSON file")
    create_parser.add_argument("--creator", required=True, help="Creator reference recorded on new documents")
    create_parser.add_argument("--strict", action="store_true", help="Fail if the document already exists")

    # show
    show_parser = subparsers.add_parser("show", help="Print a document by id or address")
    show_parser.add_argument("key", help="Document id or hex content address")

    # last
    subparsers.add_parser("last", help="Print the most recently created document")

    args = parser.parse_args(argv)

    handlers = {"hash": _cmd_hash, "create": _cmd_create, "show": _cmd_show, "last": _cmd_last}
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except (DocGraphError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


__all__ = ["main"]
