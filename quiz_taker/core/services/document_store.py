"""Document store used for quizzes and submitted results.

The store is an external collaborator: the session only fetches one document
by id and appends one new document. Two implementations are provided, an
in-memory store for tests and demos and a directory of JSON files.
"""

from __future__ import annotations

import asyncio
import copy
import json
from pathlib import Path
from typing import Any, Protocol
from uuid import uuid4

Document = dict[str, Any]


class DocumentStoreError(Exception):
    """Raised when the backend cannot serve or accept a document."""


class DocumentNotFoundError(DocumentStoreError):
    """Raised when no document exists for the requested id."""

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"No document {doc_id!r} in collection {collection!r}.")
        self.collection = collection
        self.doc_id = doc_id


class DocumentStore(Protocol):
    async def fetch(self, collection: str, doc_id: str) -> Document: ...

    async def append(self, collection: str, document: Document) -> str: ...

    async def list(self, collection: str) -> list[tuple[str, Document]]: ...


class InMemoryDocumentStore:
    """Keeps collections in dictionaries. Documents are copied on the way in and out."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Document]] = {}

    def put(self, collection: str, doc_id: str, document: Document) -> None:
        """Insert or replace a document under a known id."""
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(document)

    async def fetch(self, collection: str, doc_id: str) -> Document:
        try:
            document = self._collections[collection][doc_id]
        except KeyError as exc:
            raise DocumentNotFoundError(collection, doc_id) from exc
        return copy.deepcopy(document)

    async def append(self, collection: str, document: Document) -> str:
        doc_id = uuid4().hex
        self.put(collection, doc_id, document)
        return doc_id

    async def list(self, collection: str) -> list[tuple[str, Document]]:
        documents = self._collections.get(collection, {})
        return [(doc_id, copy.deepcopy(doc)) for doc_id, doc in documents.items()]


class JsonDirectoryDocumentStore:
    """Stores each document as ``<root>/<collection>/<id>.json``."""

    def __init__(self, root: Path) -> None:
        self._root = root.resolve()

    def put(self, collection: str, doc_id: str, document: Document) -> None:
        """Insert or replace a document under a known id."""
        try:
            self._write(self._path_for(collection, doc_id), document)
        except OSError as exc:
            raise DocumentStoreError(f"Could not write {collection}/{doc_id}: {exc}") from exc

    async def fetch(self, collection: str, doc_id: str) -> Document:
        path = self._path_for(collection, doc_id)
        try:
            return await asyncio.to_thread(self._read, path)
        except FileNotFoundError as exc:
            raise DocumentNotFoundError(collection, doc_id) from exc
        except (OSError, ValueError) as exc:
            raise DocumentStoreError(f"Could not read {collection}/{doc_id}: {exc}") from exc

    async def append(self, collection: str, document: Document) -> str:
        doc_id = uuid4().hex
        path = self._path_for(collection, doc_id)
        try:
            await asyncio.to_thread(self._write, path, document)
        except (OSError, TypeError) as exc:
            raise DocumentStoreError(f"Could not write {collection}/{doc_id}: {exc}") from exc
        return doc_id

    async def list(self, collection: str) -> list[tuple[str, Document]]:
        try:
            return await asyncio.to_thread(self._read_collection, collection)
        except (OSError, ValueError) as exc:
            raise DocumentStoreError(f"Could not list {collection}: {exc}") from exc

    def _path_for(self, collection: str, doc_id: str) -> Path:
        if not doc_id or "/" in doc_id or "\\" in doc_id or doc_id.startswith("."):
            raise DocumentNotFoundError(collection, doc_id)
        return self._root / collection / f"{doc_id}.json"

    def _read_collection(self, collection: str) -> list[tuple[str, Document]]:
        directory = self._root / collection
        if not directory.is_dir():
            return []
        return [(path.stem, self._read(path)) for path in sorted(directory.glob("*.json"))]

    @staticmethod
    def _read(path: Path) -> Document:
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _write(path: Path, document: Document) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(document, ensure_ascii=False, indent=2)
        temp_path = path.with_suffix(".tmp")
        temp_path.write_text(payload, encoding="utf-8")
        temp_path.replace(path)
