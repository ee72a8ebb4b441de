"""Document store used for questions, configuration, users, responses and feedback.

Data model:

    {
        "collections": {
            "<collection>": {"<doc id>": { ...document fields... }, ...},
            ...
        }
    }

``DocumentStore`` keeps everything in memory. ``JsonDocumentStore`` persists the
same structure to a JSON file using atomic writes so readers never observe a
partially-written file.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Mapping
from uuid import uuid4

logger = logging.getLogger(__name__)

Document = dict[str, Any]


class DocumentStoreError(Exception):
    """Raised when the store cannot read or write its backing data."""


class DocumentStore:
    """In-memory collection/document store."""

    def __init__(self, initial: Mapping[str, Mapping[str, Document]] | None = None) -> None:
        self._lock = Lock()
        self._collections: dict[str, dict[str, Document]] = {
            name: {doc_id: dict(doc) for doc_id, doc in docs.items()}
            for name, docs in (initial or {}).items()
        }

    def list_documents(self, collection: str) -> list[tuple[str, Document]]:
        """Return ``(doc_id, document)`` pairs in insertion order."""
        with self._lock:
            docs = self._load().get(collection, {})
            return [(doc_id, copy.deepcopy(doc)) for doc_id, doc in docs.items()]

    def get_document(self, collection: str, doc_id: str) -> Document | None:
        with self._lock:
            doc = self._load().get(collection, {}).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def add_document(self, collection: str, data: Mapping[str, Any]) -> str:
        """Insert ``data`` under a generated id and return that id."""
        doc_id = uuid4().hex
        self.set_document(collection, doc_id, data)
        return doc_id

    def set_document(
        self,
        collection: str,
        doc_id: str,
        data: Mapping[str, Any],
        merge: bool = False,
    ) -> None:
        """Create or replace a document; with ``merge`` only the given fields change."""

        def apply(collections: dict[str, dict[str, Document]]) -> None:
            docs = collections.setdefault(collection, {})
            if merge and doc_id in docs:
                docs[doc_id].update(data)
            else:
                docs[doc_id] = dict(data)

        self._mutate(apply)

    def delete_document(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns False when it did not exist."""
        removed: list[bool] = []

        def apply(collections: dict[str, dict[str, Document]]) -> None:
            removed.append(collections.get(collection, {}).pop(doc_id, None) is not None)

        self._mutate(apply)
        return removed[0]

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._load().get(collection, {}))

    # --- Backing storage hooks ---

    def _load(self) -> dict[str, dict[str, Document]]:
        return self._collections

    def _persist(self, collections: dict[str, dict[str, Document]]) -> None:
        self._collections = collections

    def _mutate(self, apply: Callable[[dict[str, dict[str, Document]]], None]) -> None:
        with self._lock:
            working = copy.deepcopy(self._load())
            apply(working)
            self._persist(working)


class JsonDocumentStore(DocumentStore):
    """Document store persisted to a single JSON file."""

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path).resolve()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict[str, dict[str, Document]]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            raise DocumentStoreError(f"Could not read {self.path}: {exc}") from exc

        collections = data.get("collections") if isinstance(data, dict) else None
        if not isinstance(collections, dict):
            raise DocumentStoreError(f"{self.path} does not contain a 'collections' object.")
        return collections

    def _persist(self, collections: dict[str, dict[str, Document]]) -> None:
        directory = self.path.parent
        fd, tmp_path = tempfile.mkstemp(prefix=".store.", suffix=".tmp", dir=directory, text=True)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
                json.dump({"collections": collections}, tmp_file, indent=2, ensure_ascii=False)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise DocumentStoreError(f"Could not write {self.path}: {exc}") from exc
        finally:
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_path)
