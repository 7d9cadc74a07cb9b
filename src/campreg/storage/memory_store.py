"""In-memory document store.

Used for local development and tests. Writes are serialized under an
``asyncio.Lock`` so that the unique-index check and the write happen
atomically with respect to other coroutines on the same loop.
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
import copy
from datetime import UTC, datetime
import logging
from typing import Any
import uuid

from campreg.core.exceptions import UniqueConstraintViolation
from campreg.ports.storage import DocumentStorePort, Filters
from campreg.storage.constraints import UNIQUE_INDEXES, UniqueIndex

logger = logging.getLogger(__name__)


def _matches(document: dict[str, Any], filters: Filters | None) -> bool:
    if not filters:
        return True
    return all(document.get(field) == value for field, value in filters.items())


def _sort_key(field: str):
    def key(document: dict[str, Any]) -> tuple[bool, str]:
        value = document.get(field)
        return (value is None, "" if value is None else str(value))

    return key


class InMemoryDocumentStore(DocumentStorePort):
    """Dictionary-backed implementation of ``DocumentStorePort``."""

    def __init__(
        self, unique_indexes: dict[str, tuple[UniqueIndex, ...]] | None = None
    ) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self._unique_indexes = (
            UNIQUE_INDEXES if unique_indexes is None else unique_indexes
        )
        self._lock = asyncio.Lock()

    def _check_unique(
        self, collection: str, document: dict[str, Any], exclude_id: str | None = None
    ) -> None:
        for index in self._unique_indexes.get(collection, ()):
            key = index.key_for(document)
            if key is None:
                continue
            for other_id, other in self._collections[collection].items():
                if other_id != exclude_id and index.key_for(other) == key:
                    logger.warning(
                        "Unique index %s.%s rejected a write", collection, index.name
                    )
                    raise UniqueConstraintViolation(collection, index.fields, key)

    async def insert(self, collection: str, document: dict[str, Any]) -> dict[str, Any]:
        now = datetime.now(UTC).isoformat()
        stored = copy.deepcopy(document)
        stored.setdefault("id", uuid.uuid4().hex)
        stored["created_at"] = now
        stored["updated_at"] = now

        async with self._lock:
            if stored["id"] in self._collections[collection]:
                raise UniqueConstraintViolation(collection, ("id",), stored["id"])
            self._check_unique(collection, stored)
            self._collections[collection][stored["id"]] = stored

        logger.debug("Created document in %s: %s", collection, stored["id"])
        return copy.deepcopy(stored)

    async def find_by_id(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        document = self._collections[collection].get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    async def find(
        self,
        collection: str,
        filters: Filters | None = None,
        *,
        sort_by: str | None = None,
    ) -> list[dict[str, Any]]:
        documents = [
            copy.deepcopy(document)
            for document in self._collections[collection].values()
            if _matches(document, filters)
        ]
        if sort_by:
            documents.sort(key=_sort_key(sort_by))
        return documents

    async def find_one(
        self,
        collection: str,
        filters: Filters,
        *,
        sort_by: str | None = None,
    ) -> dict[str, Any] | None:
        documents = await self.find(collection, filters, sort_by=sort_by)
        return documents[0] if documents else None

    async def update_by_id(
        self, collection: str, doc_id: str, patch: dict[str, Any]
    ) -> dict[str, Any] | None:
        async with self._lock:
            existing = self._collections[collection].get(doc_id)
            if existing is None:
                return None
            merged = {**existing, **copy.deepcopy(patch)}
            merged["id"] = doc_id
            merged["created_at"] = existing.get("created_at")
            merged["updated_at"] = datetime.now(UTC).isoformat()
            self._check_unique(collection, merged, exclude_id=doc_id)
            self._collections[collection][doc_id] = merged

        logger.debug("Updated document %s in %s", doc_id, collection)
        return copy.deepcopy(merged)

    async def delete_by_id(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        async with self._lock:
            removed = self._collections[collection].pop(doc_id, None)
        if removed is not None:
            logger.debug("Deleted document %s from %s", doc_id, collection)
        return removed

    async def count(self, collection: str, filters: Filters | None = None) -> int:
        return sum(
            1 for document in self._collections[collection].values()
            if _matches(document, filters)
        )

    def clear(self) -> None:
        """Drop every collection."""
        self._collections.clear()
