"""Storage port interface following Clean Architecture principles.

This module defines the abstract interface for document storage, so the
services depend on an abstraction rather than on a concrete database.
"""

from abc import ABC, abstractmethod
from typing import Any

Filters = dict[str, Any]


class DocumentStorePort(ABC):
    """Abstract interface for document storage operations.

    Documents are JSON-compatible dictionaries identified by their ``id``
    field. Filters are field-equality mappings; an empty mapping matches
    every document of the collection.

    Implementations MUST enforce the unique indexes they are configured with
    and raise ``UniqueConstraintViolation`` when a write would break one.
    """

    @abstractmethod
    async def insert(self, collection: str, document: dict[str, Any]) -> dict[str, Any]:
        """Store a new document.

        Args:
            collection: Name of the collection
            document: Document data; an ``id`` is generated when absent

        Returns:
            The stored document including ``id`` and timestamps
        """

    @abstractmethod
    async def find_by_id(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Retrieve a document by ID, or None if it does not exist."""

    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: Filters | None = None,
        *,
        sort_by: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return all documents matching ``filters``.

        Args:
            collection: Name of the collection
            filters: Field-equality conditions
            sort_by: Optional field to order ascending by; creation order otherwise
        """

    @abstractmethod
    async def find_one(
        self,
        collection: str,
        filters: Filters,
        *,
        sort_by: str | None = None,
    ) -> dict[str, Any] | None:
        """Return the first document matching ``filters``, or None."""

    @abstractmethod
    async def update_by_id(
        self, collection: str, doc_id: str, patch: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Merge ``patch`` into a document.

        Returns:
            The updated document, or None if it does not exist
        """

    @abstractmethod
    async def delete_by_id(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Delete a document by ID.

        Returns:
            The deleted document, or None if it did not exist
        """

    @abstractmethod
    async def count(self, collection: str, filters: Filters | None = None) -> int:
        """Count documents matching ``filters``."""
