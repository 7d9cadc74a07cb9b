"""Storage adapters implementing ``DocumentStorePort``."""

from campreg.storage.constraints import (
    CAMPERS,
    REGISTRATIONS,
    ROLES,
    UNIQUE_INDEXES,
    USERS,
    UniqueIndex,
)
from campreg.storage.memory_store import InMemoryDocumentStore

__all__ = [
    "CAMPERS",
    "REGISTRATIONS",
    "ROLES",
    "UNIQUE_INDEXES",
    "USERS",
    "InMemoryDocumentStore",
    "UniqueIndex",
]
