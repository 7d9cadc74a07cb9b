"""Camper Directory.

Owns camper records and their owning-parent relation. Ownership is fixed at
creation; a camper cannot be deleted while any registration references it.
"""

from __future__ import annotations

import logging
from typing import Any

from campreg.core.exceptions import (
    DuplicateAmkaError,
    ImmutableFieldChangeError,
    NotFoundError,
    ReferentialConflictError,
    UniqueConstraintViolation,
    create_amka_format_error,
)
from campreg.models.base import is_valid_amka
from campreg.models.camper import (
    AmkaAvailability,
    Camper,
    CamperCreate,
    CamperUpdate,
    CamperView,
)
from campreg.models.user import USER_SUMMARY_FIELDS
from campreg.ports.storage import DocumentStorePort, Filters
from campreg.storage.constraints import CAMPERS, REGISTRATIONS, USERS
from campreg.storage.population import populate

logger = logging.getLogger(__name__)

# Fields that may be cleared by an update
_NULLABLE_FIELDS = frozenset({"additional_info"})


class CamperService:
    def __init__(self, store: DocumentStorePort) -> None:
        self._store = store

    async def create_camper(self, data: CamperCreate, owner_id: str) -> CamperView:
        """Store a camper owned by ``owner_id``; any ``parent`` in ``data`` is ignored."""
        if await self._store.find_by_id(USERS, owner_id) is None:
            raise NotFoundError("User", owner_id)

        if await self._store.find_one(CAMPERS, {"amka": data.amka}):
            raise DuplicateAmkaError("Camper with this AMKA already exists", amka=data.amka)

        document = data.model_dump(mode="json", exclude={"parent"})
        document["parent"] = owner_id

        try:
            created = await self._store.insert(CAMPERS, document)
        except UniqueConstraintViolation as e:
            raise DuplicateAmkaError(
                "Camper with this AMKA already exists", amka=data.amka
            ) from e

        logger.info("Created camper %s for user %s", created["id"], owner_id)
        return (await self._views([created]))[0]

    async def update_camper(self, camper_id: str, patch: CamperUpdate) -> CamperView:
        changes: dict[str, Any] = patch.model_dump(mode="json", exclude_unset=True)
        if "parent" in changes:
            raise ImmutableFieldChangeError(
                "Cannot change the parent of an existing camper", fields=["parent"]
            )
        changes = {
            k: v for k, v in changes.items() if v is not None or k in _NULLABLE_FIELDS
        }

        if await self._store.find_by_id(CAMPERS, camper_id) is None:
            raise NotFoundError("Camper", camper_id)

        if "amka" in changes:
            other = await self._store.find_one(CAMPERS, {"amka": changes["amka"]})
            if other is not None and other["id"] != camper_id:
                raise DuplicateAmkaError(
                    "Another camper already has this AMKA", amka=changes["amka"]
                )

        try:
            updated = await self._store.update_by_id(CAMPERS, camper_id, changes)
        except UniqueConstraintViolation as e:
            raise DuplicateAmkaError(
                "Another camper already has this AMKA", amka=changes.get("amka")
            ) from e
        if updated is None:
            raise NotFoundError("Camper", camper_id)

        logger.info("Updated camper %s", camper_id)
        return (await self._views([updated]))[0]

    async def delete_camper(self, camper_id: str) -> Camper:
        if await self._store.find_by_id(CAMPERS, camper_id) is None:
            raise NotFoundError("Camper", camper_id)

        registrations = await self._store.count(REGISTRATIONS, {"camper": camper_id})
        if registrations > 0:
            logger.info(
                "Refused to delete camper %s with %d registrations",
                camper_id,
                registrations,
            )
            raise ReferentialConflictError(
                "Cannot delete camper with existing registrations",
                details={"camper": camper_id, "registrations": registrations},
            )

        deleted = await self._store.delete_by_id(CAMPERS, camper_id)
        if deleted is None:
            raise NotFoundError("Camper", camper_id)

        logger.info("Deleted camper %s", camper_id)
        return Camper.model_validate(deleted)

    # --- Queries ---

    async def find_all(self) -> list[CamperView]:
        return await self._find({})

    async def find_by_id(self, camper_id: str) -> CamperView | None:
        doc = await self._store.find_by_id(CAMPERS, camper_id)
        return (await self._views([doc]))[0] if doc else None

    async def find_by_amka(self, amka: str) -> CamperView | None:
        doc = await self._store.find_one(CAMPERS, {"amka": amka})
        return (await self._views([doc]))[0] if doc else None

    async def find_by_owner(self, owner_id: str) -> list[CamperView]:
        return await self._find({"parent": owner_id})

    async def check_amka_availability(self, amka: str) -> AmkaAvailability:
        """Report whether an AMKA is free in both the camper and parent namespaces."""
        if not is_valid_amka(amka):
            raise create_amka_format_error(amka)

        is_camper = await self._store.find_one(CAMPERS, {"amka": amka}) is not None
        is_parent = await self._store.find_one(USERS, {"amka": amka}) is not None

        if is_camper:
            message = "AMKA registered as camper"
        elif is_parent:
            message = "AMKA registered as parent"
        else:
            message = "AMKA available"

        return AmkaAvailability(
            available=not (is_camper or is_parent),
            is_parent_amka=is_parent,
            is_camper_amka=is_camper,
            message=message,
        )

    # --- Helpers ---

    async def _find(self, filters: Filters) -> list[CamperView]:
        return await self._views(await self._store.find(CAMPERS, filters))

    async def _views(self, docs: list[dict[str, Any]]) -> list[CamperView]:
        populated = await populate(
            self._store, docs, "parent", USERS, projection=USER_SUMMARY_FIELDS
        )
        return [CamperView.model_validate(doc) for doc in populated]
