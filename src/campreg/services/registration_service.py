"""Registration Ledger.

Owns registrations linking a camper and its enrolling parent to a camp
offering. Creation runs an ordered sequence of checks, each with its own
failure kind; nothing is written until all of them pass. The checks give
precise errors, while the store's unique index on (camper, camp_period)
is what rejects a concurrent duplicate.
"""

from __future__ import annotations

from datetime import UTC, datetime
import logging
from typing import Any, Literal

from campreg.core.exceptions import (
    DuplicateRegistrationError,
    ImmutableFieldChangeError,
    IneligiblePeriodError,
    MissingFieldError,
    NotFoundError,
    OwnershipMismatchError,
    UniqueConstraintViolation,
    create_amka_format_error,
)
from campreg.models.base import is_valid_amka
from campreg.models.enums import CampPeriod, CampType, is_period_offered
from campreg.models.registration import (
    Registration,
    RegistrationCreate,
    RegistrationUpdate,
    RegistrationView,
)
from campreg.models.user import USER_SUMMARY_FIELDS
from campreg.ports.storage import DocumentStorePort, Filters
from campreg.storage.constraints import CAMPERS, REGISTRATIONS, USERS
from campreg.storage.population import populate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("camper", "camp_period", "camp_type")
IMMUTABLE_FIELDS: tuple[str, ...] = ("user", "camper")
_NULLABLE_FIELDS = frozenset({"social_security_fund", "notes"})

AmkaOwner = Literal["parent", "camper"]


def _utc_isoformat(value: datetime) -> str:
    """Stored dates are UTC ISO strings so they sort chronologically; naive means UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


class RegistrationService:
    def __init__(self, store: DocumentStorePort) -> None:
        self._store = store

    async def create_registration(self, data: RegistrationCreate) -> RegistrationView:
        missing = [field for field in REQUIRED_FIELDS if getattr(data, field) is None]
        if missing:
            raise MissingFieldError(
                "Camper, camp period, and camp type are required", fields=missing
            )
        camp_type: CampType = data.camp_type  # type: ignore[assignment]
        camp_period: CampPeriod = data.camp_period  # type: ignore[assignment]
        camper_id: str = data.camper  # type: ignore[assignment]

        camper = await self._store.find_by_id(CAMPERS, camper_id)
        if camper is None:
            raise NotFoundError("Camper", camper_id)

        user = await self._store.find_by_id(USERS, data.user) if data.user else None
        if user is None:
            raise NotFoundError("User", data.user)

        if str(camper["parent"]) != str(data.user):
            logger.info(
                "User %s tried to register camper %s owned by another user",
                data.user,
                camper_id,
            )
            raise OwnershipMismatchError(camper_id, data.user)

        existing = await self._store.find_one(
            REGISTRATIONS, {"camper": camper_id, "camp_period": camp_period.value}
        )
        if existing is not None:
            raise DuplicateRegistrationError(camper_id, camp_period.value)

        if not is_period_offered(camp_type, camp_period):
            raise IneligiblePeriodError(camp_type.value, camp_period.value)

        document = data.model_dump(mode="json")
        document["registration_date"] = _utc_isoformat(
            data.registration_date or datetime.now(UTC)
        )

        try:
            created = await self._store.insert(REGISTRATIONS, document)
        except UniqueConstraintViolation as e:
            logger.warning(
                "Concurrent registration of camper %s for %s", camper_id, camp_period.value
            )
            raise DuplicateRegistrationError(camper_id, camp_period.value) from e

        logger.info(
            "Created registration %s for camper %s (%s)",
            created["id"],
            camper_id,
            camp_period.name,
        )
        return (await self._views([created]))[0]

    async def update_registration(
        self, registration_id: str, patch: RegistrationUpdate
    ) -> RegistrationView | None:
        """Apply a partial update; returns None when the registration does not exist.

        A patch naming ``user`` or ``camper`` is rejected outright, even when
        the value equals the stored one.
        """
        changes: dict[str, Any] = patch.model_dump(mode="json", exclude_unset=True)
        immutable = [field for field in IMMUTABLE_FIELDS if field in changes]
        if immutable:
            raise ImmutableFieldChangeError(
                "Cannot change user or camper for existing registration",
                fields=immutable,
            )
        changes = {
            k: v for k, v in changes.items() if v is not None or k in _NULLABLE_FIELDS
        }
        if "registration_date" in changes and patch.registration_date is not None:
            changes["registration_date"] = _utc_isoformat(patch.registration_date)

        existing = await self._store.find_by_id(REGISTRATIONS, registration_id)
        if existing is None:
            return None

        camp_type = CampType(changes.get("camp_type", existing["camp_type"]))
        camp_period = CampPeriod(changes.get("camp_period", existing["camp_period"]))
        if not is_period_offered(camp_type, camp_period):
            raise IneligiblePeriodError(camp_type.value, camp_period.value)

        if camp_period.value != existing["camp_period"]:
            clash = await self._store.find_one(
                REGISTRATIONS,
                {"camper": existing["camper"], "camp_period": camp_period.value},
            )
            if clash is not None and clash["id"] != registration_id:
                raise DuplicateRegistrationError(existing["camper"], camp_period.value)

        try:
            updated = await self._store.update_by_id(
                REGISTRATIONS, registration_id, changes
            )
        except UniqueConstraintViolation as e:
            raise DuplicateRegistrationError(existing["camper"], camp_period.value) from e
        if updated is None:
            return None

        logger.info("Updated registration %s", registration_id)
        return (await self._views([updated]))[0]

    async def delete_registration(self, registration_id: str) -> Registration | None:
        deleted = await self._store.delete_by_id(REGISTRATIONS, registration_id)
        if deleted is None:
            return None
        logger.info("Deleted registration %s", registration_id)
        return Registration.model_validate(deleted)

    # --- Queries ---

    async def find_all(self) -> list[RegistrationView]:
        return await self._find({})

    async def find_by_id(self, registration_id: str) -> RegistrationView | None:
        doc = await self._store.find_by_id(REGISTRATIONS, registration_id)
        return (await self._views([doc]))[0] if doc else None

    async def find_by_user(self, user_id: str) -> list[RegistrationView]:
        return await self._find({"user": user_id})

    async def find_by_camper(self, camper_id: str) -> list[RegistrationView]:
        return await self._find({"camper": camper_id})

    async def find_by_parent_amka(self, amka: str) -> list[RegistrationView]:
        user = await self._store.find_one(USERS, {"amka": amka})
        if user is None:
            return []
        return await self.find_by_user(user["id"])

    async def find_by_camper_amka(self, amka: str) -> RegistrationView | None:
        """Return the earliest registration of the camper holding ``amka``.

        A camper may hold one registration per period; only the first by
        registration date is returned.
        """
        camper = await self._store.find_one(CAMPERS, {"amka": amka})
        if camper is None:
            return None
        doc = await self._store.find_one(
            REGISTRATIONS, {"camper": camper["id"]}, sort_by="registration_date"
        )
        return (await self._views([doc]))[0] if doc else None

    async def search_by_amka(
        self, amka: str, owner: AmkaOwner
    ) -> list[RegistrationView] | RegistrationView | None:
        """Admin search: all registrations of a parent, or the camper's registration."""
        if not is_valid_amka(amka):
            raise create_amka_format_error(amka)
        if owner == "parent":
            return await self.find_by_parent_amka(amka)
        return await self.find_by_camper_amka(amka)

    async def search(
        self,
        *,
        camp_type: CampType | None = None,
        camp_period: CampPeriod | None = None,
        is_active: bool | None = None,
        amka: str | None = None,
        amka_owner: AmkaOwner | None = None,
    ) -> list[RegistrationView]:
        """Filtered admin listing.

        ``amka`` narrows to registrations whose parent or camper holds it;
        ``amka_owner`` restricts which of the two is matched.
        """
        filters: Filters = {}
        if camp_type is not None:
            filters["camp_type"] = camp_type.value
        if camp_period is not None:
            filters["camp_period"] = camp_period.value
        if is_active is not None:
            filters["is_active"] = is_active

        docs = await self._store.find(REGISTRATIONS, filters)

        if amka is not None:
            if not is_valid_amka(amka):
                raise create_amka_format_error(amka)
            user_ids: set[str] = set()
            camper_ids: set[str] = set()
            if amka_owner in (None, "parent"):
                user = await self._store.find_one(USERS, {"amka": amka})
                if user is not None:
                    user_ids.add(user["id"])
            if amka_owner in (None, "camper"):
                camper = await self._store.find_one(CAMPERS, {"amka": amka})
                if camper is not None:
                    camper_ids.add(camper["id"])
            docs = [
                doc for doc in docs
                if doc.get("user") in user_ids or doc.get("camper") in camper_ids
            ]

        return await self._views(docs)

    # --- Helpers ---

    async def _find(self, filters: Filters) -> list[RegistrationView]:
        return await self._views(await self._store.find(REGISTRATIONS, filters))

    async def _views(self, docs: list[dict[str, Any]]) -> list[RegistrationView]:
        populated = await populate(self._store, docs, "camper", CAMPERS)
        populated = await populate(
            self._store, populated, "user", USERS, projection=USER_SUMMARY_FIELDS
        )
        return [RegistrationView.model_validate(doc) for doc in populated]
