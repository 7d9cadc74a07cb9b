"""Role lookup and seeding."""

import logging

from campreg.core.exceptions import UniqueConstraintViolation
from campreg.models.enums import RoleName
from campreg.models.user import Role
from campreg.ports.storage import DocumentStorePort
from campreg.storage.constraints import ROLES

logger = logging.getLogger(__name__)

DEFAULT_ROLES: dict[RoleName, str] = {
    RoleName.ADMIN: "Manages every user, camper and registration",
    RoleName.READER: "Manages own campers and registrations",
}


class RoleService:
    def __init__(self, store: DocumentStorePort) -> None:
        self._store = store

    async def find_all(self) -> list[Role]:
        return [Role.model_validate(doc) for doc in await self._store.find(ROLES)]

    async def find_by_name(self, name: str) -> Role | None:
        doc = await self._store.find_one(ROLES, {"name": name})
        return Role.model_validate(doc) if doc else None

    async def find_or_create(self, name: str, description: str | None = None) -> Role:
        """Return the role called ``name``, creating it if needed.

        Safe against a concurrent creator: the ``roles.name`` unique index
        rejects the second insert and the winner's record is returned.
        """
        existing = await self.find_by_name(name)
        if existing is not None:
            return existing

        try:
            doc = await self._store.insert(
                ROLES, {"name": name, "description": description, "is_active": True}
            )
        except UniqueConstraintViolation:
            logger.info("Role %s created concurrently; reusing it", name)
            existing = await self.find_by_name(name)
            if existing is None:
                raise
            return existing

        logger.info("Created role %s", name)
        return Role.model_validate(doc)

    async def seed_default_roles(self) -> list[Role]:
        """Idempotently create the roles the bootstrap step relies on."""
        return [
            await self.find_or_create(name.value, description)
            for name, description in DEFAULT_ROLES.items()
        ]
