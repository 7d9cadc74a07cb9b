"""Identity service: self-service registration and profile management.

The first user ever stored receives the ADMIN role and every later user
READER. The decision is a pure function of the current user count in the
store, so it survives restarts and holds across instances; deleting every
user makes the next one an administrator again.
"""

from __future__ import annotations

import logging
from typing import Any

from campreg.core.exceptions import (
    DuplicateAmkaError,
    DuplicateUsernameError,
    NotFoundError,
    UniqueConstraintViolation,
    create_amka_format_error,
)
from campreg.models.auth import UserAmkaAvailability
from campreg.models.base import is_valid_amka
from campreg.models.enums import RoleName
from campreg.models.user import (
    Role,
    User,
    UserCreate,
    UserPublic,
    UserUpdate,
    normalize_username,
)
from campreg.ports.auth_ports import IPasswordHasher
from campreg.ports.storage import DocumentStorePort
from campreg.services.role_service import DEFAULT_ROLES, RoleService
from campreg.storage.constraints import ROLES, USERS

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        store: DocumentStorePort,
        password_hasher: IPasswordHasher,
        role_service: RoleService,
    ) -> None:
        self._store = store
        self._hasher = password_hasher
        self._roles = role_service

    # --- Registration ---

    async def bootstrap_role(self) -> Role:
        """Pick the role for a new user from the number of stored users."""
        name = RoleName.ADMIN if await self._store.count(USERS) == 0 else RoleName.READER
        return await self._roles.find_or_create(name.value, DEFAULT_ROLES[name])

    async def create_user(self, data: UserCreate) -> UserPublic:
        username = normalize_username(data.username)

        if await self._store.find_one(USERS, {"username": username}):
            raise DuplicateUsernameError(username)
        if await self._store.find_one(USERS, {"amka": data.amka}):
            raise DuplicateAmkaError("User with this AMKA already exists", amka=data.amka)

        role = await self.bootstrap_role()

        document = data.model_dump(mode="json", exclude={"password"})
        document["username"] = username
        document["password_hash"] = self._hasher.hash(data.password)
        document["roles"] = [role.id]

        try:
            created = await self._store.insert(USERS, document)
        except UniqueConstraintViolation as e:
            translated = self._translate_violation(e, username=username, amka=data.amka)
            if translated is None:
                raise
            raise translated from e

        logger.info("Registered user %s with role %s", created["id"], role.name)
        return await self._to_public(created)

    # --- Profile ---

    async def update_user(self, user_id: str, patch: UserUpdate) -> UserPublic:
        existing = await self._store.find_by_id(USERS, user_id)
        if existing is None:
            raise NotFoundError("User", user_id)

        changes: dict[str, Any] = patch.model_dump(mode="json", exclude_unset=True)

        password = changes.pop("password", None)
        if password is not None:
            changes["password_hash"] = self._hasher.hash(password)

        for required in ("username", "amka"):
            if required in changes and changes[required] is None:
                del changes[required]

        if "username" in changes:
            changes["username"] = normalize_username(changes["username"])
            other = await self._store.find_one(USERS, {"username": changes["username"]})
            if other is not None and other["id"] != user_id:
                raise DuplicateUsernameError(changes["username"])

        if "amka" in changes:
            other = await self._store.find_one(USERS, {"amka": changes["amka"]})
            if other is not None and other["id"] != user_id:
                raise DuplicateAmkaError(
                    "Another user already has this AMKA", amka=changes["amka"]
                )

        try:
            updated = await self._store.update_by_id(USERS, user_id, changes)
        except UniqueConstraintViolation as e:
            translated = self._translate_violation(
                e, username=changes.get("username"), amka=changes.get("amka")
            )
            if translated is None:
                raise
            raise translated from e
        if updated is None:
            raise NotFoundError("User", user_id)

        logger.info("Updated user %s", user_id)
        return await self._to_public(updated)

    async def delete_user(self, user_id: str) -> UserPublic | None:
        """Delete a user. Campers and registrations referencing it are left in place."""
        deleted = await self._store.delete_by_id(USERS, user_id)
        if deleted is None:
            return None
        logger.info("Deleted user %s", user_id)
        return await self._to_public(deleted)

    # --- Queries ---

    async def find_all(self) -> list[UserPublic]:
        return [await self._to_public(doc) for doc in await self._store.find(USERS)]

    async def find_by_id(self, user_id: str) -> UserPublic | None:
        doc = await self._store.find_by_id(USERS, user_id)
        return await self._to_public(doc) if doc else None

    async def find_by_amka(self, amka: str) -> UserPublic | None:
        doc = await self._store.find_one(USERS, {"amka": amka})
        return await self._to_public(doc) if doc else None

    async def find_credentials(self, username: str) -> User | None:
        """Return the stored user including its password hash."""
        doc = await self._store.find_one(
            USERS, {"username": normalize_username(username)}
        )
        return User.model_validate(doc) if doc else None

    async def check_amka_availability(self, amka: str) -> UserAmkaAvailability:
        if not is_valid_amka(amka):
            raise create_amka_format_error(amka)
        taken = await self._store.find_one(USERS, {"amka": amka}) is not None
        return UserAmkaAvailability(
            available=not taken,
            message="AMKA already registered" if taken else "AMKA available",
        )

    # --- Helpers ---

    async def _to_public(self, doc: dict[str, Any]) -> UserPublic:
        roles = []
        for role_id in doc.get("roles", []):
            role = await self._store.find_by_id(ROLES, role_id)
            if role is not None:
                roles.append(role)
        public = {k: v for k, v in doc.items() if k != "password_hash"}
        public["roles"] = roles
        return UserPublic.model_validate(public)

    @staticmethod
    def _translate_violation(
        error: UniqueConstraintViolation,
        *,
        username: str | None,
        amka: str | None,
    ) -> Exception | None:
        if error.fields == ("username",):
            return DuplicateUsernameError(username or "")
        if error.fields == ("amka",):
            return DuplicateAmkaError("User with this AMKA already exists", amka=amka)
        return None
