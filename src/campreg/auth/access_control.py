"""Access Control Guard.

Decides whether the acting principal may operate on a user, camper or
registration. Two scopes exist: ``SELF`` (own resources only) and ``ANY``
(administrators). Callers check that a resource exists before asking the
guard, so a missing resource is reported as not-found rather than denied.
"""

from enum import Enum
import logging
from typing import Any

from campreg.core.exceptions import AccessDeniedError, AuthenticationError
from campreg.models.auth import Principal
from campreg.models.enums import RoleName
from campreg.models.user import Role
from campreg.ports.storage import DocumentStorePort
from campreg.storage.constraints import ROLES, USERS

logger = logging.getLogger(__name__)


class AccessScope(str, Enum):
    SELF = "self"
    ANY = "any"


def owner_id_of(owner_ref: Any) -> str | None:
    """Return the id behind a raw or populated owner reference."""
    if owner_ref is None:
        return None
    if isinstance(owner_ref, str):
        return owner_ref
    if isinstance(owner_ref, dict):
        ref_id = owner_ref.get("id")
    else:
        ref_id = getattr(owner_ref, "id", None)
    return None if ref_id is None else str(ref_id)


class AccessControlGuard:
    """Resolves scopes from stored roles and enforces ownership."""

    def __init__(self, store: DocumentStorePort) -> None:
        self._store = store

    async def resolve_roles(self, principal: Principal) -> list[Role]:
        """Load the acting user's current roles from the identity store.

        Roles are read from the stored user rather than the token, so a role
        change takes effect without re-issuing tokens.
        """
        user = await self._store.find_by_id(USERS, principal.user_id)
        if user is None:
            logger.warning("Token for unknown user %s", principal.user_id)
            raise AuthenticationError("User not found")

        roles = []
        for role_id in user.get("roles", []):
            role = await self._store.find_by_id(ROLES, role_id)
            if role is not None:
                roles.append(Role.model_validate(role))
        return roles

    async def resolve_scope(self, principal: Principal) -> AccessScope:
        roles = await self.resolve_roles(principal)
        if any(role.name.upper() == RoleName.ADMIN.value for role in roles):
            return AccessScope.ANY
        return AccessScope.SELF

    async def is_admin(self, principal: Principal) -> bool:
        return await self.resolve_scope(principal) is AccessScope.ANY

    async def require_admin(self, principal: Principal) -> None:
        if not await self.is_admin(principal):
            logger.info("Admin access denied for user %s", principal.user_id)
            raise AccessDeniedError("admin resources", principal.user_id)

    def ensure_owner(self, owner_ref: Any, principal: Principal, resource: str) -> None:
        """Raise ``AccessDeniedError`` unless ``principal`` owns the resource."""
        owner_id = owner_id_of(owner_ref)
        if owner_id is None or owner_id != str(principal.user_id):
            logger.info("Access to %s denied for user %s", resource, principal.user_id)
            raise AccessDeniedError(resource, principal.user_id)

    async def authorize(
        self, principal: Principal, owner_ref: Any, resource: str
    ) -> AccessScope:
        """Allow administrators anything and everyone else their own records."""
        scope = await self.resolve_scope(principal)
        if scope is not AccessScope.ANY:
            self.ensure_owner(owner_ref, principal, resource)
        return scope
