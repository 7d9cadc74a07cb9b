"""User account endpoints.

Registration and the AMKA check are public; everything else needs a token.
Non-administrators may read and update only their own account.
"""

import logging

from fastapi import APIRouter, Depends, status

from campreg.api.v1.dependencies import (
    get_current_principal,
    get_guard,
    get_user_service,
    require_admin,
)
from campreg.auth.access_control import AccessControlGuard, AccessScope
from campreg.core.exceptions import NotFoundError
from campreg.models.auth import AmkaCheckRequest, Principal, UserAmkaAvailability
from campreg.models.user import UserCreate, UserPublic, UserUpdate
from campreg.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _load_authorized(
    user_id: str,
    principal: Principal,
    guard: AccessControlGuard,
    user_service: UserService,
) -> UserPublic:
    # Unknown callers fail authentication before the target lookup
    scope = await guard.resolve_scope(principal)
    user = await user_service.find_by_id(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    if scope is not AccessScope.ANY:
        guard.ensure_owner(user.id, principal, "user")
    return user


@router.post(
    "",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={409: {"description": "Username or AMKA already taken"}},
)
async def register_user(
    data: UserCreate,
    user_service: UserService = Depends(get_user_service),  # noqa: B008
) -> UserPublic:
    return await user_service.create_user(data)


@router.post("/check-amka", response_model=UserAmkaAvailability)
async def check_user_amka(
    request: AmkaCheckRequest,
    user_service: UserService = Depends(get_user_service),  # noqa: B008
) -> UserAmkaAvailability:
    return await user_service.check_amka_availability(request.amka)


@router.get("", response_model=list[UserPublic])
async def list_users(
    _: Principal = Depends(require_admin),  # noqa: B008
    user_service: UserService = Depends(get_user_service),  # noqa: B008
) -> list[UserPublic]:
    return await user_service.find_all()


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(
    user_id: str,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    guard: AccessControlGuard = Depends(get_guard),  # noqa: B008
    user_service: UserService = Depends(get_user_service),  # noqa: B008
) -> UserPublic:
    return await _load_authorized(user_id, principal, guard, user_service)


@router.put("/{user_id}", response_model=UserPublic)
async def update_user(
    user_id: str,
    patch: UserUpdate,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    guard: AccessControlGuard = Depends(get_guard),  # noqa: B008
    user_service: UserService = Depends(get_user_service),  # noqa: B008
) -> UserPublic:
    await _load_authorized(user_id, principal, guard, user_service)
    return await user_service.update_user(user_id, patch)


@router.delete("/{user_id}", response_model=UserPublic)
async def delete_user(
    user_id: str,
    principal: Principal = Depends(require_admin),  # noqa: B008
    user_service: UserService = Depends(get_user_service),  # noqa: B008
) -> UserPublic:
    deleted = await user_service.delete_user(user_id)
    if deleted is None:
        raise NotFoundError("User", user_id)
    logger.info("User %s deleted by %s", user_id, principal.user_id)
    return deleted
