"""Registration endpoints for parents managing their own enrolments."""

import logging

from fastapi import APIRouter, Depends, status

from campreg.api.v1.dependencies import (
    get_current_principal,
    get_guard,
    get_registration_service,
)
from campreg.auth.access_control import AccessControlGuard
from campreg.core.exceptions import NotFoundError
from campreg.models.auth import Principal
from campreg.models.registration import (
    Registration,
    RegistrationCreate,
    RegistrationUpdate,
    RegistrationView,
)
from campreg.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _load_owned(
    registration_id: str,
    principal: Principal,
    guard: AccessControlGuard,
    registration_service: RegistrationService,
) -> RegistrationView:
    registration = await registration_service.find_by_id(registration_id)
    if registration is None:
        raise NotFoundError("Registration", registration_id)
    await guard.authorize(principal, registration.user, "registration")
    return registration


@router.post(
    "",
    response_model=RegistrationView,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing fields, ownership mismatch or ineligible period"},
        404: {"description": "Camper not found"},
        409: {"description": "Camper already registered for this period"},
    },
)
async def create_registration(
    data: RegistrationCreate,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    registration_service: RegistrationService = Depends(get_registration_service),  # noqa: B008
) -> RegistrationView:
    """Register one of the caller's campers; the caller is the enrolling user."""
    data = data.model_copy(update={"user": principal.user_id})
    return await registration_service.create_registration(data)


@router.get("", response_model=list[RegistrationView])
async def list_own_registrations(
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    registration_service: RegistrationService = Depends(get_registration_service),  # noqa: B008
) -> list[RegistrationView]:
    return await registration_service.find_by_user(principal.user_id)


@router.get("/{registration_id}", response_model=RegistrationView)
async def get_registration(
    registration_id: str,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    guard: AccessControlGuard = Depends(get_guard),  # noqa: B008
    registration_service: RegistrationService = Depends(get_registration_service),  # noqa: B008
) -> RegistrationView:
    return await _load_owned(registration_id, principal, guard, registration_service)


@router.put("/{registration_id}", response_model=RegistrationView)
async def update_registration(
    registration_id: str,
    patch: RegistrationUpdate,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    guard: AccessControlGuard = Depends(get_guard),  # noqa: B008
    registration_service: RegistrationService = Depends(get_registration_service),  # noqa: B008
) -> RegistrationView:
    await _load_owned(registration_id, principal, guard, registration_service)
    updated = await registration_service.update_registration(registration_id, patch)
    if updated is None:
        raise NotFoundError("Registration", registration_id)
    return updated


@router.delete("/{registration_id}", response_model=Registration)
async def delete_registration(
    registration_id: str,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    guard: AccessControlGuard = Depends(get_guard),  # noqa: B008
    registration_service: RegistrationService = Depends(get_registration_service),  # noqa: B008
) -> Registration:
    await _load_owned(registration_id, principal, guard, registration_service)
    deleted = await registration_service.delete_registration(registration_id)
    if deleted is None:
        raise NotFoundError("Registration", registration_id)
    return deleted
