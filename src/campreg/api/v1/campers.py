"""Camper endpoints for parents managing their own children."""

import logging

from fastapi import APIRouter, Depends, status

from campreg.api.v1.dependencies import (
    get_camper_service,
    get_current_principal,
    get_guard,
)
from campreg.auth.access_control import AccessControlGuard
from campreg.core.exceptions import NotFoundError
from campreg.models.auth import AmkaCheckRequest, Principal
from campreg.models.camper import (
    AmkaAvailability,
    Camper,
    CamperCreate,
    CamperUpdate,
    CamperView,
)
from campreg.services.camper_service import CamperService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _load_owned(
    camper_id: str,
    principal: Principal,
    guard: AccessControlGuard,
    camper_service: CamperService,
) -> CamperView:
    camper = await camper_service.find_by_id(camper_id)
    if camper is None:
        raise NotFoundError("Camper", camper_id)
    await guard.authorize(principal, camper.parent, "camper")
    return camper


@router.post(
    "",
    response_model=CamperView,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "AMKA already registered as camper"}},
)
async def create_camper(
    data: CamperCreate,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    camper_service: CamperService = Depends(get_camper_service),  # noqa: B008
) -> CamperView:
    """Add a child to the caller's account; the caller always becomes the parent."""
    return await camper_service.create_camper(data, principal.user_id)


@router.get("", response_model=list[CamperView])
async def list_own_campers(
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    camper_service: CamperService = Depends(get_camper_service),  # noqa: B008
) -> list[CamperView]:
    return await camper_service.find_by_owner(principal.user_id)


@router.post("/check-amka", response_model=AmkaAvailability)
async def check_camper_amka(
    request: AmkaCheckRequest,
    _: Principal = Depends(get_current_principal),  # noqa: B008
    camper_service: CamperService = Depends(get_camper_service),  # noqa: B008
) -> AmkaAvailability:
    return await camper_service.check_amka_availability(request.amka)


@router.get("/{camper_id}", response_model=CamperView)
async def get_camper(
    camper_id: str,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    guard: AccessControlGuard = Depends(get_guard),  # noqa: B008
    camper_service: CamperService = Depends(get_camper_service),  # noqa: B008
) -> CamperView:
    return await _load_owned(camper_id, principal, guard, camper_service)


@router.put("/{camper_id}", response_model=CamperView)
async def update_camper(
    camper_id: str,
    patch: CamperUpdate,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    guard: AccessControlGuard = Depends(get_guard),  # noqa: B008
    camper_service: CamperService = Depends(get_camper_service),  # noqa: B008
) -> CamperView:
    await _load_owned(camper_id, principal, guard, camper_service)
    return await camper_service.update_camper(camper_id, patch)


@router.delete("/{camper_id}", response_model=Camper)
async def delete_camper(
    camper_id: str,
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    guard: AccessControlGuard = Depends(get_guard),  # noqa: B008
    camper_service: CamperService = Depends(get_camper_service),  # noqa: B008
) -> Camper:
    await _load_owned(camper_id, principal, guard, camper_service)
    return await camper_service.delete_camper(camper_id)
