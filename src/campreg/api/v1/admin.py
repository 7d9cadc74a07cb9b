"""Administrator endpoints over every camper and registration."""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query

from campreg.api.v1.dependencies import (
    get_camper_service,
    get_registration_service,
    require_admin,
)
from campreg.core.exceptions import NotFoundError
from campreg.models.auth import Principal
from campreg.models.camper import Camper, CamperView
from campreg.models.enums import CampPeriod, CampType
from campreg.models.registration import (
    Registration,
    RegistrationSearchRequest,
    RegistrationUpdate,
    RegistrationView,
)
from campreg.services.camper_service import CamperService
from campreg.services.registration_service import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/registrations", response_model=list[RegistrationView])
async def list_registrations(
    camp_type: CampType | None = Query(None, alias="campType"),  # noqa: B008
    camp_period: CampPeriod | None = Query(None, alias="campPeriod"),  # noqa: B008
    is_active: bool | None = Query(None, alias="isActive"),  # noqa: B008
    amka: str | None = Query(None),  # noqa: B008
    amka_owner: Literal["parent", "camper"] | None = Query(None, alias="type"),  # noqa: B008
    _: Principal = Depends(require_admin),  # noqa: B008
    registration_service: RegistrationService = Depends(get_registration_service),  # noqa: B008
) -> list[RegistrationView]:
    """List registrations, optionally narrowed by offering, status or AMKA."""
    return await registration_service.search(
        camp_type=camp_type,
        camp_period=camp_period,
        is_active=is_active,
        amka=amka,
        amka_owner=amka_owner,
    )


@router.post(
    "/registrations/search",
    response_model=list[RegistrationView] | RegistrationView | None,
)
async def search_registrations(
    request: RegistrationSearchRequest,
    _: Principal = Depends(require_admin),  # noqa: B008
    registration_service: RegistrationService = Depends(get_registration_service),  # noqa: B008
) -> list[RegistrationView] | RegistrationView | None:
    """All registrations of a parent, or the registration of a camper, by AMKA."""
    return await registration_service.search_by_amka(request.amka, request.type)


@router.get("/registrations/{registration_id}", response_model=RegistrationView)
async def get_registration(
    registration_id: str,
    _: Principal = Depends(require_admin),  # noqa: B008
    registration_service: RegistrationService = Depends(get_registration_service),  # noqa: B008
) -> RegistrationView:
    registration = await registration_service.find_by_id(registration_id)
    if registration is None:
        raise NotFoundError("Registration", registration_id)
    return registration


@router.put("/registrations/{registration_id}", response_model=RegistrationView)
async def update_registration(
    registration_id: str,
    patch: RegistrationUpdate,
    _: Principal = Depends(require_admin),  # noqa: B008
    registration_service: RegistrationService = Depends(get_registration_service),  # noqa: B008
) -> RegistrationView:
    updated = await registration_service.update_registration(registration_id, patch)
    if updated is None:
        raise NotFoundError("Registration", registration_id)
    return updated


@router.delete("/registrations/{registration_id}", response_model=Registration)
async def delete_registration(
    registration_id: str,
    principal: Principal = Depends(require_admin),  # noqa: B008
    registration_service: RegistrationService = Depends(get_registration_service),  # noqa: B008
) -> Registration:
    deleted = await registration_service.delete_registration(registration_id)
    if deleted is None:
        raise NotFoundError("Registration", registration_id)
    logger.info("Registration %s deleted by admin %s", registration_id, principal.user_id)
    return deleted


@router.get("/campers", response_model=list[CamperView])
async def list_campers(
    _: Principal = Depends(require_admin),  # noqa: B008
    camper_service: CamperService = Depends(get_camper_service),  # noqa: B008
) -> list[CamperView]:
    return await camper_service.find_all()


@router.delete("/campers/{camper_id}", response_model=Camper)
async def delete_camper(
    camper_id: str,
    principal: Principal = Depends(require_admin),  # noqa: B008
    camper_service: CamperService = Depends(get_camper_service),  # noqa: B008
) -> Camper:
    deleted = await camper_service.delete_camper(camper_id)
    logger.info("Camper %s deleted by admin %s", camper_id, principal.user_id)
    return deleted
