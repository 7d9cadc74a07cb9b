"""Role listing."""

from fastapi import APIRouter, Depends

from campreg.api.v1.dependencies import get_role_service, require_admin
from campreg.models.auth import Principal
from campreg.models.user import Role
from campreg.services.role_service import RoleService

router = APIRouter()


@router.get("", response_model=list[Role])
async def list_roles(
    _: Principal = Depends(require_admin),  # noqa: B008
    role_service: RoleService = Depends(get_role_service),  # noqa: B008
) -> list[Role]:
    return await role_service.find_all()
