"""Authentication endpoints."""

import logging

from fastapi import APIRouter, Depends

from campreg.api.v1.dependencies import get_auth_service
from campreg.models.auth import LoginRequest, LoginResponse
from campreg.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    responses={401: {"description": "Invalid username or password"}},
)
async def login(
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),  # noqa: B008
) -> LoginResponse:
    """Exchange a username and password for a signed identity token."""
    return await auth_service.login(credentials.username, credentials.password)
