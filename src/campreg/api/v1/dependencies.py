"""FastAPI dependencies: service access and the acting principal.

Services live on the application's ``ServiceContainer``; handlers reach them
through these functions so tests can build an app around any store.
"""

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from campreg.auth.access_control import AccessControlGuard
from campreg.core.container import ServiceContainer
from campreg.core.exceptions import AuthenticationError
from campreg.models.auth import Principal
from campreg.services.auth_service import AuthService
from campreg.services.camper_service import CamperService
from campreg.services.registration_service import RegistrationService
from campreg.services.role_service import RoleService
from campreg.services.user_service import UserService

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_user_service(
    container: ServiceContainer = Depends(get_container),  # noqa: B008
) -> UserService:
    return container.user_service


def get_role_service(
    container: ServiceContainer = Depends(get_container),  # noqa: B008
) -> RoleService:
    return container.role_service


def get_auth_service(
    container: ServiceContainer = Depends(get_container),  # noqa: B008
) -> AuthService:
    return container.auth_service


def get_camper_service(
    container: ServiceContainer = Depends(get_container),  # noqa: B008
) -> CamperService:
    return container.camper_service


def get_registration_service(
    container: ServiceContainer = Depends(get_container),  # noqa: B008
) -> RegistrationService:
    return container.registration_service


def get_guard(
    container: ServiceContainer = Depends(get_container),  # noqa: B008
) -> AccessControlGuard:
    return container.guard


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),  # noqa: B008
    auth_service: AuthService = Depends(get_auth_service),  # noqa: B008
) -> Principal:
    """Resolve the bearer token into the acting principal (401 otherwise)."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Missing or invalid Authorization header")
    return auth_service.authenticate(credentials.credentials)


async def require_admin(
    principal: Principal = Depends(get_current_principal),  # noqa: B008
    guard: AccessControlGuard = Depends(get_guard),  # noqa: B008
) -> Principal:
    """Resolve the principal and reject anyone without the ADMIN role."""
    await guard.require_admin(principal)
    return principal
