"""Business services."""

from campreg.services.auth_service import AuthService
from campreg.services.camper_service import CamperService
from campreg.services.registration_service import RegistrationService
from campreg.services.role_service import RoleService
from campreg.services.user_service import UserService

__all__ = [
    "AuthService",
    "CamperService",
    "RegistrationService",
    "RoleService",
    "UserService",
]
