"""Domain models for the camp registration backend.

All pydantic models live in this package; services and routers import them
from here rather than defining their own.
"""

from campreg.models.auth import (
    AmkaCheckRequest,
    LoginRequest,
    LoginResponse,
    Principal,
    UserAmkaAvailability,
)
from campreg.models.base import AMKA_PATTERN, is_valid_amka
from campreg.models.camper import (
    AmkaAvailability,
    Camper,
    CamperCreate,
    CamperUpdate,
    CamperView,
)
from campreg.models.enums import (
    NEST_ONLY_PERIODS,
    Beneficiary,
    CampPeriod,
    CampType,
    PhoneType,
    RoleName,
    VisitorType,
    is_period_offered,
)
from campreg.models.registration import (
    Registration,
    RegistrationCreate,
    RegistrationSearchRequest,
    RegistrationUpdate,
    RegistrationView,
)
from campreg.models.user import (
    USER_SUMMARY_FIELDS,
    Address,
    Phone,
    Role,
    User,
    UserCreate,
    UserPublic,
    UserSummary,
    UserUpdate,
    normalize_username,
)

__all__ = [
    "AMKA_PATTERN",
    "NEST_ONLY_PERIODS",
    "USER_SUMMARY_FIELDS",
    "Address",
    "AmkaAvailability",
    "AmkaCheckRequest",
    "Beneficiary",
    "CampPeriod",
    "CampType",
    "Camper",
    "CamperCreate",
    "CamperUpdate",
    "CamperView",
    "LoginRequest",
    "LoginResponse",
    "Phone",
    "PhoneType",
    "Principal",
    "Registration",
    "RegistrationCreate",
    "RegistrationSearchRequest",
    "RegistrationUpdate",
    "RegistrationView",
    "Role",
    "RoleName",
    "User",
    "UserAmkaAvailability",
    "UserCreate",
    "UserPublic",
    "UserSummary",
    "UserUpdate",
    "VisitorType",
    "is_period_offered",
    "is_valid_amka",
    "normalize_username",
]
