"""Registration models."""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import StringConstraints

from campreg.models.base import CamelModel, Document
from campreg.models.camper import Camper
from campreg.models.enums import Beneficiary, CampPeriod, CampType
from campreg.models.user import UserSummary

ParentName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=3, max_length=100)
]
SocialSecurityFund = Annotated[str, StringConstraints(max_length=50)]
Notes = Annotated[str, StringConstraints(max_length=500)]


class RegistrationCreate(CamelModel):
    """Enrolment payload.

    ``camper``, ``camp_type`` and ``camp_period`` are optional here so the
    ledger can report their absence as a single missing-field failure.
    ``user`` is filled in from the acting principal on the self-service path.
    """

    camp_type: CampType | None = None
    camp_period: CampPeriod | None = None
    camper: str | None = None
    user: str | None = None
    beneficiary: Beneficiary
    mother_name: ParentName
    father_name: ParentName
    social_security_fund: SocialSecurityFund | None = None
    registration_date: datetime | None = None
    is_active: bool = True
    notes: Notes | None = None


class RegistrationUpdate(CamelModel):
    """Partial update. ``camper`` and ``user`` exist only to be rejected."""

    camp_type: CampType | None = None
    camp_period: CampPeriod | None = None
    camper: str | None = None
    user: str | None = None
    beneficiary: Beneficiary | None = None
    mother_name: ParentName | None = None
    father_name: ParentName | None = None
    social_security_fund: SocialSecurityFund | None = None
    registration_date: datetime | None = None
    is_active: bool | None = None
    notes: Notes | None = None


class _RegistrationFields(CamelModel):
    camp_type: CampType
    camp_period: CampPeriod
    beneficiary: Beneficiary
    mother_name: str
    father_name: str
    social_security_fund: str | None = None
    registration_date: datetime
    is_active: bool = True
    notes: str | None = None


class Registration(_RegistrationFields, Document):
    """Stored registration holding raw references."""

    camper: str
    user: str


class RegistrationView(_RegistrationFields, Document):
    """Registration with the camper and enrolling user populated."""

    camper: Camper | None = None
    user: UserSummary | None = None


class RegistrationSearchRequest(CamelModel):
    """Admin search by parent or camper AMKA. The AMKA is checked by the ledger."""

    amka: str
    type: Literal["parent", "camper"]
