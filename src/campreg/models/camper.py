"""Camper models."""

from datetime import date
from typing import Annotated, Literal

from pydantic import Field, StringConstraints

from campreg.models.base import Amka, CamelModel, Document
from campreg.models.enums import VisitorType
from campreg.models.user import UserSummary

FullName = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=3, max_length=100)
]
AdditionalInfo = Annotated[str, StringConstraints(max_length=500)]


class CamperCreate(CamelModel):
    """Payload for adding a child. ``parent`` is accepted but always overridden."""

    full_name: FullName
    date_of_birth: date
    amka: Amka
    visitor_type: VisitorType
    additional_info: AdditionalInfo | None = None
    health_declaration_accepted: Literal[True] = Field(
        ..., description="Health declaration must be accepted"
    )
    parent: str | None = None


class CamperUpdate(CamelModel):
    full_name: FullName | None = None
    date_of_birth: date | None = None
    amka: Amka | None = None
    visitor_type: VisitorType | None = None
    additional_info: AdditionalInfo | None = None
    health_declaration_accepted: Literal[True] | None = None
    parent: str | None = None


class _CamperFields(CamelModel):
    full_name: str
    date_of_birth: date
    amka: str
    visitor_type: VisitorType
    additional_info: str | None = None
    health_declaration_accepted: bool


class Camper(_CamperFields, Document):
    """Stored camper; ``parent`` is the owning user's id."""

    parent: str


class CamperView(_CamperFields, Document):
    """Camper with its parent populated as a summary."""

    parent: UserSummary | None = None


class AmkaAvailability(CamelModel):
    """Result of a cross-namespace AMKA availability check."""

    available: bool
    is_parent_amka: bool = False
    is_camper_amka: bool = False
    message: str
