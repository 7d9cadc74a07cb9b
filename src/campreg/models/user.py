"""User and role models."""

from typing import Annotated, Any

from pydantic import EmailStr, Field, StringConstraints, field_validator

from campreg.models.base import Amka, CamelModel, Document
from campreg.models.enums import PhoneType

Username = Annotated[
    str,
    StringConstraints(strip_whitespace=True, to_lower=True, min_length=3, max_length=20),
]
Password = Annotated[str, StringConstraints(min_length=5)]


def normalize_username(username: str) -> str:
    """Usernames are case-insensitive and stored trimmed and lower-cased."""
    return username.strip().lower()


class Phone(CamelModel):
    type: PhoneType = Field(..., description="Mobile or landline")
    number: str = Field(..., description="Phone number")


class Address(CamelModel):
    area: str | None = None
    street: str | None = None
    number: str | None = None
    po: str | None = None
    municipality: str | None = None


class Role(Document):
    """A named permission tag."""

    name: str = Field(..., description="Role name, e.g. ADMIN or READER")
    description: str | None = Field(None, description="What the role grants")
    is_active: bool = Field(True, description="Whether the role is in use")


class _UserProfile(CamelModel):
    firstname: str | None = Field(None, description="Given name")
    lastname: str | None = Field(None, description="Family name")
    email: EmailStr | None = Field(None, description="Contact email")
    address: Address | None = None
    phone: list[Phone] | None = None

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return value or None
        return value


class UserCreate(_UserProfile):
    """Self-service registration payload."""

    username: Username
    password: Password
    amka: Amka

    model_config = {
        "json_schema_extra": {
            "example": {
                "username": "mparent",
                "password": "secret1",
                "firstname": "Maria",
                "lastname": "Papadopoulou",
                "amka": "12345678901",
                "email": "maria@example.com",
            }
        }
    }


class UserUpdate(_UserProfile):
    """Profile update payload; every field is optional."""

    username: Username | None = None
    password: Password | None = None
    amka: Amka | None = None


class User(_UserProfile, Document):
    """Stored user, including the password hash."""

    username: str
    password_hash: str
    amka: str | None = None
    roles: list[str] = Field(default_factory=list, description="Role ids")


class UserPublic(_UserProfile, Document):
    """User as returned to callers: roles populated, no credential."""

    username: str
    amka: str | None = None
    roles: list[Role] = Field(default_factory=list)


class UserSummary(CamelModel):
    """Owner fields exposed when a user is populated into another record."""

    id: str
    username: str
    firstname: str | None = None
    lastname: str | None = None
    amka: str | None = None
    email: str | None = None


USER_SUMMARY_FIELDS: tuple[str, ...] = tuple(UserSummary.model_fields)
