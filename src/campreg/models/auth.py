"""Authentication models."""

from pydantic import ConfigDict, Field

from campreg.models.base import CamelModel
from campreg.models.user import UserPublic


class Principal(CamelModel):
    """The authenticated identity attached to an operation.

    Produced once by the authenticator and passed by value; never rebuilt
    from raw token claims further down.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., description="Acting user id")
    username: str
    email: str | None = None
    roles: tuple[str, ...] = Field(default=(), description="Role ids")


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    user: UserPublic
    token: str


class AmkaCheckRequest(CamelModel):
    amka: str


class UserAmkaAvailability(CamelModel):
    available: bool
    message: str
