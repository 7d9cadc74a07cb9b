"""Authentication adapters and the access control guard."""

from campreg.auth.access_control import AccessControlGuard, AccessScope, owner_id_of
from campreg.auth.jwt_authenticator import JWTAuthenticator
from campreg.auth.password import BcryptPasswordHasher

__all__ = [
    "AccessControlGuard",
    "AccessScope",
    "BcryptPasswordHasher",
    "JWTAuthenticator",
    "owner_id_of",
]
