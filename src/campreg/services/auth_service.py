"""Login and token verification."""

import logging

from campreg.core.exceptions import AuthenticationError
from campreg.models.auth import LoginResponse, Principal
from campreg.ports.auth_ports import IAuthenticator, IPasswordHasher
from campreg.services.user_service import UserService

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        user_service: UserService,
        password_hasher: IPasswordHasher,
        authenticator: IAuthenticator,
    ) -> None:
        self._users = user_service
        self._hasher = password_hasher
        self._authenticator = authenticator

    async def login(self, username: str, password: str) -> LoginResponse:
        """Check credentials and issue a token.

        Unknown usernames and wrong passwords fail identically.
        """
        user = await self._users.find_credentials(username)
        if user is None or not self._hasher.compare(password, user.password_hash):
            logger.info("Failed login attempt")
            raise AuthenticationError("Invalid username or password")

        principal = Principal(
            user_id=user.id,
            username=user.username,
            email=user.email,
            roles=tuple(user.roles),
        )
        token = self._authenticator.issue(principal)

        public = await self._users.find_by_id(user.id)
        if public is None:
            raise AuthenticationError("Invalid username or password")

        logger.info("User %s logged in", user.id)
        return LoginResponse(user=public, token=token)

    def authenticate(self, token: str) -> Principal:
        principal = self._authenticator.verify(token)
        if principal is None:
            raise AuthenticationError("Invalid or expired token")
        return principal
