"""Signed identity tokens using PyJWT."""

from datetime import UTC, datetime, timedelta
import logging
from typing import Any

import jwt
from pydantic import ValidationError

from campreg.models.auth import Principal
from campreg.ports.auth_ports import IAuthenticator

logger = logging.getLogger(__name__)


class JWTAuthenticator(IAuthenticator):
    """HMAC-signed JWTs with a fixed validity window."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=24),
    ) -> None:
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, principal: Principal) -> str:
        now = datetime.now(UTC)
        claims: dict[str, Any] = {
            "sub": principal.user_id,
            "username": principal.username,
            "email": principal.email,
            "roles": list(principal.roles),
            "iat": now,
            "exp": now + self.ttl,
        }
        return jwt.encode(claims, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Principal | None:
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            return None
        except jwt.PyJWTError as e:
            logger.warning("Rejected invalid token: %s", e)
            return None

        try:
            return Principal(
                user_id=claims["sub"],
                username=claims["username"],
                email=claims.get("email"),
                roles=tuple(claims.get("roles") or ()),
            )
        except (KeyError, ValidationError):
            logger.warning("Rejected token with malformed claims")
            return None
