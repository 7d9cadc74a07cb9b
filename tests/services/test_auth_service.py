"""Tests for login and token verification."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from campreg.core.exceptions import AuthenticationError, ErrorKind
from campreg.services.auth_service import AuthService


class TestLogin:
    """Test credential checks and token issuing."""

    @pytest.mark.asyncio
    async def test_login_returns_user_and_verifiable_token(
        self, make_user, auth_service: AuthService, authenticator
    ) -> None:
        user = await make_user("parenta", "11111111111")

        response = await auth_service.login("parenta", "secret1")

        assert response.user.id == user.id
        assert [r.name for r in response.user.roles] == ["ADMIN"]
        principal = authenticator.verify(response.token)
        assert principal is not None
        assert principal.user_id == user.id
        assert principal.username == "parenta"
        assert principal.roles == tuple(r.id for r in user.roles)

    @pytest.mark.asyncio
    async def test_login_is_case_insensitive_on_username(
        self, make_user, auth_service: AuthService
    ) -> None:
        await make_user("parenta", "11111111111")

        response = await auth_service.login("ParentA", "secret1")

        assert response.user.username == "parenta"

    @pytest.mark.parametrize(
        ("username", "password"),
        [("parenta", "wrong-password"), ("nobody", "secret1")],
    )
    @pytest.mark.asyncio
    async def test_bad_credentials_fail_identically(
        self, make_user, auth_service: AuthService, username: str, password: str
    ) -> None:
        await make_user("parenta", "11111111111")

        with pytest.raises(AuthenticationError) as exc_info:
            await auth_service.login(username, password)

        assert exc_info.value.message == "Invalid username or password"
        assert exc_info.value.status_code == 401


class TestAuthenticate:
    """Test bearer-token verification."""

    @pytest.mark.asyncio
    async def test_authenticate_valid_token(
        self, make_user, auth_service: AuthService
    ) -> None:
        user = await make_user("parenta", "11111111111")
        response = await auth_service.login("parenta", "secret1")

        principal = auth_service.authenticate(response.token)

        assert principal.user_id == user.id

    def test_authenticate_rejects_invalid_token(self, auth_service: AuthService) -> None:
        with pytest.raises(AuthenticationError) as exc_info:
            auth_service.authenticate("not-a-token")

        assert exc_info.value.error_code == ErrorKind.AUTHENTICATION_FAILED

    def test_authenticate_delegates_to_authenticator(self) -> None:
        authenticator = Mock()
        authenticator.verify.return_value = None
        service = AuthService(Mock(), Mock(), authenticator)

        with pytest.raises(AuthenticationError):
            service.authenticate("token")

        authenticator.verify.assert_called_once_with("token")
