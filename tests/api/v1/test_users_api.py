"""HTTP tests for authentication, user and role endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from campreg.core.config import Settings
from campreg.main import create_app
from campreg.storage.memory_store import InMemoryDocumentStore

API = "/api/v1"


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestUserRegistration:
    def test_first_user_is_admin(self, client: TestClient, register) -> None:
        admin = register("parenta", "11111111111")
        reader = register("parentb", "33333333333")

        assert [r["name"] for r in admin["user"]["roles"]] == ["ADMIN"]
        assert [r["name"] for r in reader["user"]["roles"]] == ["READER"]
        assert "passwordHash" not in admin["user"]
        assert "password" not in admin["user"]

    def test_duplicate_username(self, client: TestClient, register) -> None:
        register("parenta", "11111111111")

        response = client.post(
            f"{API}/users",
            json={"username": "ParentA", "password": "secret1", "amka": "33333333333"},
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_USERNAME"

    def test_duplicate_amka(self, client: TestClient, register) -> None:
        register("parenta", "11111111111")

        response = client.post(
            f"{API}/users",
            json={"username": "parentb", "password": "secret1", "amka": "11111111111"},
        )

        assert response.status_code == 409
        assert response.json() == {
            "detail": "User with this AMKA already exists",
            "error_code": "DUPLICATE_AMKA",
        }

    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "parenta", "password": "secret1", "amka": "123"},
            {"username": "pa", "password": "secret1", "amka": "11111111111"},
            {"username": "parenta", "password": "1234", "amka": "11111111111"},
            {"username": "parenta", "password": "secret1", "amka": "11111111111", "email": "nope"},
            {"username": "parenta", "password": "secret1", "amka": " 11111111111 "},
        ],
    )
    def test_invalid_payload_is_invalid_format(self, client: TestClient, payload) -> None:
        response = client.post(f"{API}/users", json=payload)

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_FORMAT"

    def test_check_amka(self, client: TestClient, register) -> None:
        register("parenta", "11111111111")

        taken = client.post(f"{API}/users/check-amka", json={"amka": "11111111111"})
        malformed = client.post(f"{API}/users/check-amka", json={"amka": "11"})

        assert taken.status_code == 200
        assert taken.json() == {"available": False, "message": "AMKA already registered"}
        assert malformed.status_code == 400
        assert malformed.json()["error_code"] == "INVALID_FORMAT"


class TestLogin:
    def test_wrong_password(self, client: TestClient, register) -> None:
        register("parenta", "11111111111")

        response = client.post(
            f"{API}/auth/login", json={"username": "parenta", "password": "wrong1"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTHENTICATION_FAILED"
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.parametrize(
        "headers",
        [{}, {"Authorization": "Bearer not-a-token"}, {"Authorization": "Basic abc"}],
    )
    def test_protected_route_requires_valid_token(
        self, client: TestClient, headers
    ) -> None:
        response = client.get(f"{API}/campers", headers=headers)

        assert response.status_code == 401


class TestUserAccess:
    def test_admin_lists_users_reader_cannot(self, client: TestClient, register) -> None:
        admin = register("parenta", "11111111111")
        reader = register("parentb", "33333333333")

        admin_response = client.get(f"{API}/users", headers=admin["headers"])
        reader_response = client.get(f"{API}/users", headers=reader["headers"])

        assert admin_response.status_code == 200
        assert len(admin_response.json()) == 2
        assert reader_response.status_code == 403
        assert reader_response.json()["error_code"] == "ACCESS_DENIED"

    def test_reader_reads_and_updates_only_self(
        self, client: TestClient, register
    ) -> None:
        admin = register("parenta", "11111111111")
        reader = register("parentb", "33333333333")

        own = client.put(
            f"{API}/users/{reader['id']}",
            json={"firstname": "Eleni"},
            headers=reader["headers"],
        )
        other = client.get(f"{API}/users/{admin['id']}", headers=reader["headers"])
        by_admin = client.get(f"{API}/users/{reader['id']}", headers=admin["headers"])

        assert own.status_code == 200
        assert own.json()["firstname"] == "Eleni"
        assert other.status_code == 403
        assert by_admin.status_code == 200

    def test_unknown_user_is_not_found_for_reader(
        self, client: TestClient, register
    ) -> None:
        register("parenta", "11111111111")
        reader = register("parentb", "33333333333")

        read = client.get(f"{API}/users/doesnotexist", headers=reader["headers"])
        update = client.put(
            f"{API}/users/doesnotexist",
            json={"firstname": "Eleni"},
            headers=reader["headers"],
        )

        assert read.status_code == 404
        assert read.json()["error_code"] == "NOT_FOUND"
        assert update.status_code == 404
        assert update.json()["error_code"] == "NOT_FOUND"

    def test_admin_deletes_user(self, client: TestClient, register) -> None:
        admin = register("parenta", "11111111111")
        reader = register("parentb", "33333333333")

        deleted = client.delete(f"{API}/users/{reader['id']}", headers=admin["headers"])
        missing = client.get(f"{API}/users/{reader['id']}", headers=admin["headers"])

        assert deleted.status_code == 200
        assert missing.status_code == 404
        assert missing.json()["error_code"] == "NOT_FOUND"

    def test_deleted_user_token_is_rejected(self, client: TestClient, register) -> None:
        admin = register("parenta", "11111111111")
        reader = register("parentb", "33333333333")
        client.delete(f"{API}/users/{reader['id']}", headers=admin["headers"])

        response = client.get(f"{API}/users/{reader['id']}", headers=reader["headers"])

        assert response.status_code == 401

    def test_roles_listing_is_admin_only(self, client: TestClient, register) -> None:
        admin = register("parenta", "11111111111")
        reader = register("parentb", "33333333333")

        roles = client.get(f"{API}/roles", headers=admin["headers"])

        assert sorted(r["name"] for r in roles.json()) == ["ADMIN", "READER"]
        assert client.get(f"{API}/roles", headers=reader["headers"]).status_code == 403


class TestUnexpectedErrors:
    def test_unexpected_error_returns_500(
        self, settings: Settings, store: InMemoryDocumentStore, monkeypatch
    ) -> None:
        app = create_app(settings, store=store)

        async def explode(*args, **kwargs):
            raise RuntimeError("database on fire")

        monkeypatch.setattr(app.state.container.user_service, "create_user", explode)

        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.post(
                f"{API}/users",
                json={"username": "parenta", "password": "secret1", "amka": "11111111111"},
            )

        assert response.status_code == 500
        assert response.json() == {"detail": "Internal server error"}
