"""HTTP-level fixtures: an app over a fresh in-memory store and auth helpers."""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

from fastapi.testclient import TestClient
import pytest

from campreg.core.config import Settings
from campreg.main import create_app
from campreg.storage.memory_store import InMemoryDocumentStore

API = "/api/v1"


@pytest.fixture
def client(settings: Settings, store: InMemoryDocumentStore) -> Generator[TestClient, None, None]:
    with TestClient(create_app(settings, store=store)) as test_client:
        yield test_client


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Register a user over HTTP and return its token and body."""

    def _register(username: str, amka: str, password: str = "secret1") -> dict[str, Any]:
        response = client.post(
            f"{API}/users",
            json={
                "username": username,
                "password": password,
                "amka": amka,
                "email": f"{username}@example.com",
            },
        )
        assert response.status_code == 201, response.text
        login = client.post(
            f"{API}/auth/login", json={"username": username, "password": password}
        )
        assert login.status_code == 200, login.text
        body = login.json()
        return {
            "id": body["user"]["id"],
            "token": body["token"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
            "user": body["user"],
        }

    return _register


@pytest.fixture
def camper_body() -> Callable[..., dict[str, Any]]:
    def _body(amka: str, **overrides: Any) -> dict[str, Any]:
        body = {
            "fullName": "Nikos Papadopoulos",
            "dateOfBirth": "2015-05-04",
            "amka": amka,
            "visitorType": "Νέος κατασκηνωτής",
            "healthDeclarationAccepted": True,
        }
        body.update(overrides)
        return body

    return _body


@pytest.fixture
def registration_body() -> Callable[..., dict[str, Any]]:
    def _body(camper_id: str, **overrides: Any) -> dict[str, Any]:
        body = {
            "campType": "Η Φωλιά του Παιδιού",
            "campPeriod": "A' (16/6 - 30/6)",
            "camper": camper_id,
            "beneficiary": "Μητέρα",
            "motherName": "Maria Papadopoulou",
            "fatherName": "Giorgos Papadopoulos",
        }
        body.update(overrides)
        return body

    return _body
