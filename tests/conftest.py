"""Shared test fixtures for the camp registration test suite.

Every test gets a fresh in-memory store and services wired to it. Password
hashing uses the minimum bcrypt cost so registration-heavy tests stay fast.
"""

from __future__ import annotations

from datetime import date
import os
from typing import Any

import pytest

from campreg.auth.access_control import AccessControlGuard
from campreg.auth.jwt_authenticator import JWTAuthenticator
from campreg.auth.password import BcryptPasswordHasher
from campreg.core.config import Settings
from campreg.models.camper import CamperCreate, CamperView
from campreg.models.enums import Beneficiary, CampPeriod, CampType, VisitorType
from campreg.models.registration import RegistrationCreate
from campreg.models.user import UserCreate, UserPublic
from campreg.services.auth_service import AuthService
from campreg.services.camper_service import CamperService
from campreg.services.registration_service import RegistrationService
from campreg.services.role_service import RoleService
from campreg.services.user_service import UserService
from campreg.storage.memory_store import InMemoryDocumentStore

# Set testing environment
os.environ["TESTING"] = "1"
os.environ["ENVIRONMENT"] = "testing"

TEST_SECRET_KEY = "test-secret-key-for-campreg-tests"  # noqa: S105


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="testing",
        testing=True,
        secret_key=TEST_SECRET_KEY,
        bcrypt_rounds=4,
        storage_backend="memory",
    )


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def authenticator() -> JWTAuthenticator:
    return JWTAuthenticator(secret_key=TEST_SECRET_KEY)


@pytest.fixture
def role_service(store: InMemoryDocumentStore) -> RoleService:
    return RoleService(store)


@pytest.fixture
def user_service(
    store: InMemoryDocumentStore,
    password_hasher: BcryptPasswordHasher,
    role_service: RoleService,
) -> UserService:
    return UserService(store, password_hasher, role_service)


@pytest.fixture
def auth_service(
    user_service: UserService,
    password_hasher: BcryptPasswordHasher,
    authenticator: JWTAuthenticator,
) -> AuthService:
    return AuthService(user_service, password_hasher, authenticator)


@pytest.fixture
def camper_service(store: InMemoryDocumentStore) -> CamperService:
    return CamperService(store)


@pytest.fixture
def registration_service(store: InMemoryDocumentStore) -> RegistrationService:
    return RegistrationService(store)


@pytest.fixture
def guard(store: InMemoryDocumentStore) -> AccessControlGuard:
    return AccessControlGuard(store)


# --- Payload builders ---


def _user_payload(username: str, amka: str, **overrides: Any) -> UserCreate:
    data: dict[str, Any] = {
        "username": username,
        "password": "secret1",
        "amka": amka,
        "firstname": username.capitalize(),
        "lastname": "Papadopoulou",
        "email": f"{username}@example.com",
    }
    data.update(overrides)
    return UserCreate(**data)


def _camper_payload(amka: str, **overrides: Any) -> CamperCreate:
    data: dict[str, Any] = {
        "full_name": "Nikos Papadopoulos",
        "date_of_birth": date(2015, 5, 4),
        "amka": amka,
        "visitor_type": VisitorType.NEW,
        "health_declaration_accepted": True,
    }
    data.update(overrides)
    return CamperCreate(**data)


def _registration_payload(
    camper_id: str | None,
    user_id: str | None,
    camp_type: CampType | None = CampType.NEST,
    camp_period: CampPeriod | None = CampPeriod.A,
    **overrides: Any,
) -> RegistrationCreate:
    data: dict[str, Any] = {
        "camp_type": camp_type,
        "camp_period": camp_period,
        "camper": camper_id,
        "user": user_id,
        "beneficiary": Beneficiary.MOTHER,
        "mother_name": "Maria Papadopoulou",
        "father_name": "Giorgos Papadopoulos",
    }
    data.update(overrides)
    return RegistrationCreate(**data)


@pytest.fixture
def make_user(user_service: UserService):
    """Register a user through the identity service."""

    async def _make(username: str, amka: str, **overrides: Any) -> UserPublic:
        return await user_service.create_user(_user_payload(username, amka, **overrides))

    return _make


@pytest.fixture
def make_camper(camper_service: CamperService):
    """Create a camper owned by ``owner_id``."""

    async def _make(owner_id: str, amka: str, **overrides: Any) -> CamperView:
        return await camper_service.create_camper(_camper_payload(amka, **overrides), owner_id)

    return _make


@pytest.fixture
def build_user():
    return _user_payload


@pytest.fixture
def build_camper():
    return _camper_payload


@pytest.fixture
def build_registration():
    return _registration_payload
