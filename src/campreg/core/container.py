"""Dependency container wiring adapters and services together."""

from __future__ import annotations

import asyncio
from datetime import timedelta
import logging

from campreg.auth.access_control import AccessControlGuard
from campreg.auth.jwt_authenticator import JWTAuthenticator
from campreg.auth.password import BcryptPasswordHasher
from campreg.core.config import Settings
from campreg.ports.storage import DocumentStorePort
from campreg.services.auth_service import AuthService
from campreg.services.camper_service import CamperService
from campreg.services.registration_service import RegistrationService
from campreg.services.role_service import RoleService
from campreg.services.user_service import UserService
from campreg.storage.memory_store import InMemoryDocumentStore

logger = logging.getLogger(__name__)


def create_store(settings: Settings) -> DocumentStorePort:
    """Build the document store selected by ``STORAGE_BACKEND``."""
    if settings.storage_backend == "dynamodb":
        from campreg.storage.dynamodb_store import DynamoDBDocumentStore  # noqa: PLC0415

        logger.info(
            "Using DynamoDB storage (prefix %s, region %s)",
            settings.dynamodb_table_prefix,
            settings.dynamodb_region,
        )
        return DynamoDBDocumentStore(
            table_prefix=settings.dynamodb_table_prefix,
            region=settings.dynamodb_region,
            endpoint_url=settings.dynamodb_endpoint_url,
        )

    logger.info("Using in-memory storage")
    return InMemoryDocumentStore()


class ServiceContainer:
    """Holds one instance of every adapter and service for an application."""

    def __init__(self, settings: Settings, store: DocumentStorePort | None = None) -> None:
        self.settings = settings
        self.store = store if store is not None else create_store(settings)

        self.password_hasher = BcryptPasswordHasher(rounds=settings.bcrypt_rounds)
        self.authenticator = JWTAuthenticator(
            secret_key=settings.secret_key,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(hours=settings.token_ttl_hours),
        )
        self.guard = AccessControlGuard(self.store)

        self.role_service = RoleService(self.store)
        self.user_service = UserService(
            self.store, self.password_hasher, self.role_service
        )
        self.auth_service = AuthService(
            self.user_service, self.password_hasher, self.authenticator
        )
        self.camper_service = CamperService(self.store)
        self.registration_service = RegistrationService(self.store)

    async def startup(self) -> None:
        """Prepare storage and seed the default roles."""
        ensure_tables = getattr(self.store, "ensure_tables", None)
        if ensure_tables is not None and not self.settings.is_production():
            await asyncio.get_event_loop().run_in_executor(None, ensure_tables)

        roles = await self.role_service.seed_default_roles()
        logger.info("Seeded roles: %s", ", ".join(role.name for role in roles))
