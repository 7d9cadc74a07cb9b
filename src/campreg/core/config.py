"""Camp registration backend - Configuration Management.

Environment-based configuration using Pydantic settings for development,
testing and production deployments.
"""

from functools import lru_cache
import logging
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

# Configure logger
logger = logging.getLogger(__name__)

DEV_SECRET_KEY = "dev-secret-key"  # noqa: S105
STORAGE_BACKENDS = ("memory", "dynamodb")


class Settings(BaseSettings):
    """Application settings with secure defaults and validation."""

    # Environment settings
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    testing: bool = Field(default=False, alias="TESTING")

    # Security settings
    secret_key: str = Field(default=DEV_SECRET_KEY, alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    token_ttl_hours: int = Field(default=24, alias="TOKEN_TTL_HOURS", gt=0)
    bcrypt_rounds: int = Field(default=12, alias="BCRYPT_ROUNDS", ge=4, le=31)

    # Server settings
    host: str = Field(default="127.0.0.1", alias="HOST")
    port: int = Field(default=8080, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        alias="CORS_ORIGINS",
    )

    # Storage settings
    storage_backend: str = Field(default="memory", alias="STORAGE_BACKEND")
    dynamodb_region: str = Field(default="us-east-1", alias="DYNAMODB_REGION")
    dynamodb_endpoint_url: str | None = Field(
        default=None, alias="DYNAMODB_ENDPOINT_URL"
    )
    dynamodb_table_prefix: str = Field(
        default="campreg", alias="DYNAMODB_TABLE_PREFIX"
    )

    # Application settings
    app_name: str = "Camp Registration API"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def validate_environment_requirements(self) -> Self:
        """Validate environment-specific requirements."""
        if self.storage_backend not in STORAGE_BACKENDS:
            msg = (
                f"Unknown storage backend {self.storage_backend!r}; "
                f"expected one of {', '.join(STORAGE_BACKENDS)}"
            )
            raise ValueError(msg)

        if self.is_production() and self.secret_key == DEV_SECRET_KEY:
            msg = "SECRET_KEY must be set in production"
            raise ValueError(msg)

        if self.is_development() and self.secret_key == DEV_SECRET_KEY:
            logger.warning("Using development secret key for token signing")

        return self

    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def is_testing(self) -> bool:
        return self.testing or self.environment.lower() == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
