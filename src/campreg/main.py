"""Camp registration backend - Application entry point.

Builds the FastAPI application around a ``ServiceContainer``. The lifespan
configures logging and seeds the default roles before requests are served.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campreg import __version__
from campreg.api.v1.errors import register_exception_handlers
from campreg.api.v1.router import api_router
from campreg.core.config import Settings, get_settings
from campreg.core.container import ServiceContainer
from campreg.core.logging_config import setup_logging
from campreg.ports.storage import DocumentStorePort

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    container: ServiceContainer = app.state.container
    setup_logging(container.settings)
    logger.info(
        "Starting %s in %s mode",
        container.settings.app_name,
        container.settings.environment,
    )

    try:
        await container.startup()
    except Exception:
        logger.exception("Startup failed")
        raise

    logger.info("✅ Camp registration backend started successfully")

    yield

    logger.info("Shutting down camp registration backend...")


def create_app(
    settings: Settings | None = None, store: DocumentStorePort | None = None
) -> FastAPI:
    """Create the application; ``store`` overrides the configured backend."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Summer-camp registration: parents, campers and enrolments.",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.container = ServiceContainer(settings, store=store)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=86400,
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health_check() -> dict[str, Any]:
        """Liveness probe."""
        return {
            "status": "healthy",
            "service": "campreg",
            "version": __version__,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        create_app(_settings),
        host=_settings.host,
        port=_settings.port,
        log_level=_settings.log_level.lower(),
    )
