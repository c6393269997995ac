"""
FastAPI application factory.

Creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config import get_settings

from .dependencies import get_container
from .errors import register_exception_handlers
from .routes import auth, health, usage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Starts the session expiry sweeper and stops it on shutdown.
    """
    container = get_container()
    settings = container.settings
    logger.info(
        "Starting %s on %s:%s (storage=%s)",
        settings.app_name,
        settings.host,
        settings.port,
        settings.storage_backend,
    )
    # Build the token service now so a missing secret is reported at startup
    container.tokens
    container.sweeper.start()
    yield
    await container.sweeper.stop()
    logger.info("Shutting down %s", settings.app_name)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Authentication, session and quota enforcement API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url="/api/redoc" if settings.debug else None,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

    register_exception_handlers(app)

    # Register routes
    app.include_router(health.router, prefix="/api", tags=["health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(usage.router, prefix="/api/usage", tags=["usage"])

    return app


# Application instance for uvicorn
app = create_app()
