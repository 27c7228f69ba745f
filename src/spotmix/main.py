"""FastAPI application entry point."""

import logging

import uvicorn
from fastapi import FastAPI

from spotmix import __version__
from spotmix.api.exception_handlers import register_exception_handlers
from spotmix.api.routers import api_router, auth, health
from spotmix.config import Settings, get_settings
from spotmix.infrastructure.lifecycle import lifespan
from spotmix.infrastructure.observability import (
    RequestLoggingMiddleware,
    configure_logging,
)

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use instead of the environment (tests)
    """
    settings = settings or get_settings()
    configure_logging(
        log_level=settings.observability.level,
        json_format=settings.observability.json_format,
        app_name=settings.app_name,
    )

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(api_router, prefix="/api")
    return app


def main() -> None:
    """Run the API server (console script `spotmix`)."""
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
