"""Application lifecycle: startup and shutdown of shared resources."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from spotmix.application.services.catalog_services import build_catalog_cache
from spotmix.application.services.session_store import SessionStore
from spotmix.application.workers.auto_update_worker import AutoUpdateWorker
from spotmix.config import Settings, get_settings
from spotmix.infrastructure.integrations.spotify_client import SpotifyClient

logger = logging.getLogger(__name__)


# Listen future me, everything before `yield` is STARTUP, everything after is SHUTDOWN.
# Routes reach these objects through app.state (see api/dependencies.py). The
# in-process auto-update worker only runs when the server holds its own refresh
# token (SPOTIFY_REFRESH_TOKEN); otherwise the spotmix-update CLI run from cron
# does that job.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create shared resources on startup, release them on shutdown."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    app.state.settings = settings
    logger.info("Starting application: %s", settings.app_name)

    spotify_client = SpotifyClient(settings.spotify)
    app.state.spotify_client = spotify_client
    app.state.session_store = SessionStore(
        session_timeout_seconds=settings.session_timeout_seconds
    )
    app.state.catalog_cache = build_catalog_cache(settings.cache)

    worker: AutoUpdateWorker | None = None
    if settings.spotify.refresh_token and settings.auto_update.interval_hours > 0:
        worker = AutoUpdateWorker(settings, spotify_client, cache=app.state.catalog_cache)
        await worker.start()
    else:
        logger.info("In-process auto-update worker not started (no refresh token configured)")
    app.state.auto_update_worker = worker

    try:
        yield
    finally:
        logger.info("Shutting down application")
        if worker is not None:
            await worker.stop()
        await spotify_client.close()
