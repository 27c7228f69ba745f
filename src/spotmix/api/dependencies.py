"""Dependency injection for API endpoints."""

import logging
from typing import cast

from fastapi import Cookie, Depends, Header, HTTPException, Request

from spotmix.application.cache.spotify_cache import SpotifyCatalogCache
from spotmix.application.services.auto_update_service import AutoUpdateService
from spotmix.application.services.catalog_services import (
    CatalogServices,
    build_catalog_services,
)
from spotmix.application.services.playlist_fill_service import PlaylistFillService
from spotmix.application.services.session_store import Session, SessionStore
from spotmix.application.services.track_aggregator import TrackAggregator
from spotmix.config import Settings
from spotmix.domain.exceptions import TokenRefreshException
from spotmix.infrastructure.integrations.spotify_client import SpotifyClient
from spotmix.infrastructure.plugins.spotify_plugin import SpotifyPlugin

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_id"


# Hey future me - everything long-lived (settings, session store, the shared
# SpotifyClient, the catalog cache) is created in main.py's lifespan and hung on
# app.state. Tests swap them out via app.dependency_overrides.
def get_app_settings(request: Request) -> Settings:
    return cast(Settings, request.app.state.settings)


def get_session_store(request: Request) -> SessionStore:
    """Get the session store from app state.

    Raises:
        HTTPException: 503 if the store is not initialized
    """
    if not hasattr(request.app.state, "session_store"):
        raise HTTPException(status_code=503, detail="Session store not initialized")
    return cast(SessionStore, request.app.state.session_store)


def get_spotify_client(request: Request) -> SpotifyClient:
    """Get the shared SpotifyClient (one httpx connection pool per app)."""
    if not hasattr(request.app.state, "spotify_client"):
        raise HTTPException(status_code=503, detail="Spotify client not initialized")
    return cast(SpotifyClient, request.app.state.spotify_client)


def get_catalog_cache(request: Request) -> SpotifyCatalogCache | None:
    """Catalog cache, or None when caching is disabled."""
    return cast(SpotifyCatalogCache | None, getattr(request.app.state, "catalog_cache", None))


def parse_bearer_token(authorization: str) -> str:
    """Strip an optional (case-insensitive) "Bearer " prefix."""
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    return authorization.strip()


async def get_session_id(
    authorization: str | None = Header(None),
    session_id_cookie: str | None = Cookie(None, alias=SESSION_COOKIE),
) -> str | None:
    """Session ID from "Authorization: Bearer <session_id>" or the session cookie.

    The header wins; a blank header falls back to the cookie.
    """
    if authorization and authorization.strip():
        return parse_bearer_token(authorization)
    return session_id_cookie


async def refresh_session_tokens(session: Session, spotify_client: SpotifyClient) -> str:
    """Refresh the session's access token and store the new tokens on it.

    Spotify may or may not rotate the refresh token; the old one is kept
    when no new one comes back.

    Raises:
        TokenRefreshException: Refresh token rejected
        httpx.HTTPError: Network or unexpected HTTP failure
    """
    if not session.refresh_token:
        raise TokenRefreshException("No refresh token available")

    token_data = await spotify_client.refresh_token(session.refresh_token)
    session.set_tokens(
        access_token=token_data["access_token"],
        refresh_token=token_data.get("refresh_token"),
        expires_in=token_data.get("expires_in", 3600),
    )
    logger.debug(f"Refreshed access token for session {session.session_id[:8]}...")
    return cast(str, token_data["access_token"])


async def get_current_session(
    session_store: SessionStore = Depends(get_session_store),
    session_id: str | None = Depends(get_session_id),
) -> Session | None:
    if not session_id:
        return None
    return await session_store.get_session(session_id)


# Hey future me, THE auth dependency for all /api routes! Returns a token that's
# valid for at least another minute, refreshing it on the way if needed. A dead
# refresh token means the user has to log in again - 401 in every failure case.
async def get_spotify_token_from_session(
    session: Session | None = Depends(get_current_session),
    spotify_client: SpotifyClient = Depends(get_spotify_client),
) -> str:
    """Get a valid Spotify access token from the session.

    Raises:
        HTTPException: 401 if no session/token or the refresh fails
    """
    if session is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    if not session.access_token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    if not session.is_token_expired():
        return session.access_token

    if not session.refresh_token:
        raise HTTPException(status_code=401, detail="Token expired")

    try:
        return await refresh_session_tokens(session, spotify_client)
    except TokenRefreshException as e:
        raise HTTPException(
            status_code=401, detail=f"Token refresh failed. {e.message}"
        ) from e
    except Exception as e:
        logger.warning(f"Token refresh failed for session {session.session_id[:8]}...: {e}")
        raise HTTPException(status_code=401, detail="Token refresh failed") from e


async def get_spotify_plugin(
    access_token: str = Depends(get_spotify_token_from_session),
    spotify_client: SpotifyClient = Depends(get_spotify_client),
) -> SpotifyPlugin:
    """SpotifyPlugin bound to the caller's access token."""
    return SpotifyPlugin(spotify_client, access_token)


async def get_catalog_services(
    plugin: SpotifyPlugin = Depends(get_spotify_plugin),
    cache: SpotifyCatalogCache | None = Depends(get_catalog_cache),
    settings: Settings = Depends(get_app_settings),
) -> CatalogServices:
    return build_catalog_services(
        plugin, cache, album_timeout=settings.spotify.request_timeout
    )


async def get_track_aggregator(
    services: CatalogServices = Depends(get_catalog_services),
) -> TrackAggregator:
    return services.aggregator


async def get_fill_service(
    services: CatalogServices = Depends(get_catalog_services),
) -> PlaylistFillService:
    return services.fill_service


async def get_auto_update_service(
    services: CatalogServices = Depends(get_catalog_services),
) -> AutoUpdateService:
    return services.auto_update
