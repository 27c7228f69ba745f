"""Fixtures for API tests: real app, fake Spotify client, in-memory sessions."""

import logging
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from spotmix.api.dependencies import get_session_store, get_spotify_client
from spotmix.application.services.session_store import Session, SessionStore
from spotmix.config import AutoUpdateSettings, CacheSettings, Settings, SpotifySettings
from spotmix.infrastructure.integrations.spotify_client import SpotifyClient
from spotmix.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(
        spotify=SpotifySettings(client_id="cid", client_secret="secret"),
        cache=CacheSettings(enabled=False),
        auto_update=AutoUpdateSettings(interval_hours=0),
    )


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def spotify_client() -> AsyncMock:
    client = AsyncMock(spec=SpotifyClient)
    client.MAX_TRACKS_PER_REQUEST = 100
    return client


@pytest.fixture
def app(settings: Settings, session_store: SessionStore, spotify_client: AsyncMock) -> FastAPI:
    root = logging.getLogger()
    handlers = root.handlers[:]
    app = create_app(settings)
    root.handlers[:] = handlers
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_spotify_client] = lambda: spotify_client
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def session(session_store: SessionStore) -> Session:
    """Logged-in session with a valid access token."""
    session = session_store.create_session()
    session.set_tokens("access-token", "refresh-token", expires_in=3600)
    return session


@pytest.fixture
def auth_headers(session: Session) -> dict[str, str]:
    return {"Authorization": f"Bearer {session.session_id}"}
