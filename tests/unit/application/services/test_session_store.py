"""Unit tests for the in-memory session store."""

from datetime import UTC, datetime, timedelta

import pytest

from spotmix.application.services.session_store import Session, SessionStore


class TestSession:
    def test_new_session_is_not_authenticated(self) -> None:
        session = Session(session_id="s1")

        assert session.is_token_expired() is True
        assert session.is_authenticated() is False

    def test_set_tokens(self) -> None:
        session = Session(session_id="s1")

        session.set_tokens("access", "refresh", expires_in=3600)

        assert session.access_token == "access"
        assert session.refresh_token == "refresh"
        assert session.is_authenticated() is True

    def test_set_tokens_keeps_refresh_token_when_not_rotated(self) -> None:
        session = Session(session_id="s1")
        session.set_tokens("a1", "r1", expires_in=3600)

        session.set_tokens("a2", None, expires_in=3600)

        assert session.access_token == "a2"
        assert session.refresh_token == "r1"

    def test_token_inside_expiry_buffer_counts_as_expired(self) -> None:
        session = Session(session_id="s1")
        session.set_tokens("access", "refresh", expires_in=30)

        assert session.is_token_expired() is True

    def test_token_outside_expiry_buffer_is_valid(self) -> None:
        session = Session(session_id="s1")
        session.set_tokens("access", "refresh", expires_in=120)

        assert session.is_token_expired() is False


class TestSessionStore:
    @pytest.fixture
    def store(self) -> SessionStore:
        return SessionStore(session_timeout_seconds=60)

    async def test_create_and_get(self, store: SessionStore) -> None:
        session = store.create_session()

        assert await store.get_session(session.session_id) is session

    async def test_unknown_session(self, store: SessionStore) -> None:
        assert await store.get_session("unknown") is None

    async def test_session_ids_are_unique(self, store: SessionStore) -> None:
        ids = {store.create_session().session_id for _ in range(20)}
        assert len(ids) == 20

    async def test_idle_session_times_out(self, store: SessionStore) -> None:
        session = store.create_session()
        session.last_accessed_at = datetime.now(UTC) - timedelta(seconds=61)

        assert await store.get_session(session.session_id) is None
        assert await store.get_session(session.session_id) is None

    async def test_get_touches_session(self, store: SessionStore) -> None:
        session = store.create_session()
        stale = datetime.now(UTC) - timedelta(seconds=30)
        session.last_accessed_at = stale

        await store.get_session(session.session_id)

        assert session.last_accessed_at > stale

    async def test_delete(self, store: SessionStore) -> None:
        session = store.create_session()

        assert await store.delete_session(session.session_id) is True
        assert await store.delete_session(session.session_id) is False
        assert await store.get_session(session.session_id) is None

    async def test_cleanup_expired(self, store: SessionStore) -> None:
        old = store.create_session()
        old.last_accessed_at = datetime.now(UTC) - timedelta(hours=1)
        fresh = store.create_session()

        assert await store.cleanup_expired() == 1
        assert await store.get_session(fresh.session_id) is fresh
