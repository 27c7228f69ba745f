"""Server-side session store for Spotify tokens.

Hey future me - the browser only ever gets an opaque session_id cookie; the
access/refresh tokens and the PKCE verifier stay here. This store is in-memory,
so a restart logs everybody out. That's acceptable for a single-user tool.
"""

import asyncio
import logging
import secrets
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

logger = logging.getLogger(__name__)

# Tokens are treated as expired this long before Spotify would reject them.
TOKEN_EXPIRY_BUFFER = timedelta(seconds=60)


@dataclass
class Session:
    """One browser session."""

    session_id: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    last_accessed_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    access_token: str | None = None
    refresh_token: str | None = None
    token_expires_at: datetime | None = None
    oauth_state: str | None = None
    code_verifier: str | None = None

    def set_tokens(
        self, access_token: str, refresh_token: str | None, expires_in: int
    ) -> None:
        """Store a token response (refresh token kept if none is given)."""
        self.access_token = access_token
        if refresh_token:
            self.refresh_token = refresh_token
        self.token_expires_at = datetime.now(UTC) + timedelta(seconds=expires_in)

    def is_token_expired(self) -> bool:
        """True if the access token is missing or about to expire."""
        if not self.access_token or self.token_expires_at is None:
            return True
        return datetime.now(UTC) >= self.token_expires_at - TOKEN_EXPIRY_BUFFER

    def is_authenticated(self) -> bool:
        return self.access_token is not None and not self.is_token_expired()

    def touch(self) -> None:
        self.last_accessed_at = datetime.now(UTC)


class SessionStore:
    """In-memory session store with idle timeout."""

    def __init__(self, session_timeout_seconds: int = 3600) -> None:
        self.session_timeout = timedelta(seconds=session_timeout_seconds)
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()

    def create_session(self) -> Session:
        """Create and register a new session."""
        session = Session(session_id=secrets.token_urlsafe(32))
        self._sessions[session.session_id] = session
        return session

    async def get_session(self, session_id: str) -> Session | None:
        """Get a live session, dropping it if it timed out."""
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None

            if datetime.now(UTC) - session.last_accessed_at > self.session_timeout:
                del self._sessions[session_id]
                logger.debug(f"Session {session_id[:8]}... timed out")
                return None

            session.touch()
            return session

    async def delete_session(self, session_id: str) -> bool:
        """Destroy a session."""
        async with self._lock:
            return self._sessions.pop(session_id, None) is not None

    async def cleanup_expired(self) -> int:
        """Remove timed-out sessions."""
        now = datetime.now(UTC)
        async with self._lock:
            expired = [
                sid
                for sid, session in self._sessions.items()
                if now - session.last_accessed_at > self.session_timeout
            ]
            for sid in expired:
                del self._sessions[sid]
            return len(expired)
