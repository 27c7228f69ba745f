"""Authentication endpoints (Spotify OAuth PKCE + server-side sessions).

Hey future me - two ways to get tokens into a session:
1) /auth/login -> Spotify -> /auth/callback (server-side PKCE, verifier never
   leaves the session), or
2) POST /auth/session with tokens a client-side flow already obtained.
Either way the browser only holds the opaque session_id cookie.
"""

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import RedirectResponse

from spotmix.api.dependencies import (
    SESSION_COOKIE,
    get_app_settings,
    get_current_session,
    get_session_id,
    get_session_store,
    get_spotify_client,
    refresh_session_tokens,
)
from spotmix.api.schemas import AuthStatusResponse, SessionTokensRequest, SuccessResponse
from spotmix.application.services.session_store import Session, SessionStore
from spotmix.config import Settings
from spotmix.infrastructure.integrations.spotify_client import SpotifyClient

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_session_cookie(response: Response, session: Session, settings: Settings) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=session.session_id,
        httponly=True,
        samesite="lax",
        max_age=settings.session_timeout_seconds,
    )


@router.get("/login")
async def login(
    session_store: SessionStore = Depends(get_session_store),
    spotify_client: SpotifyClient = Depends(get_spotify_client),
    settings: Settings = Depends(get_app_settings),
) -> RedirectResponse:
    """Start the OAuth flow and redirect to Spotify."""
    session = session_store.create_session()
    session.oauth_state = secrets.token_urlsafe(16)
    session.code_verifier = spotify_client.generate_code_verifier()

    auth_url = spotify_client.get_authorization_url(session.oauth_state, session.code_verifier)
    response = RedirectResponse(url=auth_url, status_code=307)
    _set_session_cookie(response, session, settings)
    return response


@router.get("/callback", response_model=AuthStatusResponse)
async def callback(
    code: str | None = Query(None),
    state: str | None = Query(None),
    error: str | None = Query(None),
    session: Session | None = Depends(get_current_session),
    spotify_client: SpotifyClient = Depends(get_spotify_client),
) -> AuthStatusResponse:
    """OAuth redirect target: check state, exchange the code, store tokens."""
    if error:
        raise HTTPException(status_code=400, detail=f"Spotify authorization failed: {error}")
    if not code or not state:
        raise HTTPException(status_code=400, detail="Missing code or state")
    if session is None or not session.code_verifier:
        raise HTTPException(status_code=400, detail="No pending login for this session")
    # Constant-time compare; the state is our CSRF token.
    if not session.oauth_state or not secrets.compare_digest(session.oauth_state, state):
        raise HTTPException(status_code=400, detail="Invalid state parameter")

    token_data = await spotify_client.exchange_code(code, session.code_verifier)
    session.set_tokens(
        access_token=token_data["access_token"],
        refresh_token=token_data.get("refresh_token"),
        expires_in=token_data.get("expires_in", 3600),
    )
    session.oauth_state = None
    session.code_verifier = None
    logger.info(f"Spotify login completed for session {session.session_id[:8]}...")
    return AuthStatusResponse(authenticated=True)


@router.post("/session", response_model=SuccessResponse)
async def store_session_tokens(
    body: SessionTokensRequest,
    response: Response,
    session: Session | None = Depends(get_current_session),
    session_store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_app_settings),
) -> SuccessResponse:
    """Store tokens from a client-side OAuth flow in the (new or existing) session."""
    if session is None:
        session = session_store.create_session()
    session.set_tokens(body.access_token, body.refresh_token, body.expires_in)
    _set_session_cookie(response, session, settings)
    return SuccessResponse()


@router.get("/status", response_model=AuthStatusResponse)
async def auth_status(
    session: Session | None = Depends(get_current_session),
    spotify_client: SpotifyClient = Depends(get_spotify_client),
) -> AuthStatusResponse:
    """Report whether the session holds a usable token, refreshing it if it's about to expire."""
    if session is None or not session.access_token or session.token_expires_at is None:
        return AuthStatusResponse(authenticated=False)

    if not session.is_token_expired():
        return AuthStatusResponse(authenticated=True)

    if not session.refresh_token:
        return AuthStatusResponse(authenticated=False)

    try:
        await refresh_session_tokens(session, spotify_client)
    except Exception as e:
        logger.error(f"Token refresh error: {e}")
        return AuthStatusResponse(authenticated=False)
    return AuthStatusResponse(authenticated=True)


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    response: Response,
    session_id: str | None = Depends(get_session_id),
    session_store: SessionStore = Depends(get_session_store),
) -> SuccessResponse:
    """Destroy the session."""
    if session_id:
        await session_store.delete_session(session_id)
    response.delete_cookie(SESSION_COOKIE)
    return SuccessResponse()
