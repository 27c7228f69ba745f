"""Spotify HTTP client implementation with OAuth PKCE."""

import base64
import hashlib
import logging
import secrets
from typing import Any, cast
from urllib.parse import urlencode

import httpx

from spotmix.config.settings import SpotifySettings
from spotmix.domain.exceptions import ConfigurationError, TokenRefreshException

logger = logging.getLogger(__name__)


class SpotifyClient:
    """HTTP client for Spotify API operations with OAuth PKCE.

    Every API method takes the access token explicitly - this class holds
    credentials from settings but never user tokens. SpotifyPlugin binds a
    token for the core.
    """

    AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
    TOKEN_URL = "https://accounts.spotify.com/api/token"  # nosec B105 - public endpoint URL, not a password
    API_BASE_URL = "https://api.spotify.com/v1"

    # Spotify rejects playlist mutations with more than 100 URIs in one body.
    MAX_TRACKS_PER_REQUEST = 100

    SCOPES = (
        "playlist-read-private",
        "playlist-read-collaborative",
        "playlist-modify-private",
        "playlist-modify-public",
        "user-follow-read",
        "user-read-private",
        "user-read-email",
    )

    # Hey future me, the HTTP client is created lazily in _get_client() - creating an
    # httpx.AsyncClient outside a running loop gives weird asyncio issues.
    def __init__(self, settings: SpotifySettings) -> None:
        """
        Initialize Spotify client.

        Args:
            settings: Spotify configuration settings
        """
        self.settings = settings
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.request_timeout)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # Hey future me - ALL Web API calls go through here. No retries, no rate limiting: a failed
    # call is reported to the caller and the caller decides (the aggregator just drops that album).
    async def _api_request(
        self,
        method: str,
        url: str,
        access_token: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Make an authenticated API request.

        Args:
            method: HTTP method (GET, POST, PUT)
            url: Full URL to request
            access_token: OAuth access token
            params: Query parameters
            json: JSON body

        Returns:
            httpx.Response object (status not checked)
        """
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {access_token}"}

        response = await client.request(
            method=method,
            url=url,
            params=params,
            json=json,
            headers=headers,
        )
        if response.status_code >= 400:
            logger.warning(
                f"Spotify API {method} {url} -> {response.status_code}",
                extra={"status_code": response.status_code, "url": url},
            )
        return response

    # =========================================================================
    # OAUTH (PKCE)
    # =========================================================================

    # The verifier MUST stay server-side (session) - never log it or put it in a URL.
    @staticmethod
    def generate_code_verifier() -> str:
        """
        Generate a PKCE code verifier.

        Returns:
            Random code verifier string
        """
        return (
            base64.urlsafe_b64encode(secrets.token_bytes(32))
            .decode("utf-8")
            .rstrip("=")
        )

    @staticmethod
    def generate_code_challenge(code_verifier: str) -> str:
        """
        Generate a PKCE code challenge from verifier.

        Args:
            code_verifier: Code verifier string

        Returns:
            SHA256 hash of code verifier as base64 URL-safe string
        """
        digest = hashlib.sha256(code_verifier.encode("utf-8")).digest()
        return base64.urlsafe_b64encode(digest).decode("utf-8").rstrip("=")

    def get_authorization_url(self, state: str, code_verifier: str) -> str:
        """
        Generate Spotify OAuth authorization URL.

        Args:
            state: State parameter for CSRF protection
            code_verifier: PKCE code verifier

        Returns:
            Authorization URL

        Raises:
            ConfigurationError: If client_id or redirect_uri is not configured
        """
        if not self.settings.client_id or not self.settings.client_id.strip():
            raise ConfigurationError(
                "SPOTIFY_CLIENT_ID is not configured. "
                "Get credentials at https://developer.spotify.com/dashboard"
            )
        if not self.settings.redirect_uri or not self.settings.redirect_uri.strip():
            raise ConfigurationError(
                "SPOTIFY_REDIRECT_URI is not configured. "
                "Set it to match your callback URL (e.g., http://localhost:8000/auth/callback)"
            )

        params = {
            "client_id": self.settings.client_id,
            "response_type": "code",
            "redirect_uri": self.settings.redirect_uri,
            "state": state,
            "code_challenge_method": "S256",
            "code_challenge": self.generate_code_challenge(code_verifier),
            "scope": " ".join(self.SCOPES),
        }

        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    # Yo future me, the code is single-use and expires after ~10 minutes. redirect_uri MUST match
    # the one from get_authorization_url() exactly. Body has to be form-urlencoded, not JSON.
    async def exchange_code(self, code: str, code_verifier: str) -> dict[str, Any]:
        """
        Exchange authorization code for access token.

        Args:
            code: Authorization code
            code_verifier: PKCE code verifier

        Returns:
            Token response with access_token, refresh_token, expires_in

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        client = await self._get_client()

        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.settings.redirect_uri,
            "client_id": self.settings.client_id,
            "code_verifier": code_verifier,
        }

        response = await client.post(
            self.TOKEN_URL,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    # Hey future me - the browser flow is a public PKCE client (client_id only). The scheduled job
    # holds a refresh token that was issued to the confidential client, so it authenticates with
    # HTTP Basic (client_id:client_secret). use_client_secret picks between the two.
    async def refresh_token(
        self, refresh_token: str, use_client_secret: bool = False
    ) -> dict[str, Any]:
        """
        Refresh access token using refresh token.

        Args:
            refresh_token: Refresh token from previous authentication
            use_client_secret: Authenticate with client_id:client_secret (Basic auth)

        Returns:
            Token response with access_token, expires_in and maybe a rotated refresh_token

        Raises:
            TokenRefreshException: If refresh token is invalid/revoked (requires re-auth)
            ConfigurationError: If use_client_secret is set but no secret is configured
            httpx.HTTPStatusError: For other HTTP errors
        """
        client = await self._get_client()

        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self.settings.client_id,
        }
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

        if use_client_secret:
            if not self.settings.client_secret:
                raise ConfigurationError("SPOTIFY_CLIENT_SECRET is not configured")
            basic = base64.b64encode(
                f"{self.settings.client_id}:{self.settings.client_secret}".encode()
            ).decode("ascii")
            headers["Authorization"] = f"Basic {basic}"

        response = await client.post(self.TOKEN_URL, data=data, headers=headers)

        # Spotify answers 400 {"error": "invalid_grant"} for a revoked refresh token.
        if response.status_code == 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {}
            if error_data.get("error") == "invalid_grant":
                description = error_data.get(
                    "error_description", "Refresh token is invalid or has been revoked"
                )
                raise TokenRefreshException(
                    message=f"Refresh token invalid: {description}. Please re-authenticate with Spotify.",
                    error_code="invalid_grant",
                    http_status=400,
                )

        if response.status_code in (401, 403):
            raise TokenRefreshException(
                message="Spotify access denied. Please re-authenticate with Spotify.",
                error_code="access_denied",
                http_status=response.status_code,
            )

        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    # =========================================================================
    # USER / BROWSING
    # =========================================================================

    async def get_current_user(self, access_token: str) -> dict[str, Any]:
        """Get the current user's profile."""
        response = await self._api_request(
            method="GET",
            url=f"{self.API_BASE_URL}/me",
            access_token=access_token,
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    async def get_user_playlists(
        self, access_token: str, limit: int = 50, offset: int = 0
    ) -> dict[str, Any]:
        """
        Get current user's playlists.

        Args:
            access_token: OAuth access token
            limit: Maximum number of playlists to return (1-50, default 50)
            offset: The index of the first playlist to return

        Returns:
            Paging object with items, total, next

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        limit = min(limit, 50)

        response = await self._api_request(
            method="GET",
            url=f"{self.API_BASE_URL}/me/playlists",
            access_token=access_token,
            params={"limit": limit, "offset": offset},
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    async def get_playlist(self, playlist_id: str, access_token: str) -> dict[str, Any]:
        """
        Get playlist details.

        Args:
            playlist_id: Spotify playlist ID
            access_token: OAuth access token

        Returns:
            Playlist object (name, description, tracks.total, ...)

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        response = await self._api_request(
            method="GET",
            url=f"{self.API_BASE_URL}/playlists/{playlist_id}",
            access_token=access_token,
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    # Hey future me, /me/following uses CURSOR paging ("after" = last artist ID of the previous
    # page), not offsets. We flatten the nested "artists" object into items/next/total.
    async def get_followed_artists(
        self, access_token: str, limit: int = 50, after: str | None = None
    ) -> dict[str, Any]:
        """
        Get current user's followed artists.

        Args:
            access_token: OAuth access token
            limit: Maximum number of artists to return (1-50, default 50)
            after: The last artist ID retrieved from previous page

        Returns:
            Dict with items (artist objects), next (cursor or None), total

        Raises:
            httpx.HTTPStatusError: If the request fails (403 without user-follow-read)
        """
        limit = min(limit, 50)

        params: dict[str, str | int] = {
            "type": "artist",
            "limit": limit,
        }
        if after:
            params["after"] = after

        response = await self._api_request(
            method="GET",
            url=f"{self.API_BASE_URL}/me/following",
            access_token=access_token,
            params=params,
        )
        response.raise_for_status()
        artists = cast(dict[str, Any], response.json()).get("artists") or {}

        return {
            "items": artists.get("items") or [],
            "next": (artists.get("cursors") or {}).get("after"),
            "total": artists.get("total", 0),
        }

    # =========================================================================
    # CATALOG LISTINGS
    # =========================================================================

    async def get_artist_albums_page(
        self, artist_id: str, access_token: str, limit: int = 20, offset: int = 0
    ) -> dict[str, Any]:
        """
        Get one page of an artist's albums.

        Args:
            artist_id: Spotify artist ID
            access_token: OAuth access token
            limit: Page size
            offset: Index of the first album

        Returns:
            Paging object with items, total, limit, offset, next

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        response = await self._api_request(
            method="GET",
            url=f"{self.API_BASE_URL}/artists/{artist_id}/albums",
            access_token=access_token,
            params={"limit": limit, "offset": offset},
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    async def get_album_tracks(
        self, album_id: str, access_token: str, limit: int = 30, offset: int = 0
    ) -> dict[str, Any]:
        """
        Get one page of an album's tracks.

        Args:
            album_id: Spotify album ID
            access_token: OAuth access token
            limit: Page size
            offset: Index of the first track

        Returns:
            Paging object with items (simplified tracks), total, next

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        response = await self._api_request(
            method="GET",
            url=f"{self.API_BASE_URL}/albums/{album_id}/tracks",
            access_token=access_token,
            params={"limit": limit, "offset": offset},
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    # =========================================================================
    # PLAYLIST MUTATIONS
    # =========================================================================

    async def create_playlist(
        self,
        user_id: str,
        name: str,
        access_token: str,
        description: str = "",
        public: bool = False,
    ) -> dict[str, Any]:
        """
        Create a playlist for a user.

        Returns:
            Created playlist object

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        response = await self._api_request(
            method="POST",
            url=f"{self.API_BASE_URL}/users/{user_id}/playlists",
            access_token=access_token,
            json={"name": name, "description": description, "public": public},
        )
        response.raise_for_status()
        return cast(dict[str, Any], response.json())

    @classmethod
    def chunk_uris(cls, track_uris: list[str]) -> list[list[str]]:
        """Split URIs into request-sized batches."""
        size = cls.MAX_TRACKS_PER_REQUEST
        return [track_uris[i : i + size] for i in range(0, len(track_uris), size)]

    # Hey future me - chunks go out SEQUENTIALLY, not in parallel. Parallel POSTs to the same
    # playlist land in random order and Spotify answers with snapshot conflicts now and then.
    async def add_tracks_to_playlist(
        self, playlist_id: str, track_uris: list[str], access_token: str
    ) -> None:
        """
        Append tracks to a playlist in batches of at most 100 URIs.

        Raises:
            httpx.HTTPStatusError: If any batch fails (earlier batches stay applied)
        """
        chunks = self.chunk_uris(track_uris)
        logger.debug(
            f"Adding {len(track_uris)} tracks to playlist {playlist_id} in {len(chunks)} chunks"
        )

        for chunk in chunks:
            response = await self._api_request(
                method="POST",
                url=f"{self.API_BASE_URL}/playlists/{playlist_id}/tracks",
                access_token=access_token,
                json={"uris": chunk},
            )
            response.raise_for_status()

    async def replace_playlist_tracks(
        self, playlist_id: str, track_uris: list[str], access_token: str
    ) -> None:
        """
        Replace playlist contents.

        The first 100 URIs replace the playlist (PUT), the rest is appended.

        Raises:
            httpx.HTTPStatusError: If a request fails
        """
        first_chunk = track_uris[: self.MAX_TRACKS_PER_REQUEST]
        response = await self._api_request(
            method="PUT",
            url=f"{self.API_BASE_URL}/playlists/{playlist_id}/tracks",
            access_token=access_token,
            json={"uris": first_chunk},
        )
        response.raise_for_status()

        remaining = track_uris[self.MAX_TRACKS_PER_REQUEST :]
        if remaining:
            await self.add_tracks_to_playlist(playlist_id, remaining, access_token)

    async def __aenter__(self) -> "SpotifyClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager."""
        await self.close()
