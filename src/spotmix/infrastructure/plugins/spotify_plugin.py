"""
Spotify Plugin - binds a SpotifyClient to one access token.

Hey future me – the core (aggregator, fill service) talks to ICatalogClient
and never sees tokens. SpotifyClient stays a stateless-per-user HTTP layer
(token is a parameter on every call), and this plugin is created per request
or per job with a fresh token.

Usage:
    plugin = SpotifyPlugin(spotify_client, access_token)
    page = await plugin.list_artist_albums("4dpARuHxo51G3z768sgnrY")
"""

import logging
from typing import Any

from spotmix.domain.exceptions import AuthenticationError
from spotmix.domain.ports import ICatalogClient
from spotmix.infrastructure.integrations.spotify_client import SpotifyClient

logger = logging.getLogger(__name__)


class SpotifyPlugin(ICatalogClient):
    """Catalog client backed by the Spotify Web API."""

    def __init__(self, client: SpotifyClient, access_token: str | None = None) -> None:
        """
        Initialize Spotify plugin.

        Args:
            client: Low-level SpotifyClient for HTTP calls
            access_token: OAuth access token (can be set later via set_token)
        """
        self._client = client
        self._access_token = access_token

    @property
    def client(self) -> SpotifyClient:
        return self._client

    def set_token(self, access_token: str) -> None:
        """Swap the bound access token (after a refresh)."""
        self._access_token = access_token

    def _token(self) -> str:
        if not self._access_token:
            raise AuthenticationError("Not authenticated with Spotify")
        return self._access_token

    # =========================================================================
    # ICatalogClient
    # =========================================================================

    async def list_artist_albums(
        self, artist_id: str, limit: int = 20, offset: int = 0
    ) -> dict[str, Any]:
        return await self._client.get_artist_albums_page(
            artist_id, self._token(), limit=limit, offset=offset
        )

    async def list_album_tracks(
        self, album_id: str, limit: int = 30, offset: int = 0
    ) -> dict[str, Any]:
        return await self._client.get_album_tracks(
            album_id, self._token(), limit=limit, offset=offset
        )

    async def add_tracks_to_playlist(
        self, playlist_id: str, track_uris: list[str]
    ) -> None:
        await self._client.add_tracks_to_playlist(playlist_id, track_uris, self._token())

    async def replace_playlist_tracks(
        self, playlist_id: str, track_uris: list[str]
    ) -> None:
        await self._client.replace_playlist_tracks(
            playlist_id, track_uris, self._token()
        )

    async def get_playlist(self, playlist_id: str) -> dict[str, Any]:
        return await self._client.get_playlist(playlist_id, self._token())

    # =========================================================================
    # BROWSING (used by the HTTP routes, not by the core)
    # =========================================================================

    async def get_current_user(self) -> dict[str, Any]:
        return await self._client.get_current_user(self._token())

    async def get_user_playlists(self, limit: int = 50, offset: int = 0) -> dict[str, Any]:
        return await self._client.get_user_playlists(
            self._token(), limit=limit, offset=offset
        )

    async def get_followed_artists(
        self, limit: int = 50, after: str | None = None
    ) -> dict[str, Any]:
        return await self._client.get_followed_artists(
            self._token(), limit=limit, after=after
        )

    async def create_playlist(
        self, user_id: str, name: str, description: str = "", public: bool = False
    ) -> dict[str, Any]:
        logger.info(f"Creating playlist '{name}' for user {user_id}")
        return await self._client.create_playlist(
            user_id, name, self._token(), description=description, public=public
        )
