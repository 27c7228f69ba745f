"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod
from typing import Any


# Hey future me, ICatalogClient is a PORT! The aggregator and fill service depend on this
# interface, never on SpotifyClient directly. SpotifyPlugin is the real implementation (it binds
# one access token), tests pass AsyncMock(spec=ICatalogClient) or a small fake. All methods raise
# on remote failure (httpx errors) - the CALLERS decide what a failure means.
class ICatalogClient(ABC):
    """Interface for the remote music catalog used by the core."""

    @abstractmethod
    async def list_artist_albums(
        self, artist_id: str, limit: int = 20, offset: int = 0
    ) -> dict[str, Any]:
        """List one page of an artist's albums.

        Returns:
            Paging object with "items" (album objects), "total", "next", ...
        """
        pass

    @abstractmethod
    async def list_album_tracks(
        self, album_id: str, limit: int = 30, offset: int = 0
    ) -> dict[str, Any]:
        """List one page of an album's tracks.

        Returns:
            Paging object with "items" (simplified track objects), "total", ...
        """
        pass

    @abstractmethod
    async def add_tracks_to_playlist(
        self, playlist_id: str, track_uris: list[str]
    ) -> None:
        """Append track URIs to a playlist (chunked to the API batch limit)."""
        pass

    @abstractmethod
    async def replace_playlist_tracks(
        self, playlist_id: str, track_uris: list[str]
    ) -> None:
        """Replace playlist contents with the given URIs.

        The first batch replaces, the remaining URIs are appended.
        """
        pass

    @abstractmethod
    async def get_playlist(self, playlist_id: str) -> dict[str, Any]:
        """Get playlist details (description, tracks.total, ...)."""
        pass


__all__ = ["ICatalogClient"]
