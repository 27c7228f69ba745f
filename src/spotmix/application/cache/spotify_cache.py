"""Spotify catalog listing cache.

Hey future me - this is the key scheme + TTL policy for catalog listings.
The storage behind it is any BaseCache (FileCache in production).

- Artist album listings: 2 months. Artists release stuff rarely, and a
  slightly stale discography just means a new album shows up a bit later.
- Album track listings: forever. A released album's tracklist doesn't change.
"""

from typing import Any

from spotmix.application.cache.base_cache import BaseCache


class SpotifyCatalogCache:
    """Cache for Spotify album/track listing responses.

    Stores the raw JSON paging objects exactly as the API returned them.
    """

    # Cache TTL values (in seconds)
    ARTIST_ALBUMS_TTL = 60 * 24 * 60 * 60  # 2 months
    ALBUM_TRACKS_TTL: float | None = None  # permanent

    def __init__(self, cache: BaseCache) -> None:
        """Initialize catalog cache.

        Args:
            cache: Storage backend (FileCache, InMemoryCache)
        """
        self._cache = cache

    @staticmethod
    def make_artist_albums_key(artist_id: str, limit: int, offset: int) -> str:
        """Make cache key for one page of an artist's albums."""
        return f"artist-albums:{artist_id}:{limit}:{offset}"

    @staticmethod
    def make_album_tracks_key(album_id: str, limit: int, offset: int) -> str:
        """Make cache key for one page of an album's tracks."""
        return f"album-tracks:{album_id}:{limit}:{offset}"

    # =========================================================================
    # ARTIST ALBUMS
    # =========================================================================

    async def get_artist_albums(
        self, artist_id: str, limit: int, offset: int
    ) -> dict[str, Any] | None:
        """Get cached artist album page."""
        key = self.make_artist_albums_key(artist_id, limit, offset)
        return await self._cache.get(key, self.ARTIST_ALBUMS_TTL)

    async def set_artist_albums(
        self, artist_id: str, limit: int, offset: int, page: dict[str, Any]
    ) -> bool:
        """Cache artist album page."""
        key = self.make_artist_albums_key(artist_id, limit, offset)
        return await self._cache.set(key, page, self.ARTIST_ALBUMS_TTL)

    # =========================================================================
    # ALBUM TRACKS
    # =========================================================================

    async def get_album_tracks(
        self, album_id: str, limit: int, offset: int
    ) -> dict[str, Any] | None:
        """Get cached album track page."""
        key = self.make_album_tracks_key(album_id, limit, offset)
        return await self._cache.get(key, self.ALBUM_TRACKS_TTL)

    async def set_album_tracks(
        self, album_id: str, limit: int, offset: int, page: dict[str, Any]
    ) -> bool:
        """Cache album track page."""
        key = self.make_album_tracks_key(album_id, limit, offset)
        return await self._cache.set(key, page, self.ALBUM_TRACKS_TTL)

    async def clear(self) -> int:
        """Clear the underlying cache."""
        return await self._cache.clear()
