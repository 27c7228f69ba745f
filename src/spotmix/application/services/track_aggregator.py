"""Artist -> albums -> tracks aggregation.

Hey future me - this is the expensive part of every fill. One artist costs
1 album listing + up to 20 album track listings, so the cache matters a lot:
album track listings are cached forever, album listings for two months.

Scope limits (on purpose, don't "fix" without a reason):
- only the FIRST page of albums (20) is looked at,
- only the FIRST page of each album's tracks (30) is looked at.
"""

import asyncio
import logging
from typing import Any

from spotmix.application.cache.spotify_cache import SpotifyCatalogCache
from spotmix.domain.dtos import Album, Track
from spotmix.domain.ports import ICatalogClient

logger = logging.getLogger(__name__)


class TrackAggregator:
    """Collects an artist's deduplicated track set from the catalog."""

    ALBUM_PAGE_SIZE = 20
    TRACK_PAGE_SIZE = 30

    def __init__(
        self,
        catalog: ICatalogClient,
        cache: SpotifyCatalogCache | None = None,
        album_timeout: float | None = None,
    ) -> None:
        """Initialize aggregator.

        Args:
            catalog: Remote catalog client
            cache: Catalog listing cache (None = always hit the network)
            album_timeout: Per-album fetch timeout in seconds (None = no timeout)
        """
        self._catalog = catalog
        self._cache = cache
        self._album_timeout = album_timeout

    async def get_all_artist_tracks(self, artist_id: str) -> list[Track]:
        """Get all tracks of an artist's first album page, deduplicated.

        Album track fetches run concurrently and we wait for ALL of them. An
        album that fails contributes nothing - no retry, no error to the caller.
        Order follows album listing order, first occurrence of a track id wins.

        Args:
            artist_id: Spotify artist ID

        Returns:
            List of unique tracks (empty if the artist has no albums)

        Raises:
            httpx.HTTPError: If the album listing itself fails
        """
        albums_page = await self._get_artist_albums(
            artist_id, self.ALBUM_PAGE_SIZE, 0
        )
        albums = [
            Album.from_spotify(item)
            for item in albums_page.get("items") or []
            if item and item.get("id")
        ]

        if not albums:
            logger.debug(f"Artist {artist_id} has no albums")
            return []

        results = await asyncio.gather(
            *(self._fetch_album_tracks(album) for album in albums),
            return_exceptions=True,
        )

        seen_track_ids: set[str] = set()
        all_tracks: list[Track] = []
        failed = 0

        for album, result in zip(albums, results, strict=True):
            if isinstance(result, BaseException):
                failed += 1
                logger.warning(
                    f"Skipping album {album.id} of artist {artist_id}: {result!r}"
                )
                continue

            for track in result:
                if track.id not in seen_track_ids:
                    seen_track_ids.add(track.id)
                    all_tracks.append(track)

        logger.debug(
            f"Artist {artist_id}: {len(all_tracks)} unique tracks from "
            f"{len(albums) - failed}/{len(albums)} albums"
        )
        return all_tracks

    async def _fetch_album_tracks(self, album: Album) -> list[Track]:
        """Fetch one album's first track page and convert it (one fan-out branch)."""
        fetch = self._get_album_tracks(album.id, self.TRACK_PAGE_SIZE, 0)
        if self._album_timeout is not None:
            page = await asyncio.wait_for(fetch, timeout=self._album_timeout)
        else:
            page = await fetch

        album_ref = album.to_ref()
        # Unavailable tracks come back as null or without uri - they can't go into a playlist.
        return [
            Track.from_spotify(item, album=album_ref)
            for item in page.get("items") or []
            if item and item.get("id") and item.get("uri")
        ]

    async def _get_artist_albums(
        self, artist_id: str, limit: int, offset: int
    ) -> dict[str, Any]:
        """Album listing, cache first."""
        if self._cache is not None:
            cached = await self._cache.get_artist_albums(artist_id, limit, offset)
            if cached is not None:
                return cached

        page = await self._catalog.list_artist_albums(artist_id, limit=limit, offset=offset)

        if self._cache is not None:
            await self._cache.set_artist_albums(artist_id, limit, offset, page)
        return page

    async def _get_album_tracks(
        self, album_id: str, limit: int, offset: int
    ) -> dict[str, Any]:
        """Album track listing, cache first."""
        if self._cache is not None:
            cached = await self._cache.get_album_tracks(album_id, limit, offset)
            if cached is not None:
                return cached

        page = await self._catalog.list_album_tracks(album_id, limit=limit, offset=offset)

        if self._cache is not None:
            await self._cache.set_album_tracks(album_id, limit, offset, page)
        return page
