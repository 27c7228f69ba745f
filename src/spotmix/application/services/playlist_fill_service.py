"""Random playlist fill from a pool of artists.

Hey future me - this service is THE boundary for callers (routes, scheduled
job): fill_playlist() never raises. Whatever goes wrong comes back as
FillResult(success=False, error=...).

Pool rules:
- every requested artist is aggregated concurrently, failures only shrink the pool,
- NO dedup across artists (a collab owned by two requested artists can appear twice),
- uniform shuffle (Fisher-Yates via random.shuffle), then take the first N.
"""

import asyncio
import logging
import random
from collections.abc import Mapping, Sequence

from spotmix.application.services.track_aggregator import TrackAggregator
from spotmix.domain.dtos import FillResult, PlaylistFillRequest, Track
from spotmix.domain.ports import ICatalogClient

logger = logging.getLogger(__name__)

NO_TRACKS_ERROR = "No tracks found for selected artists"


def select_random_tracks(
    artists_tracks: Mapping[str, Sequence[Track]] | Sequence[Sequence[Track]],
    track_count: int,
    rng: random.Random | None = None,
) -> list[Track]:
    """Flatten per-artist track lists and draw a uniform random sample.

    Args:
        artists_tracks: Track lists keyed by artist ID (or a plain list of lists)
        track_count: Maximum number of tracks to return
        rng: Random source (default: module-level, unseeded)

    Returns:
        At most min(track_count, pool size) tracks, in random order
    """
    groups = (
        artists_tracks.values() if isinstance(artists_tracks, Mapping) else artists_tracks
    )
    pool: list[Track] = [track for tracks in groups for track in tracks]

    (rng or random).shuffle(pool)
    return pool[: max(0, min(track_count, len(pool)))]


class PlaylistFillService:
    """Fills a playlist with randomly sampled tracks from a set of artists."""

    def __init__(
        self,
        catalog: ICatalogClient,
        aggregator: TrackAggregator,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize fill service.

        Args:
            catalog: Catalog client used for the playlist mutation
            aggregator: Per-artist track aggregator
            rng: Random source for sampling (tests pass a seeded Random)
        """
        self._catalog = catalog
        self._aggregator = aggregator
        self._rng = rng

    async def fill_playlist(
        self,
        playlist_id: str,
        artist_ids: Sequence[str],
        track_count: int,
        replace_existing: bool = False,
    ) -> FillResult:
        """Fill a playlist with random tracks from the given artists.

        Args:
            playlist_id: Target playlist
            artist_ids: Artists forming the pool (duplicates allowed)
            track_count: Number of tracks wanted
            replace_existing: Replace playlist contents instead of appending

        Returns:
            FillResult - never raises
        """
        try:
            request = PlaylistFillRequest(
                playlist_id=playlist_id,
                artist_ids=list(artist_ids),
                track_count=track_count,
                replace_existing=replace_existing,
            )
            return await self._fill(request)
        except Exception as e:
            logger.exception(f"Filling playlist {playlist_id} failed")
            return FillResult(success=False, track_count=0, error=str(e) or type(e).__name__)

    async def fill(self, request: PlaylistFillRequest) -> FillResult:
        """Same as fill_playlist() for a prepared request."""
        return await self.fill_playlist(
            request.playlist_id,
            request.artist_ids,
            request.track_count,
            request.replace_existing,
        )

    async def collect_artist_tracks(
        self, artist_ids: Sequence[str]
    ) -> dict[str, list[Track]]:
        """Aggregate every artist concurrently, keeping only the successful ones.

        Duplicate artist IDs are fetched once per occurrence; the result keeps
        one entry per ID (same content either way).
        """
        results = await asyncio.gather(
            *(self._aggregator.get_all_artist_tracks(artist_id) for artist_id in artist_ids),
            return_exceptions=True,
        )

        artists_tracks: dict[str, list[Track]] = {}
        for artist_id, result in zip(artist_ids, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(f"No tracks for artist {artist_id}: {result!r}")
                continue
            artists_tracks[artist_id] = result
        return artists_tracks

    async def _fill(self, request: PlaylistFillRequest) -> FillResult:
        artists_tracks = await self.collect_artist_tracks(request.artist_ids)
        selected = select_random_tracks(artists_tracks, request.track_count, self._rng)

        if not selected:
            logger.info(
                f"Playlist {request.playlist_id}: no tracks found for "
                f"{len(request.artist_ids)} artists"
            )
            return FillResult(success=False, track_count=0, error=NO_TRACKS_ERROR)

        track_uris = [track.uri for track in selected]

        if request.replace_existing:
            await self._catalog.replace_playlist_tracks(request.playlist_id, track_uris)
        else:
            await self._catalog.add_tracks_to_playlist(request.playlist_id, track_uris)

        logger.info(
            f"Playlist {request.playlist_id}: "
            f"{'replaced with' if request.replace_existing else 'added'} "
            f"{len(track_uris)} tracks from {len(artists_tracks)} artists"
        )
        return FillResult(success=True, track_count=len(selected))
