"""Refresh of auto-update playlists.

Hey future me - one refresh = read the playlist, parse the artist marker from
its description, refill it in REPLACE mode with as many tracks as it holds
right now. So the playlist keeps its size and gets a fresh random selection.
Used by POST /api/playlists/{id}/update, the spotmix-update CLI and the
AutoUpdateWorker.
"""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from spotmix.application.services.auto_update import parse_artist_ids_from_description
from spotmix.application.services.playlist_fill_service import PlaylistFillService
from spotmix.domain.dtos import FillResult
from spotmix.domain.exceptions import ValidationException
from spotmix.domain.ports import ICatalogClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaylistUpdateResult:
    """Outcome of refreshing one playlist."""

    playlist_id: str
    name: str = ""
    artist_ids: tuple[str, ...] = ()
    fill: FillResult | None = None
    skipped_reason: str | None = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None

    @property
    def success(self) -> bool:
        return self.fill is not None and self.fill.success

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "playlistId": self.playlist_id,
            "name": self.name,
            "artistCount": len(self.artist_ids),
        }
        if self.fill is not None:
            result.update(self.fill.to_dict())
        else:
            result.update({"success": False, "trackCount": 0, "error": self.skipped_reason})
        return result


def load_playlist_ids(config_path: Path | str) -> list[str]:
    """Read playlist IDs from a {"playlistIds": [...]} JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValidationException: If the file is not a valid config document
    """
    path = Path(config_path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationException(f"Invalid playlist config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationException(f"Invalid playlist config {path}: expected an object")

    playlist_ids = data.get("playlistIds") or []
    if not isinstance(playlist_ids, list) or not all(
        isinstance(item, str) for item in playlist_ids
    ):
        raise ValidationException(
            f"Invalid playlist config {path}: playlistIds must be a list of strings"
        )
    return playlist_ids


class AutoUpdateService:
    """Refreshes playlists tagged with an auto-update marker."""

    NO_MARKER_REASON = "No artist IDs found in playlist description"

    def __init__(self, catalog: ICatalogClient, fill_service: PlaylistFillService) -> None:
        self._catalog = catalog
        self._fill_service = fill_service

    async def update_playlist(self, playlist_id: str) -> PlaylistUpdateResult:
        """Refresh one playlist.

        Returns:
            Result; skipped_reason is set when the playlist has no marker

        Raises:
            httpx.HTTPError: If the playlist itself can't be fetched
        """
        playlist = await self._catalog.get_playlist(playlist_id)
        name = playlist.get("name") or ""
        artist_ids = parse_artist_ids_from_description(playlist.get("description"))

        if not artist_ids:
            logger.info(f"Playlist {playlist_id} ({name}) has no auto-update marker - skipping")
            return PlaylistUpdateResult(
                playlist_id=playlist_id,
                name=name,
                skipped_reason=self.NO_MARKER_REASON,
            )

        track_count = (playlist.get("tracks") or {}).get("total") or 0
        logger.info(
            f"Refreshing playlist {playlist_id} ({name}): "
            f"{len(artist_ids)} artists, {track_count} tracks"
        )

        fill = await self._fill_service.fill_playlist(
            playlist_id, artist_ids, track_count, replace_existing=True
        )
        return PlaylistUpdateResult(
            playlist_id=playlist_id,
            name=name,
            artist_ids=tuple(artist_ids),
            fill=fill,
        )

    async def update_playlists(
        self, playlist_ids: Iterable[str]
    ) -> list[PlaylistUpdateResult]:
        """Refresh several playlists one after another.

        A playlist that can't be fetched is reported as failed, the run goes on.
        """
        results: list[PlaylistUpdateResult] = []
        for playlist_id in playlist_ids:
            try:
                result = await self.update_playlist(playlist_id)
            except Exception as e:
                logger.exception(f"Updating playlist {playlist_id} failed")
                result = PlaylistUpdateResult(
                    playlist_id=playlist_id,
                    fill=FillResult(success=False, track_count=0, error=str(e)),
                )

            if result.fill is not None and result.fill.success:
                logger.info(
                    f"Playlist {playlist_id}: updated with {result.fill.track_count} tracks"
                )
            elif result.fill is not None:
                logger.error(f"Playlist {playlist_id}: {result.fill.error}")
            results.append(result)
        return results
