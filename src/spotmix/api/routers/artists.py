"""Artist endpoints: followed artists and aggregated artist tracks."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from spotmix.api.dependencies import get_spotify_plugin, get_track_aggregator
from spotmix.application.services.track_aggregator import TrackAggregator
from spotmix.infrastructure.plugins.spotify_plugin import SpotifyPlugin

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/followed")
async def get_followed_artists(
    limit: int = Query(50, ge=1, le=50),
    after: str | None = Query(None, description="Cursor (last artist ID of the previous page)"),
    plugin: SpotifyPlugin = Depends(get_spotify_plugin),
) -> dict[str, Any]:
    """One cursor page of followed artists."""
    return await plugin.get_followed_artists(limit=limit, after=after)


# Yo, this is the expensive one: one album page + one track page per album, all
# albums in parallel. Albums that fail are left out, so the list can be partial.
@router.get("/{artist_id}/tracks")
async def get_artist_tracks(
    artist_id: str,
    aggregator: TrackAggregator = Depends(get_track_aggregator),
) -> list[dict[str, Any]]:
    """All distinct tracks of an artist across their albums."""
    tracks = await aggregator.get_all_artist_tracks(artist_id)
    return [track.to_dict() for track in tracks]
