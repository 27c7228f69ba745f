"""Playlist endpoints: list, create, add tracks, fill and auto-update refresh."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from spotmix.api.dependencies import (
    get_auto_update_service,
    get_fill_service,
    get_spotify_plugin,
)
from spotmix.api.schemas import (
    AddTracksRequest,
    CreatePlaylistRequest,
    FillPlaylistRequest,
    SuccessResponse,
)
from spotmix.application.services.auto_update import with_auto_update_marker
from spotmix.application.services.auto_update_service import AutoUpdateService
from spotmix.application.services.playlist_fill_service import PlaylistFillService
from spotmix.domain.exceptions import ValidationException
from spotmix.infrastructure.plugins.spotify_plugin import SpotifyPlugin

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def list_playlists(
    limit: int = Query(50, ge=1, le=50),
    offset: int = Query(0, ge=0),
    plugin: SpotifyPlugin = Depends(get_spotify_plugin),
) -> dict[str, Any]:
    """One page of the current user's playlists."""
    return await plugin.get_user_playlists(limit=limit, offset=offset)


# Hey future me - autoUpdate=true just writes the "[Auto-update: id1,id2]" marker
# into the description. The playlist starts empty; the UI fills it with /fill and
# the scheduled job / /update refresh it later from the marker.
@router.post("")
async def create_playlist(
    body: CreatePlaylistRequest,
    plugin: SpotifyPlugin = Depends(get_spotify_plugin),
) -> dict[str, Any]:
    """Create a playlist, optionally tagged for auto-update."""
    description = body.description
    if body.auto_update:
        if not body.artist_ids:
            raise ValidationException("autoUpdate requires at least one artist ID")
        description = with_auto_update_marker(description, body.artist_ids)

    user_id = body.user_id
    if not user_id:
        user_id = (await plugin.get_current_user())["id"]

    return await plugin.create_playlist(
        user_id, body.name, description=description, public=body.public
    )


@router.post("/{playlist_id}/tracks", response_model=SuccessResponse)
async def add_tracks(
    playlist_id: str,
    body: AddTracksRequest,
    plugin: SpotifyPlugin = Depends(get_spotify_plugin),
) -> SuccessResponse:
    """Append tracks (sent to Spotify in batches of 100)."""
    logger.info(f"Adding {len(body.track_uris)} tracks to playlist {playlist_id}")
    await plugin.add_tracks_to_playlist(playlist_id, body.track_uris)
    return SuccessResponse()


# The fill engine never raises; failures come back as {"success": false, "error": ...}.
@router.post("/{playlist_id}/fill")
async def fill_playlist(
    playlist_id: str,
    body: FillPlaylistRequest,
    fill_service: PlaylistFillService = Depends(get_fill_service),
) -> dict[str, Any]:
    """Fill a playlist with random tracks from the given artists."""
    result = await fill_service.fill_playlist(
        playlist_id,
        body.artist_ids,
        body.track_count,
        replace_existing=body.replace_existing,
    )
    return result.to_dict()


@router.post("/{playlist_id}/update", response_model=None)
async def update_playlist(
    playlist_id: str,
    auto_update: AutoUpdateService = Depends(get_auto_update_service),
) -> dict[str, Any] | JSONResponse:
    """Refresh an auto-update playlist from its description marker.

    Keeps the current track count and replaces all tracks. 400 if the playlist
    has no marker.
    """
    result = await auto_update.update_playlist(playlist_id)
    if result.skipped:
        return JSONResponse(status_code=400, content={"detail": result.skipped_reason})
    return result.to_dict()
