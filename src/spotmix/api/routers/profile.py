"""Current user profile."""

from typing import Any

from fastapi import APIRouter, Depends

from spotmix.api.dependencies import get_spotify_plugin
from spotmix.infrastructure.plugins.spotify_plugin import SpotifyPlugin

router = APIRouter()


@router.get("/profile")
async def get_profile(plugin: SpotifyPlugin = Depends(get_spotify_plugin)) -> dict[str, Any]:
    """Spotify profile of the logged-in user."""
    return await plugin.get_current_user()
