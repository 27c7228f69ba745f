"""API router initialization."""

# Hey future me, /health and /auth/* live at the root, everything that needs a
# Spotify session lives under /api (see main.py).

from fastapi import APIRouter

from spotmix.api.routers import artists, auth, health, playlists, profile

api_router = APIRouter()
api_router.include_router(profile.router, tags=["Profile"])
api_router.include_router(playlists.router, prefix="/playlists", tags=["Playlists"])
api_router.include_router(artists.router, prefix="/artists", tags=["Artists"])

__all__ = ["api_router", "auth", "health"]
