"""Pydantic request/response models."""

from spotmix.api.schemas.auth import (
    AuthStatusResponse,
    SessionTokensRequest,
    SuccessResponse,
)
from spotmix.api.schemas.playlists import (
    AddTracksRequest,
    CreatePlaylistRequest,
    FillPlaylistRequest,
)

__all__ = [
    "AddTracksRequest",
    "AuthStatusResponse",
    "CreatePlaylistRequest",
    "FillPlaylistRequest",
    "SessionTokensRequest",
    "SuccessResponse",
]
