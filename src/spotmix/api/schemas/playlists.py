"""API schemas for playlist endpoints.

The web client speaks camelCase (artistIds, trackCount, ...); fields are
snake_case in Python with camelCase aliases. Both spellings are accepted.
"""

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CreatePlaylistRequest(CamelModel):
    """Create a playlist for the current (or given) user."""

    name: str = Field(..., min_length=1, description="Playlist name")
    description: str = Field(default="", description="Playlist description")
    user_id: str | None = Field(
        default=None, alias="userId", description="Owner; defaults to the current user"
    )
    public: bool = Field(default=False, description="Public playlist")
    artist_ids: list[str] = Field(
        default_factory=list, alias="artistIds", description="Artists for auto-update"
    )
    auto_update: bool = Field(
        default=False,
        alias="autoUpdate",
        description="Append an [Auto-update: ...] marker for artist_ids to the description",
    )


class AddTracksRequest(CamelModel):
    """Append track URIs to a playlist."""

    track_uris: list[str] = Field(..., alias="trackUris", description="spotify:track:... URIs")


class FillPlaylistRequest(CamelModel):
    """Fill a playlist with random tracks of the given artists."""

    artist_ids: list[str] = Field(..., alias="artistIds", description="Artist IDs")
    track_count: int = Field(..., ge=0, alias="trackCount", description="Maximum track count")
    replace_existing: bool = Field(
        default=False, alias="replaceExisting", description="Replace instead of append"
    )

