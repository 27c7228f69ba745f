"""
Data Transfer Objects for catalog data and fill operations.

Hey future me - these DTOs are what the core hands around. The catalog client
returns raw JSON dicts (that's also what lands in the cache), and the
aggregator converts album track listings into Track objects right before
deduplication. Tracks are frozen: the core only copies and filters them.

Flow: Spotify JSON -> (cache) -> Track.from_spotify() -> aggregator -> fill service
"""

from dataclasses import dataclass, field
from typing import Any

from spotmix.domain.exceptions import ValidationException


@dataclass(frozen=True)
class ArtistRef:
    """Minimal artist reference carried on a track."""

    id: str
    name: str = ""

    @classmethod
    def from_spotify(cls, data: dict[str, Any]) -> "ArtistRef":
        return cls(id=data.get("id") or "", name=data.get("name") or "")


@dataclass(frozen=True)
class AlbumRef:
    """Minimal album reference carried on a track."""

    id: str
    name: str = ""

    @classmethod
    def from_spotify(cls, data: dict[str, Any]) -> "AlbumRef":
        return cls(id=data.get("id") or "", name=data.get("name") or "")


@dataclass(frozen=True)
class Album:
    """Album from an artist's album listing.

    Only used as a pagination unit for fetching tracks - we never keep albums
    around after the aggregation that produced them (except inside the cache).
    """

    id: str
    name: str = ""
    album_type: str | None = None
    total_tracks: int = 0
    release_date: str | None = None

    @classmethod
    def from_spotify(cls, data: dict[str, Any]) -> "Album":
        return cls(
            id=data["id"],
            name=data.get("name") or "",
            album_type=data.get("album_type"),
            total_tracks=data.get("total_tracks") or 0,
            release_date=data.get("release_date"),
        )

    def to_ref(self) -> AlbumRef:
        return AlbumRef(id=self.id, name=self.name)


# Hey future me - /albums/{id}/tracks returns "simplified" track objects WITHOUT an album field.
# That's why from_spotify() takes the album we iterated as a fallback. Full track objects
# (e.g. from /tracks/{id}) carry their own album and that one wins.
@dataclass(frozen=True)
class Track:
    """Playable track from the catalog."""

    id: str
    uri: str
    name: str = ""
    artists: tuple[ArtistRef, ...] = ()
    album: AlbumRef | None = None
    duration_ms: int = 0

    @classmethod
    def from_spotify(
        cls, data: dict[str, Any], album: AlbumRef | None = None
    ) -> "Track":
        """Build a Track from a Spotify track object.

        Args:
            data: Full or simplified Spotify track JSON
            album: Album the track was listed under (used when data has no album)

        Returns:
            Track instance

        Raises:
            KeyError: If the track has no id or uri
        """
        album_data = data.get("album")
        return cls(
            id=data["id"],
            uri=data["uri"],
            name=data.get("name") or "",
            artists=tuple(ArtistRef.from_spotify(a) for a in data.get("artists") or []),
            album=AlbumRef.from_spotify(album_data) if album_data else album,
            duration_ms=data.get("duration_ms") or 0,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses."""
        return {
            "id": self.id,
            "uri": self.uri,
            "name": self.name,
            "artists": [{"id": a.id, "name": a.name} for a in self.artists],
            "album": (
                {"id": self.album.id, "name": self.album.name} if self.album else None
            ),
            "duration_ms": self.duration_ms,
        }


@dataclass
class PlaylistFillRequest:
    """Input for one playlist fill.

    artist_ids may contain duplicates - each one is fetched, but one artist's
    aggregation never yields the same track twice.
    """

    playlist_id: str
    artist_ids: list[str] = field(default_factory=list)
    track_count: int = 0
    replace_existing: bool = False

    def __post_init__(self) -> None:
        """Validate essential fields."""
        if not self.playlist_id or not self.playlist_id.strip():
            raise ValidationException("playlist_id cannot be empty")
        if isinstance(self.track_count, bool) or not isinstance(self.track_count, int):
            raise ValidationException("track_count must be an integer")
        if self.track_count < 0:
            raise ValidationException("track_count cannot be negative")


@dataclass(frozen=True)
class FillResult:
    """Structured outcome of a playlist fill. Never an exception."""

    success: bool
    track_count: int = 0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success, "trackCount": self.track_count}
        if self.error is not None:
            result["error"] = self.error
        return result


__all__ = [
    "Album",
    "AlbumRef",
    "ArtistRef",
    "FillResult",
    "PlaylistFillRequest",
    "Track",
]
