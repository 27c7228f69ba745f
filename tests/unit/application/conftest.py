"""Shared fixtures for application-layer tests."""

from typing import Any

import pytest

from spotmix.domain.ports import ICatalogClient


def make_track_item(track_id: str, name: str | None = None) -> dict[str, Any]:
    """Simplified Spotify track object as returned by /albums/{id}/tracks."""
    return {
        "id": track_id,
        "uri": f"spotify:track:{track_id}",
        "name": name or f"Track {track_id}",
        "artists": [{"id": "artist", "name": "Artist"}],
        "duration_ms": 180000,
    }


def make_album_item(album_id: str) -> dict[str, Any]:
    return {
        "id": album_id,
        "name": f"Album {album_id}",
        "album_type": "album",
        "total_tracks": 10,
        "release_date": "2020-01-01",
    }


class FakeCatalog(ICatalogClient):
    """In-memory catalog.

    albums: artist_id -> list of album ids, or an exception to raise
    tracks: album_id -> list of track ids, or an exception to raise
    """

    def __init__(self) -> None:
        self.albums: dict[str, list[str] | BaseException] = {}
        self.tracks: dict[str, list[str] | BaseException] = {}
        self.playlists: dict[str, dict[str, Any]] = {}
        self.album_calls: list[tuple[str, int, int]] = []
        self.track_calls: list[tuple[str, int, int]] = []
        self.added: list[tuple[str, list[str]]] = []
        self.replaced: list[tuple[str, list[str]]] = []

    def add_artist(self, artist_id: str, albums: dict[str, list[str]]) -> None:
        self.albums[artist_id] = list(albums)
        self.tracks.update(albums)

    async def list_artist_albums(
        self, artist_id: str, limit: int = 20, offset: int = 0
    ) -> dict[str, Any]:
        self.album_calls.append((artist_id, limit, offset))
        albums = self.albums.get(artist_id, [])
        if isinstance(albums, BaseException):
            raise albums
        return {"items": [make_album_item(album_id) for album_id in albums], "total": len(albums)}

    async def list_album_tracks(
        self, album_id: str, limit: int = 30, offset: int = 0
    ) -> dict[str, Any]:
        self.track_calls.append((album_id, limit, offset))
        tracks = self.tracks.get(album_id, [])
        if isinstance(tracks, BaseException):
            raise tracks
        return {"items": [make_track_item(track_id) for track_id in tracks], "total": len(tracks)}

    async def add_tracks_to_playlist(self, playlist_id: str, track_uris: list[str]) -> None:
        self.added.append((playlist_id, list(track_uris)))

    async def replace_playlist_tracks(self, playlist_id: str, track_uris: list[str]) -> None:
        self.replaced.append((playlist_id, list(track_uris)))

    async def get_playlist(self, playlist_id: str) -> dict[str, Any]:
        playlist = self.playlists[playlist_id]
        if isinstance(playlist, BaseException):
            raise playlist
        return playlist


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


class FakeClock:
    """Manually advanced Unix clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
