"""Integration test: one auto-update cycle against a fake Spotify Web API.

Real SpotifyClient, plugin, services, disk cache and worker - only the HTTP
transport is replaced (httpx.MockTransport).
"""

import json
from collections import Counter
from pathlib import Path

import httpx
import pytest

from spotmix.application.services.catalog_services import build_catalog_cache
from spotmix.application.workers.auto_update_worker import AutoUpdateWorker
from spotmix.config import AutoUpdateSettings, CacheSettings, Settings, SpotifySettings
from spotmix.infrastructure.integrations.spotify_client import SpotifyClient

PLAYLISTS = {
    "pl-auto": {
        "name": "Weekly Mix",
        "description": "Fresh every week [Auto-update: a1,a2]",
        "tracks": {"total": 3},
    },
    "pl-plain": {"name": "Hand-picked", "description": "", "tracks": {"total": 5}},
}
ARTIST_ALBUMS = {"a1": ["alb1"], "a2": ["alb2", "alb-broken"]}
ALBUM_TRACKS = {"alb1": ["t1", "t2"], "alb2": ["t3", "t4"]}


class FakeSpotify:
    """Routes Web API requests to canned responses and counts them."""

    def __init__(self) -> None:
        self.hits: Counter[str] = Counter()
        self.replaced: dict[str, list[str]] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.hits[f"{request.method} {path}"] += 1

        if path == "/api/token":
            assert request.headers["Authorization"].startswith("Basic ")
            return httpx.Response(200, json={"access_token": "job-token", "expires_in": 3600})

        assert request.headers["Authorization"] == "Bearer job-token"
        parts = path.removeprefix("/v1/").split("/")

        if parts[0] == "playlists" and len(parts) == 2:
            return httpx.Response(200, json={"id": parts[1], **PLAYLISTS[parts[1]]})
        if parts[0] == "playlists" and request.method == "PUT":
            self.replaced[parts[1]] = json.loads(request.content)["uris"]
            return httpx.Response(201, json={"snapshot_id": "snap"})
        if parts[0] == "artists":
            items = [{"id": album_id, "name": album_id} for album_id in ARTIST_ALBUMS[parts[1]]]
            return httpx.Response(200, json={"items": items})
        if parts[0] == "albums" and parts[1] in ALBUM_TRACKS:
            items = [
                {"id": track_id, "uri": f"spotify:track:{track_id}", "name": track_id}
                for track_id in ALBUM_TRACKS[parts[1]]
            ]
            return httpx.Response(200, json={"items": items})
        return httpx.Response(500, json={"error": {"status": 500}})


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    config_path = tmp_path / "playlists-config.json"
    config_path.write_text(json.dumps({"playlistIds": ["pl-auto", "pl-plain"]}))
    return Settings(
        spotify=SpotifySettings(client_id="cid", client_secret="secret", refresh_token="rt"),
        cache=CacheSettings(enabled=True, directory=tmp_path / "cache"),
        auto_update=AutoUpdateSettings(config_path=config_path, interval_hours=0),
    )


@pytest.fixture
def fake_spotify() -> FakeSpotify:
    return FakeSpotify()


@pytest.fixture
async def worker(settings: Settings, fake_spotify: FakeSpotify):
    client = SpotifyClient(settings.spotify)
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(fake_spotify))
    yield AutoUpdateWorker(settings, client, cache=build_catalog_cache(settings.cache))
    await client.close()


async def test_refreshes_marked_playlist_and_skips_the_rest(
    worker: AutoUpdateWorker, fake_spotify: FakeSpotify
) -> None:
    results = await worker.run_once()

    by_id = {result.playlist_id: result for result in results}
    assert by_id["pl-auto"].success
    assert by_id["pl-auto"].to_dict()["trackCount"] == 3
    assert by_id["pl-plain"].skipped

    uris = fake_spotify.replaced["pl-auto"]
    assert len(uris) == 3
    assert len(set(uris)) == 3
    assert set(uris) <= {f"spotify:track:t{i}" for i in range(1, 5)}
    assert "pl-plain" not in fake_spotify.replaced


async def test_second_cycle_is_served_from_cache(
    worker: AutoUpdateWorker, fake_spotify: FakeSpotify
) -> None:
    await worker.run_once()
    await worker.run_once()

    assert fake_spotify.hits["GET /v1/artists/a1/albums"] == 1
    assert fake_spotify.hits["GET /v1/albums/alb1/tracks"] == 1
    # Failed pages are never cached.
    assert fake_spotify.hits["GET /v1/albums/alb-broken/tracks"] == 2
    assert fake_spotify.hits["PUT /v1/playlists/pl-auto/tracks"] == 2
    assert worker.get_status()["last_error"] is None
