"""Unit tests for AutoUpdateWorker."""

import asyncio
import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from spotmix.application.services.auto_update_service import (
    AutoUpdateService,
    PlaylistUpdateResult,
)
from spotmix.application.workers.auto_update_worker import AutoUpdateWorker
from spotmix.config import AutoUpdateSettings, CacheSettings, Settings, SpotifySettings
from spotmix.domain.dtos import FillResult
from spotmix.domain.exceptions import ConfigurationError
from spotmix.infrastructure.integrations.spotify_client import SpotifyClient


def _settings(config_path: Path, refresh_token: str = "refresh", interval_hours: float = 1.0):
    return Settings(
        spotify=SpotifySettings(
            client_id="cid", client_secret="secret", refresh_token=refresh_token
        ),
        cache=CacheSettings(enabled=False),
        auto_update=AutoUpdateSettings(config_path=config_path, interval_hours=interval_hours),
    )


class TestAutoUpdateWorker:
    """Test suite for the scheduled playlist refresh."""

    @pytest.fixture
    def config_path(self, tmp_path: Path) -> Path:
        path = tmp_path / "playlists-config.json"
        path.write_text(json.dumps({"playlistIds": ["p1", "p2"]}), encoding="utf-8")
        return path

    @pytest.fixture
    def spotify_client(self) -> AsyncMock:
        client = AsyncMock(spec=SpotifyClient)
        client.refresh_token.return_value = {"access_token": "fresh", "expires_in": 3600}
        return client

    @pytest.fixture
    def update_playlists(self, mocker) -> AsyncMock:
        return mocker.patch.object(
            AutoUpdateService,
            "update_playlists",
            autospec=True,
            side_effect=lambda self, ids: [
                PlaylistUpdateResult(
                    playlist_id=pid, fill=FillResult(success=True, track_count=5)
                )
                for pid in ids
            ],
        )

    async def test_run_once_refreshes_configured_playlists(
        self, config_path, spotify_client, update_playlists
    ) -> None:
        worker = AutoUpdateWorker(_settings(config_path), spotify_client)

        results = await worker.run_once()

        assert [r.playlist_id for r in results] == ["p1", "p2"]
        spotify_client.refresh_token.assert_awaited_once_with("refresh", use_client_secret=True)
        assert update_playlists.call_args.args[1] == ["p1", "p2"]

        status = worker.get_status()
        assert status["last_run"] is not None
        assert status["last_error"] is None
        assert len(status["last_results"]) == 2

    async def test_playlist_filter(
        self, config_path, spotify_client, update_playlists
    ) -> None:
        worker = AutoUpdateWorker(_settings(config_path), spotify_client, playlist_id="p2")

        results = await worker.run_once()

        assert [r.playlist_id for r in results] == ["p2"]

    async def test_filter_not_in_config_does_nothing(
        self, config_path, spotify_client, update_playlists
    ) -> None:
        worker = AutoUpdateWorker(_settings(config_path), spotify_client, playlist_id="other")

        assert await worker.run_once() == []
        spotify_client.refresh_token.assert_not_awaited()
        update_playlists.assert_not_called()

    async def test_missing_refresh_token(self, config_path, spotify_client) -> None:
        worker = AutoUpdateWorker(_settings(config_path, refresh_token=""), spotify_client)

        with pytest.raises(ConfigurationError):
            await worker.run_once()

    async def test_missing_config_file(self, tmp_path, spotify_client) -> None:
        worker = AutoUpdateWorker(_settings(tmp_path / "missing.json"), spotify_client)

        with pytest.raises(FileNotFoundError):
            await worker.run_once()

    async def test_start_and_stop(self, config_path, spotify_client, update_playlists) -> None:
        worker = AutoUpdateWorker(_settings(config_path), spotify_client)

        await worker.start()
        await asyncio.sleep(0.05)
        assert worker.get_status()["running"] is True

        await worker.stop()

        assert worker.get_status()["running"] is False
        assert update_playlists.call_count == 1

    async def test_loop_survives_failing_cycle(self, tmp_path, spotify_client) -> None:
        worker = AutoUpdateWorker(_settings(tmp_path / "missing.json"), spotify_client)

        await worker.start()
        await asyncio.sleep(0.05)

        status = worker.get_status()
        assert status["running"] is True
        assert status["last_error"] is not None
        await worker.stop()

    async def test_zero_interval_does_not_start(self, config_path, spotify_client) -> None:
        worker = AutoUpdateWorker(_settings(config_path, interval_hours=0), spotify_client)

        await worker.start()

        assert worker.get_status()["running"] is False
        await worker.stop()
