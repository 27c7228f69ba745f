"""Scheduled refresh of auto-update playlists.

Hey future me - this worker has NO user session. It gets its access token from
the long-lived SPOTIFY_REFRESH_TOKEN (client secret + Basic auth) at the start
of every cycle, builds a SpotifyPlugin for that token and refreshes every
playlist listed in the config file. A failing cycle is logged and the loop
keeps going - next cycle tries again.
"""

import asyncio
import contextlib
import logging
from datetime import UTC, datetime
from typing import Any

from spotmix.application.cache.spotify_cache import SpotifyCatalogCache
from spotmix.application.services.auto_update_service import (
    PlaylistUpdateResult,
    load_playlist_ids,
)
from spotmix.application.services.catalog_services import build_catalog_services
from spotmix.config.settings import Settings
from spotmix.domain.exceptions import ConfigurationError
from spotmix.infrastructure.integrations.spotify_client import SpotifyClient
from spotmix.infrastructure.observability.logging import set_correlation_id
from spotmix.infrastructure.plugins.spotify_plugin import SpotifyPlugin

logger = logging.getLogger(__name__)


class AutoUpdateWorker:
    """Periodically refreshes the configured auto-update playlists."""

    def __init__(
        self,
        settings: Settings,
        spotify_client: SpotifyClient,
        cache: SpotifyCatalogCache | None = None,
        playlist_id: str | None = None,
    ) -> None:
        """Initialize worker.

        Args:
            settings: Application settings (credentials, config path, interval)
            spotify_client: HTTP client (owned by the caller)
            cache: Catalog cache shared across cycles
            playlist_id: Only refresh this playlist (must be in the config)
        """
        self._settings = settings
        self._client = spotify_client
        self._cache = cache
        self._playlist_id = playlist_id
        self._running = False
        self._task: asyncio.Task[None] | None = None
        self._last_run: datetime | None = None
        self._last_results: list[PlaylistUpdateResult] = []
        self._last_error: str | None = None

    @property
    def interval_seconds(self) -> float:
        return self._settings.auto_update.interval_hours * 3600

    async def start(self) -> None:
        """Start the refresh loop (idempotent)."""
        if self._running:
            logger.warning("Auto-update worker is already running")
            return
        if self.interval_seconds <= 0:
            logger.info("Auto-update worker disabled (interval is 0)")
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop(), name="auto_update_worker")
        logger.info(
            f"Auto-update worker started (every {self._settings.auto_update.interval_hours:g}h)"
        )

    async def stop(self) -> None:
        """Stop the loop and wait for the task to finish (idempotent)."""
        self._running = False
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        logger.info("Auto-update worker stopped")

    async def wait(self) -> None:
        """Block until the loop task ends (used by the CLI)."""
        if self._task:
            await self._task

    def get_status(self) -> dict[str, Any]:
        return {
            "running": self._running,
            "interval_seconds": self.interval_seconds,
            "last_run": self._last_run.isoformat() if self._last_run else None,
            "last_error": self._last_error,
            "last_results": [result.to_dict() for result in self._last_results],
        }

    async def _run_loop(self) -> None:
        while self._running:
            try:
                await self.run_once()
            except Exception as e:
                logger.exception(f"Auto-update cycle failed: {e}")
                self._last_error = str(e)

            await asyncio.sleep(self.interval_seconds)

    def _playlist_ids(self) -> list[str]:
        playlist_ids = load_playlist_ids(self._settings.auto_update.config_path)
        if self._playlist_id:
            logger.info(f"Filtering for specific playlist: {self._playlist_id}")
            playlist_ids = [pid for pid in playlist_ids if pid == self._playlist_id]
            if not playlist_ids:
                logger.warning(f"Playlist {self._playlist_id} not found in config")
        return playlist_ids

    async def _get_access_token(self) -> str:
        refresh_token = self._settings.spotify.refresh_token
        if not refresh_token:
            raise ConfigurationError("SPOTIFY_REFRESH_TOKEN is not configured")
        token_data = await self._client.refresh_token(refresh_token, use_client_secret=True)
        return str(token_data["access_token"])

    async def run_once(self) -> list[PlaylistUpdateResult]:
        """Run one refresh cycle over the configured playlists.

        Raises:
            ConfigurationError: Missing refresh token / client secret
            TokenRefreshException: Refresh token rejected by Spotify
            FileNotFoundError: Missing playlist config file
        """
        set_correlation_id()
        self._last_run = datetime.now(UTC)
        self._last_error = None

        playlist_ids = self._playlist_ids()
        logger.info(f"Found {len(playlist_ids)} playlist(s) to update")
        if not playlist_ids:
            self._last_results = []
            return []

        access_token = await self._get_access_token()
        plugin = SpotifyPlugin(self._client, access_token)
        services = build_catalog_services(
            plugin, self._cache, album_timeout=self._settings.spotify.request_timeout
        )

        results = await services.auto_update.update_playlists(playlist_ids)
        self._last_results = results

        updated = sum(1 for result in results if result.success)
        skipped = sum(1 for result in results if result.skipped)
        logger.info(
            f"Playlist update complete: {updated} updated, {skipped} skipped, "
            f"{len(results) - updated - skipped} failed"
        )
        return results
