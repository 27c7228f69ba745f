"""spotmix-update: refresh auto-update playlists from the command line.

Meant for cron / CI. Reads the playlist IDs from the config file, gets an
access token from SPOTIFY_REFRESH_TOKEN and refreshes every playlist whose
description carries an auto-update marker.

    spotmix-update --once
    spotmix-update --once --playlist-id 37i9dQZF1DXcBWIGoYBM5M
    spotmix-update                     # repeat every AUTO_UPDATE_INTERVAL_HOURS
"""

import argparse
import asyncio
import logging
import os
from pathlib import Path

import httpx

from spotmix.application.services.catalog_services import build_catalog_cache
from spotmix.application.workers.auto_update_worker import AutoUpdateWorker
from spotmix.config import Settings, get_settings
from spotmix.domain.exceptions import DomainException
from spotmix.infrastructure.integrations.spotify_client import SpotifyClient
from spotmix.infrastructure.observability.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spotmix-update",
        description="Refresh auto-update playlists with new random tracks",
    )
    parser.add_argument(
        "--playlist-id",
        default=os.environ.get("PLAYLIST_ID") or None,
        help="Only refresh this playlist (default: $PLAYLIST_ID, else all configured)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Playlist config file (default: AUTO_UPDATE_CONFIG_PATH or playlists-config.json)",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single refresh cycle and exit",
    )
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with command-line overrides applied."""
    if args.config is None:
        return settings
    auto_update = settings.auto_update.model_copy(update={"config_path": args.config})
    return settings.model_copy(update={"auto_update": auto_update})


async def run(settings: Settings, playlist_id: str | None, once: bool) -> int:
    """Run one cycle (or loop) and return the process exit code."""
    async with SpotifyClient(settings.spotify) as client:
        worker = AutoUpdateWorker(
            settings,
            client,
            cache=build_catalog_cache(settings.cache),
            playlist_id=playlist_id,
        )

        if once or settings.auto_update.interval_hours <= 0:
            try:
                await worker.run_once()
            except FileNotFoundError as e:
                logger.error(f"Playlist config not found: {e.filename}")
                return 1
            except DomainException as e:
                logger.error(f"Playlist update failed: {e.message}")
                return 1
            except httpx.HTTPError as e:
                logger.error(f"Spotify request failed: {e}")
                return 1
            return 0

        await worker.start()
        try:
            await worker.wait()
        finally:
            await worker.stop()
    return 0


def main(argv: list[str] | None = None) -> int:
    """Console script entry point."""
    args = build_parser().parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    configure_logging(
        log_level=settings.observability.level,
        json_format=settings.observability.json_format,
        app_name=f"{settings.app_name}-update",
    )

    try:
        return asyncio.run(run(settings, args.playlist_id, args.once))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
