"""Wiring of the catalog core for one access token."""

import logging
import random
from dataclasses import dataclass

from spotmix.application.cache.base_cache import BaseCache
from spotmix.application.cache.file_cache import FileCache
from spotmix.application.cache.spotify_cache import SpotifyCatalogCache
from spotmix.application.services.auto_update_service import AutoUpdateService
from spotmix.application.services.playlist_fill_service import PlaylistFillService
from spotmix.application.services.track_aggregator import TrackAggregator
from spotmix.config.settings import CacheSettings
from spotmix.domain.ports import ICatalogClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogServices:
    """Core services bound to one catalog client."""

    catalog: ICatalogClient
    aggregator: TrackAggregator
    fill_service: PlaylistFillService
    auto_update: AutoUpdateService


def build_catalog_cache(
    settings: CacheSettings, backend: BaseCache | None = None
) -> SpotifyCatalogCache | None:
    """Create the catalog cache from settings (None when disabled)."""
    if not settings.enabled:
        logger.info("Catalog cache disabled")
        return None
    return SpotifyCatalogCache(backend or FileCache(settings.directory))


def build_catalog_services(
    catalog: ICatalogClient,
    cache: SpotifyCatalogCache | None = None,
    album_timeout: float | None = None,
    rng: random.Random | None = None,
) -> CatalogServices:
    """Build aggregator, fill service and auto-update service around a catalog."""
    aggregator = TrackAggregator(catalog, cache, album_timeout=album_timeout)
    fill_service = PlaylistFillService(catalog, aggregator, rng=rng)
    return CatalogServices(
        catalog=catalog,
        aggregator=aggregator,
        fill_service=fill_service,
        auto_update=AutoUpdateService(catalog, fill_service),
    )
