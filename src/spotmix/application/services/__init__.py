"""Application services."""

from spotmix.application.services.auto_update import (
    build_auto_update_marker,
    parse_artist_ids_from_description,
    with_auto_update_marker,
)
from spotmix.application.services.auto_update_service import (
    AutoUpdateService,
    PlaylistUpdateResult,
    load_playlist_ids,
)
from spotmix.application.services.catalog_services import (
    CatalogServices,
    build_catalog_cache,
    build_catalog_services,
)
from spotmix.application.services.playlist_fill_service import (
    PlaylistFillService,
    select_random_tracks,
)
from spotmix.application.services.session_store import Session, SessionStore
from spotmix.application.services.track_aggregator import TrackAggregator

__all__ = [
    "AutoUpdateService",
    "CatalogServices",
    "PlaylistFillService",
    "PlaylistUpdateResult",
    "Session",
    "SessionStore",
    "TrackAggregator",
    "build_auto_update_marker",
    "build_catalog_cache",
    "build_catalog_services",
    "load_playlist_ids",
    "parse_artist_ids_from_description",
    "select_random_tracks",
    "with_auto_update_marker",
]
