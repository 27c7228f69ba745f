"""Unit tests for catalog service wiring."""

from pathlib import Path

from spotmix.application.cache.base_cache import InMemoryCache
from spotmix.application.cache.file_cache import FileCache
from spotmix.application.cache.spotify_cache import SpotifyCatalogCache
from spotmix.application.services.catalog_services import (
    build_catalog_cache,
    build_catalog_services,
)
from spotmix.config import CacheSettings


class TestBuildCatalogCache:
    def test_disabled(self, tmp_path: Path) -> None:
        settings = CacheSettings(enabled=False, directory=tmp_path)
        assert build_catalog_cache(settings) is None

    def test_file_cache_by_default(self, tmp_path: Path) -> None:
        cache = build_catalog_cache(CacheSettings(enabled=True, directory=tmp_path / "c"))

        assert isinstance(cache, SpotifyCatalogCache)
        assert isinstance(cache._cache, FileCache)
        assert (tmp_path / "c").is_dir()

    def test_custom_backend(self, tmp_path: Path) -> None:
        backend = InMemoryCache()
        cache = build_catalog_cache(CacheSettings(enabled=True, directory=tmp_path), backend)

        assert cache is not None
        assert cache._cache is backend


class TestBuildCatalogServices:
    async def test_services_share_catalog(self, catalog) -> None:
        catalog.add_artist("artist", {"alb": ["t1", "t2"]})

        services = build_catalog_services(catalog)
        result = await services.fill_service.fill_playlist("p1", ["artist"], 5)

        assert services.catalog is catalog
        assert result.track_count == 2
        assert catalog.added[0][0] == "p1"
