"""Unit tests for SpotifyCatalogCache."""

import pytest

from spotmix.application.cache.base_cache import InMemoryCache
from spotmix.application.cache.spotify_cache import SpotifyCatalogCache

TWO_MONTHS = 60 * 24 * 60 * 60


class TestSpotifyCatalogCache:
    @pytest.fixture
    def backend(self, clock) -> InMemoryCache:
        return InMemoryCache(clock=clock)

    @pytest.fixture
    def cache(self, backend: InMemoryCache) -> SpotifyCatalogCache:
        return SpotifyCatalogCache(backend)

    def test_keys_include_paging(self) -> None:
        assert (
            SpotifyCatalogCache.make_artist_albums_key("a1", 20, 0) == "artist-albums:a1:20:0"
        )
        assert (
            SpotifyCatalogCache.make_album_tracks_key("b1", 30, 0) == "album-tracks:b1:30:0"
        )

    async def test_artist_albums_expire_after_two_months(
        self, cache: SpotifyCatalogCache, clock
    ) -> None:
        page = {"items": [{"id": "alb"}]}
        await cache.set_artist_albums("a1", 20, 0, page)

        clock.advance(TWO_MONTHS)
        assert await cache.get_artist_albums("a1", 20, 0) == page

        clock.advance(1)
        assert await cache.get_artist_albums("a1", 20, 0) is None

    async def test_album_tracks_are_permanent(
        self, cache: SpotifyCatalogCache, clock
    ) -> None:
        page = {"items": [{"id": "t1"}]}
        await cache.set_album_tracks("b1", 30, 0, page)

        clock.advance(10 * TWO_MONTHS)
        assert await cache.get_album_tracks("b1", 30, 0) == page

    async def test_different_page_is_a_miss(self, cache: SpotifyCatalogCache) -> None:
        await cache.set_album_tracks("b1", 30, 0, {"items": []})
        assert await cache.get_album_tracks("b1", 30, 30) is None

    async def test_clear(self, cache: SpotifyCatalogCache) -> None:
        await cache.set_album_tracks("b1", 30, 0, {"items": []})
        await cache.set_artist_albums("a1", 20, 0, {"items": []})

        assert await cache.clear() == 2
