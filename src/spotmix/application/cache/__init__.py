"""Cache layer for catalog listings."""

from spotmix.application.cache.base_cache import BaseCache, CacheEntry, InMemoryCache
from spotmix.application.cache.file_cache import FileCache
from spotmix.application.cache.spotify_cache import SpotifyCatalogCache

__all__ = [
    "BaseCache",
    "CacheEntry",
    "FileCache",
    "InMemoryCache",
    "SpotifyCatalogCache",
]
