"""Base cache interface and in-memory implementation."""

import asyncio
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    """Cache entry with value and metadata.

    timestamp is Unix seconds at write time, ttl is seconds (None = never expires).
    """

    data: Any
    timestamp: float
    ttl: float | None = None

    # Hey future me, the caller may pass its own ttl on read - that one WINS over the stored ttl.
    # This lets one reader be stricter than the writer. No ttl anywhere means permanent. If the
    # system clock jumps backwards, age goes negative and the entry simply counts as fresh.
    def is_expired(self, now: float, ttl: float | None = None) -> bool:
        """Check if cache entry is expired at `now`."""
        effective_ttl = self.ttl if ttl is None else ttl
        if effective_ttl is None:
            return False
        return now - self.timestamp > effective_ttl

    def to_dict(self) -> dict[str, Any]:
        return {"data": self.data, "timestamp": self.timestamp, "ttl": self.ttl}

    @classmethod
    def from_dict(cls, raw: Any) -> "CacheEntry":
        """Rebuild an entry from its JSON document.

        Raises:
            ValueError: If the document is not a cache entry
        """
        if not isinstance(raw, dict) or "data" not in raw or "timestamp" not in raw:
            raise ValueError("Not a cache entry document")
        ttl = raw.get("ttl")
        return cls(
            data=raw["data"],
            timestamp=float(raw["timestamp"]),
            ttl=float(ttl) if ttl is not None else None,
        )


class BaseCache(ABC):
    """Base cache interface for all cache implementations.

    The cache is an optimization, never a source of truth: implementations must
    turn every failure into a miss (reads) or a reported loss (writes).
    """

    @abstractmethod
    async def get(self, key: str, ttl: float | None = None) -> Any | None:
        """Get value from cache.

        Args:
            key: Cache key
            ttl: Maximum age in seconds (overrides the ttl stored with the entry)

        Returns:
            Cached value if found and not expired, None otherwise
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: float | None = None) -> bool:
        """Set value in cache, overwriting any previous entry.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: Time to live in seconds (None = permanent)

        Returns:
            True if the entry was stored, False if the write was lost
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete value from cache.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def clear(self) -> int:
        """Clear all entries from cache.

        Returns:
            Number of entries removed
        """
        pass

    async def exists(self, key: str, ttl: float | None = None) -> bool:
        """Check if key exists in cache and is not expired.

        Same side effect as get(): an expired entry is deleted.
        """
        return await self.get(key, ttl) is not None


class InMemoryCache(BaseCache):
    """In-memory cache implementation using a dictionary.

    Used by tests and when the disk cache is disabled. Nothing survives a restart.
    """

    def __init__(self, clock: Clock = time.time) -> None:
        """Initialize in-memory cache.

        Args:
            clock: Returns current Unix time in seconds (injectable for tests)
        """
        self._cache: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    async def get(self, key: str, ttl: float | None = None) -> Any | None:
        """Get value from cache (expired entries are evicted on read)."""
        async with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None

            if entry.is_expired(self._clock(), ttl):
                del self._cache[key]
                return None

            return entry.data

    async def set(self, key: str, value: Any, ttl: float | None = None) -> bool:
        """Set value in cache."""
        async with self._lock:
            self._cache[key] = CacheEntry(data=value, timestamp=self._clock(), ttl=ttl)
        return True

    async def delete(self, key: str) -> bool:
        """Delete value from cache."""
        async with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    async def clear(self) -> int:
        """Clear all entries from cache."""
        async with self._lock:
            count = len(self._cache)
            self._cache.clear()
            return count

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics (unlocked snapshot, entries judged by their stored ttl)."""
        now = self._clock()
        total_entries = len(self._cache)
        expired_entries = sum(1 for entry in self._cache.values() if entry.is_expired(now))

        return {
            "total_entries": total_entries,
            "active_entries": total_entries - expired_entries,
            "expired_entries": expired_entries,
        }
