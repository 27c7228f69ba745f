"""Content-addressed disk cache with per-entry TTL.

Hey future me - one JSON file per key, named by the MD5 of the logical key
("artist-albums:<id>:20:0" -> "3f2a...e1.json"). Hashing keeps filenames safe
and bounded no matter what the key contains. There is NO index file: an entry
exists if and only if its file exists.

File format: {"data": <value>, "timestamp": <unix seconds>, "ttl": <seconds or null>}

Every failure degrades: unreadable/corrupt file -> miss, failed write -> False.
The aggregation logic has to be correct even if nothing ever gets persisted.
"""

import asyncio
import contextlib
import hashlib
import json
import logging
import os
import time
import uuid
from pathlib import Path
from typing import Any

from spotmix.application.cache.base_cache import BaseCache, CacheEntry, Clock

logger = logging.getLogger(__name__)


class FileCache(BaseCache):
    """Cache backed by one file per key on local disk."""

    SUFFIX = ".json"
    TMP_SUFFIX = ".tmp"

    def __init__(self, cache_dir: Path | str, clock: Clock = time.time) -> None:
        """Initialize the cache and make sure the directory exists.

        Args:
            cache_dir: Directory that exclusively holds cache entry files
            clock: Returns current Unix time in seconds (injectable for tests)
        """
        self.cache_dir = Path(cache_dir)
        self._clock = clock
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            # Not fatal - every read becomes a miss and every write reports False.
            logger.warning(f"Cache directory {self.cache_dir} unavailable: {e}")

    def path_for(self, key: str) -> Path:
        """Return the file that stores `key`."""
        digest = hashlib.md5(key.encode("utf-8"), usedforsecurity=False).hexdigest()
        return self.cache_dir / f"{digest}{self.SUFFIX}"

    async def get(self, key: str, ttl: float | None = None) -> Any | None:
        """Get value from cache; expired entries are deleted on read."""
        return await asyncio.to_thread(self._get_sync, key, ttl)

    async def set(self, key: str, value: Any, ttl: float | None = None) -> bool:
        """Write value to cache, overwriting any previous entry."""
        return await asyncio.to_thread(self._set_sync, key, value, ttl)

    async def delete(self, key: str) -> bool:
        """Delete the entry for `key` if present."""
        return await asyncio.to_thread(self._delete_sync, key)

    async def clear(self) -> int:
        """Remove every entry file in the cache directory."""
        return await asyncio.to_thread(self._clear_sync)

    def _get_sync(self, key: str, ttl: float | None) -> Any | None:
        path = self.path_for(key)
        try:
            if not path.exists():
                return None

            entry = CacheEntry.from_dict(json.loads(path.read_text(encoding="utf-8")))

            if entry.is_expired(self._clock(), ttl):
                path.unlink(missing_ok=True)
                logger.debug(f"Cache expired: {key}")
                return None

            return entry.data
        except (OSError, ValueError, TypeError) as e:
            # Corrupt file, half-deleted by another process, permissions... all just a miss.
            logger.warning(f"Cache read error for {key}: {e}")
            return None

    # Hey future me - we write to a unique temp file and os.replace() it into place. Replace is
    # atomic on POSIX and Windows, so a concurrent reader sees either the old entry or the new
    # one, never half a JSON document. Two processes writing the same key: last one wins, fine.
    def _set_sync(self, key: str, value: Any, ttl: float | None) -> bool:
        path = self.path_for(key)
        tmp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex}{self.TMP_SUFFIX}")
        entry = CacheEntry(data=value, timestamp=self._clock(), ttl=ttl)
        try:
            payload = json.dumps(entry.to_dict())
            tmp_path.write_text(payload, encoding="utf-8")
            os.replace(tmp_path, path)
            return True
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Cache write error for {key}: {e}")
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            return False

    def _delete_sync(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            if path.exists():
                path.unlink()
                return True
            return False
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Cache delete error for {key}: {e}")
            return False

    # Temp files left behind by a crash mid-write are swept too, but only entries are counted.
    def _clear_sync(self) -> int:
        removed = 0
        try:
            files = list(self.cache_dir.glob(f"*{self.SUFFIX}"))
            files += self.cache_dir.glob(f"*{self.TMP_SUFFIX}")
        except OSError as e:
            logger.warning(f"Cache clear error: {e}")
            return 0

        for file in files:
            try:
                file.unlink()
                if file.suffix == self.SUFFIX:
                    removed += 1
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Cache clear could not remove {file.name}: {e}")

        logger.info(f"Cache cleared: {removed} entries removed from {self.cache_dir}")
        return removed
