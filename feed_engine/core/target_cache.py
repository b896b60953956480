"""Per-batch cache for resolved targets and insights.

Entries are keyed by (farm_id, batch_id) and expire after a short TTL.
Writes that can change a batch's targets or rations invalidate the
affected entries explicitly instead of waiting for expiry.

Every invalidation bumps a version counter. Readers take the version
before querying and pass it back to `set`, so a result computed from
rows read before an invalidation is never stored.
"""

import threading
import time
from collections.abc import Callable
from typing import Any, Protocol
from uuid import UUID

from feed_engine.config import settings
from feed_engine.infra.logging import get_logger

logger = get_logger(__name__)

CacheKey = tuple[UUID, UUID]
CacheVersion = tuple[int, int]


class ResultCache(Protocol):
    """What services need from a cache of batch results."""

    def version(self, farm_id: UUID, batch_id: UUID) -> CacheVersion: ...

    def get(self, farm_id: UUID, batch_id: UUID, kind: str) -> Any | None: ...

    def set(
        self,
        farm_id: UUID,
        batch_id: UUID,
        kind: str,
        value: Any,
        version: CacheVersion | None = None,
    ) -> None: ...

    def invalidate_batch(self, farm_id: UUID, batch_id: UUID) -> None: ...

    def invalidate_farm(self, farm_id: UUID) -> None: ...


class TargetCache:
    """Thread-safe TTL cache for batch resolution results.

    Each (farm_id, batch_id) entry holds named values ("targets",
    "insights"), each with its own expiry time.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: Entry lifetime (defaults to settings; 0 disables caching)
            clock: Monotonic clock, injectable for tests
        """
        self._ttl = settings.target_cache_ttl_seconds if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._entries: dict[CacheKey, dict[str, tuple[float, Any]]] = {}
        self._farm_versions: dict[UUID, int] = {}
        self._batch_versions: dict[CacheKey, int] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    def version(self, farm_id: UUID, batch_id: UUID) -> CacheVersion:
        """Current invalidation version of a batch entry."""
        with self._lock:
            return self._version((farm_id, batch_id))

    def get(self, farm_id: UUID, batch_id: UUID, kind: str) -> Any | None:
        """Return a cached value, or None when missing or expired."""
        if not self.enabled:
            return None

        key = (farm_id, batch_id)
        with self._lock:
            values = self._entries.get(key)
            if values is None or kind not in values:
                return None

            expires_at, value = values[kind]
            if self._clock() >= expires_at:
                del values[kind]
                if not values:
                    del self._entries[key]
                return None

            return value

    def set(
        self,
        farm_id: UUID,
        batch_id: UUID,
        kind: str,
        value: Any,
        version: CacheVersion | None = None,
    ) -> None:
        """Store a value under the batch entry.

        Args:
            version: Version read before the value was computed; the value
                is dropped when the entry was invalidated since
        """
        if not self.enabled:
            return

        key = (farm_id, batch_id)
        with self._lock:
            if version is not None and version != self._version(key):
                logger.debug(
                    "Outdated cache value dropped",
                    farm_id=str(farm_id),
                    batch_id=str(batch_id),
                    kind=kind,
                )
                return
            self._entries.setdefault(key, {})[kind] = (self._clock() + self._ttl, value)

    def invalidate_batch(self, farm_id: UUID, batch_id: UUID) -> None:
        """Drop everything cached for one batch."""
        key = (farm_id, batch_id)
        with self._lock:
            self._batch_versions[key] = self._batch_versions.get(key, 0) + 1
            removed = self._entries.pop(key, None) is not None

        if removed:
            logger.debug("Batch cache invalidated", farm_id=str(farm_id), batch_id=str(batch_id))

    def invalidate_farm(self, farm_id: UUID) -> None:
        """Drop every batch entry of a farm."""
        with self._lock:
            self._farm_versions[farm_id] = self._farm_versions.get(farm_id, 0) + 1
            keys = [key for key in self._entries if key[0] == farm_id]
            for key in keys:
                del self._entries[key]

        if keys:
            logger.debug("Farm cache invalidated", farm_id=str(farm_id), batches=len(keys))

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()

        logger.info("Target cache cleared", entries_removed=count)

    def _version(self, key: CacheKey) -> CacheVersion:
        return self._farm_versions.get(key[0], 0), self._batch_versions.get(key, 0)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class TransactionCache:
    """Request-scoped view of a TargetCache.

    Invalidations apply at once and are recorded; `flush` applies them
    again once the request transaction has committed, dropping anything
    cached from rows read before the commit.
    """

    def __init__(self, cache: TargetCache) -> None:
        self._cache = cache
        self._batches: set[CacheKey] = set()
        self._farms: set[UUID] = set()

    def version(self, farm_id: UUID, batch_id: UUID) -> CacheVersion:
        return self._cache.version(farm_id, batch_id)

    def get(self, farm_id: UUID, batch_id: UUID, kind: str) -> Any | None:
        return self._cache.get(farm_id, batch_id, kind)

    def set(
        self,
        farm_id: UUID,
        batch_id: UUID,
        kind: str,
        value: Any,
        version: CacheVersion | None = None,
    ) -> None:
        self._cache.set(farm_id, batch_id, kind, value, version=version)

    def invalidate_batch(self, farm_id: UUID, batch_id: UUID) -> None:
        self._cache.invalidate_batch(farm_id, batch_id)
        self._batches.add((farm_id, batch_id))

    def invalidate_farm(self, farm_id: UUID) -> None:
        self._cache.invalidate_farm(farm_id)
        self._farms.add(farm_id)

    @property
    def pending(self) -> bool:
        return bool(self._batches or self._farms)

    def flush(self) -> None:
        """Re-apply recorded invalidations after commit."""
        for farm_id in self._farms:
            self._cache.invalidate_farm(farm_id)
        for farm_id, batch_id in self._batches:
            if farm_id not in self._farms:
                self._cache.invalidate_batch(farm_id, batch_id)
        self.discard()

    def discard(self) -> None:
        self._batches.clear()
        self._farms.clear()


# Global singleton instance
_target_cache: TargetCache | None = None


def get_target_cache() -> TargetCache:
    """Get or create the global target cache singleton."""
    global _target_cache

    if _target_cache is None:
        _target_cache = TargetCache()
        logger.info("Created global TargetCache singleton")

    return _target_cache
