"""
Cache adapter implementations.

Provides the Django cache implementation of CachePort.
"""

import logging
import time
from typing import Any, Callable, Optional

from django.core.cache import caches

from core.infrastructure.cache import MISS, CacheLookup, CachePort
from core.metrics import cache_hits_total, cache_misses_total

logger = logging.getLogger(__name__)

GC_TTL_FACTOR = 2


class DjangoCacheAdapter(CachePort):
    """
    Django cache adapter implementing CachePort.

    Uses Django's cache framework (can be Redis, Memcached, etc.).
    Entries are stored as envelopes and freshness is computed from the
    stored timestamp. The backend timeout only bounds how long stale
    envelopes are kept.
    """

    def __init__(self, alias: str = "default", clock: Optional[Callable[[], float]] = None):
        """
        Args:
            alias: Django cache alias
            clock: Returns the current time in seconds
        """
        self.alias = alias
        self.clock = clock or time.time

    @staticmethod
    def backend_timeout(ttl: int) -> int:
        """Seconds the backend keeps an envelope: twice the freshness window."""
        return max(int(ttl), 1) * GC_TTL_FACTOR

    @property
    def backend(self):
        return caches[self.alias]

    def get(self, key: str) -> CacheLookup:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            CacheLookup for the key
        """
        try:
            envelope = self.backend.get(key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error getting from cache: %s", e, exc_info=True)
            return MISS

        if not isinstance(envelope, dict) or "stored_at" not in envelope:
            logger.debug("Cache miss: %s", key)
            cache_misses_total.labels(result="missing").inc()
            return MISS

        stored_at = envelope["stored_at"]
        expired = self.clock() >= stored_at + envelope.get("ttl", 0)
        if expired:
            logger.debug("Cache expired: %s", key)
            cache_misses_total.labels(result="expired").inc()
        else:
            logger.debug("Cache hit: %s", key)
            cache_hits_total.inc()

        return CacheLookup(
            value=envelope.get("value"),
            found=True,
            expired=expired,
            stored_at=stored_at,
        )

    def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Freshness window in seconds
        """
        envelope = {"value": value, "stored_at": self.clock(), "ttl": int(ttl)}
        try:
            self.backend.set(key, envelope, timeout=self.backend_timeout(ttl))
            logger.debug("Cache set: %s (ttl=%s)", key, ttl)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error setting cache: %s", e, exc_info=True)

    def delete(self, key: str) -> None:
        """
        Delete a value from cache.

        Args:
            key: Cache key
        """
        try:
            self.backend.delete(key)
            logger.debug("Cache delete: %s", key)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error deleting from cache: %s", e, exc_info=True)
