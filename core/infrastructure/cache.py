"""
Cache abstraction (port).

This module defines the expiring cache interface that can be implemented
with different backends (Redis, Memcached, in-memory, etc.).

Expiry is owned by the cache entry itself: every entry remembers when it
was stored and for how long it is fresh, so callers can tell a missing
entry apart from a stale one.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class CacheLookup:
    """Result of a cache lookup."""

    value: Optional[Any]
    found: bool
    expired: bool
    stored_at: Optional[float] = None

    @property
    def hit(self) -> bool:
        """True when a fresh value was found."""
        return self.found and not self.expired


MISS = CacheLookup(value=None, found=False, expired=False)


class CachePort(ABC):
    """
    Abstract cache port.

    This defines the interface for caching operations.
    Implementations can use Redis, Memcached, or in-memory cache.
    """

    @abstractmethod
    def get(self, key: str) -> CacheLookup:
        """
        Get a value from cache.

        Args:
            key: Cache key

        Returns:
            CacheLookup telling whether the key was found and whether it expired
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Freshness window in seconds
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Delete a value from cache.

        Args:
            key: Cache key
        """
        pass
