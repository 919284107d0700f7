"""
License status cache service.

Provides caching for remote license validity checks.
"""
import logging
from typing import Optional

from core.domain.value_objects import Environment
from core.infrastructure.cache import CachePort
from licenses.application.dto.license_dto import StatusCacheEntry
from licenses.domain.services import OptionNames

logger = logging.getLogger(__name__)


class LicenseStatusCache:
    """Service for caching license validity per activation."""

    def __init__(self, cache: CachePort):
        """
        Args:
            cache: Expiring cache backend
        """
        self.cache = cache

    @staticmethod
    def cache_key(plugin_slug: str, environment: Environment, activation_key: str) -> str:
        """Generate cache key for an activation's status."""
        return OptionNames.status_cache_key(plugin_slug, environment, activation_key)

    def get(self, plugin_slug: str, environment: Environment, activation_key: str) -> Optional[StatusCacheEntry]:
        """
        Get a fresh cached status.

        Args:
            plugin_slug: Plugin slug
            environment: Licensing environment
            activation_key: Activation the status belongs to

        Returns:
            StatusCacheEntry, or None when missing or expired
        """
        cache_key = self.cache_key(plugin_slug, environment, activation_key)
        lookup = self.cache.get(cache_key)
        if not lookup.hit:
            return None

        cached = lookup.value
        if not isinstance(cached, dict) or "valid" not in cached:
            logger.warning("Discarding malformed cached status: %s", cache_key)
            return None

        return StatusCacheEntry(
            cache_key=cache_key,
            valid=bool(cached["valid"]),
            fetched_at=lookup.stored_at,
            ttl=int(cached.get("ttl", 0)),
        )

    def set(
        self,
        plugin_slug: str,
        environment: Environment,
        activation_key: str,
        valid: bool,
        ttl: int,
    ) -> None:
        """
        Cache a status, valid or not.

        Args:
            plugin_slug: Plugin slug
            environment: Licensing environment
            activation_key: Activation the status belongs to
            valid: Validity reported by the licensing service
            ttl: Time to live in seconds
        """
        cache_key = self.cache_key(plugin_slug, environment, activation_key)
        self.cache.set(cache_key, {"valid": bool(valid), "ttl": int(ttl)}, ttl)

    def invalidate(self, plugin_slug: str, environment: Environment, activation_key: str) -> None:
        """
        Invalidate a cached status.

        Args:
            plugin_slug: Plugin slug
            environment: Licensing environment
            activation_key: Activation the status belongs to
        """
        cache_key = self.cache_key(plugin_slug, environment, activation_key)
        self.cache.delete(cache_key)
        logger.info("Invalidated license status cache: %s", cache_key)
