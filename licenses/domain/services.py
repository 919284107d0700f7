"""
License domain services.

Naming rules for everything the client persists or caches.
"""
import hashlib

from core.domain.value_objects import Environment


class OptionNames:
    """Builds persisted option names and status cache keys."""

    LICENSE_ID_PREFIX = "pls_license_id"
    ACTIVATION_KEY_PREFIX = "pls_activation_key"
    STATUS_CACHE_PREFIX = "pls:license:status"

    @staticmethod
    def license_id(plugin_slug: str, environment: Environment) -> str:
        """Option name holding the license id of a plugin."""
        return f"{OptionNames.LICENSE_ID_PREFIX}_{environment.value}_{plugin_slug}"

    @staticmethod
    def activation_key(plugin_slug: str, environment: Environment) -> str:
        """Option name holding the activation key of a plugin."""
        return f"{OptionNames.ACTIVATION_KEY_PREFIX}_{environment.value}_{plugin_slug}"

    @staticmethod
    def status_cache_key(plugin_slug: str, environment: Environment, activation_key: str) -> str:
        """
        Cache key for the validity of one activation.

        The activation key is part of the cache key, so a new key never
        reads a status computed for an old one.
        """
        key_hash = hashlib.sha256(activation_key.encode()).hexdigest()[:16]
        return f"{OptionNames.STATUS_CACHE_PREFIX}:{environment.value}:{plugin_slug}:{key_hash}"
