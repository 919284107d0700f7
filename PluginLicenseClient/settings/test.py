"""
Test settings for PluginLicenseClient.
"""

from .base import *  # noqa: F403, F401

DEBUG = False

# Use in-memory SQLite for faster tests
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Use in-memory cache for tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# Password hashers for faster tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

PLS_CLIENT = {
    "ENVIRONMENT": "staging",
    "CACHE_TTL": 3600,
    "TIMEOUT": 5,
    "NETWORK": False,
    "SITE_URL": "https://site.example.com",
    "ADMIN_EMAIL": "admin@example.com",
}

OBSERVABILITY_ENABLED = False

# Disable logging during tests
LOGGING_CONFIG = None
