"""
Licensing client configuration.

A LicenseConfig is an immutable value handed to every LicenseManager.
Per-request overrides produce a new config instead of mutating shared
state.
"""
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from django.conf import settings

from core.domain.value_objects import Environment

SERVERS = {
    Environment.STAGING: "https://licensing-stg.hiive.cloud",
    Environment.PRODUCTION: "https://licensing.hiive.cloud",
}

DEFAULT_CACHE_TTL = 12 * 60 * 60
DEFAULT_TIMEOUT = 5


def base_url_for(environment: Environment) -> str:
    """Return the licensing service base URL for an environment."""
    return SERVERS[Environment.resolve(environment)]


def _client_settings() -> Dict[str, Any]:
    return getattr(settings, "PLS_CLIENT", {}) or {}


def _first_admin_email() -> str:
    for admin in getattr(settings, "ADMINS", ()) or ():
        email = admin[1] if isinstance(admin, (list, tuple)) else admin
        if email:
            return email
    return ""


@dataclass(frozen=True)
class LicenseConfig:
    """Settings read by every license operation."""

    environment: Environment = Environment.PRODUCTION
    cache_ttl: int = DEFAULT_CACHE_TTL
    timeout: float = DEFAULT_TIMEOUT
    network: bool = False

    def __post_init__(self):
        object.__setattr__(self, "environment", Environment.resolve(self.environment))
        if self.cache_ttl < 0:
            raise ValueError("cache_ttl cannot be negative")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @classmethod
    def from_settings(cls) -> "LicenseConfig":
        """Build the default config from the PLS_CLIENT Django setting."""
        conf = _client_settings()
        return cls(
            environment=Environment.resolve(conf.get("ENVIRONMENT")),
            cache_ttl=int(conf.get("CACHE_TTL", DEFAULT_CACHE_TTL)),
            timeout=float(conf.get("TIMEOUT", DEFAULT_TIMEOUT)),
            network=bool(conf.get("NETWORK", False)),
        )

    def merged(
        self,
        environment: Optional[Any] = None,
        cache_ttl: Optional[int] = None,
        timeout: Optional[float] = None,
        network: Optional[bool] = None,
    ) -> "LicenseConfig":
        """
        Return a copy with the given values applied.

        None or empty values keep the current value. An unknown
        environment resolves to production.
        """
        changes: Dict[str, Any] = {}
        if environment not in (None, ""):
            changes["environment"] = Environment.resolve(environment)
        if cache_ttl is not None:
            changes["cache_ttl"] = int(cache_ttl)
        if timeout is not None:
            changes["timeout"] = float(timeout)
        if network is not None:
            changes["network"] = bool(network)
        return replace(self, **changes)

    @property
    def base_url(self) -> str:
        return base_url_for(self.environment)


@dataclass(frozen=True)
class SiteDefaults:
    """Site identity sent with activation requests unless the caller overrides it."""

    domain_name: str = ""
    email: str = ""

    @classmethod
    def from_settings(cls) -> "SiteDefaults":
        """Read SITE_URL and ADMIN_EMAIL from PLS_CLIENT, falling back to ADMINS for the email."""
        conf = _client_settings()
        return cls(
            domain_name=conf.get("SITE_URL", "") or "",
            email=conf.get("ADMIN_EMAIL", "") or _first_admin_email(),
        )

    def with_fallbacks(self, domain_name: str = "", email: str = "") -> "SiteDefaults":
        """Return a copy whose empty values are filled from the given ones."""
        return replace(
            self,
            domain_name=self.domain_name or domain_name or "",
            email=self.email or email or "",
        )

    def as_payload(self) -> Dict[str, str]:
        return {"domain_name": self.domain_name, "email": self.email}
