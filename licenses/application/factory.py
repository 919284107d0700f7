"""
LicenseManager wiring.

Builds a manager from Django settings with the Django-backed store and
cache and the HTTP licensing client.
"""
from typing import Optional

from core.infrastructure.cache_adapters import DjangoCacheAdapter
from licenses.application.services.license_manager import LicenseManager
from licenses.application.services.license_status_cache import LicenseStatusCache
from licenses.domain.config import LicenseConfig, SiteDefaults
from licenses.infrastructure.clients.licensing_client import RequestsLicensingClient
from licenses.infrastructure.repositories.django_option_store import DjangoOptionStore


def build_license_manager(
    config: Optional[LicenseConfig] = None,
    site_defaults: Optional[SiteDefaults] = None,
    **overrides,
) -> LicenseManager:
    """
    Build a LicenseManager.

    Args:
        config: Base config, read from settings when omitted
        site_defaults: Activation payload defaults, read from settings when omitted
        **overrides: environment, cache_ttl, timeout or network values
            applied on top of the base config

    Returns:
        LicenseManager
    """
    config = (config or LicenseConfig.from_settings()).merged(**overrides)
    return LicenseManager(
        store=DjangoOptionStore(),
        client=RequestsLicensingClient(config.environment, config.timeout),
        status_cache=LicenseStatusCache(DjangoCacheAdapter()),
        config=config,
        site_defaults=site_defaults or SiteDefaults.from_settings(),
    )
