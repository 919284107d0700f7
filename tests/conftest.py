"""
Pytest configuration and shared fixtures.
"""

import pytest
from django.core.cache import cache

from core.domain.value_objects import Environment, StoreScope
from core.infrastructure.cache_adapters import DjangoCacheAdapter
from licenses.application.services.license_manager import LicenseManager
from licenses.application.services.license_status_cache import LicenseStatusCache
from licenses.domain.config import LicenseConfig, SiteDefaults
from licenses.infrastructure.repositories.django_option_store import DjangoOptionStore
from licenses.ports.license_store import LicenseStore
from licenses.ports.licensing_service import LicensingServicePort


class FakeClock:
    """Clock returning a fixed time until advanced."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class InMemoryLicenseStore(LicenseStore):
    """LicenseStore keeping options in a dict."""

    def __init__(self):
        self.options = {}

    def get(self, name, default=None, scope=StoreScope.SITE):
        return self.options.get((scope, name), default)

    def set(self, name, value, scope=StoreScope.SITE):
        self.options[(scope, name)] = value
        return True

    def delete(self, name, scope=StoreScope.SITE):
        return self.options.pop((scope, name), None) is not None


class FakeLicensingService(LicensingServicePort):
    """
    LicensingServicePort recording every call.

    Each operation answers with the configured response, or raises the
    configured error.
    """

    def __init__(self):
        self.calls = []
        self.responses = {
            "activate": {"data": {"activation_key": "key-abc"}},
            "deactivate": {"data": {}},
            "status": {"data": {"valid": True}},
        }
        self.errors = {}

    def calls_to(self, operation):
        return [call for call in self.calls if call[0] == operation]

    def _answer(self, operation, *args):
        self.calls.append((operation, *args))
        if operation in self.errors:
            raise self.errors[operation]
        return self.responses[operation]

    def activate(self, license_id, payload):
        return self._answer("activate", license_id, payload)

    def deactivate(self, license_id, activation_key):
        return self._answer("deactivate", license_id, activation_key)

    def status(self, activation_key):
        return self._answer("status", activation_key)


@pytest.fixture(autouse=True)
def clear_cache():
    """Fixture clearing the Django cache around each test."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def clock():
    """Fixture for a controllable clock."""
    return FakeClock()


@pytest.fixture
def cache_adapter(clock):
    """Fixture for DjangoCacheAdapter driven by the fake clock."""
    return DjangoCacheAdapter(clock=clock)


@pytest.fixture
def status_cache(cache_adapter):
    """Fixture for LicenseStatusCache."""
    return LicenseStatusCache(cache_adapter)


@pytest.fixture
def license_store():
    """Fixture for an in-memory LicenseStore."""
    return InMemoryLicenseStore()


@pytest.fixture
def option_store(db):
    """Fixture for the Django LicenseStore."""
    return DjangoOptionStore()


@pytest.fixture
def licensing_service():
    """Fixture for a recording licensing service."""
    return FakeLicensingService()


@pytest.fixture
def license_config():
    """Fixture for a staging LicenseConfig with a one hour cache."""
    return LicenseConfig(environment=Environment.STAGING, cache_ttl=3600, timeout=5)


@pytest.fixture
def site_defaults():
    """Fixture for SiteDefaults."""
    return SiteDefaults(domain_name="https://site.example.com", email="admin@example.com")


@pytest.fixture
def license_manager(license_store, licensing_service, status_cache, license_config, site_defaults):
    """Fixture for LicenseManager over in-memory collaborators."""
    return LicenseManager(
        store=license_store,
        client=licensing_service,
        status_cache=status_cache,
        config=license_config,
        site_defaults=site_defaults,
    )


@pytest.fixture
def patch_licensing_service(monkeypatch, licensing_service):
    """Fixture routing managers built from settings to the recording licensing service."""
    monkeypatch.setattr(
        "licenses.application.factory.RequestsLicensingClient",
        lambda *args, **kwargs: licensing_service,
    )
    return licensing_service


@pytest.fixture
def api_client():
    """Fixture for DRF API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def staff_user(db):
    """Fixture for a staff user."""
    from django.contrib.auth import get_user_model

    return get_user_model().objects.create_user(
        username="site-admin", password="secret", email="admin@example.com", is_staff=True
    )


@pytest.fixture
def staff_client(api_client, staff_user):
    """Fixture for an API client authenticated as staff."""
    api_client.force_authenticate(user=staff_user)
    return api_client
