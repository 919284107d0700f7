"""
License manager.

Single authority for license state transitions of a site: stores the
license id of each plugin, activates and deactivates it against the
licensing service, and answers (cached) validity checks.

Ordering rules:
- a license id is required before activating, deactivating or checking;
- an activation key is required before deactivating or checking remotely.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional

from core.domain.exceptions import MalformedResponseError, NoLicenseFoundError, PLSClientError
from core.domain.value_objects import Environment, PluginSlug, StoreScope
from core.instrumentation import Status, StatusCode, get_tracer
from core.metrics import license_operations_total
from licenses.application.services.license_status_cache import LicenseStatusCache
from licenses.domain.config import LicenseConfig, SiteDefaults
from licenses.domain.license_record import ActivationKey, LicenseRecord
from licenses.domain.services import OptionNames
from licenses.ports.license_store import LicenseStore
from licenses.ports.licensing_service import LicensingServicePort

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


def _response_field(response: Dict[str, Any], field: str) -> Optional[Any]:
    """Return response["data"][field], or None when absent."""
    data = response.get("data") if isinstance(response, dict) else None
    if not isinstance(data, dict):
        return None
    return data.get(field)


class LicenseManager:
    """
    Activation state manager for one site.

    Example:
        manager = LicenseManager(store, client, status_cache, config)
        manager.activate("acme-plugin", "lic-123")
        manager.check("acme-plugin")
    """

    def __init__(
        self,
        store: LicenseStore,
        client: LicensingServicePort,
        status_cache: LicenseStatusCache,
        config: Optional[LicenseConfig] = None,
        site_defaults: Optional[SiteDefaults] = None,
    ):
        """
        Args:
            store: Persistence for license ids and activation keys
            client: Remote licensing service
            status_cache: Cache of remote validity checks
            config: Environment, cache TTL, timeout and scope
            site_defaults: Activation payload defaults
        """
        self.store = store
        self.client = client
        self.status_cache = status_cache
        self.config = config or LicenseConfig()
        self.site_defaults = site_defaults or SiteDefaults()

    @property
    def environment(self) -> Environment:
        return self.config.environment

    @property
    def scope(self) -> StoreScope:
        return StoreScope.for_network(self.config.network)

    @contextmanager
    def _operation(self, operation: str, plugin_slug: str):
        """Trace, log and count one license operation."""
        with tracer.start_as_current_span(f"license.{operation}") as span:
            span.set_attribute("plugin.slug", plugin_slug)
            span.set_attribute("pls.environment", self.environment.value)
            span.set_attribute("pls.scope", self.scope.value)
            try:
                yield span
            except PLSClientError as e:
                span.set_status(Status(StatusCode.ERROR, e.code))
                license_operations_total.labels(
                    operation=operation, environment=self.environment.value, outcome=e.code.lower()
                ).inc()
                logger.warning("License %s failed for %s: %s - %s", operation, plugin_slug, e.code, e.message)
                raise
            license_operations_total.labels(
                operation=operation, environment=self.environment.value, outcome="success"
            ).inc()

    def activate(self, plugin_slug: str, license_id: Optional[str] = None, args: Optional[Dict[str, Any]] = None) -> bool:
        """
        Activate the license of a plugin for this site.

        Args:
            plugin_slug: Plugin to activate
            license_id: License to activate; stored (overwriting) when given,
                read from the store otherwise
            args: Payload values overriding domain_name and email defaults

        Returns:
            True once the activation key is stored

        Raises:
            NoLicenseFoundError: No license id given or stored
            MalformedResponseError: Response without data.activation_key
            RemoteFailureError: Non-200 response
            TransportError: Licensing service unreachable
        """
        with self._operation("activate", plugin_slug) as span:
            payload = {**self.site_defaults.as_payload(), **(args or {})}

            if license_id:
                self.store_license_id(plugin_slug, license_id)
            else:
                license_id = self.get_license_id(plugin_slug)

            response = self.client.activate(license_id, payload)

            activation_key = _response_field(response, "activation_key")
            if not isinstance(activation_key, str) or not activation_key:
                raise MalformedResponseError(missing_field="data.activation_key")

            key = ActivationKey(PluginSlug(plugin_slug), self.environment, activation_key)
            stored = self.store.set(self._activation_key_option(plugin_slug), key.key, self.scope)
            span.set_attribute("activation.stored", stored)
            logger.info("License activated for %s (%s): %s", plugin_slug, self.environment.value, key.short)
            return stored

    def deactivate(self, plugin_slug: str) -> bool:
        """
        Deactivate the license of a plugin for this site.

        Without a stored activation key the plugin is already inactive and
        the licensing service is not called. When the remote call fails the
        key is kept so the deactivation can be retried.

        Args:
            plugin_slug: Plugin to deactivate

        Returns:
            True

        Raises:
            NoLicenseFoundError: No license id stored
            RemoteFailureError: Non-200 response
            TransportError: Licensing service unreachable
        """
        with self._operation("deactivate", plugin_slug) as span:
            license_id = self.get_license_id(plugin_slug)

            activation_key = self.get_activation_key(plugin_slug)
            if not activation_key:
                span.set_attribute("activation.present", False)
                logger.debug("No activation key for %s, nothing to deactivate", plugin_slug)
                return True

            self.client.deactivate(license_id, activation_key)

            self.store.delete(self._activation_key_option(plugin_slug), self.scope)
            self.status_cache.invalidate(plugin_slug, self.environment, activation_key)
            logger.info("License deactivated for %s (%s)", plugin_slug, self.environment.value)
            return True

    def check(self, plugin_slug: str, force: bool = False) -> bool:
        """
        Check whether the license of a plugin is valid.

        Remote results, valid or not, are cached for the configured TTL.

        Args:
            plugin_slug: Plugin to check
            force: Skip the cache and ask the licensing service

        Returns:
            True if valid; False if invalid or not activated

        Raises:
            NoLicenseFoundError: No license id stored
            MalformedResponseError: Response without a boolean data.valid
            RemoteFailureError: Non-200 response
            TransportError: Licensing service unreachable
        """
        with self._operation("check", plugin_slug) as span:
            self.get_license_id(plugin_slug)

            activation_key = self.get_activation_key(plugin_slug)
            if not activation_key:
                span.set_attribute("activation.present", False)
                return False

            if not force:
                cached = self.status_cache.get(plugin_slug, self.environment, activation_key)
                if cached is not None:
                    span.set_attribute("cache.hit", True)
                    return cached.valid

            span.set_attribute("cache.hit", False)
            response = self.client.status(activation_key)

            valid = _response_field(response, "valid")
            if not isinstance(valid, bool):
                raise MalformedResponseError(missing_field="data.valid")

            self.status_cache.set(plugin_slug, self.environment, activation_key, valid, self.config.cache_ttl)
            span.set_attribute("license.valid", valid)
            return valid

    def store_license_id(self, plugin_slug: str, license_id: str) -> bool:
        """
        Store the license id of a plugin, overwriting any previous one.

        Raises:
            ValueError: Invalid plugin slug or license id
        """
        record = LicenseRecord.create(plugin_slug, self.environment, license_id)
        self.store.set(self._license_id_option(plugin_slug), str(record.license_id), self.scope)
        logger.info("License ID stored for %s (%s)", plugin_slug, self.environment.value)
        return True

    def get_license_id(self, plugin_slug: str) -> str:
        """
        Return the stored license id of a plugin.

        Raises:
            NoLicenseFoundError: No license id stored
        """
        license_id = self.store.get(self._license_id_option(plugin_slug), "", self.scope)
        if not license_id:
            raise NoLicenseFoundError(plugin_slug)
        return license_id

    def delete_license_id(self, plugin_slug: str) -> bool:
        """Delete the stored license id of a plugin."""
        return self.store.delete(self._license_id_option(plugin_slug), self.scope)

    def get_activation_key(self, plugin_slug: str) -> str:
        """Return the stored activation key of a plugin, or an empty string."""
        return self.store.get(self._activation_key_option(plugin_slug), "", self.scope) or ""

    def _license_id_option(self, plugin_slug: str) -> str:
        return OptionNames.license_id(str(PluginSlug(plugin_slug)), self.environment)

    def _activation_key_option(self, plugin_slug: str) -> str:
        return OptionNames.activation_key(str(PluginSlug(plugin_slug)), self.environment)
