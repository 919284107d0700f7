"""
App configuration for Plugin License Client.
"""

import logging
import os

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class PluginLicenseClientConfig(AppConfig):
    """App configuration for PluginLicenseClient."""

    name = "PluginLicenseClient"
    verbose_name = "Plugin License Client"

    def ready(self):
        """Called when Django starts."""
        if not getattr(settings, "OBSERVABILITY_ENABLED", False):
            return

        # Django's reloader runs the project twice; only the serving process sets up
        if os.environ.get("RUN_MAIN") == "false":
            return

        # Only setup once
        if not hasattr(self, "_initialized"):
            logger.info("Setting up observability...")
            self.setup_observability()
            self._initialized = True
            logger.info("Observability setup complete")

    def setup_observability(self):
        """Setup observability after apps are ready."""
        from core.instrumentation import setup_opentelemetry

        setup_opentelemetry()
