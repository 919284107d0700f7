"""
License domain records.

LicenseRecord binds a plugin to a purchased license for one environment.
ActivationKey is the token the licensing service issues for one live
activation of that license.
"""
from dataclasses import dataclass

from core.domain.value_objects import Environment, LicenseId, PluginSlug


@dataclass(frozen=True)
class LicenseRecord:
    """Which license a plugin is bound to in an environment."""

    plugin_slug: PluginSlug
    environment: Environment
    license_id: LicenseId

    @classmethod
    def create(cls, plugin_slug: str, environment: Environment, license_id: str) -> "LicenseRecord":
        """
        Create a LicenseRecord from raw values.

        Raises:
            ValueError: If the slug or license id is invalid
        """
        return cls(
            plugin_slug=PluginSlug(plugin_slug),
            environment=Environment.resolve(environment),
            license_id=LicenseId(license_id),
        )


@dataclass(frozen=True)
class ActivationKey:
    """A live activation of a license, keyed by plugin and environment."""

    plugin_slug: PluginSlug
    environment: Environment
    key: str

    def __post_init__(self):
        if not self.key:
            raise ValueError("Activation key cannot be empty")

    @property
    def short(self) -> str:
        """Key prefix safe for logs."""
        return f"{self.key[:8]}..."
