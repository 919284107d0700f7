"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Optional

PLUGIN_SLUG_PATTERN = re.compile(r"^[\w.-]+$")


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class PluginSlug(ValueObject):
    """Plugin slug value object."""

    value: str

    def __post_init__(self):
        """Validate slug format."""
        if not self.value:
            raise ValueError("Plugin slug cannot be empty")
        if not PLUGIN_SLUG_PATTERN.match(self.value):
            raise ValueError(f"Invalid plugin slug format: {self.value}")

    def __str__(self) -> str:
        """Return slug as string."""
        return self.value


@dataclass(frozen=True)
class LicenseId(ValueObject):
    """License identifier value object."""

    value: str

    def __post_init__(self):
        """Validate license id."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("License ID cannot be empty")
        if "/" in self.value:
            raise ValueError(f"Invalid license ID: {self.value}")

    def __str__(self) -> str:
        """Return license id as string."""
        return self.value


class Environment(Enum):
    """Licensing environment value object."""

    PRODUCTION = "production"
    STAGING = "staging"

    @classmethod
    def resolve(cls, value: Optional[object]) -> "Environment":
        """
        Resolve an environment name.

        Unknown or missing values fall back to production.

        Args:
            value: Environment name or Environment

        Returns:
            Environment
        """
        if isinstance(value, cls):
            return value
        for environment in cls:
            if environment.value == value:
                return environment
        return cls.PRODUCTION

    def __str__(self) -> str:
        """Return environment as string."""
        return self.value


class StoreScope(Enum):
    """Persistence scope: a single site or the whole network of sites."""

    SITE = "site"
    NETWORK = "network"

    @classmethod
    def for_network(cls, network: bool) -> "StoreScope":
        """Return the scope selected by a network flag."""
        return cls.NETWORK if network else cls.SITE

    def __str__(self) -> str:
        """Return scope as string."""
        return self.value
