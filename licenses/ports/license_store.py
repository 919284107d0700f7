"""
License store port (interface).

This defines the contract for the key/value persistence the license
manager relies on. Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Any, Optional

from core.domain.value_objects import StoreScope


class LicenseStore(ABC):
    """
    Abstract key/value store for license ids and activation keys.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Every operation has a site-local and a network-wide variant,
    selected through ``scope``.
    """

    @abstractmethod
    def get(self, name: str, default: Optional[Any] = None, scope: StoreScope = StoreScope.SITE) -> Any:
        """
        Read a stored value.

        Args:
            name: Option name
            default: Value returned when nothing is stored
            scope: Site or network scope

        Returns:
            Stored value or default
        """
        pass

    @abstractmethod
    def set(self, name: str, value: Any, scope: StoreScope = StoreScope.SITE) -> bool:
        """
        Store a value, overwriting any previous one.

        Args:
            name: Option name
            value: Value to store
            scope: Site or network scope

        Returns:
            True once the value is stored
        """
        pass

    @abstractmethod
    def delete(self, name: str, scope: StoreScope = StoreScope.SITE) -> bool:
        """
        Delete a stored value.

        Args:
            name: Option name
            scope: Site or network scope

        Returns:
            True if a value was deleted, False if none was stored
        """
        pass
