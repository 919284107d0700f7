"""
Django implementation of the LicenseStore port.

This adapter persists options as LicenseOption rows.
"""
import logging
from typing import Any, Optional

from core.domain.value_objects import StoreScope
from licenses.infrastructure.models import LicenseOption
from licenses.ports.license_store import LicenseStore

logger = logging.getLogger(__name__)


class DjangoOptionStore(LicenseStore):
    """
    Django ORM implementation of LicenseStore.

    Values are stored as text. Database errors propagate to the caller.
    """

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
        # pylint: disable=no-member
        value = (
            LicenseOption.objects.filter(scope=scope.value, name=name)
            .values_list("value", flat=True)
            .first()
        )
        if value is None:
            return default
        return value

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
        # pylint: disable=no-member
        _, created = LicenseOption.objects.update_or_create(
            scope=scope.value,
            name=name,
            defaults={"value": "" if value is None else str(value)},
        )
        logger.debug("Option %s: %s:%s", "created" if created else "updated", scope.value, name)
        return True

    def delete(self, name: str, scope: StoreScope = StoreScope.SITE) -> bool:
        """
        Delete a stored value.

        Args:
            name: Option name
            scope: Site or network scope

        Returns:
            True if a value was deleted, False if none was stored
        """
        # pylint: disable=no-member
        deleted, _ = LicenseOption.objects.filter(scope=scope.value, name=name).delete()
        if deleted:
            logger.debug("Option deleted: %s:%s", scope.value, name)
        return deleted > 0
