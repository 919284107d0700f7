"""
Domain exceptions.

Domain exceptions represent failed license operations. They are raised
by the license manager and its collaborators and travel unmodified to
the immediate caller; the API layer translates them into responses.
"""
from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None, data: Optional[Dict[str, Any]] = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            data: Structured error details
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.data = data or {}


class PLSClientError(DomainException):
    """Base exception for licensing client errors."""

    pass


class NoLicenseFoundError(PLSClientError):
    """Raised when no license id is registered for a plugin and environment."""

    def __init__(self, plugin_slug: str, message: str = None):
        super().__init__(
            message or f"No license ID found for plugin slug {plugin_slug}",
            code="NO_LICENSE_FOUND",
            data={"plugin_slug": plugin_slug},
        )
        self.plugin_slug = plugin_slug


class MalformedResponseError(PLSClientError):
    """Raised when the licensing service response violates its contract."""

    def __init__(self, message: str = "Malformed PLS API response", missing_field: str = None):
        super().__init__(
            message,
            code="MALFORMED_RESPONSE",
            data={"missing_field": missing_field} if missing_field else None,
        )
        self.missing_field = missing_field


class RemoteFailureError(PLSClientError):
    """Raised when the licensing service answers with a non-200 status."""

    def __init__(
        self,
        status_code: int,
        body: Optional[Dict[str, Any]] = None,
        message: str = "Server responded with a failure HTTP status",
    ):
        data = dict(body or {})
        data["status"] = status_code
        super().__init__(message, code="REMOTE_FAILURE", data=data)
        self.status_code = status_code
        self.body = body or {}


class TransportError(PLSClientError):
    """Raised when no response could be obtained from the licensing service."""

    def __init__(self, message: str = "Could not reach the licensing service", url: str = None):
        super().__init__(message, code="TRANSPORT_ERROR", data={"url": url} if url else None)
        self.url = url
