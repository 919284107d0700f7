"""
API exception handlers.

This module provides custom exception handling for REST API responses.
Errors are rendered as ``{"code", "message", "data"}`` with the HTTP
status repeated in ``data.status``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    DomainException,
    MalformedResponseError,
    NoLicenseFoundError,
    RemoteFailureError,
    TransportError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)


def error_body(code: str, message: str, status_code: int, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build an error body."""
    return {"code": code, "message": message, "data": {**(data or {}), "status": status_code}}


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, trace_id)
        errors_total.labels(error_type=exc.code, endpoint=_get_endpoint(context)).inc()
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    if isinstance(exc, ValueError):
        response = Response(
            error_body("INVALID_PARAMETER", str(exc), status.HTTP_400_BAD_REQUEST),
            status=status.HTTP_400_BAD_REQUEST,
        )
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    if isinstance(exc, APIException):
        response = exception_handler(exc, context)
        if response is not None:
            code = (
                exc.default_code.upper().replace("-", "_")
                if hasattr(exc, "default_code")
                else "API_ERROR"
            )
            if isinstance(exc, ValidationError):
                response.data = error_body(
                    "INVALID_PARAMETER",
                    "Invalid request parameters",
                    response.status_code,
                    {"params": response.data},
                )
            else:
                message = response.data.get("detail", exc.default_detail)
                response.data = error_body(code, str(message), response.status_code)
            if trace_id:
                response["X-Trace-ID"] = trace_id
            return response

    if isinstance(exc, Http404):
        response = Response(
            error_body("NOT_FOUND", "Resource not found", status.HTTP_404_NOT_FOUND),
            status=status.HTTP_404_NOT_FOUND,
        )
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    return _handle_unexpected_exception(exc, context, trace_id)


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _get_endpoint(context: Dict[str, Any]) -> str:
    """Extract the matched route from request context."""
    request = context.get("request")
    resolver_match = getattr(request, "resolver_match", None)
    return getattr(resolver_match, "route", None) or "unknown"


def _status_for(exc: DomainException) -> int:
    """Map a domain exception to an HTTP status."""
    if isinstance(exc, RemoteFailureError):
        return exc.status_code
    if isinstance(exc, NoLicenseFoundError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, (MalformedResponseError, TransportError)):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


def _handle_domain_exception(exc: DomainException, trace_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = _status_for(exc)
    logger.warning("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    return Response(error_body(exc.code, exc.message, status_code, exc.data), status=status_code)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    errors_total.labels(error_type=type(exc).__name__, endpoint=_get_endpoint(context)).inc()
    response = Response(
        error_body(
            "INTERNAL_ERROR",
            "An internal error occurred",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        ),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response
