"""
Licensing service HTTP client.

Talks to the remote licensing service with ``requests``. No retries: a
failed call is raised to the caller as-is.
"""
import ipaddress
import json
import logging
import socket
import time
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote, urljoin, urlparse

import requests

from core.domain.exceptions import RemoteFailureError, TransportError
from core.domain.value_objects import Environment
from core.metrics import pls_remote_request_duration_seconds, pls_remote_requests_total
from licenses.domain.config import DEFAULT_TIMEOUT, base_url_for
from licenses.ports.licensing_service import LicensingServicePort

logger = logging.getLogger(__name__)

USER_AGENT = "PLS-Client/1.0"

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

# Clients built without a session share this one and its connection pool
shared_session = requests.Session()


def resolve_host(host: str) -> List[IPAddress]:
    """Return the addresses a hostname resolves to, or an empty list when it does not resolve."""
    try:
        infos = socket.getaddrinfo(host, None, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError):
        return []
    # IPv6 link-local results may carry a zone suffix (fe80::1%eth0)
    return [ipaddress.ip_address(info[4][0].split("%")[0]) for info in infos]


def is_public_address(address: IPAddress) -> bool:
    return not (
        address.is_private
        or address.is_loopback
        or address.is_link_local
        or address.is_reserved
        or address.is_multicast
        or address.is_unspecified
    )


def is_safe_url(url: str) -> bool:
    """
    Check whether a URL may be requested.

    Only http(s) URLs are allowed. The host must not be localhost, and
    every address it is or resolves to must be public. A host that does
    not resolve is unsafe.

    Args:
        url: Absolute URL

    Returns:
        True if the URL is safe to follow
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        return False

    host = (parsed.hostname or "").lower()
    if not host:
        return False
    if host == "localhost" or host.endswith(".localhost"):
        return False

    try:
        addresses = [ipaddress.ip_address(host)]
    except ValueError:
        addresses = resolve_host(host)

    return bool(addresses) and all(is_public_address(address) for address in addresses)


def reject_unsafe_redirect(response: requests.Response, *args, **kwargs) -> requests.Response:
    """Response hook refusing to follow redirects to unsafe URLs."""
    if response.is_redirect:
        target = urljoin(response.url, response.headers.get("location", ""))
        if not is_safe_url(target):
            raise requests.exceptions.InvalidURL(f"Refusing redirect to unsafe URL: {target}")
    return response


class RequestsLicensingClient(LicensingServicePort):
    """LicensingServicePort implementation over HTTP."""

    def __init__(
        self,
        environment: Environment = Environment.PRODUCTION,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            environment: Selects the licensing server
            timeout: Seconds to wait for the server
            session: requests session to use instead of the shared one
        """
        self.environment = Environment.resolve(environment)
        self.timeout = timeout
        self.session = session or shared_session

    def endpoint_url(self, endpoint: str) -> str:
        """Return the absolute URL of an endpoint."""
        return f"{base_url_for(self.environment)}/{endpoint}"

    def activate(self, license_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.call(f"license/{quote(license_id, safe='')}/activate", "POST", payload, operation="activate")

    def deactivate(self, license_id: str, activation_key: str) -> Dict[str, Any]:
        return self.call(
            f"license/{quote(license_id, safe='')}/deactivate",
            "POST",
            {"activationKey": activation_key},
            operation="deactivate",
        )

    def status(self, activation_key: str) -> Dict[str, Any]:
        return self.call(f"license/{quote(activation_key, safe='')}/status", operation="status")

    def call(
        self,
        endpoint: str,
        method: str = "GET",
        payload: Optional[Dict[str, Any]] = None,
        operation: str = None,
    ) -> Dict[str, Any]:
        """
        Perform a call against the licensing service.

        Args:
            endpoint: Path relative to the environment's base URL
            method: HTTP method
            payload: JSON body for non-GET requests, query params for GET
            operation: Metric label, defaults to the endpoint

        Returns:
            Decoded JSON body of a 200 response

        Raises:
            RemoteFailureError: Non-200 response
            TransportError: Connection, timeout, TLS or unsafe redirect failure
        """
        url = self.endpoint_url(endpoint)
        operation = operation or endpoint
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        request_params: Dict[str, Any] = {
            "timeout": self.timeout,
            "verify": True,
            "allow_redirects": True,
            "hooks": {"response": reject_unsafe_redirect},
        }
        if method != "GET":
            headers["Content-Type"] = "application/json"
            request_params["data"] = json.dumps(payload or {})
        elif payload:
            request_params["params"] = payload

        logger.debug("Calling licensing service: %s %s", method, url)
        start_time = time.time()
        try:
            response = self.session.request(method, url, headers=headers, **request_params)
        except requests.exceptions.RequestException as e:
            pls_remote_requests_total.labels(endpoint=operation, method=method, status_code="error").inc()
            logger.warning("Licensing service unreachable: %s %s - %s", method, url, e)
            raise TransportError(str(e) or "Could not reach the licensing service", url=url) from e
        finally:
            pls_remote_request_duration_seconds.labels(endpoint=operation, method=method).observe(
                time.time() - start_time
            )

        pls_remote_requests_total.labels(
            endpoint=operation, method=method, status_code=response.status_code
        ).inc()
        return self.process_response(response)

    @staticmethod
    def process_response(response: requests.Response) -> Dict[str, Any]:
        """
        Decode a licensing service response.

        A body that is not a JSON object decodes to an empty dict.

        Raises:
            RemoteFailureError: Non-200 response, carrying the decoded body
        """
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.status_code != 200:
            logger.warning(
                "Licensing service responded with HTTP %s: %s",
                response.status_code,
                body.get("code", "unknown"),
            )
            raise RemoteFailureError(response.status_code, body)

        return body
