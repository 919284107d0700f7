"""
Unit tests for the HTTP licensing client.
"""
import json
import socket
from unittest.mock import MagicMock

import pytest
import requests

from core.domain.exceptions import RemoteFailureError, TransportError
from core.domain.value_objects import Environment
from licenses.application.factory import build_license_manager
from licenses.infrastructure.clients import licensing_client
from licenses.infrastructure.clients.licensing_client import (
    USER_AGENT,
    RequestsLicensingClient,
    is_safe_url,
    reject_unsafe_redirect,
)

HOSTS = {
    "licensing.hiive.cloud": ["104.18.20.10"],
    "example.com": ["93.184.215.14", "2606:2800:21f:cb07:6820:80da:af6b:8b2c"],
    "internal.example.com": ["10.0.0.7"],
    "mixed.example.com": ["93.184.215.14", "127.0.0.1"],
    "metadata.example.com": ["fe80::1%eth0"],
}


def fake_getaddrinfo(host, port, *args, **kwargs):
    if host not in HOSTS:
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")
    return [
        (socket.AF_INET6 if ":" in address else socket.AF_INET, socket.SOCK_STREAM, 6, "", (address, 0))
        for address in HOSTS[host]
    ]


def make_response(status_code=200, body=None, text=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    if text is not None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    """Fixture for a mocked requests session."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    """Fixture for a staging RequestsLicensingClient."""
    return RequestsLicensingClient(Environment.STAGING, timeout=3, session=session)


class TestRequestsLicensingClient:
    """Tests for RequestsLicensingClient."""

    def test_activate_request(self, client, session):
        """Test activation posts the JSON payload to the license endpoint."""
        session.request.return_value = make_response(body={"data": {"activation_key": "k"}})

        result = client.activate("lic-123", {"domain_name": "https://a.example.com", "email": ""})

        assert result == {"data": {"activation_key": "k"}}
        args, kwargs = session.request.call_args
        assert args == ("POST", "https://licensing-stg.hiive.cloud/license/lic-123/activate")
        assert json.loads(kwargs["data"]) == {"domain_name": "https://a.example.com", "email": ""}
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["headers"]["User-Agent"] == USER_AGENT
        assert kwargs["timeout"] == 3
        assert kwargs["verify"] is True
        assert kwargs["hooks"] == {"response": reject_unsafe_redirect}

    def test_deactivate_request(self, client, session):
        """Test deactivation posts the activation key."""
        session.request.return_value = make_response(body={})

        client.deactivate("lic-123", "key-abc")

        args, kwargs = session.request.call_args
        assert args == ("POST", "https://licensing-stg.hiive.cloud/license/lic-123/deactivate")
        assert json.loads(kwargs["data"]) == {"activationKey": "key-abc"}

    def test_status_request(self, client, session):
        """Test status is a GET on the activation key."""
        session.request.return_value = make_response(body={"data": {"valid": True}})

        assert client.status("key-abc") == {"data": {"valid": True}}

        args, kwargs = session.request.call_args
        assert args == ("GET", "https://licensing-stg.hiive.cloud/license/key-abc/status")
        assert "data" not in kwargs

    def test_path_segments_are_quoted(self, client, session):
        """Test identifiers are URL quoted."""
        session.request.return_value = make_response(body={})
        client.status("a b?c")
        args, _ = session.request.call_args
        assert args[1].endswith("/license/a%20b%3Fc/status")

    def test_production_url(self, session):
        """Test unknown environments talk to production."""
        client = RequestsLicensingClient("qa", session=session)
        assert client.endpoint_url("license/x/status") == "https://licensing.hiive.cloud/license/x/status"

    def test_non_200_raises_remote_failure(self, client, session):
        """Test non-200 responses carry status and body."""
        session.request.return_value = make_response(404, {"code": "not-found", "message": "Nope"})

        with pytest.raises(RemoteFailureError) as exc_info:
            client.status("key-abc")

        error = exc_info.value
        assert error.status_code == 404
        assert error.body == {"code": "not-found", "message": "Nope"}
        assert error.data["status"] == 404
        assert error.data["code"] == "not-found"

    def test_non_200_without_json(self, client, session):
        """Test a non-200 response without JSON still carries its status."""
        session.request.return_value = make_response(502, text="Bad gateway")

        with pytest.raises(RemoteFailureError) as exc_info:
            client.status("key-abc")
        assert exc_info.value.data == {"status": 502}

    def test_invalid_json_decodes_to_empty(self, client, session):
        """Test a 200 response without JSON decodes to an empty dict."""
        session.request.return_value = make_response(200, text="<html>")
        assert client.status("key-abc") == {}

    def test_non_object_json_decodes_to_empty(self, client, session):
        """Test a JSON body that is not an object decodes to an empty dict."""
        session.request.return_value = make_response(200, ["unexpected"])
        assert client.status("key-abc") == {}

    @pytest.mark.parametrize(
        "error",
        [
            requests.exceptions.ConnectTimeout("timed out"),
            requests.exceptions.ConnectionError("refused"),
            requests.exceptions.SSLError("bad certificate"),
            requests.exceptions.InvalidURL("unsafe redirect"),
        ],
    )
    def test_transport_errors(self, client, session, error):
        """Test transport failures raise TransportError."""
        session.request.side_effect = error

        with pytest.raises(TransportError) as exc_info:
            client.status("key-abc")
        assert exc_info.value.code == "TRANSPORT_ERROR"
        assert exc_info.value.data["url"].endswith("/license/key-abc/status")


class TestSafeUrls:
    """Tests for redirect safety checks."""

    @pytest.fixture(autouse=True)
    def dns(self, monkeypatch):
        """Fixture answering host lookups from HOSTS."""
        monkeypatch.setattr(licensing_client.socket, "getaddrinfo", fake_getaddrinfo)

    @pytest.mark.parametrize(
        "url",
        [
            "https://licensing.hiive.cloud/license/x",
            "http://example.com/path",
            "https://8.8.8.8/",
        ],
    )
    def test_safe_urls(self, url):
        """Test public http(s) URLs are safe."""
        assert is_safe_url(url) is True

    @pytest.mark.parametrize(
        "url",
        [
            "ftp://example.com/",
            "file:///etc/passwd",
            "http://localhost/",
            "http://127.0.0.1/",
            "http://10.0.0.5/",
            "http://169.254.169.254/latest/meta-data",
            "http://[::1]/",
            "https:///no-host",
            "http://internal.example.com/",
            "http://mixed.example.com/",
            "http://metadata.example.com/",
            "http://unknown.invalid/",
        ],
    )
    def test_unsafe_urls(self, url):
        """Test local, private, unresolvable and non-http URLs are unsafe."""
        assert is_safe_url(url) is False

    def test_redirect_to_private_address_rejected(self):
        """Test the response hook refuses redirects to private addresses."""
        response = requests.Response()
        response.status_code = 302
        response.url = "https://licensing.hiive.cloud/license/x/status"
        response.headers["Location"] = "http://192.168.1.10/admin"

        with pytest.raises(requests.exceptions.InvalidURL):
            reject_unsafe_redirect(response)

    def test_redirect_to_public_address_allowed(self):
        """Test the response hook lets public redirects through."""
        response = requests.Response()
        response.status_code = 301
        response.url = "https://licensing.hiive.cloud/license/x/status"
        response.headers["Location"] = "/v2/license/x/status"

        assert reject_unsafe_redirect(response) is response

    def test_redirect_to_name_resolving_privately_rejected(self):
        """Test the response hook resolves hostnames before following them."""
        response = requests.Response()
        response.status_code = 302
        response.url = "https://licensing.hiive.cloud/license/x/status"
        response.headers["Location"] = "http://internal.example.com/admin"

        with pytest.raises(requests.exceptions.InvalidURL):
            reject_unsafe_redirect(response)


class TestSharedSession:
    """Tests for session reuse."""

    def test_clients_share_a_session(self):
        """Test clients built without a session reuse the shared one."""
        first = RequestsLicensingClient(Environment.STAGING)
        second = RequestsLicensingClient(Environment.PRODUCTION)
        assert first.session is second.session is licensing_client.shared_session

    def test_built_managers_share_a_session(self):
        """Test managers built per request do not open new sessions."""
        assert build_license_manager().client.session is build_license_manager().client.session
