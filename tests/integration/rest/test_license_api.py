"""
Integration tests for plugin license API endpoints.
"""

import pytest
from django.urls import reverse

from core.domain.exceptions import MalformedResponseError, RemoteFailureError, TransportError
from licenses.infrastructure.models import LicenseOption


def url_for(name, plugin_slug="acme-plugin", **query):
    url = reverse(name, kwargs={"plugin_slug": plugin_slug})
    if query:
        url += "?" + "&".join(f"{key}={value}" for key, value in query.items())
    return url


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseAPIPermissions:
    """Permission checks for the license API."""

    def test_anonymous_rejected(self, api_client, patch_licensing_service):
        """Test anonymous requests are refused."""
        response = api_client.get(url_for("check-license"))
        assert response.status_code in (401, 403)
        assert patch_licensing_service.calls == []

    def test_non_staff_rejected(self, api_client, django_user_model):
        """Test non-staff users are refused."""
        user = django_user_model.objects.create_user(username="subscriber", password="secret")
        api_client.force_authenticate(user=user)

        response = api_client.post(url_for("store-license"), {"license_id": "lic-123"}, format="json")

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"
        assert LicenseOption.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenseAPI:
    """Integration tests for the license API."""

    def test_store_license(self, staff_client):
        """Test storing a license id."""
        response = staff_client.post(url_for("store-license"), {"license_id": "lic-123"}, format="json")

        assert response.status_code == 200
        assert response.json() is True
        assert LicenseOption.objects.get(name="pls_license_id_staging_acme-plugin").value == "lic-123"

    def test_store_license_requires_license_id(self, staff_client):
        """Test store-license validates its body."""
        response = staff_client.post(url_for("store-license"), {}, format="json")

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "INVALID_PARAMETER"
        assert "license_id" in data["data"]["params"]

    def test_store_license_environment(self, staff_client):
        """Test the environment query parameter selects the namespace."""
        response = staff_client.post(
            url_for("store-license", environment="production"),
            {"license_id": "lic-prod"},
            format="json",
        )

        assert response.status_code == 200
        assert LicenseOption.objects.filter(name="pls_license_id_production_acme-plugin").exists()

    def test_invalid_environment(self, staff_client):
        """Test unknown environments are rejected by the API."""
        response = staff_client.post(
            url_for("store-license", environment="qa"), {"license_id": "lic-123"}, format="json"
        )
        assert response.status_code == 400

    def test_network_scope(self, staff_client):
        """Test the network flag stores network-wide."""
        staff_client.post(
            url_for("store-license", network="true"), {"license_id": "lic-123"}, format="json"
        )
        assert LicenseOption.objects.get(name="pls_license_id_staging_acme-plugin").scope == "network"

    def test_activate(self, staff_client, patch_licensing_service):
        """Test activating with a license id in the body."""
        response = staff_client.post(
            url_for("activate-license"),
            {"license_id": "lic-123", "domain_name": "", "email": "owner@example.com"},
            format="json",
        )

        assert response.status_code == 200
        assert response.json() is True
        _, license_id, payload = patch_licensing_service.calls_to("activate")[0]
        assert license_id == "lic-123"
        assert payload == {"domain_name": "https://site.example.com", "email": "owner@example.com"}
        assert (
            LicenseOption.objects.get(name="pls_activation_key_staging_acme-plugin").value
            == "key-abc"
        )

    def test_activate_defaults_to_request_origin(self, staff_client, patch_licensing_service, settings):
        """Test an unconfigured site activates for the request origin and the staff email."""
        settings.PLS_CLIENT = {**settings.PLS_CLIENT, "SITE_URL": "", "ADMIN_EMAIL": ""}

        response = staff_client.post(url_for("activate-license"), {"license_id": "lic-123"}, format="json")

        assert response.status_code == 200
        _, _, payload = patch_licensing_service.calls_to("activate")[0]
        assert payload == {"domain_name": "http://testserver", "email": "admin@example.com"}

    def test_activate_prefers_admins_over_staff_email(self, staff_client, patch_licensing_service, settings):
        """Test the ADMINS address wins over the requesting user's email."""
        settings.PLS_CLIENT = {**settings.PLS_CLIENT, "SITE_URL": "", "ADMIN_EMAIL": ""}
        settings.ADMINS = [("Ops", "ops@example.com")]

        staff_client.post(url_for("activate-license"), {"license_id": "lic-123"}, format="json")

        _, _, payload = patch_licensing_service.calls_to("activate")[0]
        assert payload["domain_name"] == "http://testserver"
        assert payload["email"] == "ops@example.com"

    def test_activate_without_license(self, staff_client, patch_licensing_service):
        """Test activating an unconfigured plugin is a client error."""
        response = staff_client.post(url_for("activate-license"), {}, format="json")

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "NO_LICENSE_FOUND"
        assert data["data"] == {"plugin_slug": "acme-plugin", "status": 400}
        assert patch_licensing_service.calls == []

    def test_activate_remote_failure(self, staff_client, patch_licensing_service):
        """Test remote failures pass their status through."""
        patch_licensing_service.errors["activate"] = RemoteFailureError(
            404, {"code": "not-found", "message": "License not found"}
        )

        response = staff_client.post(url_for("activate-license"), {"license_id": "lic-123"}, format="json")

        assert response.status_code == 404
        data = response.json()
        assert data["code"] == "REMOTE_FAILURE"
        assert data["data"]["status"] == 404
        assert data["data"]["code"] == "not-found"

    @pytest.mark.parametrize(
        "error, code",
        [
            (MalformedResponseError(missing_field="data.activation_key"), "MALFORMED_RESPONSE"),
            (TransportError("timed out"), "TRANSPORT_ERROR"),
        ],
    )
    def test_activate_server_errors(self, staff_client, patch_licensing_service, error, code):
        """Test malformed responses and transport failures are server errors."""
        patch_licensing_service.errors["activate"] = error

        response = staff_client.post(url_for("activate-license"), {"license_id": "lic-123"}, format="json")

        assert response.status_code == 500
        assert response.json()["code"] == code

    def test_deactivate(self, staff_client, patch_licensing_service):
        """Test deactivating twice calls the licensing service once."""
        staff_client.post(url_for("activate-license"), {"license_id": "lic-123"}, format="json")

        first = staff_client.post(url_for("deactivate-license"))
        second = staff_client.post(url_for("deactivate-license"))

        assert first.status_code == second.status_code == 200
        assert first.json() is True and second.json() is True
        assert len(patch_licensing_service.calls_to("deactivate")) == 1

    def test_check(self, staff_client, patch_licensing_service):
        """Test checks are cached unless forced."""
        staff_client.post(url_for("activate-license"), {"license_id": "lic-123"}, format="json")

        assert staff_client.get(url_for("check-license")).json() is True
        assert staff_client.get(url_for("check-license")).json() is True
        assert len(patch_licensing_service.calls_to("status")) == 1

        patch_licensing_service.responses["status"] = {"data": {"valid": False}}
        response = staff_client.get(url_for("check-license", force="true"))
        assert response.json() is False
        assert len(patch_licensing_service.calls_to("status")) == 2

    def test_check_not_activated(self, staff_client, patch_licensing_service):
        """Test a stored but inactive license is invalid."""
        staff_client.post(url_for("store-license"), {"license_id": "lic-123"}, format="json")

        response = staff_client.get(url_for("check-license"))

        assert response.status_code == 200
        assert response.json() is False
        assert patch_licensing_service.calls == []

    def test_dotted_slug_without_license(self, staff_client, patch_licensing_service):
        """Test a dotted slug never configured reports no license."""
        response = staff_client.get(url_for("check-license", plugin_slug="acme.plugin"))

        assert response.status_code == 400
        assert response.json()["code"] == "NO_LICENSE_FOUND"
        assert patch_licensing_service.calls == []

    def test_unknown_plugin_route(self, staff_client):
        """Test slugs with invalid characters do not match a route."""
        response = staff_client.get("/api/pls/v1/acme%20plugin/check")
        assert response.status_code == 404


@pytest.mark.django_db
@pytest.mark.integration
class TestHealthEndpoints:
    """Integration tests for health endpoints."""

    def test_health(self, client):
        """Test the liveness endpoint."""
        response = client.get("/health/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health_db(self, client):
        """Test the database health endpoint."""
        assert client.get("/health/db/").status_code == 200

    def test_health_cache(self, client):
        """Test the cache health endpoint."""
        assert client.get("/health/cache/").status_code == 200

    def test_schema(self, client):
        """Test the OpenAPI schema is served."""
        response = client.get("/api/schema/")
        assert response.status_code == 200
