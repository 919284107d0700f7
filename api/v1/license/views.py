"""
Plugin license API views.

These endpoints are used by site administrators to:
- Store the license id of a plugin
- Activate and deactivate the license with the licensing service
- Check whether the license is valid
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import error_body
from api.v1.license.serializers import (
    ActivateLicenseRequestSerializer,
    CheckLicenseQuerySerializer,
    LicenseQuerySerializer,
    StoreLicenseRequestSerializer,
)
from core.domain.exceptions import DomainException
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.factory import build_license_manager
from licenses.domain.config import SiteDefaults

tracer = get_tracer(__name__)

LICENSE_QUERY_PARAMETERS = [
    OpenApiParameter(
        name="environment",
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        required=False,
        enum=["production", "staging"],
        description="Licensing environment (default: configured environment)",
    ),
    OpenApiParameter(
        name="network",
        type=OpenApiTypes.BOOL,
        location=OpenApiParameter.QUERY,
        required=False,
        description="Use network-wide storage instead of site storage",
    ),
]

ERROR_RESPONSES = {
    400: {"description": "Bad Request - Invalid parameters or no license stored"},
    401: {"description": "Unauthorized"},
    403: {"description": "Forbidden - Administrator access required"},
    500: {"description": "Licensing service unreachable or malformed response"},
}


def _validation_failed(span, errors) -> Response:
    span.set_attribute("error", "validation_failed")
    span.set_attribute("error.details", str(errors))
    span.set_status(Status(StatusCode.ERROR, "Validation failed"))
    return Response(
        error_body(
            "INVALID_PARAMETER",
            "Invalid request parameters",
            status.HTTP_400_BAD_REQUEST,
            {"params": errors},
        ),
        status=status.HTTP_400_BAD_REQUEST,
    )


class LicenseAPIView(APIView):
    """Base view resolving the license manager for a request."""

    query_serializer_class = LicenseQuerySerializer

    def get_query(self, request: Request):
        """Validate the query parameters."""
        return self.query_serializer_class(data=request.query_params.dict())

    def get_site_defaults(self, request: Request) -> SiteDefaults:
        """Site defaults, completed from the request origin and user when settings leave them empty."""
        return SiteDefaults.from_settings().with_fallbacks(
            domain_name=request.build_absolute_uri("/").rstrip("/"),
            email=getattr(request.user, "email", "") or "",
        )

    def get_manager(self, request: Request, query_data):
        """Build a license manager for the requested environment and scope."""
        return build_license_manager(
            site_defaults=self.get_site_defaults(request),
            environment=query_data.get("environment"),
            network=query_data.get("network"),
        )

    def run(self, span, operation):
        """Run a manager operation, recording domain failures on the span."""
        try:
            result = operation()
        except DomainException as e:
            span.set_attribute("error", e.code)
            span.set_status(Status(StatusCode.ERROR, e.message))
            raise
        span.set_status(Status(StatusCode.OK))
        return Response(result, status=status.HTTP_200_OK)


class StoreLicenseView(LicenseAPIView):
    """View for storing a license id."""

    @extend_schema(
        operation_id="store_license",
        summary="Store License ID",
        description="Store the license id of a plugin, replacing any stored one.",
        tags=["Plugin License API"],
        parameters=LICENSE_QUERY_PARAMETERS,
        request=StoreLicenseRequestSerializer,
        responses={200: OpenApiTypes.BOOL, **ERROR_RESPONSES},
    )
    def post(self, request: Request, plugin_slug: str) -> Response:
        """Store a license id."""
        with tracer.start_as_current_span("store_license") as span:
            span.set_attribute("operation", "store_license")
            span.set_attribute("plugin.slug", plugin_slug)

            query = self.get_query(request)
            if not query.is_valid():
                return _validation_failed(span, query.errors)

            serializer = StoreLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_failed(span, serializer.errors)

            manager = self.get_manager(request, query.validated_data)
            return self.run(
                span,
                lambda: manager.store_license_id(plugin_slug, serializer.validated_data["license_id"]),
            )


class ActivateLicenseView(LicenseAPIView):
    """View for activating a license."""

    @extend_schema(
        operation_id="activate_license",
        summary="Activate License",
        description=(
            "Activate the license of a plugin for this site. A license id in the body "
            "is stored first; otherwise the stored license id is used. Empty domain_name "
            "or email fall back to the configured site defaults, then to the request "
            "origin and the requesting user's email."
        ),
        tags=["Plugin License API"],
        parameters=LICENSE_QUERY_PARAMETERS,
        request=ActivateLicenseRequestSerializer,
        responses={200: OpenApiTypes.BOOL, **ERROR_RESPONSES},
    )
    def post(self, request: Request, plugin_slug: str) -> Response:
        """Activate a license."""
        with tracer.start_as_current_span("activate_license") as span:
            span.set_attribute("operation", "activate_license")
            span.set_attribute("plugin.slug", plugin_slug)

            query = self.get_query(request)
            if not query.is_valid():
                return _validation_failed(span, query.errors)

            serializer = ActivateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_failed(span, serializer.errors)

            license_id = serializer.validated_data.get("license_id") or None
            args = {
                field: serializer.validated_data[field]
                for field in ("domain_name", "email")
                if serializer.validated_data.get(field)
            }
            span.set_attribute("license.provided", license_id is not None)

            manager = self.get_manager(request, query.validated_data)
            return self.run(span, lambda: manager.activate(plugin_slug, license_id, args))


class DeactivateLicenseView(LicenseAPIView):
    """View for deactivating a license."""

    @extend_schema(
        operation_id="deactivate_license",
        summary="Deactivate License",
        description=(
            "Deactivate the license of a plugin for this site. Succeeds without calling "
            "the licensing service when the plugin is not activated."
        ),
        tags=["Plugin License API"],
        parameters=LICENSE_QUERY_PARAMETERS,
        request=None,
        responses={200: OpenApiTypes.BOOL, **ERROR_RESPONSES},
    )
    def post(self, request: Request, plugin_slug: str) -> Response:
        """Deactivate a license."""
        with tracer.start_as_current_span("deactivate_license") as span:
            span.set_attribute("operation", "deactivate_license")
            span.set_attribute("plugin.slug", plugin_slug)

            query = self.get_query(request)
            if not query.is_valid():
                return _validation_failed(span, query.errors)

            manager = self.get_manager(request, query.validated_data)
            return self.run(span, lambda: manager.deactivate(plugin_slug))


class CheckLicenseView(LicenseAPIView):
    """View for checking a license."""

    query_serializer_class = CheckLicenseQuerySerializer

    @extend_schema(
        operation_id="check_license",
        summary="Check License",
        description=(
            "Report whether the license of a plugin is valid. Results are cached; "
            "pass force=true to ask the licensing service."
        ),
        tags=["Plugin License API"],
        parameters=[
            *LICENSE_QUERY_PARAMETERS,
            OpenApiParameter(
                name="force",
                type=OpenApiTypes.BOOL,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Bypass the status cache",
            ),
        ],
        responses={200: OpenApiTypes.BOOL, **ERROR_RESPONSES},
    )
    def get(self, request: Request, plugin_slug: str) -> Response:
        """Check a license."""
        with tracer.start_as_current_span("check_license") as span:
            span.set_attribute("operation", "check_license")
            span.set_attribute("plugin.slug", plugin_slug)

            query = self.get_query(request)
            if not query.is_valid():
                return _validation_failed(span, query.errors)

            force = query.validated_data["force"]
            span.set_attribute("force", force)

            manager = self.get_manager(request, query.validated_data)
            return self.run(span, lambda: manager.check(plugin_slug, force=force))
