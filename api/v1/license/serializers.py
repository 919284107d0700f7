"""
Serializers for plugin license API endpoints.
"""

from rest_framework import serializers

from core.domain.value_objects import Environment


class LicenseQuerySerializer(serializers.Serializer):
    """Serializer for the query parameters every license endpoint accepts."""

    environment = serializers.ChoiceField(
        choices=[environment.value for environment in Environment],
        required=False,
        allow_blank=True,
    )
    network = serializers.BooleanField(required=False)


class CheckLicenseQuerySerializer(LicenseQuerySerializer):
    """Serializer for check license query parameters."""

    force = serializers.BooleanField(required=False, default=False)


class StoreLicenseRequestSerializer(serializers.Serializer):
    """Serializer for store license request."""

    license_id = serializers.CharField(required=True, max_length=191)

    def validate_license_id(self, value):
        """Validate license id."""
        if "/" in value:
            raise serializers.ValidationError("License ID cannot contain '/'")
        return value


class ActivateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for activate license request."""

    license_id = serializers.CharField(required=False, allow_blank=True, max_length=191)
    domain_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True)

    def validate_license_id(self, value):
        """Validate license id."""
        if "/" in value:
            raise serializers.ValidationError("License ID cannot contain '/'")
        return value
