"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from licenses.infrastructure.models import LicenseOption


@admin.register(LicenseOption)
class LicenseOptionAdmin(admin.ModelAdmin):
    """Admin interface for LicenseOption model."""

    list_display = [
        "name",
        "scope",
        "kind_display",
        "value_display",
        "updated_at",
    ]
    list_filter = ["scope", "updated_at"]
    search_fields = ["name"]
    readonly_fields = ["id", "scope", "name", "value_display", "created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "scope", "name", "value_display"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def kind_display(self, obj):
        """Display whether the option is a license id or an activation key."""
        if obj.is_activation_key:
            return format_html('<span style="color: green;">{}</span>', "Activation key")
        return "License ID"

    kind_display.short_description = "Kind"

    def value_display(self, obj):
        """Display the value, masking activation keys."""
        if obj.is_activation_key and obj.value:
            return f"{obj.value[:8]}..."
        return obj.value or "-"

    value_display.short_description = "Value"

    def has_add_permission(self, request):
        """Options are written through the license manager."""
        return False

    def has_change_permission(self, request, obj=None):
        """Options are written through the license manager."""
        return False
