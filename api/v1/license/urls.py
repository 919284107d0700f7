"""
URL configuration for plugin license API endpoints.
"""

from django.urls import re_path

from api.v1.license import views

urlpatterns = [
    re_path(
        r"^(?P<plugin_slug>[\w.-]+)/store-license$",
        views.StoreLicenseView.as_view(),
        name="store-license",
    ),
    re_path(
        r"^(?P<plugin_slug>[\w.-]+)/activate$",
        views.ActivateLicenseView.as_view(),
        name="activate-license",
    ),
    re_path(
        r"^(?P<plugin_slug>[\w.-]+)/deactivate$",
        views.DeactivateLicenseView.as_view(),
        name="deactivate-license",
    ),
    re_path(
        r"^(?P<plugin_slug>[\w.-]+)/check$",
        views.CheckLicenseView.as_view(),
        name="check-license",
    ),
]
