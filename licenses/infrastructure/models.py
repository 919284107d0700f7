"""
LicenseOption model.

Key/value rows holding license ids and activation keys, one namespace per
scope (single site or whole network).
"""
from django.db import models


class LicenseOption(models.Model):
    """A persisted licensing option."""

    SCOPE_CHOICES = [
        ("site", "Site"),
        ("network", "Network"),
    ]

    scope = models.CharField(max_length=10, choices=SCOPE_CHOICES, default="site")
    name = models.CharField(max_length=191, db_index=True)
    value = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "licenses"
        db_table = "license_options"
        ordering = ["scope", "name"]
        constraints = [
            models.UniqueConstraint(fields=["scope", "name"], name="unique_license_option_per_scope"),
        ]

    def __str__(self):
        return f"{self.scope}:{self.name}"

    @property
    def is_activation_key(self) -> bool:
        return self.name.startswith("pls_activation_key_")
