"""
Model registry for the licenses app.

Models live in the infrastructure layer.
"""
from licenses.infrastructure.models import LicenseOption  # noqa: F401
