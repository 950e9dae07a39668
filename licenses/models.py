"""
Model registration for the licenses app.
"""
from licenses.infrastructure.models import AdminLog, License, LicenseCheckLog  # noqa: F401
