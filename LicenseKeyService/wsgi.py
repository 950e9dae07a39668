"""
WSGI config for LicenseKeyService project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseKeyService.settings.prod")

application = get_wsgi_application()
