"""ASGI entry point for the SmartSpend web client."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "smartspend.settings")

application = get_asgi_application()
