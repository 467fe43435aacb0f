"""
ASGI config for reviewer_service.
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'reviewer_service.settings')

application = get_asgi_application()
