"""
WSGI config for the skillfolio project.

Plain HTTP only; the chat websockets need the ASGI application in asgi.py.
"""

import logging
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'skillfolio.settings')

try:
    application = get_wsgi_application()
except Exception as e:
    # Log the error for production debugging
    logging.error(f"Failed to load WSGI application: {e}")
    raise
