"""
ASGI config for the skillfolio project.

It exposes the ASGI callable as a module-level variable named ``application``.
HTTP goes to Django; websockets go to the community chat consumers.
"""

import logging
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'skillfolio.settings')

try:
    # Set up Django ASGI application first
    django_asgi_app = get_asgi_application()

    from channels.auth import AuthMiddlewareStack
    from channels.routing import ProtocolTypeRouter, URLRouter
    from channels.security.websocket import AllowedHostsOriginValidator

    import community.routing

    application = ProtocolTypeRouter({
        'http': django_asgi_app,
        'websocket': AllowedHostsOriginValidator(
            AuthMiddlewareStack(
                URLRouter(
                    community.routing.websocket_urlpatterns
                )
            )
        ),
    })
except Exception as e:
    # Log the error for production debugging
    logging.error(f"Failed to load ASGI application: {e}")
    raise
