"""
ASGI config for setlistvote project.

It exposes the ASGI callable as a module-level variable named ``application``.

For more information on this file, see
https://docs.djangoproject.com/en/5.1/howto/deployment/asgi/
"""

import os
from django.core.asgi import get_asgi_application
from channels.routing import ProtocolTypeRouter, URLRouter

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "setlistvote.settings")

django_asgi_app = get_asgi_application()

# Imported after the app registry is ready: these modules touch models.
from users.auth_middleware import SessionCookieAuthMiddlewareStack
from .routing import websocket_urlpatterns

application = ProtocolTypeRouter({
    "http": django_asgi_app,
    "websocket": SessionCookieAuthMiddlewareStack(
        URLRouter(
            websocket_urlpatterns
        )
    ),
})
