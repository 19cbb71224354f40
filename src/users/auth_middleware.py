# users/auth_middleware.py
import logging

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser

from .utils import SESSION_COOKIE, get_user_for_token

logger = logging.getLogger(__name__)


@database_sync_to_async
def get_fan_user_from_session(session_cookie_value: str):
    user = get_user_for_token(session_cookie_value)
    if user is None:
        return AnonymousUser()
    return user


def parse_cookie_header(cookie_header_bytes):
    cookie_header_str = cookie_header_bytes.decode("utf-8", errors="ignore")
    return {
        k.strip(): v.strip()
        for k, v in (item.split("=", 1) for item in cookie_header_str.split(";") if "=" in item)
    }


class SessionCookieAuthMiddleware(BaseMiddleware):
    """Populate ``scope["user"]`` from the ``session`` cookie of the websocket handshake."""

    async def __call__(self, scope, receive, send):
        cookies = scope.get("cookies", {})
        session_cookie_value = cookies.get(SESSION_COOKIE)

        if not session_cookie_value:
            headers = dict(scope.get("headers", []))
            cookie_header_bytes = headers.get(b"cookie")
            if cookie_header_bytes:
                session_cookie_value = parse_cookie_header(cookie_header_bytes).get(SESSION_COOKIE)

        if session_cookie_value:
            scope["user"] = await get_fan_user_from_session(session_cookie_value)
        else:
            scope["user"] = AnonymousUser()

        logger.debug(
            f"Websocket auth finished, authenticated={scope['user'].is_authenticated}"
        )
        return await super().__call__(scope, receive, send)


def SessionCookieAuthMiddlewareStack(inner):
    return SessionCookieAuthMiddleware(inner)
