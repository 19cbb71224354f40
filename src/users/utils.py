import logging
from datetime import timedelta
from functools import wraps
from typing import Optional

import jwt
from django.conf import settings
from django.utils import timezone
from pydantic import BaseModel, ValidationError
from rest_framework import status
from rest_framework.response import Response

from .models import FanUser

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session"


class SessionPayload(BaseModel):
    userid: str
    exp: float


def generate_session_token(user):
    """Issue a signed session token for ``user``; returns ``(token, expires_at)``."""
    expires_at = timezone.now() + timedelta(hours=settings.JWT_EXPIRATION_HOURS)
    payload = {
        "userid": str(user.user_id),
        "exp": expires_at.timestamp(),
    }
    token = jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    return token, expires_at


def decrypt_session_token(token: str) -> Optional[SessionPayload]:
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
        return SessionPayload(**payload)
    except jwt.ExpiredSignatureError:
        logger.info("Session token expired")
        return None
    except (jwt.InvalidTokenError, ValidationError) as error:
        logger.warning(f"Rejected session token: {error}")
        return None


def get_user_for_token(token: Optional[str]) -> Optional[FanUser]:
    if not token:
        return None
    session_payload = decrypt_session_token(token)
    if not session_payload or not session_payload.userid:
        return None
    try:
        return FanUser.objects.get(user_id=session_payload.userid)
    except (FanUser.DoesNotExist, ValueError):
        logger.warning(f"Session refers to unknown user {session_payload.userid}")
        return None


def get_session_user(request) -> Optional[FanUser]:
    """Resolve the session cookie on ``request`` to a FanUser, or None."""
    return get_user_for_token(request.COOKIES.get(SESSION_COOKIE))


def require_auth(view_func):
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        session_cookie = request.COOKIES.get(SESSION_COOKIE)
        if not session_cookie:
            return Response(
                {"error": "No session token provided."},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        user = get_user_for_token(session_cookie)
        if user is None:
            return Response(
                {"error": "Invalid or expired session."},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        request.user = user
        return view_func(request, *args, **kwargs)
    return wrapper
