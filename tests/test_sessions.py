import time

import jwt
import pytest

from users.auth_middleware import parse_cookie_header
from users.utils import decrypt_session_token, generate_session_token, get_user_for_token


@pytest.mark.django_db
class TestSessionTokens:

    def test_round_trip(self, fan):
        token, expires_at = generate_session_token(fan)

        payload = decrypt_session_token(token)

        assert payload.userid == str(fan.user_id)
        assert payload.exp == pytest.approx(expires_at.timestamp())
        assert get_user_for_token(token) == fan

    def test_expired_token(self, fan, settings):
        token = jwt.encode(
            {"userid": str(fan.user_id), "exp": time.time() - 10},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        assert decrypt_session_token(token) is None
        assert get_user_for_token(token) is None

    def test_wrong_secret(self, fan, settings):
        token = jwt.encode(
            {"userid": str(fan.user_id), "exp": time.time() + 60}, "other-secret", algorithm="HS256"
        )
        assert decrypt_session_token(token) is None

    def test_payload_missing_user(self, settings):
        token = jwt.encode({"exp": time.time() + 60}, settings.JWT_SECRET, algorithm="HS256")
        assert decrypt_session_token(token) is None

    def test_unknown_user(self, settings):
        token = jwt.encode(
            {"userid": "00000000-0000-0000-0000-000000000000", "exp": time.time() + 60},
            settings.JWT_SECRET,
            algorithm="HS256",
        )
        assert get_user_for_token(token) is None


def test_parse_cookie_header():
    cookies = parse_cookie_header(b"theme=dark; session=abc.def=; other")
    assert cookies == {"theme": "dark", "session": "abc.def="}
