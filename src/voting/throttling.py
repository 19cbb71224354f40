from rest_framework.throttling import SimpleRateThrottle

from users.utils import get_session_user


class VoteRateThrottle(SimpleRateThrottle):
    """
    Per-fan rate limit on vote attempts, the ``votes`` entry of
    ``DEFAULT_THROTTLE_RATES``.

    Sessions come from our own cookie rather than DRF authentication, so
    the cache key is built from the session user. Requests without a valid
    session are not throttled here; the view rejects them.
    """

    scope = "votes"

    def get_cache_key(self, request, view):
        user = get_session_user(request)
        if user is None:
            return None
        return self.cache_format % {"scope": self.scope, "ident": user.pk}
