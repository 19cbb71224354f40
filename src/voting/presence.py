"""
Who is currently viewing a show's voting page.

Presence is kept per connection in ``ShowPresence`` so it survives
restarts and is shared by every server instance. A connection counts as
live while its ``last_seen`` is within ``PRESENCE_TTL_SECONDS``; clients
heartbeat to stay live and ``expire_stale_presence`` removes connections
that vanished without saying goodbye. A user is visible while at least
one of their connections is live, so join/leave deltas are emitted per
user, not per connection.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from users.models import FanUser
from .broadcast import publish_presence_diff
from .models import ShowPresence

logger = logging.getLogger(__name__)


def _cutoff(now):
    return now - timedelta(seconds=settings.PRESENCE_TTL_SECONDS)


def _live_connections(show_id, now):
    return ShowPresence.objects.filter(show_id=show_id, last_seen__gte=_cutoff(now))


def _is_visible(show_id, user_id, now):
    return _live_connections(show_id, now).filter(user_id=user_id).exists()


def _lock_user(user_id):
    # Joins and leaves of one user run one at a time, so exactly one of two
    # simultaneous first connections sees the user as not yet visible.
    list(FanUser.objects.select_for_update().filter(pk=user_id).values_list("pk", flat=True))


def active_viewers(show_id, now=None):
    now = now or timezone.now()
    user_ids = (
        _live_connections(show_id, now)
        .values_list("user_id", flat=True)
        .distinct()
    )
    return sorted(str(user_id) for user_id in user_ids)


def join(show_id, user_id, connection_id, now=None, origin=None):
    """Register a connection. Returns True when the user was not visible before."""
    now = now or timezone.now()
    with transaction.atomic():
        _lock_user(user_id)
        was_visible = _is_visible(show_id, user_id, now)
        ShowPresence.objects.update_or_create(
            show_id=show_id,
            user_id=user_id,
            connection_id=connection_id,
            defaults={"last_seen": now},
        )
    if not was_visible:
        logger.info(f"User {user_id} joined show {show_id}")
        publish_presence_diff(show_id, joins=[user_id], origin=origin)
    return not was_visible


def heartbeat(show_id, user_id, connection_id, now=None, origin=None):
    """Keep a connection live; a connection that already expired re-joins."""
    now = now or timezone.now()
    refreshed = ShowPresence.objects.filter(
        show_id=show_id,
        user_id=user_id,
        connection_id=connection_id,
        last_seen__gte=_cutoff(now),
    ).update(last_seen=now)
    if refreshed:
        return False
    return join(show_id, user_id, connection_id, now=now, origin=origin)


def leave(show_id, user_id, connection_id, now=None, origin=None):
    """Drop a connection. Returns True when the user is no longer visible."""
    now = now or timezone.now()
    with transaction.atomic():
        _lock_user(user_id)
        deleted, _ = ShowPresence.objects.filter(
            show_id=show_id, user_id=user_id, connection_id=connection_id
        ).delete()
        still_visible = _is_visible(show_id, user_id, now)
    if not deleted or still_visible:
        return False
    logger.info(f"User {user_id} left show {show_id}")
    publish_presence_diff(show_id, leaves=[user_id], origin=origin)
    return True


def expire_stale_presence(now=None):
    """Remove connections past the TTL and announce users that disappeared."""
    now = now or timezone.now()
    cutoff = _cutoff(now)
    stale = list(
        ShowPresence.objects.filter(last_seen__lt=cutoff).values_list("pk", "show_id", "user_id")
    )
    if not stale:
        return 0

    # Re-check last_seen so a heartbeat that landed meanwhile keeps its row.
    ShowPresence.objects.filter(pk__in=[pk for pk, _, _ in stale], last_seen__lt=cutoff).delete()

    departed = 0
    for show_id, user_id in {(show_id, user_id) for _, show_id, user_id in stale}:
        if _is_visible(show_id, user_id, now):
            continue
        publish_presence_diff(show_id, leaves=[user_id])
        departed += 1
    logger.info(f"Expired {len(stale)} presence connections, {departed} viewers left")
    return departed
