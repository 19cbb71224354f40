"""
Vote admission and vote-state queries.

``cast_vote`` is the only code path that writes ``Vote``, ``VoteAnalytics``
and ``SetlistSong.vote_count``. Everything it checks and writes happens in
one transaction that starts by locking the voter's ``FanUser`` row, so two
admissions for the same fan run one after the other while admissions for
different fans never wait on each other. The
``unique_user_setlist_song_vote`` constraint still backs the duplicate
check, and tallies move only through ``F()`` increments.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import timedelta
from functools import partial
from typing import List, Optional

from django.conf import settings
from django.db import DatabaseError, IntegrityError, connection, models, transaction
from django.db.models import Count, F, Max
from django.db.models.functions import TruncDate
from django.utils import timezone

from setlists.models import SetlistSong
from setlists.tally import increment_vote_count
from users.models import FanUser
from .broadcast import publish_vote_delta
from .models import Vote, VoteAnalytics

logger = logging.getLogger(__name__)


class RejectionReason(models.TextChoices):
    UNAUTHENTICATED = "UNAUTHENTICATED", "Authentication required"
    SONG_NOT_FOUND = "SONG_NOT_FOUND", "Song is not on this show's setlist"
    ALREADY_VOTED = "ALREADY_VOTED", "Already voted for this song"
    SHOW_LIMIT_REACHED = "SHOW_LIMIT_REACHED", "Show vote limit reached"
    DAILY_LIMIT_REACHED = "DAILY_LIMIT_REACHED", "Daily vote limit reached"


class VotingError(Exception):
    pass


class VoteUnavailable(VotingError):
    """The vote could not be admitted because storage failed. Safe to retry."""

    retryable = True


@dataclass
class VoteResult:
    accepted: bool
    reason: Optional[str] = None
    message: str = ""
    vote_id: Optional[int] = None
    setlist_song_id: Optional[int] = None
    new_vote_count: Optional[int] = None
    show_vote_limit: int = 0
    show_votes_used: int = 0
    show_votes_remaining: int = 0
    daily_vote_limit: int = 0
    daily_votes_used: int = 0
    daily_votes_remaining: int = 0

    def to_dict(self):
        return asdict(self)


@dataclass
class VoteStatus:
    show_id: int
    show_vote_limit: int
    show_votes_used: int
    show_votes_remaining: int
    daily_vote_limit: int
    daily_votes_used: int
    daily_votes_remaining: int
    voted_setlist_song_ids: List[int] = field(default_factory=list)

    def to_dict(self):
        return asdict(self)


def day_bounds(now):
    """Start and end of the calendar day containing ``now`` in the project timezone."""
    start = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def count_show_votes(user, show_id):
    return Vote.objects.filter(user=user, show_id=show_id).count()


def count_daily_votes(user, now):
    start, end = day_bounds(now)
    return Vote.objects.filter(user=user, created_at__gte=start, created_at__lt=end).count()


def _result(accepted, show_used, daily_used, reason=None, **extra):
    show_limit = settings.VOTE_SHOW_LIMIT
    daily_limit = settings.VOTE_DAILY_LIMIT
    return VoteResult(
        accepted=accepted,
        reason=reason.value if reason else None,
        message=reason.label if reason else "Vote recorded",
        show_vote_limit=show_limit,
        show_votes_used=show_used,
        show_votes_remaining=max(0, show_limit - show_used),
        daily_vote_limit=daily_limit,
        daily_votes_used=daily_used,
        daily_votes_remaining=max(0, daily_limit - daily_used),
        **extra,
    )


def _apply_lock_timeout():
    """Bound how long this transaction waits for row locks, per backend."""
    seconds = int(settings.VOTE_LOCK_TIMEOUT_SECONDS)
    with connection.cursor() as cursor:
        if connection.vendor == "postgresql":
            cursor.execute("SELECT set_config('lock_timeout', %s, true)", [f"{seconds * 1000}ms"])
        # mysql: innodb_lock_wait_timeout is set per connection by init_command
        # sqlite: the connection "timeout" option bounds the wait for the write lock


def _lock_voter(user):
    locked = list(
        FanUser.objects.select_for_update().filter(pk=user.pk).values_list("pk", flat=True)
    )
    return bool(locked)


def _record_analytics(user, show_id, now):
    today = timezone.localdate(now)
    analytics, created = VoteAnalytics.objects.get_or_create(
        user=user,
        show_id=show_id,
        defaults={
            "show_votes": 1,
            "daily_votes": 1,
            "daily_date": today,
            "last_vote_at": now,
        },
    )
    if created:
        return
    daily_votes = F("daily_votes") + 1 if analytics.daily_date == today else 1
    VoteAnalytics.objects.filter(pk=analytics.pk).update(
        show_votes=F("show_votes") + 1,
        daily_votes=daily_votes,
        daily_date=today,
        last_vote_at=now,
    )


def cast_vote(user, show_id, setlist_song_id, now=None) -> VoteResult:
    """
    Admit or reject one vote.

    Checks, in order: authenticated, song on the show's setlist, not
    already voted, under the per-show cap, under the daily cap. Rejections
    are returned as results carrying the quota numbers. Storage failures
    (including lock timeouts) raise ``VoteUnavailable``; nothing is written
    in that case.

    On success the vote delta is published after commit.
    """
    if user is None or not getattr(user, "is_authenticated", False):
        return _result(False, 0, 0, RejectionReason.UNAUTHENTICATED)

    now = now or timezone.now()
    try:
        with transaction.atomic():
            _apply_lock_timeout()
            if not _lock_voter(user):
                return _result(False, 0, 0, RejectionReason.UNAUTHENTICATED)

            show_used = count_show_votes(user, show_id)
            daily_used = count_daily_votes(user, now)

            setlist_song = (
                SetlistSong.objects.filter(pk=setlist_song_id, setlist__show_id=show_id)
                .only("id", "song_id")
                .first()
            )
            if setlist_song is None:
                return _result(False, show_used, daily_used, RejectionReason.SONG_NOT_FOUND)

            if Vote.objects.filter(user=user, setlist_song_id=setlist_song.pk).exists():
                return _result(
                    False, show_used, daily_used, RejectionReason.ALREADY_VOTED,
                    setlist_song_id=setlist_song.pk,
                )
            if show_used >= settings.VOTE_SHOW_LIMIT:
                return _result(False, show_used, daily_used, RejectionReason.SHOW_LIMIT_REACHED)
            if daily_used >= settings.VOTE_DAILY_LIMIT:
                return _result(False, show_used, daily_used, RejectionReason.DAILY_LIMIT_REACHED)

            try:
                with transaction.atomic():
                    vote = Vote.objects.create(
                        user=user,
                        setlist_song_id=setlist_song.pk,
                        show_id=show_id,
                        created_at=now,
                    )
                    new_vote_count = increment_vote_count(setlist_song.pk)
            except SetlistSong.DoesNotExist:
                # Removed from the setlist after the lookup above.
                return _result(False, show_used, daily_used, RejectionReason.SONG_NOT_FOUND)
            except IntegrityError:
                if not SetlistSong.objects.filter(pk=setlist_song.pk).exists():
                    return _result(False, show_used, daily_used, RejectionReason.SONG_NOT_FOUND)
                # Lost the race to a concurrent request for the same song.
                return _result(
                    False, show_used, daily_used, RejectionReason.ALREADY_VOTED,
                    setlist_song_id=setlist_song.pk,
                )

            _record_analytics(user, show_id, now)

            transaction.on_commit(
                partial(
                    publish_vote_delta,
                    show_id,
                    setlist_song.pk,
                    setlist_song.song_id,
                    new_vote_count,
                )
            )
    except DatabaseError as error:
        logger.exception(
            f"Vote admission failed for user {user.pk} on setlist song {setlist_song_id}"
        )
        raise VoteUnavailable("Voting is temporarily unavailable, please retry.") from error

    logger.info(
        f"Vote {vote.pk} accepted: user {user.pk} show {show_id} "
        f"setlist song {setlist_song.pk} now at {new_vote_count}"
    )
    return _result(
        True,
        show_used + 1,
        daily_used + 1,
        vote_id=vote.pk,
        setlist_song_id=setlist_song.pk,
        new_vote_count=new_vote_count,
    )


def get_vote_status(user, show_id, now=None) -> VoteStatus:
    now = now or timezone.now()
    show_used = count_show_votes(user, show_id)
    daily_used = count_daily_votes(user, now)
    voted_ids = list(
        Vote.objects.filter(user=user, show_id=show_id)
        .order_by("created_at")
        .values_list("setlist_song_id", flat=True)
    )
    return VoteStatus(
        show_id=show_id,
        show_vote_limit=settings.VOTE_SHOW_LIMIT,
        show_votes_used=show_used,
        show_votes_remaining=max(0, settings.VOTE_SHOW_LIMIT - show_used),
        daily_vote_limit=settings.VOTE_DAILY_LIMIT,
        daily_votes_used=daily_used,
        daily_votes_remaining=max(0, settings.VOTE_DAILY_LIMIT - daily_used),
        voted_setlist_song_ids=voted_ids,
    )


def has_voted(user, setlist_song_ids):
    """One bool per id, in order. Anonymous users have voted for nothing."""
    if user is None:
        return [False for _ in setlist_song_ids]
    voted = set(
        Vote.objects.filter(user=user, setlist_song_id__in=setlist_song_ids)
        .values_list("setlist_song_id", flat=True)
    )
    return [song_id in voted for song_id in setlist_song_ids]


def list_user_votes(user, show_id=None, limit=50, offset=0):
    votes = Vote.objects.filter(user=user).select_related("setlist_song__song")
    if show_id is not None:
        votes = votes.filter(show_id=show_id)
    return votes.order_by("-created_at", "-id")[offset:offset + limit]


def get_user_vote_stats(user, now=None):
    now = now or timezone.now()
    user_votes = Vote.objects.filter(user=user)
    favorite_artists = (
        user_votes.values("show__artist_id", "show__artist__name")
        .annotate(vote_count=Count("id"), last_voted_at=Max("created_at"))
        .order_by("-vote_count", "show__artist__name")[:5]
    )
    voting_days = (
        user_votes.filter(created_at__gte=now - timedelta(days=30))
        .annotate(day=TruncDate("created_at"))
        .values("day")
        .distinct()
        .count()
    )
    return {
        "total_votes": user_votes.count(),
        "today_votes": count_daily_votes(user, now),
        "voting_days_last_30": voting_days,
        "favorite_artists": [
            {
                "artist_id": row["show__artist_id"],
                "name": row["show__artist__name"],
                "vote_count": row["vote_count"],
                "last_voted_at": row["last_voted_at"],
            }
            for row in favorite_artists
        ],
    }


def show_vote_activity(show_id, days=30, now=None):
    """Daily vote volume, unique voters and top songs for one show."""
    now = now or timezone.now()
    since = now - timedelta(days=days)
    show_votes = Vote.objects.filter(show_id=show_id, created_at__gte=since, created_at__lte=now)
    daily = list(
        show_votes.annotate(day=TruncDate("created_at"))
        .values("day")
        .annotate(vote_count=Count("id"), unique_voters=Count("user", distinct=True))
        .order_by("day")
    )
    top_songs = (
        SetlistSong.objects.filter(setlist__show_id=show_id)
        .select_related("song")
        .order_by("-vote_count", "position", "id")[:10]
    )
    total = sum(row["vote_count"] for row in daily)
    return {
        "show_id": show_id,
        "period": {"start": since, "end": now},
        "daily_votes": daily,
        "top_songs": [
            {
                "setlist_song_id": entry.pk,
                "song_id": entry.song_id,
                "name": entry.song.name,
                "vote_count": entry.vote_count,
                "position": entry.position,
            }
            for entry in top_songs
        ],
        "summary": {
            "total_votes": total,
            "unique_voters": show_votes.values("user").distinct().count(),
            "avg_votes_per_day": round(total / len(daily), 2) if daily else 0,
        },
    }
