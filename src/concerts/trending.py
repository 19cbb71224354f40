"""
Trending score for upcoming shows.

    days_until    = max(1, ceil((show.date - now) / 1 day))
    recency_boost = max(1, 31 - days_until) / 30
    score         = round(0.3 * view_count + 0.5 * total_votes + 0.2 * recency_boost * 100)

Votes weigh more than views; the recency term lifts shows that are about
to happen. Every run recomputes from current aggregates and overwrites the
stored score, so runs are idempotent and may overlap without locking.
"""

import logging
import math
import time
from dataclasses import asdict, dataclass, field
from datetime import timedelta
from typing import List

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from .models import Show

logger = logging.getLogger(__name__)

VIEW_WEIGHT = 0.3
VOTE_WEIGHT = 0.5
RECENCY_WEIGHT = 0.2

SECONDS_PER_DAY = 24 * 60 * 60
MAX_REPORTED_ERRORS = 5


@dataclass
class TrendingRunResult:
    processed: int = 0
    updated: int = 0
    failed: int = 0
    duration_ms: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self):
        return asdict(self)


def days_until_show(show_date, now):
    seconds = (show_date - now).total_seconds()
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


def recency_boost(days_until):
    """1.0 for a show tomorrow, down to 1/30 at 30 days out and beyond."""
    return max(1, 31 - days_until) / 30


def round_half_up(value):
    return int(math.floor(value + 0.5))


def compute_trending_score(view_count, total_votes, days_until):
    return round_half_up(
        VIEW_WEIGHT * view_count
        + VOTE_WEIGHT * total_votes
        + RECENCY_WEIGHT * recency_boost(days_until) * 100
    )


def trending_candidates(now):
    """Shows dated within the trending window, with their summed tallies."""
    window_end = now + timedelta(days=settings.TRENDING_WINDOW_DAYS)
    return (
        Show.objects.filter(date__gte=now, date__lte=window_end)
        .exclude(status=Show.STATUS_CANCELLED)
        .annotate(total_votes=Coalesce(Sum("setlists__songs__vote_count"), 0))
        .order_by("date")
    )


def _write_score(show_id, score):
    with transaction.atomic():
        return Show.objects.filter(pk=show_id).update(trending_score=score)


def recalculate_trending_scores(now=None) -> TrendingRunResult:
    """
    Recompute and store the trending score of every show in the window.

    A failure on one show is logged and counted; the rest of the batch
    still runs.
    """
    started = time.monotonic()
    now = now or timezone.now()
    result = TrendingRunResult()

    shows = list(trending_candidates(now).values_list("pk", "date", "view_count", "total_votes"))
    logger.info(f"Calculating trending scores for {len(shows)} upcoming shows")

    for show_id, show_date, view_count, total_votes in shows:
        result.processed += 1
        try:
            score = compute_trending_score(
                view_count or 0, total_votes or 0, days_until_show(show_date, now)
            )
            if _write_score(show_id, score):
                result.updated += 1
                logger.debug(f"Show {show_id} trending score {score}")
            else:
                result.errors.append(f"show {show_id}: no longer exists")
        except Exception as error:
            logger.exception(f"Error updating trending score for show {show_id}")
            result.errors.append(f"show {show_id}: {error}")

    result.failed = result.processed - result.updated
    result.errors = result.errors[:MAX_REPORTED_ERRORS]
    result.duration_ms = int((time.monotonic() - started) * 1000)
    logger.info(
        f"Trending calculation completed: {result.updated}/{result.processed} updated, "
        f"{result.failed} failed in {result.duration_ms}ms"
    )
    return result
