import logging
from datetime import timedelta

from django.conf import settings
from django.db.models import F, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from .models import Show

logger = logging.getLogger(__name__)


def advance_show_statuses(now=None):
    """
    Move shows along their lifecycle as their date passes.

    scheduled -> ongoing once the show starts, and scheduled/ongoing ->
    completed once SHOW_COMPLETION_HOURS have passed since the start.
    Cancelled shows are left alone.
    """
    now = now or timezone.now()
    completion_cutoff = now - timedelta(hours=settings.SHOW_COMPLETION_HOURS)

    completed = Show.objects.filter(
        status__in=[Show.STATUS_SCHEDULED, Show.STATUS_ONGOING],
        date__lte=completion_cutoff,
    ).update(status=Show.STATUS_COMPLETED, updated_at=now)
    started = Show.objects.filter(
        status=Show.STATUS_SCHEDULED,
        date__lte=now,
    ).update(status=Show.STATUS_ONGOING, updated_at=now)

    if started or completed:
        logger.info(f"Show statuses advanced: {started} ongoing, {completed} completed")
    return {"started": started, "completed": completed}


def record_show_view(show_id):
    """Count one page view. Returns False if the show does not exist."""
    return bool(Show.objects.filter(pk=show_id).update(view_count=F("view_count") + 1))


def trending_shows(limit=10, now=None):
    now = now or timezone.now()
    return (
        Show.objects.filter(date__gte=now)
        .exclude(status__in=[Show.STATUS_CANCELLED, Show.STATUS_COMPLETED])
        .select_related("artist", "venue")
        .annotate(total_votes=Coalesce(Sum("setlists__songs__vote_count"), 0))
        .order_by("-trending_score", "date")[:limit]
    )
