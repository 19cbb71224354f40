from celery import shared_task

from .services import advance_show_statuses as advance_statuses
from .trending import recalculate_trending_scores


@shared_task
def calculate_trending_scores():
    """
    Periodically recompute trending scores for upcoming shows.
    Scheduled by Celery beat every TRENDING_INTERVAL_MINUTES.
    """
    return recalculate_trending_scores().to_dict()


@shared_task
def advance_show_statuses():
    return advance_statuses()
