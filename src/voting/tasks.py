from celery import shared_task

from . import presence


@shared_task
def expire_stale_presence():
    """Sweep presence connections whose heartbeat stopped. Runs every minute."""
    return presence.expire_stale_presence()
