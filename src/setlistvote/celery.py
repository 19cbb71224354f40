import os
from datetime import timedelta

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'setlistvote.settings')

app = Celery('setlistvote')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django app configs.
app.autodiscover_tasks()

TRENDING_INTERVAL_MINUTES = int(os.getenv("TRENDING_INTERVAL_MINUTES", "15"))

# Configure periodic tasks
app.conf.beat_schedule = {
    'calculate-trending-scores': {
        'task': 'concerts.tasks.calculate_trending_scores',
        'schedule': timedelta(minutes=TRENDING_INTERVAL_MINUTES),
    },
    'advance-show-statuses-hourly': {
        'task': 'concerts.tasks.advance_show_statuses',
        'schedule': crontab(minute='5'),
    },
    'expire-stale-presence': {
        'task': 'voting.tasks.expire_stale_presence',
        'schedule': crontab(minute='*'),
    },
}
