import os
import tempfile

from .settings import *  # noqa: F401,F403

# A file, not :memory:, so threaded tests contend on real SQLite locks.
_TEST_DB = os.path.join(tempfile.gettempdir(), f"setlistvote-test-{os.getpid()}.sqlite3")

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": _TEST_DB,
        "OPTIONS": {"transaction_mode": "IMMEDIATE", "timeout": 5},
        "TEST": {"NAME": _TEST_DB},
    }
}

CACHES = {
    "default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"},
}

CHANNEL_LAYERS = {
    "default": {"BACKEND": "channels.layers.InMemoryChannelLayer"},
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

SECRET_KEY = "test-secret-key"
JWT_SECRET = "test-jwt-secret"
JWT_ALGORITHM = "HS256"
CRON_SECRET = "test-cron-secret"

TIME_ZONE = "UTC"
VOTE_SHOW_LIMIT = 10
VOTE_DAILY_LIMIT = 50
PRESENCE_TTL_SECONDS = 60
TRENDING_WINDOW_DAYS = 30
SHOW_COMPLETION_HOURS = 6
ALLOWED_HOSTS = ["testserver", "localhost", "127.0.0.1"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    "DEFAULT_THROTTLE_RATES": {"votes": "10/min"},
}
