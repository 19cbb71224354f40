"""
Django settings for setlistvote project.

Values come from the environment (a local .env file is loaded first).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "insecure-dev-key")
DEBUG = os.getenv("DJANGO_DEBUG", "false").lower() in ("1", "true", "yes")
ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "channels",
    "users",
    "music",
    "concerts",
    "setlists",
    "voting",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "setlistvote.urls"
ASGI_APPLICATION = "setlistvote.asgi.application"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"


def _database_config():
    engine = os.getenv("DB_ENGINE", "sqlite").lower()
    lock_timeout = int(os.getenv("VOTE_LOCK_TIMEOUT_SECONDS", "5"))
    if engine == "sqlite":
        return {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": os.getenv("DB_NAME", str(BASE_DIR / "db.sqlite3")),
            "OPTIONS": {
                # Take the write lock at BEGIN so writers queue on the busy
                # timeout instead of failing on a shared-to-write upgrade.
                "transaction_mode": "IMMEDIATE",
                "timeout": lock_timeout,
            },
        }
    config = {
        "ENGINE": f"django.db.backends.{engine}",
        "NAME": os.getenv("DB_NAME", "setlistvote"),
        "USER": os.getenv("DB_USER", ""),
        "PASSWORD": os.getenv("DB_PASSWORD", ""),
        "HOST": os.getenv("DB_HOST", "localhost"),
        "PORT": os.getenv("DB_PORT", ""),
    }
    if engine == "mysql":
        config["OPTIONS"] = {
            "init_command": f"SET SESSION innodb_lock_wait_timeout = {lock_timeout}",
        }
    return config


DATABASES = {"default": _database_config()}

TIME_ZONE = os.getenv("TIME_ZONE", "UTC")
USE_TZ = True

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

CHANNEL_LAYERS = {
    "default": {
        "BACKEND": "channels_redis.core.RedisChannelLayer",
        "CONFIG": {"hosts": [REDIS_URL]},
    },
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.getenv("CACHE_URL", REDIS_URL),
    },
}

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)
CELERY_TIMEZONE = TIME_ZONE
CELERY_TASK_SERIALIZER = "json"
CELERY_ACCEPT_CONTENT = ["json"]

REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "DEFAULT_PARSER_CLASSES": ["rest_framework.parsers.JSONParser"],
    # Sessions come from our own cookie, not django.contrib.auth.
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_THROTTLE_RATES": {
        "votes": os.getenv("VOTE_RATE_LIMIT", "10/min"),
    },
}

# Session tokens
JWT_SECRET = os.getenv("JWT_SECRET", "")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

# Shared secret the external scheduler sends as a bearer token.
CRON_SECRET = os.getenv("CRON_SECRET", "")

# Voting
VOTE_SHOW_LIMIT = int(os.getenv("VOTE_SHOW_LIMIT", "10"))
VOTE_DAILY_LIMIT = int(os.getenv("VOTE_DAILY_LIMIT", "50"))
VOTE_LOCK_TIMEOUT_SECONDS = int(os.getenv("VOTE_LOCK_TIMEOUT_SECONDS", "5"))

# Presence
PRESENCE_TTL_SECONDS = int(os.getenv("PRESENCE_TTL_SECONDS", "60"))

# Trending and show lifecycle
TRENDING_WINDOW_DAYS = int(os.getenv("TRENDING_WINDOW_DAYS", "30"))
SHOW_COMPLETION_HOURS = int(os.getenv("SHOW_COMPLETION_HOURS", "6"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
        },
    },
    "root": {"handlers": ["console"], "level": "WARNING"},
    "loggers": {
        app: {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False}
        for app in ("users", "concerts", "setlists", "voting")
    },
}
