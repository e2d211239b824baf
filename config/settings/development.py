"""
Development settings: local SQLite database, browsable API, chatty logs.
"""

import os

from dotenv import load_dotenv

from .base import *  # noqa: F403,F405

load_dotenv()

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "pharmapro-dev-only-secret")
DEBUG = True
ALLOWED_HOSTS = os.getenv("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("SQLITE_PATH", str(BASE_DIR / "pharmapro.sqlite3")),  # noqa: F405
        "ATOMIC_REQUESTS": True,
    }
}

REMOTE_STORE_DEFAULT_URL = os.getenv("REMOTE_STORE_DEFAULT_URL", "")
REMOTE_STORE_DEFAULT_KEY = os.getenv("REMOTE_STORE_DEFAULT_KEY", "")

REST_FRAMEWORK["DEFAULT_RENDERER_CLASSES"] = [  # noqa: F405
    "rest_framework.renderers.JSONRenderer",
    "rest_framework.renderers.BrowsableAPIRenderer",
]

# Store and checkout activity at DEBUG, Django itself at INFO
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name}: {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOGS_DIR / "pharmapro_dev.log",  # noqa: F405
            "maxBytes": 5 * 1024 * 1024,
            "backupCount": 3,
            "formatter": "verbose",
        },
    },
    "root": {"handlers": ["console"], "level": "INFO"},
    "loggers": {
        "apps": {
            "handlers": ["console", "file"],
            "level": "DEBUG",
            "propagate": False,
        },
        "django.db.backends": {
            "handlers": ["console"],
            "level": os.getenv("DJANGO_SQL_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}

SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False
