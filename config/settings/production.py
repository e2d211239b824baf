"""
Production settings: PostgreSQL, HTTPS-only cookies and JSON logs.
"""

import os

from dotenv import load_dotenv

from .base import *  # noqa: F403,F405

load_dotenv()

validate_required_env_vars()  # noqa: F405

SECRET_KEY = os.environ["DJANGO_SECRET_KEY"]
DEBUG = False
ALLOWED_HOSTS = [host for host in os.getenv("DJANGO_ALLOWED_HOSTS", "").split(",") if host]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.environ["POSTGRES_DB"],
        "USER": os.environ["POSTGRES_USER"],
        "PASSWORD": os.environ["POSTGRES_PASSWORD"],
        "HOST": os.environ["POSTGRES_HOST"],
        "PORT": os.getenv("POSTGRES_PORT", "5432"),
        "ATOMIC_REQUESTS": True,
        "CONN_MAX_AGE": 300,
    }
}

REMOTE_STORE_DEFAULT_URL = os.getenv("REMOTE_STORE_DEFAULT_URL", "")
REMOTE_STORE_DEFAULT_KEY = os.getenv("REMOTE_STORE_DEFAULT_KEY", "")

# One JSON object per line on stdout; errors also kept on disk
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
        },
        "error_file": {
            "level": "ERROR",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOGS_DIR / "pharmapro_errors.log",  # noqa: F405
            "maxBytes": 20 * 1024 * 1024,
            "backupCount": 10,
            "formatter": "json",
        },
    },
    "root": {"handlers": ["console", "error_file"], "level": "WARNING"},
    "loggers": {
        "apps": {
            "handlers": ["console", "error_file"],
            "level": os.getenv("PHARMAPRO_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "django.request": {
            "handlers": ["console", "error_file"],
            "level": "ERROR",
            "propagate": False,
        },
    },
}

SECURE_SSL_REDIRECT = os.getenv("SECURE_SSL_REDIRECT", "True").lower() == "true"
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_SECURE = True
CSRF_COOKIE_SECURE = True
SECURE_HSTS_SECONDS = 60 * 60 * 24 * 365
