"""
Test settings.

In-memory SQLite, local storage backend and quiet logging so the suite
runs without any external service.
"""

from .base import *  # noqa: F403,F405

SECRET_KEY = "test-secret-key-not-for-production"

DEBUG = False

ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
        "ATOMIC_REQUESTS": True,
    }
}

PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

PHARMACY_STORAGE_BACKEND = "local"
PHARMACY_ALLOW_NEGATIVE_STOCK = True
REMOTE_STORE_DEFAULT_URL = ""
REMOTE_STORE_DEFAULT_KEY = ""

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "root": {
        "handlers": ["null"],
        "level": "WARNING",
    },
}
