"""
Settings shared by every PharmaPro environment.

Environment modules (development, production, test) import everything from
here and add the database, secret key and logging setup.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "apps.core",
    "apps.inventory",
    "apps.crm",
    "apps.sales",
    "apps.procurement",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"
WSGI_APPLICATION = "config.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
                "apps.core.context_processors.pharmacy_profile",
            ],
        },
    },
]

AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
]

LOGIN_URL = "/accounts/login/"
LOGIN_REDIRECT_URL = "/"
LOGOUT_REDIRECT_URL = "/accounts/login/"

LANGUAGE_CODE = "en"
TIME_ZONE = os.getenv("DJANGO_TIME_ZONE", "Asia/Karachi")
USE_I18N = False
USE_TZ = True

STATIC_URL = "static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# The POS cart lives in the session for the length of a shift
SESSION_COOKIE_AGE = 12 * 60 * 60
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
CSRF_COOKIE_SAMESITE = "Lax"
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = "SAMEORIGIN"

# Session auth comes first so anonymous API calls get 403, not a Basic challenge
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [
        "rest_framework.authentication.SessionAuthentication",
        "rest_framework.authentication.BasicAuthentication",
    ],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.IsAuthenticated",
    ],
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
        "rest_framework.parsers.FormParser",
    ],
}

# Pharmacy storage: "auto" uses the hosted table store when credentials
# resolve and the local database otherwise; "local" and "remote" force one.
PHARMACY_STORAGE_BACKEND = os.getenv("PHARMACY_STORAGE_BACKEND", "auto")

# Checkout may take stock below zero (a backorder) unless disabled
PHARMACY_ALLOW_NEGATIVE_STOCK = (
    os.getenv("PHARMACY_ALLOW_NEGATIVE_STOCK", "True").lower() == "true"
)

PHARMACY_CURRENCY = os.getenv("PHARMACY_CURRENCY", "Rs.")

# Last-resort remote credentials, after saved settings and SUPABASE_* env vars
REMOTE_STORE_DEFAULT_URL = ""
REMOTE_STORE_DEFAULT_KEY = ""
REMOTE_STORE_TIMEOUT = int(os.getenv("REMOTE_STORE_TIMEOUT", "10"))

LOGS_DIR = BASE_DIR / "logs"
LOGS_DIR.mkdir(exist_ok=True)

PRODUCTION_ENV_VARS = {
    "DJANGO_SECRET_KEY": "secret key for cryptographic signing",
    "POSTGRES_DB": "PostgreSQL database name",
    "POSTGRES_USER": "PostgreSQL user",
    "POSTGRES_PASSWORD": "PostgreSQL password",
    "POSTGRES_HOST": "PostgreSQL host",
}


def validate_required_env_vars(required=None):
    """
    Raise ValueError listing every required environment variable that is unset.
    """
    required = PRODUCTION_ENV_VARS if required is None else required
    missing = [f"  - {var} ({what})" for var, what in required.items() if not os.getenv(var)]
    if missing:
        raise ValueError("Missing required environment variables:\n" + "\n".join(missing))
