"""
System checks for the pharmacy configuration.

- pharmapro.E001: unknown PHARMACY_STORAGE_BACKEND
- pharmapro.W001: remote store credentials from the environment or the
  built-in defaults are invalid; the app will use local storage
"""

from django.conf import settings
from django.core.checks import Error, Tags, Warning, register

from apps.core.exceptions import ConfigurationError
from apps.core.persistence import BACKEND_AUTO, BACKEND_LOCAL, BACKEND_REMOTE
from apps.core.persistence import resolve_remote_credentials


@register(Tags.compatibility)
def check_storage_backend(app_configs, **kwargs):
    """Validate the storage backend name and the configured remote credentials."""
    errors = []
    backend = getattr(settings, "PHARMACY_STORAGE_BACKEND", BACKEND_AUTO)

    if backend not in (BACKEND_AUTO, BACKEND_LOCAL, BACKEND_REMOTE):
        errors.append(
            Error(
                f"Unknown PHARMACY_STORAGE_BACKEND {backend!r}.",
                hint="Use 'auto', 'local' or 'remote'.",
                id="pharmapro.E001",
            )
        )
        return errors

    if backend == BACKEND_LOCAL:
        return errors

    # The settings row is not read here: checks run before migrations.
    try:
        resolve_remote_credentials()
    except ConfigurationError as e:
        errors.append(
            Warning(
                str(e),
                hint=(
                    "Fix SUPABASE_URL / REMOTE_STORE_DEFAULT_URL; "
                    "until then the local database is used."
                ),
                id="pharmapro.W001",
            )
        )
    return errors
