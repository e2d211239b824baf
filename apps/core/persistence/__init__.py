"""
Persistence layer for the pharmacy.

The store used by the application is chosen from
``PHARMACY_STORAGE_BACKEND``:

- ``local``: the project's own database (OrmStore)
- ``remote``: a hosted PostgREST project (RemoteTableStore)
- ``auto``: remote when credentials resolve, local otherwise

Remote credentials are resolved from the saved pharmacy settings, then
the ``SUPABASE_URL`` / ``SUPABASE_ANON_KEY`` environment variables, then
the ``REMOTE_STORE_DEFAULT_URL`` / ``REMOTE_STORE_DEFAULT_KEY`` settings.

``get_store()`` caches the store; saving the pharmacy settings calls
``reset_store()`` so the next request reconnects.
"""

import logging
import os
from dataclasses import dataclass
from urllib.parse import urlparse

from django.conf import settings

from apps.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

BACKEND_AUTO = "auto"
BACKEND_LOCAL = "local"
BACKEND_REMOTE = "remote"

_store = None


@dataclass(frozen=True)
class RemoteCredentials:
    url: str
    api_key: str
    source: str

    def __repr__(self):
        return f"RemoteCredentials(url={self.url!r}, source={self.source!r})"


def validate_remote_url(url):
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"Remote store URL must be an http(s) URL, got {url!r}")


def credential_sources(profile=None):
    """
    Candidate (source, url, key) triples in priority order.

    ``profile`` is the saved PharmacySettings row; it is skipped when None.
    """
    sources = []
    if profile is not None:
        sources.append(("settings", profile.db_url, profile.api_key))
    sources.append(
        ("environment", os.getenv("SUPABASE_URL", ""), os.getenv("SUPABASE_ANON_KEY", ""))
    )
    sources.append(
        (
            "default",
            getattr(settings, "REMOTE_STORE_DEFAULT_URL", ""),
            getattr(settings, "REMOTE_STORE_DEFAULT_KEY", ""),
        )
    )
    return sources


def resolve_remote_credentials(profile=None):
    """
    Return the first complete pair of remote credentials, or None.

    A source with only one of URL/key set is skipped with a warning.

    Raises:
        ConfigurationError: If the chosen URL is not an http(s) URL
    """
    for source, url, api_key in credential_sources(profile):
        url = (url or "").strip()
        api_key = (api_key or "").strip()
        if url and api_key:
            validate_remote_url(url)
            return RemoteCredentials(url=url.rstrip("/"), api_key=api_key, source=source)
        if url or api_key:
            logger.warning(f"Incomplete remote store credentials in {source}, ignoring them")
    return None


def build_store(backend=None, profile=None):
    """Construct a store for the given backend name."""
    from apps.core.persistence.orm import OrmStore
    from apps.core.persistence.remote import RemoteTableStore

    backend = backend or settings.PHARMACY_STORAGE_BACKEND
    if backend == BACKEND_LOCAL:
        return OrmStore()

    if backend not in (BACKEND_AUTO, BACKEND_REMOTE):
        raise ConfigurationError(f"Unknown PHARMACY_STORAGE_BACKEND {backend!r}")

    try:
        credentials = resolve_remote_credentials(profile)
    except ConfigurationError as e:
        if backend == BACKEND_REMOTE:
            raise
        logger.warning(f"{e}; falling back to local storage")
        return OrmStore()

    if credentials is None:
        if backend == BACKEND_REMOTE:
            raise ConfigurationError("No remote store credentials configured")
        logger.info("No remote store credentials configured, using local storage")
        return OrmStore()

    logger.info(f"Using remote store at {credentials.url} (credentials from {credentials.source})")
    return RemoteTableStore(
        credentials.url,
        credentials.api_key,
        timeout=settings.REMOTE_STORE_TIMEOUT,
    )


def get_store():
    """Return the application's store, building it on first use."""
    global _store
    if _store is None:
        profile = None
        if settings.PHARMACY_STORAGE_BACKEND != BACKEND_LOCAL:
            from apps.core.models import PharmacySettings

            profile = PharmacySettings.load()
        _store = build_store(profile=profile)
    return _store


def reset_store():
    """Forget the cached store so the next ``get_store()`` reconnects."""
    global _store
    if _store is not None:
        logger.info(f"Resetting {_store.name} store")
    _store = None
