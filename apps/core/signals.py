"""
Signal handlers for the core app.

Saving the pharmacy settings may change the remote store credentials, so
the cached store is dropped and rebuilt on the next request.
"""

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.core.models import PharmacySettings
from apps.core.persistence import reset_store

logger = logging.getLogger(__name__)


@receiver(post_save, sender=PharmacySettings)
def reconnect_store_on_settings_change(sender, instance, **kwargs):
    """Rebuild the store after the settings row is saved."""
    logger.info(f"Pharmacy settings saved for {instance.name}, reconnecting store")
    reset_store()
