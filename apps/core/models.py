"""
Core models for the pharmacy application.

PharmacySettings holds the pharmacy profile printed on invoices and the
optional credentials of the hosted table store. It is a single row that
is saved on every change; saving it makes the next request reconnect the
persistence layer (see apps.core.signals).
"""

from django.db import models


class PharmacySettings(models.Model):
    """
    Pharmacy profile and remote store override credentials.

    Only one row exists (pk=1). Use ``PharmacySettings.load()`` to read it.
    """

    SINGLETON_PK = 1

    DEFAULT_NAME = "PharmaPro"

    name = models.CharField(
        max_length=200,
        default=DEFAULT_NAME,
        help_text="Pharmacy name shown on screens and invoices",
    )

    address = models.CharField(
        max_length=255,
        blank=True,
        help_text="Pharmacy address printed in the invoice header",
    )

    phone = models.CharField(
        max_length=50,
        blank=True,
        help_text="Contact phone number",
    )

    license = models.CharField(
        max_length=100,
        blank=True,
        help_text="Drug sale license number",
    )

    invoice_notes = models.TextField(
        blank=True,
        help_text="Footer notes printed at the bottom of every invoice",
    )

    # Remote table store override
    db_url = models.URLField(
        blank=True,
        help_text="Hosted table store URL; overrides the environment when set",
    )

    api_key = models.CharField(
        max_length=500,
        blank=True,
        help_text="Access key for the hosted table store",
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "pharmacy_settings"
        verbose_name = "Pharmacy Settings"
        verbose_name_plural = "Pharmacy Settings"

    def __str__(self):
        return f"Settings for {self.name}"

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        obj, _ = cls.objects.get_or_create(pk=cls.SINGLETON_PK)
        return obj

    @property
    def has_remote_credentials(self):
        return bool(self.db_url and self.api_key)
