"""
Customer records for credit sales.

A customer's balance is the running total of invoice amounts charged to
the account. It only grows through checkout and is edited by hand when
a payment is recorded.
"""

import uuid
from decimal import Decimal

from django.db import models


class Customer(models.Model):
    """A pharmacy, clinic or individual buying on account."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the customer",
    )

    name = models.CharField(max_length=255, help_text="Customer or business name")

    phone = models.CharField(max_length=50, blank=True, help_text="Contact phone number")

    email = models.EmailField(blank=True, help_text="Optional email address")

    address = models.CharField(max_length=255, blank=True, help_text="Optional postal address")

    region = models.CharField(
        max_length=100,
        blank=True,
        help_text="Sales region or area printed on invoices",
    )

    balance = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        default=Decimal("0"),
        help_text="Outstanding balance; grows by each invoice total",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "customers"
        ordering = ["name"]
        verbose_name = "Customer"
        verbose_name_plural = "Customers"
        indexes = [
            models.Index(fields=["name"], name="customer_name_idx"),
            models.Index(fields=["phone"], name="customer_phone_idx"),
        ]

    def __str__(self):
        return self.name
