"""
Sales models for the pharmacy point of sale.

An invoice is written once by checkout and never edited afterwards;
only deletion is allowed. Invoice items are snapshots of the product
at sale time (code, name, batch, expiry, price) and keep no reference to
the product record, so later product edits or deletions leave printed
invoices unchanged.

Aggregates are stored with six decimal places so that
price x quantity x discount% is held exactly.
"""

import uuid
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.crm.models import Customer


class Invoice(models.Model):
    """A completed sale."""

    WALK_IN_NAME = "Walk-in"

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the invoice",
    )

    invoice_number = models.CharField(
        max_length=30,
        unique=True,
        help_text="Invoice number in the form INV-YYYYMMDD-####",
    )

    customer = models.ForeignKey(
        Customer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="invoices",
        help_text="Customer charged for the sale (empty for walk-in sales)",
    )

    customer_name = models.CharField(
        max_length=255,
        default=WALK_IN_NAME,
        help_text="Customer name at the time of sale",
    )

    date = models.DateField(help_text="Sale date")

    subtotal = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        default=Decimal("0"),
        help_text="Sum of gross line amounts",
    )

    discount = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        default=Decimal("0"),
        help_text="Sum of line discounts",
    )

    total = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        default=Decimal("0"),
        help_text="Amount payable (subtotal - discount)",
    )

    payment_method = models.CharField(
        max_length=30,
        default="Cash",
        help_text="Payment method (e.g., Cash, Credit)",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "invoices"
        ordering = ["-date", "-created_at"]
        verbose_name = "Invoice"
        verbose_name_plural = "Invoices"
        indexes = [
            models.Index(fields=["-date"], name="invoice_date_idx"),
            models.Index(fields=["customer", "-date"], name="invoice_cust_date_idx"),
        ]

    def __str__(self):
        return f"{self.invoice_number} - {self.customer_name}"


class InvoiceItem(models.Model):
    """Snapshot of one sold line."""

    id = models.BigAutoField(primary_key=True)

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name="items",
        help_text="Invoice this line belongs to",
    )

    position = models.PositiveIntegerField(
        default=0,
        help_text="Line order on the printed invoice",
    )

    item_code = models.CharField(max_length=50, blank=True)
    name = models.CharField(max_length=255)
    batch = models.CharField(max_length=50, blank=True)
    expiry = models.DateField(null=True, blank=True)

    quantity = models.IntegerField(
        validators=[MinValueValidator(1)],
        help_text="Charged units",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Unit price at sale time",
    )

    bonus = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0)],
        help_text="Free units given with the line",
    )

    discount = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
        help_text="Line discount percentage",
    )

    class Meta:
        db_table = "invoice_items"
        ordering = ["invoice", "position"]
        verbose_name = "Invoice Item"
        verbose_name_plural = "Invoice Items"

    def __str__(self):
        return f"{self.name} x {self.quantity}"
