"""
Inventory models for the pharmacy.

Products are stocked per batch: the same medicine received in two batches
with different expiry dates is two products sharing an item code.
Stock is a signed count; checkout may drive it below zero when
backorders are allowed (see PHARMACY_ALLOW_NEGATIVE_STOCK).
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """
    A stocked product batch.

    Reorder and optimum levels only drive dashboard alerts; they are never
    enforced at checkout.
    """

    DEFAULT_REORDER_LEVEL = 10
    DEFAULT_OPTIMUM_LEVEL = 50

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the product",
    )

    item_code = models.CharField(
        max_length=50,
        help_text="Shop item code (e.g., '001')",
    )

    name = models.CharField(
        max_length=255,
        help_text="Product name including strength (e.g., 'Paracetamol 500mg')",
    )

    batch = models.CharField(
        max_length=50,
        blank=True,
        help_text="Manufacturer batch number",
    )

    expiry = models.DateField(
        null=True,
        blank=True,
        help_text="Batch expiry date",
    )

    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Unit sale price",
    )

    stock = models.IntegerField(
        default=0,
        help_text="Units on hand; negative values are backordered units",
    )

    category = models.CharField(
        max_length=100,
        blank=True,
        default="Medicine",
        help_text="Product category (e.g., 'Medicine', 'Supplement')",
    )

    reorder_level = models.IntegerField(
        default=DEFAULT_REORDER_LEVEL,
        validators=[MinValueValidator(0)],
        help_text="Stock level at or below which the product is flagged as low",
    )

    optimum_level = models.IntegerField(
        default=DEFAULT_OPTIMUM_LEVEL,
        validators=[MinValueValidator(0)],
        help_text="Target stock level used when planning purchase orders",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["name", "batch"]
        verbose_name = "Product"
        verbose_name_plural = "Products"
        indexes = [
            models.Index(fields=["item_code"], name="product_code_idx"),
            models.Index(fields=["name"], name="product_name_idx"),
            models.Index(fields=["expiry"], name="product_expiry_idx"),
        ]

    def __str__(self):
        return f"{self.item_code} - {self.name} ({self.batch})"

    @property
    def is_low_stock(self):
        return self.stock <= self.reorder_level
