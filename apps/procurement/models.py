"""
Procurement models for the pharmacy.

Suppliers and the purchase orders raised against them. Receiving a
purchase order adds the received quantities to product stock; the
order moves from pending to partial or received as lines are filled.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.inventory.models import Product


class Supplier(models.Model):
    """A distributor or manufacturer the pharmacy buys from."""

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the supplier",
    )

    name = models.CharField(max_length=255, help_text="Supplier company name")
    contact_person = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "suppliers"
        ordering = ["name"]
        verbose_name = "Supplier"
        verbose_name_plural = "Suppliers"

    def __str__(self):
        return self.name


class PurchaseOrder(models.Model):
    """
    Order placed with a supplier.

    Status flow: pending -> partial -> received, or pending -> cancelled.
    """

    PENDING = "pending"
    PARTIAL = "partial"
    RECEIVED = "received"
    CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (PARTIAL, "Partially Received"),
        (RECEIVED, "Received"),
        (CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the purchase order",
    )

    po_number = models.CharField(
        max_length=30,
        unique=True,
        help_text="Purchase order number in the form PO-YYYYMMDD-####",
    )

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchase_orders",
    )

    order_date = models.DateField(help_text="Date the order was placed")

    expected_delivery = models.DateField(
        null=True,
        blank=True,
        help_text="Expected delivery date",
    )

    notes = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=PENDING,
    )

    total_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Sum of line totals",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "purchase_orders"
        ordering = ["-order_date", "-created_at"]
        verbose_name = "Purchase Order"
        verbose_name_plural = "Purchase Orders"
        indexes = [
            models.Index(fields=["status"], name="po_status_idx"),
            models.Index(fields=["supplier", "-order_date"], name="po_supplier_date_idx"),
        ]

    def __str__(self):
        return self.po_number


class PurchaseOrderItem(models.Model):
    """One product line on a purchase order."""

    id = models.BigAutoField(primary_key=True)

    purchase_order = models.ForeignKey(
        PurchaseOrder,
        on_delete=models.CASCADE,
        related_name="items",
    )

    position = models.PositiveIntegerField(default=0)

    product = models.ForeignKey(
        Product,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchase_order_items",
    )

    name = models.CharField(max_length=255, help_text="Product name when ordered")

    quantity = models.IntegerField(validators=[MinValueValidator(1)])

    unit_price = models.DecimalField(max_digits=12, decimal_places=2)

    total = models.DecimalField(max_digits=18, decimal_places=2)

    received_quantity = models.IntegerField(
        default=0,
        validators=[MinValueValidator(0)],
    )

    class Meta:
        db_table = "purchase_order_items"
        ordering = ["purchase_order", "position"]
        verbose_name = "Purchase Order Item"
        verbose_name_plural = "Purchase Order Items"

    def __str__(self):
        return f"{self.name} x {self.quantity}"
