"""
Serializers for the POS cart, checkout and invoices.
"""

from decimal import ROUND_HALF_UP

from rest_framework import serializers

from .state import DEFAULT_PAYMENT_METHOD

PAYMENT_METHODS = ["Cash", "Card", "Credit", "Bank Transfer", "Cheque"]


def _money():
    return serializers.DecimalField(max_digits=18, decimal_places=2, rounding=ROUND_HALF_UP)


class CartLineSerializer(serializers.Serializer):
    """Serializer for a cart line with its computed amounts."""

    product_id = serializers.CharField()
    item_code = serializers.CharField()
    name = serializers.CharField()
    batch = serializers.CharField()
    expiry = serializers.DateField(allow_null=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    quantity = serializers.IntegerField()
    bonus = serializers.IntegerField()
    discount = serializers.DecimalField(max_digits=5, decimal_places=2)
    gross = _money()
    discount_amount = _money()
    net = _money()


def cart_payload(cart):
    """Cart lines plus totals, as returned by every cart endpoint."""
    totals = cart.totals()
    decimal = _money()
    return {
        "items": CartLineSerializer(cart.lines, many=True).data,
        "subtotal": decimal.to_representation(totals.subtotal),
        "discount": decimal.to_representation(totals.discount),
        "total": decimal.to_representation(totals.total),
        "line_count": totals.line_count,
        "units": totals.units,
    }


class AddToCartSerializer(serializers.Serializer):
    product_id = serializers.CharField()


class CheckoutSerializer(serializers.Serializer):
    """Checkout request: optional customer (walk-in when empty) and payment method."""

    customer_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    payment_method = serializers.ChoiceField(
        choices=PAYMENT_METHODS, required=False, default=DEFAULT_PAYMENT_METHOD
    )


class InvoiceLineSerializer(serializers.Serializer):
    item_code = serializers.CharField()
    name = serializers.CharField()
    batch = serializers.CharField()
    expiry = serializers.DateField(allow_null=True)
    quantity = serializers.IntegerField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    bonus = serializers.IntegerField()
    discount = serializers.DecimalField(max_digits=5, decimal_places=2)
    net = _money()


class InvoiceListSerializer(serializers.Serializer):
    """Serializer for invoice lists (no line items)."""

    id = serializers.CharField()
    invoice_number = serializers.CharField()
    customer_id = serializers.CharField(allow_null=True)
    customer_name = serializers.CharField()
    date = serializers.DateField(allow_null=True)
    subtotal = _money()
    discount = _money()
    total = _money()
    payment_method = serializers.CharField()
    total_items = serializers.IntegerField()


class InvoiceDetailSerializer(InvoiceListSerializer):
    """Serializer for a single invoice with its line snapshots."""

    items = InvoiceLineSerializer(many=True)
