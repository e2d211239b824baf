"""
Serializers for suppliers and purchase orders.
"""

from rest_framework import serializers


class SupplierSerializer(serializers.Serializer):
    """Serializer for Supplier entities."""

    id = serializers.CharField(read_only=True)
    name = serializers.CharField(max_length=200)
    contact_person = serializers.CharField(
        max_length=200, required=False, allow_blank=True, default=""
    )
    phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    email = serializers.EmailField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class PurchaseOrderLineSerializer(serializers.Serializer):
    """
    Serializer for purchase order lines.

    ``total`` and ``received_quantity`` are maintained by the service and
    ignored on input.
    """

    product_id = serializers.CharField()
    name = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    total = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    received_quantity = serializers.IntegerField(read_only=True)
    outstanding = serializers.IntegerField(read_only=True)


class PurchaseOrderSerializer(serializers.Serializer):
    """Serializer for PurchaseOrder entities."""

    id = serializers.CharField(read_only=True)
    po_number = serializers.CharField(read_only=True)
    supplier_id = serializers.CharField(required=False, allow_null=True, default=None)
    order_date = serializers.DateField(required=False, allow_null=True, default=None)
    expected_delivery = serializers.DateField(required=False, allow_null=True, default=None)
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    status = serializers.CharField(read_only=True)
    total_amount = serializers.DecimalField(max_digits=18, decimal_places=2, read_only=True)
    items = PurchaseOrderLineSerializer(many=True)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("A purchase order needs at least one item.")
        return value

    def validate(self, data):
        order_date = data.get("order_date")
        expected = data.get("expected_delivery")
        if order_date and expected and expected < order_date:
            raise serializers.ValidationError(
                {"expected_delivery": "Expected delivery cannot be before the order date."}
            )
        return data


class ReceiveLineSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    quantity = serializers.IntegerField(min_value=0)


class ReceivePurchaseOrderSerializer(serializers.Serializer):
    """
    Receive request. Without ``items`` every outstanding unit is received.
    """

    items = ReceiveLineSerializer(many=True, required=False)

    def quantities(self):
        items = self.validated_data.get("items")
        if items is None:
            return None
        quantities = {}
        for item in items:
            quantities[item["product_id"]] = (
                quantities.get(item["product_id"], 0) + item["quantity"]
            )
        return quantities
