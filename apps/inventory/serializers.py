"""
Serializers for products.

Serializers validate request bodies and render Product entities; they do
not touch the database. Writes go through PharmacyState and the
configured store.
"""

from rest_framework import serializers


class ProductSerializer(serializers.Serializer):
    """Serializer for Product entities."""

    id = serializers.CharField(read_only=True)
    item_code = serializers.CharField(max_length=50)
    name = serializers.CharField(max_length=200)
    batch = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    expiry = serializers.DateField(required=False, allow_null=True, default=None)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    stock = serializers.IntegerField(default=0)
    category = serializers.CharField(
        max_length=100, required=False, allow_blank=True, default="Medicine"
    )
    reorder_level = serializers.IntegerField(min_value=0, default=10)
    optimum_level = serializers.IntegerField(min_value=0, default=50)
    is_low_stock = serializers.BooleanField(read_only=True)

    def validate(self, data):
        """Optimum level cannot be below the reorder level."""
        reorder = data.get("reorder_level")
        optimum = data.get("optimum_level")
        if reorder is not None and optimum is not None and optimum < reorder:
            raise serializers.ValidationError(
                {"optimum_level": "Optimum level must be at least the reorder level."}
            )
        return data
