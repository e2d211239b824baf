"""
Serializers for core app.
"""

from rest_framework import serializers

from apps.core.exceptions import ConfigurationError
from apps.core.persistence import validate_remote_url

from .models import PharmacySettings


class PharmacySettingsSerializer(serializers.ModelSerializer):
    """
    Serializer for the pharmacy settings row.

    The API key is write-only; reads only report whether one is stored.
    A URL and key must be given together.
    """

    has_api_key = serializers.SerializerMethodField()

    class Meta:
        model = PharmacySettings
        fields = [
            "name",
            "address",
            "phone",
            "license",
            "invoice_notes",
            "db_url",
            "api_key",
            "has_api_key",
            "updated_at",
        ]
        read_only_fields = ["updated_at"]
        extra_kwargs = {"api_key": {"write_only": True}}

    def get_has_api_key(self, obj):
        return bool(obj.api_key)

    def validate_db_url(self, value):
        if value:
            try:
                validate_remote_url(value)
            except ConfigurationError as e:
                raise serializers.ValidationError(str(e))
        return value.rstrip("/")

    def validate(self, data):
        db_url = data.get("db_url", self.instance.db_url if self.instance else "")
        api_key = data.get("api_key", self.instance.api_key if self.instance else "")
        if bool(db_url) != bool(api_key):
            raise serializers.ValidationError("Remote store URL and API key must be set together.")
        return data


class DashboardSerializer(serializers.Serializer):
    """Serializer for the dashboard summary."""

    total_revenue = serializers.DecimalField(max_digits=18, decimal_places=2)
    todays_sales = serializers.DecimalField(max_digits=18, decimal_places=2)
    todays_invoice_count = serializers.IntegerField()
    product_count = serializers.IntegerField()
    customer_count = serializers.IntegerField()
    low_stock = serializers.SerializerMethodField()
    recent_invoices = serializers.SerializerMethodField()

    def get_low_stock(self, obj):
        from apps.inventory.serializers import ProductSerializer

        return ProductSerializer(obj.low_stock, many=True).data

    def get_recent_invoices(self, obj):
        from apps.sales.serializers import InvoiceListSerializer

        return InvoiceListSerializer(obj.recent_invoices, many=True).data
