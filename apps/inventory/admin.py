"""
Admin configuration for inventory models.
"""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product."""

    list_display = [
        "item_code",
        "name",
        "batch",
        "expiry",
        "price",
        "stock",
        "reorder_level",
        "category",
    ]
    list_filter = ["category", "expiry"]
    search_fields = ["item_code", "name", "batch"]
    readonly_fields = ["created_at", "updated_at"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("item_code", "name", "category", "batch", "expiry"),
            },
        ),
        (
            "Pricing and Stock",
            {
                "fields": ("price", "stock", "reorder_level", "optimum_level"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
