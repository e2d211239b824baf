"""
Admin configuration for procurement models.
"""

from django.contrib import admin

from .models import PurchaseOrder, PurchaseOrderItem, Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    """Admin interface for Supplier."""

    list_display = ["name", "contact_person", "phone", "email"]
    search_fields = ["name", "contact_person", "phone", "email"]
    readonly_fields = ["created_at", "updated_at"]


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    fields = ["product", "name", "quantity", "unit_price", "total", "received_quantity"]
    raw_id_fields = ["product"]


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    """Admin interface for PurchaseOrder."""

    list_display = ["po_number", "supplier", "order_date", "status", "total_amount"]
    list_filter = ["status", "order_date"]
    search_fields = ["po_number", "supplier__name"]
    date_hierarchy = "order_date"
    inlines = [PurchaseOrderItemInline]
    readonly_fields = ["created_at", "updated_at"]
