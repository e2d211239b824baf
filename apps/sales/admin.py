"""
Admin configuration for sales models.
"""

from django.contrib import admin

from .models import Invoice, InvoiceItem


class InvoiceItemInline(admin.TabularInline):
    """Read-only line snapshots shown inside an invoice."""

    model = InvoiceItem
    extra = 0
    can_delete = False
    fields = ["item_code", "name", "batch", "expiry", "quantity", "bonus", "price", "discount"]
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    """Admin interface for Invoice. Invoices are immutable; only deletion is allowed."""

    list_display = ["invoice_number", "date", "customer_name", "total", "payment_method"]
    list_filter = ["date", "payment_method"]
    search_fields = ["invoice_number", "customer_name"]
    date_hierarchy = "date"
    inlines = [InvoiceItemInline]
    readonly_fields = [
        "invoice_number",
        "customer",
        "customer_name",
        "date",
        "subtotal",
        "discount",
        "total",
        "payment_method",
        "created_at",
    ]

    def has_add_permission(self, request):
        return False
