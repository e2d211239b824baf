"""
Admin configuration for customers.
"""

from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for Customer."""

    list_display = ["name", "phone", "region", "balance", "created_at"]
    list_filter = ["region"]
    search_fields = ["name", "phone", "email"]
    readonly_fields = ["created_at", "updated_at"]
