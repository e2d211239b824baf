"""
Admin configuration for core models.
"""

from django.contrib import admin

from .models import PharmacySettings


@admin.register(PharmacySettings)
class PharmacySettingsAdmin(admin.ModelAdmin):
    """Admin interface for the single pharmacy settings row."""

    list_display = ["name", "phone", "license", "has_remote_credentials", "updated_at"]
    readonly_fields = ["updated_at"]
    fieldsets = (
        (
            "Pharmacy Profile",
            {
                "fields": ("name", "address", "phone", "license", "invoice_notes"),
            },
        ),
        (
            "Remote Store",
            {
                "fields": ("db_url", "api_key"),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("updated_at",),
                "classes": ("collapse",),
            },
        ),
    )

    @admin.display(boolean=True, description="Remote store")
    def has_remote_credentials(self, obj):
        return obj.has_remote_credentials

    def has_add_permission(self, request):
        return not PharmacySettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
