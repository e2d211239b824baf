"""
URL configuration for the PharmaPro pharmacy point-of-sale.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("accounts/", include("django.contrib.auth.urls")),
    path("", include("apps.core.urls")),
    path("", include("apps.inventory.urls")),
    path("", include("apps.crm.urls")),
    path("", include("apps.sales.urls")),
    path("", include("apps.procurement.urls")),
]
