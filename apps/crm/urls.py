"""
URL configuration for CRM app.
"""

from django.urls import path

from . import views

app_name = "crm"

urlpatterns = [
    path("api/customers/", views.customer_list, name="customer_list"),
    path("api/customers/<str:customer_id>/", views.customer_detail, name="customer_detail"),
]
