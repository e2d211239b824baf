"""
URL configuration for inventory app.
"""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    path("api/products/", views.product_list, name="product_list"),
    path("api/products/low-stock/", views.low_stock_products, name="low_stock_products"),
    path("api/products/<str:product_id>/", views.product_detail, name="product_detail"),
]
