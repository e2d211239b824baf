"""
URL configuration for procurement app.
"""

from django.urls import path

from . import views

app_name = "procurement"

urlpatterns = [
    # Suppliers
    path("api/suppliers/", views.supplier_list, name="supplier_list"),
    path("api/suppliers/<str:supplier_id>/", views.supplier_detail, name="supplier_detail"),
    # Purchase orders
    path("api/purchase-orders/", views.purchase_order_list, name="purchase_order_list"),
    path(
        "api/purchase-orders/<str:po_id>/",
        views.purchase_order_detail,
        name="purchase_order_detail",
    ),
    path(
        "api/purchase-orders/<str:po_id>/receive/",
        views.purchase_order_receive,
        name="purchase_order_receive",
    ),
    path(
        "api/purchase-orders/<str:po_id>/cancel/",
        views.purchase_order_cancel,
        name="purchase_order_cancel",
    ),
]
