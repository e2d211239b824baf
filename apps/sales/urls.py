"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    # POS Interface
    path("pos/", views.pos_interface, name="pos_interface"),
    # Cart and checkout API
    path("api/pos/cart/", views.cart_detail, name="cart_detail"),
    path("api/pos/cart/items/", views.cart_add_item, name="cart_add_item"),
    path(
        "api/pos/cart/items/<str:product_id>/", views.cart_item_detail, name="cart_item_detail"
    ),
    path("api/pos/checkout/", views.checkout, name="checkout"),
    # Invoices
    path("api/invoices/", views.invoice_list, name="invoice_list"),
    path("api/invoices/<str:invoice_id>/", views.invoice_detail, name="invoice_detail"),
    path("invoices/<str:invoice_id>/print/", views.invoice_print, name="invoice_print"),
    path("invoices/<str:invoice_id>/pdf/", views.invoice_pdf, name="invoice_pdf"),
]
