"""
Views for the POS and invoices.

- POS page
- Session cart API: view, add, update, remove, clear
- Checkout
- Invoice history, detail and deletion
- Printable HTML invoice and PDF download
"""

import logging

from django.contrib.auth.decorators import login_required
from django.http import Http404, HttpResponse
from django.shortcuts import render
from django.views.decorators.http import require_http_methods

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.api import error_response, error_status, pharmacy_state
from apps.core.exceptions import EntityNotFound, PharmacyError
from apps.core.models import PharmacySettings

from .cart import Cart
from .invoice_service import InvoiceService
from .serializers import (
    PAYMENT_METHODS,
    AddToCartSerializer,
    CheckoutSerializer,
    InvoiceDetailSerializer,
    InvoiceListSerializer,
    cart_payload,
)

logger = logging.getLogger(__name__)


# POS Interface


@login_required
@require_http_methods(["GET"])
def pos_interface(request):
    """
    Main POS page.

    Renders the product picker, the current cart, the customer selector
    and the payment method selector. The page drives the cart and
    checkout API endpoints below.
    """
    products, customers = [], []
    try:
        state = pharmacy_state(request)
        cart = state.cart
        products = sorted(state.products, key=lambda p: p.name.lower())
        customers = sorted(state.customers, key=lambda c: c.name.lower())
    except PharmacyError as e:
        logger.error(f"POS page could not load catalogue: {e}", exc_info=True)
        cart = Cart.load(request.session)

    context = {
        "products": products,
        "customers": customers,
        "cart": cart,
        "totals": cart.totals(),
        "payment_methods": PAYMENT_METHODS,
    }
    return render(request, "sales/pos_interface.html", context)


# Cart API


@api_view(["GET", "DELETE"])
@permission_classes([permissions.IsAuthenticated])
def cart_detail(request):
    """Return the session cart, or clear it on DELETE."""
    try:
        state = pharmacy_state(request)
    except PharmacyError as e:
        return error_response(e)

    if request.method == "DELETE":
        state.clear_cart()
        state.cart.save(request.session)
    return Response(cart_payload(state.cart))


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def cart_add_item(request):
    """
    Add one unit of a product to the cart.

    Adding a product already in the cart increases its quantity by one.
    """
    serializer = AddToCartSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        state = pharmacy_state(request)
        state.add_to_cart(serializer.validated_data["product_id"])
    except PharmacyError as e:
        return error_response(e)

    state.cart.save(request.session)
    return Response(cart_payload(state.cart), status=status.HTTP_201_CREATED)


@api_view(["PATCH", "DELETE"])
@permission_classes([permissions.IsAuthenticated])
def cart_item_detail(request, product_id):
    """
    Update or remove a cart line.

    PATCH body may contain quantity, bonus and discount (percent). A
    product that is not in the cart is left alone.
    """
    try:
        state = pharmacy_state(request)
        if request.method == "DELETE":
            changed = state.remove_from_cart(product_id)
        else:
            changed = state.update_cart_item(product_id, **dict(request.data.items()))
    except PharmacyError as e:
        return error_response(e)

    if not changed:
        return Response({"detail": "Product is not in the cart"}, status=status.HTTP_404_NOT_FOUND)
    state.cart.save(request.session)
    return Response(cart_payload(state.cart))


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def checkout(request):
    """
    Complete the sale for the current cart.

    Request body:
    {
        "customer_id": "id" (optional, walk-in when omitted),
        "payment_method": "Cash" (optional)
    }

    Creates the invoice, deducts quantity + bonus from stock and adds the
    invoice total to the customer's balance.
    """
    serializer = CheckoutSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        state = pharmacy_state(request)
        invoice_number = state.complete_sale(
            customer_id=serializer.validated_data.get("customer_id") or None,
            payment_method=serializer.validated_data["payment_method"],
        )
    except PharmacyError as e:
        return error_response(e)

    if invoice_number is None:
        return Response({"detail": "Cart is empty"}, status=status.HTTP_400_BAD_REQUEST)

    state.cart.save(request.session)
    invoice = state.invoices[0]
    return Response(
        {"invoice_number": invoice_number, "invoice": InvoiceDetailSerializer(invoice).data},
        status=status.HTTP_201_CREATED,
    )


# Invoices


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def invoice_list(request):
    """
    Invoice history, most recent first.

    Query parameters:
    - q: Search invoice number or customer name
    - customer_id: Invoices of one customer
    """
    try:
        invoices = pharmacy_state(request).invoices
    except PharmacyError as e:
        return error_response(e)

    query = request.query_params.get("q", "").strip().lower()
    customer_id = request.query_params.get("customer_id")
    if query:
        invoices = [
            inv
            for inv in invoices
            if query in inv.invoice_number.lower() or query in inv.customer_name.lower()
        ]
    if customer_id:
        invoices = [inv for inv in invoices if inv.customer_id == customer_id]

    return Response(InvoiceListSerializer(invoices, many=True).data)


@api_view(["GET", "DELETE"])
@permission_classes([permissions.IsAuthenticated])
def invoice_detail(request, invoice_id):
    """
    Retrieve or delete an invoice.

    Deleting an invoice does not restore stock or customer balance.
    """
    try:
        state = pharmacy_state(request)
        if request.method == "DELETE":
            state.delete_invoice(invoice_id)
            return Response(status=status.HTTP_204_NO_CONTENT)
        invoice = state.get_invoice(invoice_id)
    except PharmacyError as e:
        return error_response(e)

    return Response(InvoiceDetailSerializer(invoice).data)


def _load_invoice(request, invoice_id):
    state = pharmacy_state(request)
    try:
        invoice = state.get_invoice(invoice_id)
    except EntityNotFound:
        raise Http404("Invoice not found")

    customer = None
    if invoice.customer_id:
        try:
            customer = state.get_customer(invoice.customer_id)
        except EntityNotFound:
            logger.info(f"Customer of invoice {invoice.invoice_number} no longer exists")
    return invoice, customer


def _invoice_unavailable(invoice_id, exc):
    code = error_status(exc)
    logger.error(f"Invoice {invoice_id} could not be loaded: {exc}", exc_info=True)
    return HttpResponse(
        f"Invoice unavailable: {exc}", status=code, content_type="text/plain; charset=utf-8"
    )


@login_required
@require_http_methods(["GET"])
def invoice_print(request, invoice_id):
    """Printable HTML invoice for the browser's print dialog."""
    try:
        invoice, customer = _load_invoice(request, invoice_id)
    except PharmacyError as e:
        return _invoice_unavailable(invoice_id, e)
    html_content = InvoiceService.generate(
        invoice, customer, PharmacySettings.load(), output_format="html"
    ).decode("utf-8")
    return HttpResponse(html_content, content_type="text/html")


@login_required
@require_http_methods(["GET"])
def invoice_pdf(request, invoice_id):
    """PDF invoice download."""
    try:
        invoice, customer = _load_invoice(request, invoice_id)
    except PharmacyError as e:
        return _invoice_unavailable(invoice_id, e)
    pdf_bytes = InvoiceService.generate(
        invoice, customer, PharmacySettings.load(), output_format="pdf"
    )

    response = HttpResponse(pdf_bytes, content_type="application/pdf")
    filename = f"invoice_{invoice.invoice_number}.pdf"
    response["Content-Disposition"] = f'attachment; filename="{filename}"'
    return response
