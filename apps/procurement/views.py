"""
API views for procurement.

- Supplier list/create/detail/update/delete
- Purchase order list/create/detail/update/delete
- Receiving goods against a purchase order
- Cancelling a pending purchase order
"""

import logging

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.api import error_response
from apps.core.exceptions import PharmacyError
from apps.core.persistence import get_store

from .serializers import (
    PurchaseOrderSerializer,
    ReceivePurchaseOrderSerializer,
    SupplierSerializer,
)
from .services import ProcurementService

logger = logging.getLogger(__name__)


def _service():
    return ProcurementService(get_store())


# Suppliers


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated])
def supplier_list(request):
    """List suppliers or add a new one."""
    try:
        service = _service()

        if request.method == "POST":
            serializer = SupplierSerializer(data=request.data)
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            supplier = service.create_supplier(serializer.validated_data)
            return Response(SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED)

        suppliers = sorted(service.list_suppliers(), key=lambda s: s.name.lower())
    except PharmacyError as e:
        return error_response(e)

    return Response(SupplierSerializer(suppliers, many=True).data)


@api_view(["GET", "PUT", "PATCH", "DELETE"])
@permission_classes([permissions.IsAuthenticated])
def supplier_detail(request, supplier_id):
    """Retrieve, update or delete a supplier."""
    try:
        service = _service()

        if request.method == "DELETE":
            service.delete_supplier(supplier_id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        if request.method in ("PUT", "PATCH"):
            serializer = SupplierSerializer(data=request.data, partial=request.method == "PATCH")
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            supplier = service.update_supplier(supplier_id, serializer.validated_data)
        else:
            supplier = service.get_supplier(supplier_id)
    except PharmacyError as e:
        return error_response(e)

    return Response(SupplierSerializer(supplier).data)


# Purchase orders


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated])
def purchase_order_list(request):
    """
    List purchase orders or create one.

    Query parameters:
    - status: pending, partial, received or cancelled
    - supplier_id: Orders of one supplier
    """
    try:
        service = _service()

        if request.method == "POST":
            serializer = PurchaseOrderSerializer(data=request.data)
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            order = service.create_purchase_order(serializer.validated_data)
            return Response(PurchaseOrderSerializer(order).data, status=status.HTTP_201_CREATED)

        orders = service.list_purchase_orders()
    except PharmacyError as e:
        return error_response(e)

    status_filter = request.query_params.get("status")
    supplier_id = request.query_params.get("supplier_id")
    if status_filter:
        orders = [po for po in orders if po.status == status_filter]
    if supplier_id:
        orders = [po for po in orders if po.supplier_id == supplier_id]

    return Response(PurchaseOrderSerializer(orders, many=True).data)


@api_view(["GET", "PUT", "PATCH", "DELETE"])
@permission_classes([permissions.IsAuthenticated])
def purchase_order_detail(request, po_id):
    """
    Retrieve, update or delete a purchase order.

    Only pending orders can be edited; orders with goods already
    received cannot be deleted.
    """
    try:
        service = _service()

        if request.method == "DELETE":
            service.delete_purchase_order(po_id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        if request.method in ("PUT", "PATCH"):
            serializer = PurchaseOrderSerializer(
                data=request.data, partial=request.method == "PATCH"
            )
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            order = service.update_purchase_order(po_id, serializer.validated_data)
        else:
            order = service.get_purchase_order(po_id)
    except PharmacyError as e:
        return error_response(e)

    return Response(PurchaseOrderSerializer(order).data)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def purchase_order_receive(request, po_id):
    """
    Receive goods against a purchase order.

    Request body (optional):
    {
        "items": [{"product_id": "id", "quantity": 5}]
    }

    Without items every outstanding unit is received. Received units are
    added to product stock.
    """
    serializer = ReceivePurchaseOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        order = _service().receive_purchase_order(po_id, serializer.quantities())
    except PharmacyError as e:
        return error_response(e)

    return Response(PurchaseOrderSerializer(order).data)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated])
def purchase_order_cancel(request, po_id):
    """Cancel a pending purchase order."""
    try:
        order = _service().cancel_purchase_order(po_id)
    except PharmacyError as e:
        return error_response(e)

    return Response(PurchaseOrderSerializer(order).data)
