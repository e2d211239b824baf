"""
API views for customers.
"""

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.api import error_response, pharmacy_state
from apps.core.exceptions import PharmacyError

from .serializers import CustomerSerializer


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated])
def customer_list(request):
    """
    List customers or add a new one.

    Query parameters:
    - q: Search name, phone or region
    """
    try:
        state = pharmacy_state(request)

        if request.method == "POST":
            serializer = CustomerSerializer(data=request.data)
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            customer = state.add_customer(serializer.validated_data)
            return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)

        customers = state.customers
    except PharmacyError as e:
        return error_response(e)

    query = request.query_params.get("q", "").strip().lower()
    if query:
        customers = [
            c
            for c in customers
            if query in c.name.lower() or query in c.phone.lower() or query in c.region.lower()
        ]
    customers.sort(key=lambda c: c.name.lower())
    return Response(CustomerSerializer(customers, many=True).data)


@api_view(["GET", "PUT", "PATCH", "DELETE"])
@permission_classes([permissions.IsAuthenticated])
def customer_detail(request, customer_id):
    """Retrieve, update or delete a customer."""
    try:
        state = pharmacy_state(request)

        if request.method == "DELETE":
            state.delete_customer(customer_id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        if request.method in ("PUT", "PATCH"):
            serializer = CustomerSerializer(data=request.data, partial=request.method == "PATCH")
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            customer = state.update_customer(customer_id, serializer.validated_data)
        else:
            customer = state.get_customer(customer_id)
    except PharmacyError as e:
        return error_response(e)

    return Response(CustomerSerializer(customer).data)
