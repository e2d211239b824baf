"""
API views for the product catalogue.

- List/search and create products
- Retrieve, update and delete a product
- Low-stock report (stock at or below the reorder level)
"""

import logging

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.api import error_response, pharmacy_state
from apps.core.exceptions import PharmacyError

from .serializers import ProductSerializer

logger = logging.getLogger(__name__)


def _matches(product, query):
    query = query.lower()
    return any(
        query in (value or "").lower()
        for value in (product.item_code, product.name, product.batch, product.category)
    )


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated])
def product_list(request):
    """
    List products or add a new one.

    Query parameters:
    - q: Search item code, name, batch or category
    - category: Exact category filter
    """
    try:
        state = pharmacy_state(request)

        if request.method == "POST":
            serializer = ProductSerializer(data=request.data)
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            product = state.add_product(serializer.validated_data)
            return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

        products = state.products
        query = request.query_params.get("q", "").strip()
        category = request.query_params.get("category", "").strip()
        if query:
            products = [p for p in products if _matches(p, query)]
        if category:
            products = [p for p in products if p.category == category]
    except PharmacyError as e:
        return error_response(e)

    return Response(ProductSerializer(products, many=True).data)


@api_view(["GET", "PUT", "PATCH", "DELETE"])
@permission_classes([permissions.IsAuthenticated])
def product_detail(request, product_id):
    """Retrieve, update or delete a product."""
    try:
        state = pharmacy_state(request)

        if request.method == "DELETE":
            state.delete_product(product_id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        if request.method in ("PUT", "PATCH"):
            serializer = ProductSerializer(data=request.data, partial=request.method == "PATCH")
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            product = state.update_product(product_id, serializer.validated_data)
            logger.info(f"Updated product {product.item_code} {product.name}")
        else:
            product = state.get_product(product_id)
    except PharmacyError as e:
        return error_response(e)

    return Response(ProductSerializer(product).data)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def low_stock_products(request):
    """Products at or below their reorder level, lowest stock first."""
    try:
        products = pharmacy_state(request).dashboard_summary().low_stock
    except PharmacyError as e:
        return error_response(e)

    data = ProductSerializer(products, many=True).data
    return Response({"count": len(data), "results": data})
