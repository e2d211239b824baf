"""
Shared helpers for the pharmacy API views.

- Building the per-request PharmacyState from the configured store and
  the session cart
- Translating PharmacyError subclasses to HTTP responses
"""

import logging

from rest_framework import status
from rest_framework.response import Response

from apps.core.exceptions import (
    CartValidationError,
    CheckoutError,
    ConfigurationError,
    EntityNotFound,
    ImmutableEntityError,
    PersistenceError,
    PurchaseOrderError,
    RemoteStoreError,
)
from apps.core.persistence import get_store

logger = logging.getLogger(__name__)


def pharmacy_state(request):
    """PharmacyState for this request, with the POS cart restored from the session."""
    from apps.sales.cart import Cart
    from apps.sales.state import PharmacyState

    return PharmacyState(get_store(), cart=Cart.load(request.session))


def error_status(exc):
    """HTTP status for a pharmacy error."""
    if isinstance(exc, EntityNotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, ImmutableEntityError):
        return status.HTTP_405_METHOD_NOT_ALLOWED
    if isinstance(exc, (CheckoutError, PurchaseOrderError)) and isinstance(
        exc.__cause__, PersistenceError
    ):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, (CartValidationError, CheckoutError, PurchaseOrderError)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, ConfigurationError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(exc, (RemoteStoreError, PersistenceError)):
        return status.HTTP_502_BAD_GATEWAY
    return status.HTTP_400_BAD_REQUEST


def error_response(exc):
    """Log a pharmacy error and return it as ``{"detail": ...}``."""
    code = error_status(exc)
    if code >= 500:
        logger.error(f"Request failed: {exc}", exc_info=True)
    else:
        logger.warning(f"Request rejected: {exc}")
    return Response({"detail": str(exc)}, status=code)
