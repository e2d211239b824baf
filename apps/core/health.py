"""
Health endpoint used by deployments and uptime probes.

Reports:
- whether the local database answers
- which store is active, and for the hosted store whether the products
  table is reachable
"""

import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views.decorators.cache import never_cache
from django.views.decorators.http import require_GET

from apps.core.exceptions import PharmacyError
from apps.core.persistence import get_store

logger = logging.getLogger(__name__)


def _check_database():
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.error(f"Health check: database unavailable: {e}")
        return {"status": "unhealthy", "message": str(e)}
    return {"status": "healthy"}


def _check_store():
    try:
        store = get_store()
    except (PharmacyError, DatabaseError) as e:
        logger.error(f"Health check: no usable store: {e}")
        return {"status": "unhealthy", "message": str(e)}

    result = {"status": "healthy", "backend": store.name}
    inspect_table = getattr(store, "inspect_table", None)
    if inspect_table is not None:
        products = inspect_table("products")
        if not products.exists:
            logger.warning(f"Health check: products table unreachable: {products.error}")
            result.update(status="unhealthy", message=products.error)
    return result


@never_cache
@require_GET
def health_check(request) -> JsonResponse:
    """
    Return 200 with per-check details when everything answers, 503 otherwise.
    """
    checks = {"database": _check_database(), "store": _check_store()}
    healthy = all(check["status"] == "healthy" for check in checks.values())

    return JsonResponse(
        {"status": "healthy" if healthy else "unhealthy", "checks": checks},
        status=200 if healthy else 503,
    )
