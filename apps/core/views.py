"""
Views for the core app.

- Dashboard page and dashboard summary API
- Pharmacy settings API
"""

import logging

from django.contrib.auth.decorators import login_required
from django.shortcuts import render
from django.views.decorators.http import require_http_methods

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.api import error_response, pharmacy_state
from apps.core.exceptions import PharmacyError

from .models import PharmacySettings
from .serializers import DashboardSerializer, PharmacySettingsSerializer

logger = logging.getLogger(__name__)


@login_required
@require_http_methods(["GET"])
def dashboard(request):
    """
    Dashboard page.

    Shows:
    - Total revenue and today's sales
    - Product and customer counts
    - Low-stock products
    - Most recent invoices
    """
    summary = None
    error = None
    try:
        summary = pharmacy_state(request).dashboard_summary()
    except PharmacyError as e:
        logger.error(f"Dashboard could not load data: {e}", exc_info=True)
        error = str(e)

    return render(request, "core/dashboard.html", {"summary": summary, "error": error})


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated])
def dashboard_api(request):
    """Dashboard summary as JSON."""
    try:
        summary = pharmacy_state(request).dashboard_summary()
    except PharmacyError as e:
        return error_response(e)

    return Response(DashboardSerializer(summary).data)


@api_view(["GET", "PUT", "PATCH"])
@permission_classes([permissions.IsAuthenticated])
def settings_api(request):
    """
    Read or change the pharmacy settings.

    Saving new remote store credentials makes the next request use them.
    """
    pharmacy_settings = PharmacySettings.load()

    if request.method == "GET":
        return Response(PharmacySettingsSerializer(pharmacy_settings).data)

    serializer = PharmacySettingsSerializer(
        pharmacy_settings, data=request.data, partial=request.method == "PATCH"
    )
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    serializer.save()
    logger.info(f"Pharmacy settings updated by {request.user}")
    return Response(serializer.data)
