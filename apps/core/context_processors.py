"""
Context processors for the core app.

Context processors add variables to the template context for all templates.
"""

from django.conf import settings

from apps.core.models import PharmacySettings


def pharmacy_profile(request):
    """
    Add the pharmacy profile and currency to the template context.

    This makes the pharmacy name, address and license available in the
    page header of every template without passing them from each view.
    """
    return {
        "pharmacy": PharmacySettings.load(),
        "currency": settings.PHARMACY_CURRENCY,
    }
