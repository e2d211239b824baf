"""
Django template filters for money formatting.

Usage in templates:
    {% load formatting_filters %}

    {{ amount|format_number }}
    {{ amount|format_currency }}
    {{ amount|format_currency:"PKR" }}
    {{ amount|amount_in_words }}
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Union

from django import template

from apps.core.formatting_utils import format_currency, format_number, number_to_words

logger = logging.getLogger(__name__)

register = template.Library()


@register.filter(name="format_number")
def format_number_filter(value: Union[int, float, Decimal], decimal_places: int = 2) -> str:
    """
    Format a number with thousands separators.

    Usage:
        {{ 1234567.891|format_number }}    -> 1,234,567.89
        {{ 42|format_number:0 }}           -> 42
    """
    if value is None or value == "":
        return ""

    try:
        return format_number(value, decimal_places=decimal_places)
    except (InvalidOperation, ValueError, TypeError):
        return str(value)


@register.filter(name="format_currency")
def format_currency_filter(value: Union[int, float, Decimal], currency: str = None) -> str:
    """
    Format an amount with the currency prefix (PHARMACY_CURRENCY by default).

    Usage:
        {{ 72.5|format_currency }}         -> Rs. 72.50
        {{ 72.5|format_currency:"PKR" }}   -> PKR 72.50
    """
    if value is None or value == "":
        return ""

    try:
        return format_currency(value, currency)
    except (InvalidOperation, ValueError, TypeError):
        return str(value)


@register.filter(name="amount_in_words")
def amount_in_words_filter(value: Union[int, float, Decimal]) -> str:
    """
    Spell out an amount in rupees and paisa.

    Usage:
        {{ 72.5|amount_in_words }}  -> Seventy Two Rupees and Fifty Paisa Only.
    """
    if value is None or value == "":
        return ""

    try:
        return number_to_words(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        logger.warning(f"Cannot spell out amount {value!r}: {e}")
        return ""
