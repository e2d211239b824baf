"""
Number and money formatting utilities for invoices and screens.

This module provides utilities for:
- Rendering an amount in words (Rupees/Paisa, lakh/crore grouping)
- Locale-style money formatting with a currency prefix
- Quantizing amounts to two decimal places for display
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from django.conf import settings

ONES = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
TEENS = [
    "Ten",
    "Eleven",
    "Twelve",
    "Thirteen",
    "Fourteen",
    "Fifteen",
    "Sixteen",
    "Seventeen",
    "Eighteen",
    "Nineteen",
]
TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# (divisor, scale word), largest first
SCALES = [
    (10_000_000, "Crore"),
    (100_000, "Lakh"),
    (1_000, "Thousand"),
]

TWO_PLACES = Decimal("0.01")


def to_decimal(value: Union[str, int, float, Decimal, None]) -> Decimal:
    """Coerce a numeric value to Decimal without going through binary floats."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def quantize_money(value: Union[str, int, float, Decimal]) -> Decimal:
    """Round an amount half-up to two decimal places."""
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def _integer_to_words(n: int) -> str:
    if n == 0:
        return ""
    if n < 10:
        return ONES[n]
    if n < 20:
        return TEENS[n - 10]
    if n < 100:
        words = TENS[n // 10]
        if n % 10:
            words += " " + ONES[n % 10]
        return words
    if n < 1000:
        words = ONES[n // 100] + " Hundred"
        if n % 100:
            words += " " + _integer_to_words(n % 100)
        return words

    for divisor, scale in SCALES:
        if n >= divisor:
            words = _integer_to_words(n // divisor) + " " + scale
            if n % divisor:
                words += " " + _integer_to_words(n % divisor)
            return words

    raise AssertionError("unreachable")  # pragma: no cover


def number_to_words(amount: Union[str, int, float, Decimal]) -> str:
    """
    Render an amount in words as printed at the foot of an invoice.

    The whole part uses the ones/teens/tens/hundred decomposition grouped
    into thousand, lakh and crore. The fractional part is rounded to two
    places and rendered as a Paisa suffix.

    Args:
        amount: Non-negative amount

    Returns:
        "Zero" for zero, otherwise "<words> Rupees[ and <words> Paisa] Only."

    Raises:
        ValueError: If the amount is negative

    Examples:
        >>> number_to_words(0)
        'Zero'
        >>> number_to_words(100)
        'One Hundred Rupees Only.'
        >>> number_to_words("72.50")
        'Seventy Two Rupees and Fifty Paisa Only.'
    """
    value = quantize_money(amount)
    if value < 0:
        raise ValueError(f"Cannot render a negative amount in words: {amount}")
    if value == 0:
        return "Zero"

    whole = int(value)
    paisa = int((value - whole) * 100)

    rupees = _integer_to_words(whole) or "Zero"
    result = f"{rupees} Rupees"
    if paisa:
        result += f" and {_integer_to_words(paisa)} Paisa"
    return result + " Only."


def format_number(value: Union[int, float, Decimal], decimal_places: Optional[int] = 2) -> str:
    """
    Format a number with thousands separators.

    Examples:
        >>> format_number(1234567.891)
        '1,234,567.89'
        >>> format_number(42, decimal_places=0)
        '42'
    """
    number = to_decimal(value)
    if decimal_places is None:
        return f"{number:,}"
    quantum = Decimal(1).scaleb(-decimal_places)
    return f"{number.quantize(quantum, rounding=ROUND_HALF_UP):,}"


def format_currency(value: Union[int, float, Decimal], currency: Optional[str] = None) -> str:
    """
    Format an amount with the pharmacy currency prefix.

    Examples:
        >>> format_currency(Decimal("72.5"), "Rs.")
        'Rs. 72.50'
        >>> format_currency(-10, "Rs.")
        '-Rs. 10.00'
    """
    currency = currency if currency is not None else settings.PHARMACY_CURRENCY
    number = quantize_money(value)
    sign = "-" if number < 0 else ""
    return f"{sign}{currency} {format_number(abs(number))}"
