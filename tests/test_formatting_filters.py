"""
Tests for Django template filters for money formatting.
"""

from decimal import Decimal

from django.template import Context, Template
from django.test import TestCase, override_settings


def render(source, **context):
    return Template("{% load formatting_filters %}" + source).render(Context(context))


class TestFormattingFilters(TestCase):
    """Test Django template filters for formatting."""

    def test_format_number_filter(self):
        assert render("{{ value|format_number }}", value=1234567.891) == "1,234,567.89"
        assert render("{{ value|format_number:0 }}", value=42) == "42"

    def test_format_number_filter_with_invalid_value(self):
        """Values that are not numbers are rendered unchanged."""
        assert render("{{ value|format_number }}", value="n/a") == "n/a"

    def test_filters_with_empty_values(self):
        for source in (
            "{{ value|format_number }}",
            "{{ value|format_currency }}",
            "{{ value|amount_in_words }}",
        ):
            assert render(source, value=None) == ""
            assert render(source, value="") == ""

    @override_settings(PHARMACY_CURRENCY="Rs.")
    def test_format_currency_filter(self):
        assert render("{{ value|format_currency }}", value=Decimal("72.5")) == "Rs. 72.50"
        assert render('{{ value|format_currency:"PKR" }}', value=1500) == "PKR 1,500.00"

    def test_amount_in_words_filter(self):
        assert (
            render("{{ value|amount_in_words }}", value=Decimal("72.50"))
            == "Seventy Two Rupees and Fifty Paisa Only."
        )

    def test_amount_in_words_filter_with_negative_value(self):
        assert render("{{ value|amount_in_words }}", value=-5) == ""
