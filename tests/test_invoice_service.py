"""
Tests for invoice document generation.
"""

import datetime
from decimal import Decimal

import pytest

from apps.core.persistence.entities import Customer, Invoice, InvoiceLine
from apps.sales.invoice_service import InvoiceDocument, InvoiceService, PharmacyProfile


@pytest.fixture
def invoice():
    return Invoice(
        id="i-1",
        invoice_number="INV-20240517-0001",
        customer_id="c-1",
        customer_name="Dr. Gulam Murtaza",
        date=datetime.date(2024, 5, 17),
        subtotal=Decimal("75.00"),
        discount=Decimal("2.50"),
        total=Decimal("72.50"),
        payment_method="Credit",
        items=[
            InvoiceLine(
                item_code="001",
                name="Paracetamol 500mg",
                batch="B123",
                expiry=datetime.date(2025, 12, 31),
                quantity=5,
                price=Decimal("5.00"),
                bonus=1,
            ),
            InvoiceLine(
                item_code="002",
                name="Amoxicillin 250mg",
                quantity=4,
                price=Decimal("12.50"),
                discount=Decimal("5"),
            ),
        ],
    )


@pytest.fixture
def customer():
    return Customer(
        id="c-1",
        name="Dr. Gulam Murtaza",
        phone="0300-1234567",
        region="Gulshan Ravi",
        balance=Decimal("6070.00"),
    )


class TestInvoiceDocument:
    def test_lines_recomputed_from_snapshots(self, invoice):
        document = InvoiceDocument(invoice)

        first, second = document.lines
        assert first.gross == Decimal("25.00")
        assert first.net == Decimal("25.00")
        assert first.expiry == "31/12/2025"
        assert second.batch == "-"
        assert second.expiry == "-"
        assert second.discount_amount == Decimal("2.50")
        assert second.net == Decimal("47.50")

    def test_totals_with_previous_balance(self, invoice, customer):
        document = InvoiceDocument(invoice, customer)

        assert document.totals() == [
            ("Gross Amount", Decimal("75.00")),
            ("Discount Amount", Decimal("2.50")),
            ("Invoice Total", Decimal("72.50")),
            ("Previous Balance", Decimal("6070.00")),
            ("Total Amount", Decimal("6142.50")),
        ]
        assert document.total_items == 9
        assert document.total_bonus == 1
        assert document.amount_in_words == "Seventy Two Rupees and Fifty Paisa Only."

    def test_walk_in_sale(self, invoice):
        walk_in = invoice.copy_with(customer_id=None, customer_name="")
        document = InvoiceDocument(walk_in)

        assert document.previous_balance == Decimal("0")
        assert document.customer_name == "Walk-in"
        left, right = document.metadata()
        assert ("Region", "-") in right
        assert ("Invoice #", "INV-20240517-0001") in left

    def test_metadata(self, invoice, customer):
        left, right = InvoiceDocument(invoice, customer).metadata()

        assert ("Invoice Date", "17/05/2024") in left
        assert ("Customer", "Dr. Gulam Murtaza") in right
        assert ("Region", "Gulshan Ravi") in right
        assert ("Remarks", "Credit") in right


class TestInvoiceService:
    def test_html(self, invoice, customer):
        html = InvoiceService.generate(invoice, customer, output_format="html").decode("utf-8")

        assert "INV-20240517-0001" in html
        assert "Paracetamol 500mg" in html
        assert "Seventy Two Rupees and Fifty Paisa Only." in html

    def test_pdf(self, invoice, customer):
        pdf = InvoiceService.generate(invoice, customer, output_format="pdf")

        assert pdf.startswith(b"%PDF")

    def test_unknown_format(self, invoice):
        with pytest.raises(ValueError):
            InvoiceService.generate(invoice, output_format="docx")

    def test_profile_defaults(self):
        assert PharmacyProfile.from_settings(None).name == "PharmaPro"
