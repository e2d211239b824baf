"""
Invoice document generation for the pharmacy POS.

- Recomputes every line (gross, discount, net) from the stored line
  snapshots instead of trusting the invoice aggregates
- Renders the printable invoice as HTML for browser printing
- Generates PDF invoices with ReportLab, with a QR code carrying the
  invoice number
- Amount in words for the invoice total
"""

import io
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional

from django.template.loader import render_to_string
from django.utils import timezone

import qrcode
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch, mm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.flowables import HRFlowable

from apps.core.formatting_utils import number_to_words, quantize_money

logger = logging.getLogger(__name__)

ITEM_COLUMNS = [
    "Item Code",
    "Item Name",
    "Batch",
    "Expiry",
    "Quantity",
    "Bonus",
    "Rate",
    "Gross",
    "Disc%",
    "Net Amount",
]


@dataclass(frozen=True)
class PrintedLine:
    item_code: str
    name: str
    batch: str
    expiry: str
    quantity: int
    bonus: int
    rate: Decimal
    gross: Decimal
    discount_percent: Decimal
    discount_amount: Decimal
    net: Decimal


@dataclass(frozen=True)
class PharmacyProfile:
    """Header fields printed on every invoice."""

    name: str = "PharmaPro"
    address: str = ""
    phone: str = ""
    license: str = ""
    invoice_notes: str = ""

    @classmethod
    def from_settings(cls, pharmacy_settings):
        if pharmacy_settings is None:
            return cls()
        return cls(
            name=pharmacy_settings.name or cls.name,
            address=pharmacy_settings.address,
            phone=pharmacy_settings.phone,
            license=pharmacy_settings.license,
            invoice_notes=pharmacy_settings.invoice_notes,
        )


class InvoiceDocument:
    """
    Display model of an invoice.

    A pure function of the invoice, the optional customer and the
    pharmacy profile: nothing here reads the store or the clock.
    """

    def __init__(self, invoice, customer=None, profile: Optional[PharmacyProfile] = None):
        self.invoice = invoice
        self.customer = customer
        self.profile = profile or PharmacyProfile()
        self.lines: List[PrintedLine] = [self._print_line(line) for line in invoice.items]

    @staticmethod
    def _print_line(line):
        gross = line.price * line.quantity
        discount_amount = gross * line.discount / Decimal("100")
        return PrintedLine(
            item_code=line.item_code or "-",
            name=line.name,
            batch=line.batch or "-",
            expiry=line.expiry.strftime("%d/%m/%Y") if line.expiry else "-",
            quantity=line.quantity,
            bonus=line.bonus,
            rate=line.price,
            gross=gross,
            discount_percent=line.discount,
            discount_amount=discount_amount,
            net=gross - discount_amount,
        )

    @property
    def gross_amount(self):
        return sum((line.gross for line in self.lines), Decimal("0"))

    @property
    def discount_amount(self):
        return sum((line.discount_amount for line in self.lines), Decimal("0"))

    @property
    def invoice_total(self):
        return self.gross_amount - self.discount_amount

    @property
    def total_items(self):
        return sum(line.quantity for line in self.lines)

    @property
    def total_bonus(self):
        return sum(line.bonus for line in self.lines)

    @property
    def previous_balance(self):
        """The customer's balance on file (0 for walk-in sales)."""
        if self.customer is None:
            return Decimal("0")
        return self.customer.balance

    @property
    def total_amount(self):
        return self.invoice_total + self.previous_balance

    @property
    def amount_in_words(self):
        return number_to_words(quantize_money(self.invoice_total))

    @property
    def customer_name(self):
        if self.invoice.customer_name:
            return self.invoice.customer_name
        if self.customer is not None:
            return self.customer.name
        return "Walk-in"

    def metadata(self):
        """Two-column metadata block: (left rows, right rows)."""
        invoice_date = self.invoice.date.strftime("%d/%m/%Y") if self.invoice.date else "-"
        left = [
            ("Invoice #", self.invoice.invoice_number),
            ("Invoice Date", invoice_date),
            ("Sale Order Type", "REGULAR"),
        ]
        right = [
            ("Customer", self.customer_name),
            ("Region", (self.customer.region if self.customer else "") or "-"),
            ("Phone", (self.customer.phone if self.customer else "") or "-"),
            ("Remarks", self.invoice.payment_method or "Cash"),
        ]
        return left, right

    def totals(self):
        return [
            ("Gross Amount", quantize_money(self.gross_amount)),
            ("Discount Amount", quantize_money(self.discount_amount)),
            ("Invoice Total", quantize_money(self.invoice_total)),
            ("Previous Balance", quantize_money(self.previous_balance)),
            ("Total Amount", quantize_money(self.total_amount)),
        ]


class InvoiceRenderer:
    """Renders an InvoiceDocument to HTML or PDF."""

    MARGIN = 12 * mm

    def __init__(self, document: InvoiceDocument):
        self.document = document
        self.styles = getSampleStyleSheet()
        self._create_custom_styles()

    def _create_custom_styles(self):
        """Create custom paragraph styles for invoices."""
        self.pharmacy_name_style = ParagraphStyle(
            "PharmacyName",
            parent=self.styles["Heading1"],
            fontSize=18,
            spaceAfter=4,
            alignment=2,  # Right alignment
            fontName="Helvetica-Bold",
        )

        self.header_style = ParagraphStyle(
            "InvoiceHeader",
            parent=self.styles["Normal"],
            fontSize=9,
            alignment=2,  # Right alignment
        )

        self.body_style = ParagraphStyle(
            "InvoiceBody",
            parent=self.styles["Normal"],
            fontSize=9,
            spaceAfter=2,
        )

        self.words_style = ParagraphStyle(
            "AmountWords",
            parent=self.styles["Normal"],
            fontSize=10,
            alignment=1,  # Center alignment
            fontName="Helvetica-Oblique",
        )

    def render_html(self) -> str:
        document = self.document
        left, right = document.metadata()
        context = {
            "document": document,
            "invoice": document.invoice,
            "profile": document.profile,
            "lines": document.lines,
            "columns": ITEM_COLUMNS,
            "meta_left": left,
            "meta_right": right,
            "totals": document.totals(),
            "amount_in_words": document.amount_in_words,
            "printed_at": timezone.now(),
        }
        return render_to_string("sales/invoice_print.html", context)

    def render_pdf(self) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=landscape(A4),
            rightMargin=self.MARGIN,
            leftMargin=self.MARGIN,
            topMargin=self.MARGIN,
            bottomMargin=self.MARGIN,
            title=self.document.invoice.invoice_number,
        )

        story = []
        story.extend(self._build_header())
        story.extend(self._build_metadata())
        story.extend(self._build_items_table())
        story.extend(self._build_totals())
        story.extend(self._build_footer())
        doc.build(story)

        pdf_bytes = buffer.getvalue()
        buffer.close()
        return pdf_bytes

    def _build_header(self):
        profile = self.document.profile
        elements = [Paragraph(profile.name.upper(), self.pharmacy_name_style)]
        for info in (
            profile.address,
            f"Phone: {profile.phone or 'N/A'}",
            f"License: {profile.license or 'N/A'}",
        ):
            if info:
                elements.append(Paragraph(info, self.header_style))
        elements.append(Spacer(1, 6))
        elements.append(HRFlowable(width="100%", thickness=2, color=colors.black))
        elements.append(Spacer(1, 6))
        return elements

    def _build_metadata(self):
        left, right = self.document.metadata()
        rows = []
        for index in range(max(len(left), len(right))):
            row = []
            for column in (left, right):
                if index < len(column):
                    label, value = column[index]
                    row.extend([f"{label}:", str(value)])
                else:
                    row.extend(["", ""])
            rows.append(row)

        table = Table(rows, colWidths=[35 * mm, 90 * mm, 30 * mm, 90 * mm])
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTNAME", (2, 0), (2, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
                ]
            )
        )
        return [table, Spacer(1, 8)]

    def _build_items_table(self):
        data = [ITEM_COLUMNS]
        for line in self.document.lines:
            data.append(
                [
                    line.item_code,
                    line.name,
                    line.batch,
                    line.expiry,
                    str(line.quantity),
                    str(line.bonus),
                    f"{line.rate:.2f}",
                    f"{line.gross:.2f}",
                    f"{line.discount_percent:.2f}",
                    f"{line.net:.2f}",
                ]
            )
        data.append(
            [
                f"Total Items: {self.document.total_items}",
                "",
                "",
                "",
                str(self.document.total_items),
                str(self.document.total_bonus),
                "",
                "",
                "",
                f"{quantize_money(self.document.invoice_total):.2f}",
            ]
        )

        col_widths = [
            22 * mm, 70 * mm, 22 * mm, 22 * mm, 18 * mm, 16 * mm, 20 * mm, 22 * mm, 16 * mm, 25 * mm
        ]
        table = Table(data, colWidths=col_widths, repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                    ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 8),
                    ("ALIGN", (4, 0), (-1, -1), "RIGHT"),
                    ("SPAN", (0, -1), (3, -1)),
                    ("LINEABOVE", (0, -1), (-1, -1), 1.5, colors.black),
                    ("BOX", (0, 0), (-1, -1), 1.5, colors.black),
                    ("INNERGRID", (0, 0), (-1, -2), 0.25, colors.grey),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        return [table, Spacer(1, 10)]

    def _build_totals(self):
        data = [[f"{label}:", f"{value:.2f}"] for label, value in self.document.totals()]
        table = Table(data, colWidths=[45 * mm, 35 * mm], hAlign="RIGHT")
        table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                    ("LINEABOVE", (0, 2), (-1, 2), 0.75, colors.black),
                    ("LINEABOVE", (0, -1), (-1, -1), 1.5, colors.black),
                ]
            )
        )
        return [table, Spacer(1, 8)]

    def _build_footer(self):
        elements = [
            HRFlowable(width="100%", thickness=2, color=colors.black),
            Spacer(1, 4),
            Paragraph(f"--{self.document.amount_in_words}--", self.words_style),
        ]
        notes = self.document.profile.invoice_notes
        if notes:
            elements.append(Spacer(1, 6))
            elements.append(Paragraph(notes, self.body_style))

        qr_code = self._generate_qr_code()
        if qr_code is not None:
            elements.append(Spacer(1, 6))
            elements.append(qr_code)
        return elements

    def _generate_qr_code(self) -> Optional[Image]:
        """QR code carrying the invoice number for lookup at the counter."""
        try:
            qr = qrcode.QRCode(
                version=1,
                error_correction=qrcode.constants.ERROR_CORRECT_L,
                box_size=3,
                border=2,
            )
            qr.add_data(self.document.invoice.invoice_number)
            qr.make(fit=True)
            qr_img = qr.make_image(fill_color="black", back_color="white")

            buffer = io.BytesIO()
            qr_img.save(buffer, format="PNG")
            buffer.seek(0)

            img = Image(buffer, width=0.8 * inch, height=0.8 * inch)
            img.hAlign = "RIGHT"
            return img
        except (OSError, ValueError) as e:
            logger.warning(
                f"Could not generate QR code for {self.document.invoice.invoice_number}: {e}"
            )
            return None


class InvoiceService:
    """High-level interface for invoice documents."""

    @staticmethod
    def build_document(invoice, customer=None, pharmacy_settings=None) -> InvoiceDocument:
        return InvoiceDocument(invoice, customer, PharmacyProfile.from_settings(pharmacy_settings))

    @staticmethod
    def generate(invoice, customer=None, pharmacy_settings=None, output_format="pdf") -> bytes:
        """
        Render an invoice.

        Args:
            invoice: Invoice entity
            customer: Customer entity for the balance and region fields, if any
            pharmacy_settings: PharmacySettings row for the header
            output_format: 'pdf' or 'html'

        Returns:
            PDF bytes or UTF-8 encoded HTML
        """
        document = InvoiceService.build_document(invoice, customer, pharmacy_settings)
        renderer = InvoiceRenderer(document)
        if output_format == "pdf":
            return renderer.render_pdf()
        elif output_format == "html":
            return renderer.render_html().encode("utf-8")
        else:
            raise ValueError(f"Unsupported output format: {output_format}")
