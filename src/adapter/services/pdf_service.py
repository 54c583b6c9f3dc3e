"""ReportLab PDF Generation Service Implementation

Renders the monthly invoice layout using ReportLab.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from io import BytesIO
from typing import List, Tuple
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import PdfService
from src.domain.billing_month import month_display_name
from src.domain.invoice import Invoice

EMPTY_ITEM_ROWS = 19

HIGHLIGHT = colors.HexColor("#F5E642")
HEADER_BLUE = colors.HexColor("#4A6F8A")
STRIPE_BLUE = colors.HexColor("#DCE8F0")
INK = colors.HexColor("#1A1A2E")
MUTED = colors.HexColor("#333333")


@dataclass(frozen=True)
class BillerProfile:
    """Sender and recipient details printed on every invoice"""

    biller_name: str
    biller_address: str
    payee_name: str
    client_address: List[str] = field(default_factory=list)
    bank_details: List[Tuple[str, str]] = field(default_factory=list)


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Produces a single A4 page: sender header, bill-to block, a striped item
    table with one line for the month, payment details and totals.
    """

    def __init__(self, profile: BillerProfile):
        self.profile = profile

    def render_invoice(self, invoice: Invoice) -> bytes:
        """
        Render an invoice PDF

        Args:
            invoice: Invoice entity with number, dates and amount set

        Returns:
            PDF document as bytes
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=15 * mm,
            leftMargin=15 * mm,
            topMargin=13 * mm,
            bottomMargin=13 * mm,
            title=f"Invoice {invoice.invoice_number}",
            author=self.profile.biller_name,
        )

        styles = getSampleStyleSheet()
        normal_style = ParagraphStyle(
            "NormalStyle",
            parent=styles["Normal"],
            fontSize=9,
            leading=13,
            textColor=MUTED,
        )
        sender_style = ParagraphStyle(
            "SenderStyle",
            parent=styles["Normal"],
            fontSize=14,
            leading=18,
            fontName="Helvetica-Bold",
            textColor=INK,
        )
        address_style = ParagraphStyle(
            "AddressStyle",
            parent=normal_style,
            backColor=HIGHLIGHT,
            borderPadding=2,
        )
        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Normal"],
            fontSize=32,
            leading=36,
            fontName="Helvetica-Oblique",
            textColor=colors.HexColor("#A0AAB4"),
            alignment=TA_RIGHT,
        )
        bold_style = ParagraphStyle(
            "BoldStyle",
            parent=normal_style,
            fontName="Helvetica-Bold",
            fontSize=10,
            textColor=INK,
        )
        payee_style = ParagraphStyle(
            "PayeeStyle",
            parent=normal_style,
        )
        footer_style = ParagraphStyle(
            "FooterStyle",
            parent=normal_style,
            textColor=colors.HexColor("#5A7FA0"),
            alignment=TA_CENTER,
        )

        amount = self._format_amount(invoice.amount)
        elements = []

        # Header - sender on the left, title and meta fields on the right
        meta_table = Table(
            [
                ["Date:", invoice.issue_date.strftime("%d/%m/%Y")],
                ["Invoice #:", str(invoice.invoice_number)],
            ],
            colWidths=[22 * mm, 38 * mm],
        )
        meta_table.setStyle(
            TableStyle(
                [
                    ("ALIGN", (0, 0), (0, -1), "RIGHT"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("FONTNAME", (1, 0), (1, -1), "Helvetica-Bold"),
                    ("BACKGROUND", (1, 0), (1, -1), HIGHLIGHT),
                    ("TOPPADDING", (0, 0), (-1, -1), 2),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
                ]
            )
        )
        header_table = Table(
            [
                [
                    [
                        Paragraph(escape(self.profile.biller_name), sender_style),
                        Paragraph(escape(self.profile.biller_address), address_style),
                    ],
                    [Paragraph("Invoice", title_style), meta_table],
                ]
            ],
            colWidths=[110 * mm, 70 * mm],
        )
        header_table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("ALIGN", (1, 0), (1, 0), "RIGHT"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 0),
                ]
            )
        )
        elements.append(header_table)
        elements.append(Spacer(1, 8 * mm))

        # Bill To
        client_lines = [Paragraph(escape(invoice.client_name), bold_style)]
        if self.profile.client_address:
            address = "<br/>".join(escape(line) for line in self.profile.client_address)
            client_lines.append(Paragraph(address, normal_style))
        bill_table = Table(
            [[Paragraph("To:", bold_style), client_lines]],
            colWidths=[14 * mm, 166 * mm],
        )
        bill_table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 0),
                ]
            )
        )
        elements.append(bill_table)
        elements.append(Spacer(1, 7 * mm))

        # Line Items Table - one billed line followed by blank striped rows
        line_data = [
            ["Sr. No.", "Description", "Unit Price", "Line Total"],
            [
                "",
                f"Professional Services for the month of {month_display_name(invoice.month)}",
                "",
                f"$  {amount}",
            ],
        ]
        line_data.extend([["", "", "", ""] for _ in range(EMPTY_ITEM_ROWS)])

        line_table = Table(
            line_data,
            colWidths=[18 * mm, 102 * mm, 30 * mm, 30 * mm],
            rowHeights=[9 * mm] + [6 * mm] * (len(line_data) - 1),
        )
        line_table.setStyle(
            TableStyle(
                [
                    # Header row
                    ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                    # Alternate row colors
                    (
                        "ROWBACKGROUNDS",
                        (0, 1),
                        (-1, -1),
                        [colors.white, STRIPE_BLUE],
                    ),
                ]
            )
        )
        elements.append(line_table)

        # Payment details and totals side by side
        payment_lines = [
            Paragraph("Please make checks payable to", normal_style),
            Paragraph(
                f"Wire transfer to credit of - "
                f"<font color='#1A4A8A'><b>{escape(self.profile.payee_name)}</b></font>",
                payee_style,
            ),
        ]
        if self.profile.bank_details:
            bank_table = Table(
                [[label, value] for label, value in self.profile.bank_details],
                colWidths=[32 * mm, 68 * mm],
            )
            bank_table.setStyle(
                TableStyle(
                    [
                        ("FONTSIZE", (0, 0), (-1, -1), 9),
                        ("TEXTCOLOR", (0, 0), (-1, -1), MUTED),
                        ("LEFTPADDING", (0, 0), (-1, -1), 0),
                        ("TOPPADDING", (0, 0), (-1, -1), 1),
                        ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
                    ]
                )
            )
            payment_lines.append(bank_table)

        totals_table = Table(
            [
                ["Subtotal", "$", amount],
                ["Tax", "$", "-"],
                ["Total", "$", amount],
            ],
            colWidths=[22 * mm, 7 * mm, 38 * mm],
        )
        totals_table.setStyle(
            TableStyle(
                [
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
                    ("FONTNAME", (0, 2), (-1, 2), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 2), (-1, 2), 10),
                    ("LINEABOVE", (0, 2), (-1, 2), 1.5, INK),
                ]
            )
        )

        bottom_table = Table(
            [[payment_lines, totals_table]],
            colWidths=[110 * mm, 70 * mm],
        )
        bottom_table.setStyle(
            TableStyle(
                [
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LINEABOVE", (0, 0), (-1, 0), 0.75, colors.HexColor("#BBBBBB")),
                    ("LEFTPADDING", (0, 0), (0, 0), 0),
                    ("TOPPADDING", (0, 0), (-1, -1), 8),
                ]
            )
        )
        elements.append(bottom_table)
        elements.append(Spacer(1, 12 * mm))

        # Footer
        elements.append(Paragraph(escape(self.profile.biller_address), footer_style))

        # Build PDF
        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes

    @staticmethod
    def _format_amount(amount) -> str:
        return f"{Decimal(str(amount)):,.2f}"
