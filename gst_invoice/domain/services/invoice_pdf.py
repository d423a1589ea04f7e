# gst_invoice/domain/services/invoice_pdf.py
"""
Generate GST invoice PDFs from a submitted invoice record.
Uses ReportLab for PDF generation: one A4 page per print copy
(ORIGINAL, DUPLICATE).
"""

from __future__ import annotations

import io
import logging
import re
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    PageBreak,
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from gst_invoice.config.settings import settings
from gst_invoice.domain.models.invoice import PAGE_LABELS, InvoiceRecord, InvoiceTotals
from gst_invoice.domain.services.formatters import format_indian_number, format_quantity, safe_text
from gst_invoice.domain.services.invoice_aggregator import aggregate

logger = logging.getLogger("invoice_pdf")

_HEADER_BG = colors.Color(0.2, 0.3, 0.5)
_LABEL_BG = colors.Color(0.95, 0.95, 0.95)
_TOTAL_BG = colors.Color(0.9, 0.95, 1.0)
_GRID = colors.Color(0.8, 0.8, 0.8)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def pdf_filename(invoice: InvoiceRecord) -> str:
    """``Invoice_<number>.pdf`` with anything outside [A-Za-z0-9._-] replaced."""
    number = _UNSAFE_FILENAME_CHARS.sub("_", invoice.invoice_number.strip()).strip("_")
    return f"{settings.PDF_FILENAME_PREFIX}_{number or 'draft'}.pdf"


def _fmt_amount(val) -> str:
    return format_indian_number(val, 2)


def _p(text: Optional[str], style: ParagraphStyle) -> Paragraph:
    lines = (text or "").splitlines() or [""]
    return Paragraph("<br/>".join(escape(line) for line in lines), style)


def _styles() -> dict[str, ParagraphStyle]:
    styles = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "InvoiceTitle",
            parent=styles["Heading1"],
            fontSize=16,
            alignment=1,  # center
            spaceAfter=4,
        ),
        "label": ParagraphStyle(
            "PageLabel",
            parent=styles["Normal"],
            fontSize=9,
            alignment=2,  # right
            textColor=colors.grey,
        ),
        "company": ParagraphStyle(
            "Company",
            parent=styles["Normal"],
            fontSize=9,
            alignment=1,
            leading=12,
        ),
        "cell": ParagraphStyle(
            "Cell",
            parent=styles["Normal"],
            fontSize=8,
            leading=10,
        ),
        "section": ParagraphStyle(
            "Section",
            parent=styles["Normal"],
            fontSize=9,
            leading=12,
            spaceBefore=6,
        ),
        "footer": ParagraphStyle(
            "Footer",
            parent=styles["Normal"],
            fontSize=8,
            textColor=colors.grey,
            alignment=1,
        ),
    }


def _grid_style(extra: list) -> TableStyle:
    return TableStyle(
        [
            ("FONTSIZE", (0, 0), (-1, -1), 8),
            ("GRID", (0, 0), (-1, -1), 0.5, _GRID),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ("LEFTPADDING", (0, 0), (-1, -1), 4),
            ("RIGHTPADDING", (0, 0), (-1, -1), 4),
            *extra,
        ]
    )


def _header_elements(invoice: InvoiceRecord, page_label: str, styles: dict) -> list:
    contact = " | ".join(
        part for part in (
            f"GSTIN: {invoice.company_gstin}" if invoice.company_gstin else "",
            f"Email: {invoice.company_email}" if invoice.company_email else "",
            f"Phone: {invoice.company_phone}" if invoice.company_phone else "",
        ) if part
    )
    return [
        Paragraph(page_label, styles["label"]),
        Paragraph(escape(invoice.invoice_type.upper() or "TAX INVOICE"), styles["title"]),
        _p(invoice.company_name, styles["company"]),
        _p(invoice.company_address, styles["company"]),
        _p(contact, styles["company"]),
        Spacer(1, 8),
    ]


def _metadata_table(invoice: InvoiceRecord) -> Table:
    pairs = [
        ("Invoice Number", invoice.invoice_number, "Invoice Date", invoice.invoice_date),
        ("Sale Type", invoice.sale_type.value, "Reverse Charge", invoice.reverse_charge),
        ("Transport Mode", invoice.transport_mode, "Vehicle Number", invoice.vehicle_number),
        ("Date of Supply", invoice.date_of_supply, "Place of Supply", invoice.place_of_supply),
        ("E-Way Bill No.", invoice.eway_bill_number, "PO Number", invoice.po_number),
    ]
    rows = [
        [left, safe_text(left_value, "N/A"), right, safe_text(right_value, "N/A")]
        for left, left_value, right, right_value in pairs
    ]
    table = Table(rows, colWidths=[80, 175, 80, 175])
    table.setStyle(
        _grid_style(
            [
                ("BACKGROUND", (0, 0), (0, -1), _LABEL_BG),
                ("BACKGROUND", (2, 0), (2, -1), _LABEL_BG),
                ("TEXTCOLOR", (0, 0), (0, -1), colors.grey),
                ("TEXTCOLOR", (2, 0), (2, -1), colors.grey),
            ]
        )
    )
    return table


def _parties_table(invoice: InvoiceRecord, styles: dict) -> Table:
    def _party(name, address, gstin, state, state_code) -> Paragraph:
        state_line = f"{state} ({state_code})" if state_code else state
        lines = [name, address, f"GSTIN: {gstin}", f"State: {state_line}"]
        return _p("\n".join(line for line in lines if line), styles["cell"])

    rows = [
        ["Details of Receiver (Billed to)", "Details of Consignee (Shipped to)"],
        [
            _party(
                invoice.receiver_name, invoice.receiver_address, invoice.receiver_gstin,
                invoice.receiver_state, invoice.receiver_state_code,
            ),
            _party(
                invoice.consignee_name, invoice.consignee_address, invoice.consignee_gstin,
                invoice.consignee_state, invoice.consignee_state_code,
            ),
        ],
    ]
    table = Table(rows, colWidths=[255, 255])
    table.setStyle(
        _grid_style(
            [
                ("BACKGROUND", (0, 0), (-1, 0), _LABEL_BG),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("VALIGN", (0, 1), (-1, -1), "TOP"),
            ]
        )
    )
    return table


def _items_table(invoice: InvoiceRecord, totals: InvoiceTotals, styles: dict) -> Table:
    interstate = invoice.is_interstate
    tax_headers = ["IGST"] if interstate else ["CGST", "SGST"]
    header = ["#", "Description", "HSN", "Qty", "Rate", "Taxable", *tax_headers, "Cess", "Total"]
    rows = [header]

    for index, item in enumerate(invoice.items, start=1):
        tax_cells = (
            [_fmt_amount(item.igst_amount)]
            if interstate
            else [_fmt_amount(item.cgst_amount), _fmt_amount(item.sgst_amount)]
        )
        rows.append([
            str(index),
            _p(item.description, styles["cell"]),
            item.hsn_code,
            f"{format_quantity(item.quantity)} {item.uom}".strip(),
            _fmt_amount(item.rate),
            _fmt_amount(item.taxable_value),
            *tax_cells,
            _fmt_amount(item.cess_amount),
            _fmt_amount(item.total_amount),
        ])

    tax_totals = (
        [_fmt_amount(totals.total_igst)]
        if interstate
        else [_fmt_amount(totals.total_cgst), _fmt_amount(totals.total_sgst)]
    )
    rows.append([
        "", "TOTAL", "", format_quantity(totals.total_quantity), "",
        _fmt_amount(totals.total_taxable_value),
        *tax_totals,
        _fmt_amount(totals.total_cess),
        _fmt_amount(totals.grand_total),
    ])

    if interstate:
        col_widths = [18, 150, 40, 50, 50, 60, 50, 40, 52]
    else:
        col_widths = [18, 120, 40, 45, 50, 60, 45, 45, 35, 52]

    table = Table(rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(
        _grid_style(
            [
                # Header row
                ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BG),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                # Total row (last row)
                ("BACKGROUND", (0, -1), (-1, -1), _TOTAL_BG),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("ALIGN", (3, 0), (-1, -1), "RIGHT"),
            ]
        )
    )
    return table


def _summary_table(invoice: InvoiceRecord, totals: InvoiceTotals) -> Table:
    rows = [
        ["Description", "Amount (Rs)"],
        ["Taxable Value", _fmt_amount(totals.total_taxable_value)],
    ]
    if invoice.is_interstate:
        rows.append(["IGST", _fmt_amount(totals.total_igst)])
    else:
        rows.append(["CGST", _fmt_amount(totals.total_cgst)])
        rows.append(["SGST", _fmt_amount(totals.total_sgst)])
    if totals.total_cess:
        rows.append(["Cess", _fmt_amount(totals.total_cess)])
    rows.append(["Total Tax", _fmt_amount(totals.total_tax)])
    rows.append(["GRAND TOTAL", _fmt_amount(totals.grand_total)])

    table = Table(rows, colWidths=[160, 110], hAlign="RIGHT")
    table.setStyle(
        _grid_style(
            [
                ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BG),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("BACKGROUND", (0, -1), (-1, -1), _TOTAL_BG),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ]
        )
    )
    return table


def _page_elements(invoice: InvoiceRecord, totals: InvoiceTotals, page_label: str, styles: dict) -> list:
    elements = _header_elements(invoice, page_label, styles)
    elements += [
        _metadata_table(invoice),
        Spacer(1, 8),
        _parties_table(invoice, styles),
        Spacer(1, 8),
        _items_table(invoice, totals, styles),
        Spacer(1, 8),
        _summary_table(invoice, totals),
        Spacer(1, 6),
        Paragraph(f"<b>Amount in words:</b> {escape(totals.amount_in_words)}", styles["section"]),
    ]

    bank = [
        f"{label}: {value}"
        for label, value in (
            ("Bank", invoice.company_bank_name),
            ("A/C No.", invoice.company_bank_account),
            ("IFSC", invoice.company_bank_ifsc),
            ("Branch", invoice.company_bank_branch),
        )
        if value
    ]
    if bank:
        elements.append(Paragraph(f"<b>Bank details:</b> {escape(' | '.join(bank))}", styles["section"]))

    if invoice.terms_and_conditions.strip():
        elements.append(Paragraph("<b>Terms and Conditions</b>", styles["section"]))
        elements.append(_p(invoice.terms_and_conditions, styles["cell"]))
    if invoice.notes.strip():
        elements.append(Paragraph("<b>Notes</b>", styles["section"]))
        elements.append(_p(invoice.notes, styles["cell"]))

    elements.append(Spacer(1, 20))
    elements.append(Paragraph(f"For {escape(invoice.company_name)}<br/><br/>Authorised Signatory", styles["label"]))
    elements.append(Spacer(1, 10))
    elements.append(Paragraph("This is a computer-generated invoice.", styles["footer"]))
    return elements


def generate_invoice_pdf(invoice: InvoiceRecord, totals: Optional[InvoiceTotals] = None) -> bytes:
    """
    Generate the invoice PDF.

    Args:
        invoice: Submitted invoice record (items already computed).
        totals: Invoice totals; aggregated from the items when omitted.

    Returns:
        PDF file as bytes, one page per print copy.
    """
    if totals is None:
        totals = aggregate(invoice.items, settings.CURRENCY)

    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=pdf_filename(invoice),
    )

    styles = _styles()
    elements = []
    for index, label in enumerate(PAGE_LABELS):
        if index:
            elements.append(PageBreak())
        elements.extend(_page_elements(invoice, totals, label, styles))

    doc.build(elements)
    logger.info("invoice_pdf: generated %s (%d copies)", pdf_filename(invoice), len(PAGE_LABELS))
    return buf.getvalue()
