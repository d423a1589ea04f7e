# gst_invoice/domain/services/template_engine.py
"""
Inject a computed invoice into an HTML template.

Templates carry ``{{TOKEN}}`` placeholders. The substitution table is built
once per page and applied in a single pass, so a value that itself contains
``{{...}}`` is never expanded again. Unknown tokens are left untouched.

Block tokens ({{TAX_HEADERS}}, {{ITEMS_ROWS}}, {{TAX_TOTALS}},
{{COMPANY_CONTACT}}) are generated markup; every other value is escaped text.
"""

from __future__ import annotations

import html
import logging
import re
from typing import Optional

from gst_invoice.config.settings import settings
from gst_invoice.domain.models.invoice import (
    PAGE_LABELS,
    ComputedLineItem,
    InvoiceRecord,
    InvoiceTotals,
)
from gst_invoice.domain.services.amount_in_words import amount_in_words
from gst_invoice.domain.services.formatters import format_amount, format_quantity
from gst_invoice.domain.services.invoice_aggregator import aggregate
from gst_invoice.domain.services.template_registry import ContactStyle, LoadedTemplate, TemplateMode

logger = logging.getLogger("template_engine")

TOKEN_PATTERN = re.compile(r"\{\{([A-Z0-9_]+)\}\}")

ZERO = "0.00"


def _text(value: Optional[str]) -> str:
    return html.escape(value or "", quote=False)


def _multiline(value: Optional[str]) -> str:
    return "<br>".join(_text(line) for line in (value or "").splitlines())


def _th(label: str) -> str:
    return f'<th class="text-right">{label}</th>'


def _td(value: str, strong: bool = False) -> str:
    if strong:
        value = f"<strong>{value}</strong>"
    return f'<td class="text-right">{value}</td>'


# ---------------------------------------------------------------------------
# Tax column blocks, one generator set per mode
# ---------------------------------------------------------------------------

def _standard_headers() -> str:
    return "".join(
        _th(f"{tax} %") + _th(f"{tax} Amt") for tax in ("CGST", "SGST", "IGST", "Cess")
    )


def _standard_cells(item: ComputedLineItem) -> str:
    return "".join((
        _td(format_amount(item.cgst_rate)), _td(format_amount(item.cgst_amount)),
        _td(format_amount(item.sgst_rate)), _td(format_amount(item.sgst_amount)),
        _td(format_amount(item.igst_rate)), _td(format_amount(item.igst_amount)),
        _td(format_amount(item.cess_rate)), _td(format_amount(item.cess_amount)),
    ))


def _standard_totals(totals: InvoiceTotals) -> str:
    return "".join((
        _td(""), _td(format_amount(totals.total_cgst), strong=True),
        _td(""), _td(format_amount(totals.total_sgst), strong=True),
        _td(""), _td(format_amount(totals.total_igst), strong=True),
        _td(""), _td(format_amount(totals.total_cess), strong=True),
    ))


def _dynamic_headers(invoice: InvoiceRecord) -> str:
    if invoice.is_interstate:
        return _th("IGST") + _th("Cess")
    return _th("CGST") + _th("SGST") + _th("Cess")


def _dynamic_cells(item: ComputedLineItem, interstate: bool) -> str:
    if interstate:
        return _td(format_amount(item.igst_amount)) + _td(format_amount(item.cess_amount))
    return (
        _td(format_amount(item.cgst_amount))
        + _td(format_amount(item.sgst_amount))
        + _td(format_amount(item.cess_amount))
    )


def _dynamic_totals(invoice: InvoiceRecord, totals: InvoiceTotals) -> str:
    if invoice.is_interstate:
        return _td(format_amount(totals.total_igst), strong=True) + _td(format_amount(totals.total_cess), strong=True)
    return (
        _td(format_amount(totals.total_cgst), strong=True)
        + _td(format_amount(totals.total_sgst), strong=True)
        + _td(format_amount(totals.total_cess), strong=True)
    )


def _interstate_headers() -> str:
    return _th("IGST %") + _th("IGST Amt")


def _interstate_cells(item: ComputedLineItem) -> str:
    return _td(format_amount(item.igst_rate)) + _td(format_amount(item.igst_amount))


def _interstate_totals(totals: InvoiceTotals) -> str:
    return _td("") + _td(format_amount(totals.total_igst), strong=True)


def _item_row(index: int, item: ComputedLineItem, tax_cells: str, total: float) -> str:
    return (
        "<tr>"
        f"<td>{index}</td>"
        f"<td>{_text(item.description)}</td>"
        f'<td class="text-center">{_text(item.hsn_code)}</td>'
        f'<td class="text-right">{format_quantity(item.quantity)} {_text(item.uom)}</td>'
        f"{_td(format_amount(item.rate))}"
        f"{_td(format_amount(item.taxable_value))}"
        f"{tax_cells}"
        f"{_td(format_amount(total), strong=True)}"
        "</tr>"
    )


def resolve_mode(invoice: InvoiceRecord, mode: TemplateMode) -> TemplateMode:
    """IGST-only columns cannot carry CGST/SGST, so an intrastate invoice on
    an interstate layout gets the dynamic column block instead."""
    if mode is TemplateMode.INTERSTATE and not invoice.is_interstate:
        return TemplateMode.DYNAMIC
    return mode


def _row_cells(item: ComputedLineItem, invoice: InvoiceRecord, mode: TemplateMode) -> str:
    if mode is TemplateMode.STANDARD:
        return _standard_cells(item)
    if mode is TemplateMode.INTERSTATE:
        return _interstate_cells(item)
    if mode is TemplateMode.COMPOSITION:
        return ""
    return _dynamic_cells(item, invoice.is_interstate)


def build_items_rows(invoice: InvoiceRecord, mode: TemplateMode) -> str:
    mode = resolve_mode(invoice, mode)
    rows = []
    for index, item in enumerate(invoice.items, start=1):
        total = item.taxable_value if mode is TemplateMode.COMPOSITION else item.total_amount
        rows.append(_item_row(index, item, _row_cells(item, invoice, mode), total))
    return "\n".join(rows)


def build_tax_headers(invoice: InvoiceRecord, mode: TemplateMode) -> str:
    mode = resolve_mode(invoice, mode)
    if mode is TemplateMode.STANDARD:
        return _standard_headers()
    if mode is TemplateMode.INTERSTATE:
        return _interstate_headers()
    if mode is TemplateMode.COMPOSITION:
        return ""
    return _dynamic_headers(invoice)


def build_tax_totals(invoice: InvoiceRecord, totals: InvoiceTotals, mode: TemplateMode) -> str:
    mode = resolve_mode(invoice, mode)
    if mode is TemplateMode.STANDARD:
        return _standard_totals(totals)
    if mode is TemplateMode.INTERSTATE:
        return _interstate_totals(totals)
    if mode is TemplateMode.COMPOSITION:
        return ""
    return _dynamic_totals(invoice, totals)


# ---------------------------------------------------------------------------
# Company contact line
# ---------------------------------------------------------------------------

def build_contact_line(invoice: InvoiceRecord, style: ContactStyle) -> str:
    parts = [
        (label, _text(value))
        for label, value in (("Email", invoice.company_email), ("Phone", invoice.company_phone))
        if value and value.strip()
    ]
    if not parts:
        return ""

    if style is ContactStyle.DETAIL_SPAN:
        return "<br>".join(
            f'<span class="detail-label">{label}:</span> <span class="detail-value">{value}</span>'
            for label, value in parts
        )
    if style is ContactStyle.INLINE_STRONG:
        return " | ".join(f"<strong>{label}:</strong> {value}" for label, value in parts)
    return "".join(f"<p>{label}: {value}</p>" for label, value in parts)


# ---------------------------------------------------------------------------
# Substitution table
# ---------------------------------------------------------------------------

def _check_page_label(page_label: str) -> str:
    if page_label not in PAGE_LABELS:
        raise ValueError(f"Invalid page label {page_label!r}; expected one of {', '.join(PAGE_LABELS)}")
    return page_label


def build_substitutions(
    invoice: InvoiceRecord,
    totals: InvoiceTotals,
    page_label: str,
    mode: TemplateMode = TemplateMode.DYNAMIC,
    contact_style: ContactStyle = ContactStyle.PARAGRAPH,
) -> dict[str, str]:
    page_label = _check_page_label(page_label)
    resolved = resolve_mode(invoice, mode)
    if resolved is not mode:
        logger.warning(
            "template_engine: %s is %s, rendering %s layout with %s tax columns",
            invoice.invoice_number or "<unnumbered>", invoice.sale_type.value, mode.value, resolved.value,
        )
        mode = resolved

    if mode is TemplateMode.COMPOSITION:
        # Bill of supply: no tax is collected, the payable amount is the taxable value
        grand_total = totals.total_taxable_value
        words = amount_in_words(grand_total, totals.currency)
        cgst = sgst = igst = cess = total_tax = ZERO
    else:
        grand_total = totals.grand_total
        words = totals.amount_in_words
        cgst = format_amount(totals.total_cgst)
        sgst = format_amount(totals.total_sgst)
        igst = format_amount(totals.total_igst)
        cess = format_amount(totals.total_cess)
        total_tax = format_amount(totals.total_tax)

    text_fields = {
        "COMPANY_NAME": invoice.company_name,
        "COMPANY_ADDRESS": invoice.company_address,
        "COMPANY_GSTIN": invoice.company_gstin,
        "COMPANY_EMAIL": invoice.company_email,
        "COMPANY_PHONE": invoice.company_phone,
        "COMPANY_STATE": invoice.company_state,
        "COMPANY_STATE_CODE": invoice.company_state_code,
        "BANK_NAME": invoice.company_bank_name,
        "BANK_ACCOUNT": invoice.company_bank_account,
        "BANK_IFSC": invoice.company_bank_ifsc,
        "BANK_BRANCH": invoice.company_bank_branch,
        "INVOICE_NUMBER": invoice.invoice_number,
        "INVOICE_DATE": invoice.invoice_date,
        "INVOICE_TYPE": invoice.invoice_type,
        "SALE_TYPE": invoice.sale_type.value,
        "REVERSE_CHARGE": invoice.reverse_charge,
        "TRANSPORT_MODE": invoice.transport_mode,
        "VEHICLE_NUMBER": invoice.vehicle_number,
        "TRANSPORTER_NAME": invoice.transporter_name,
        "CHALLAN_NUMBER": invoice.challan_number,
        "LR_NUMBER": invoice.lr_number,
        "DATE_OF_SUPPLY": invoice.date_of_supply,
        "PLACE_OF_SUPPLY": invoice.place_of_supply,
        "PO_NUMBER": invoice.po_number,
        "EWAY_BILL_NUMBER": invoice.eway_bill_number,
        "RECEIVER_NAME": invoice.receiver_name,
        "RECEIVER_ADDRESS": invoice.receiver_address,
        "RECEIVER_GSTIN": invoice.receiver_gstin,
        "RECEIVER_STATE": invoice.receiver_state,
        "RECEIVER_STATE_CODE": invoice.receiver_state_code,
        "CONSIGNEE_NAME": invoice.consignee_name,
        "CONSIGNEE_ADDRESS": invoice.consignee_address,
        "CONSIGNEE_GSTIN": invoice.consignee_gstin,
        "CONSIGNEE_STATE": invoice.consignee_state,
        "CONSIGNEE_STATE_CODE": invoice.consignee_state_code,
        "AMOUNT_IN_WORDS": words,
    }
    substitutions = {token: _text(value) for token, value in text_fields.items()}

    substitutions.update({
        "PAGE_TYPE": page_label,
        "TERMS_AND_CONDITIONS": _multiline(invoice.terms_and_conditions),
        "NOTES": _multiline(invoice.notes),
        "COMPANY_CONTACT": build_contact_line(invoice, contact_style),
        "TAX_HEADERS": build_tax_headers(invoice, mode),
        "ITEMS_ROWS": build_items_rows(invoice, mode),
        "TAX_TOTALS": build_tax_totals(invoice, totals, mode),
        "TOTAL_QUANTITY": format_quantity(totals.total_quantity),
        "TOTAL_TAXABLE_VALUE": format_amount(totals.total_taxable_value),
        "TOTAL_CGST": cgst,
        "TOTAL_SGST": sgst,
        "TOTAL_IGST": igst,
        "TOTAL_CESS": cess,
        "TOTAL_TAX": total_tax,
        "GRAND_TOTAL": format_amount(grand_total),
    })
    return substitutions


def substitute(template_source: str, substitutions: dict[str, str]) -> str:
    """Single regex pass; tokens missing from *substitutions* stay as written."""
    return TOKEN_PATTERN.sub(lambda m: substitutions.get(m.group(1), m.group(0)), template_source)


def render(
    template_source: str,
    invoice: InvoiceRecord,
    totals: InvoiceTotals,
    page_label: str,
    mode: TemplateMode = TemplateMode.DYNAMIC,
    contact_style: ContactStyle = ContactStyle.PARAGRAPH,
) -> str:
    substitutions = build_substitutions(invoice, totals, page_label, mode, contact_style)
    return substitute(template_source, substitutions)


def render_pages(
    template: LoadedTemplate,
    invoice: InvoiceRecord,
    totals: Optional[InvoiceTotals] = None,
) -> dict[str, str]:
    """Render the ORIGINAL and DUPLICATE copies of *invoice*."""
    if totals is None:
        totals = aggregate(invoice.items, settings.CURRENCY)
    pages = {
        label: render(template.source, invoice, totals, label, template.mode, template.contact_style)
        for label in PAGE_LABELS
    }
    logger.debug(
        "template_engine: rendered %s with %s (%s)",
        invoice.invoice_number or "<unnumbered>", template.name, template.mode.value,
    )
    return pages
