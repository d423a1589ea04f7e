# gst_invoice/domain/services/invoice_builder.py
"""
Form defaults and the submit step.

    form = build_form_defaults(profile)
    ...user edits...
    record = submit(form)        # frozen InvoiceRecord, items computed
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from gst_invoice.domain.models.invoice import (
    UNREGISTERED,
    InvoiceForm,
    InvoiceRecord,
    LineItemInput,
    SaleType,
)
from gst_invoice.domain.models.profile import DEFAULT_TERMS, Profile
from gst_invoice.domain.services.formatters import normalize_date_input, today_ddmmyyyy
from gst_invoice.domain.services.hsn_catalog import (
    DEFAULT_HSN_CODE,
    HSNCatalog,
    default_catalog,
    normalize_hsn_code,
)
from gst_invoice.domain.services.line_item_calculator import compute_items
from gst_invoice.domain.services.sale_type import classify
from gst_invoice.domain.services.state_codes import state_name

logger = logging.getLogger("invoice_builder")

UOM_OPTIONS = ("MTS", "KGS", "NOS", "PCS", "TONS", "QTLS", "BOXES", "BAGS")
TRANSPORT_MODES = ("By Lorry", "By Road", "By Rail", "By Air", "By Ship")
DEFAULT_UOM = UOM_OPTIONS[0]

NOT_APPLICABLE = "Not Applicable"
DEFAULT_INVOICE_TYPE = "Tax Invoice"
DEFAULT_REVERSE_CHARGE = "No"


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

def build_default_item(catalog: Optional[HSNCatalog] = None) -> LineItemInput:
    """A blank row on the default HSN code, quantity and rate still zero."""
    if catalog is None:
        catalog = default_catalog()
    entry = catalog.get(DEFAULT_HSN_CODE)
    return LineItemInput(
        description=entry.description if entry else "",
        hsn_code=DEFAULT_HSN_CODE,
        quantity=0,
        uom=DEFAULT_UOM,
        rate=0,
    )


def build_form_defaults(profile: Optional[Profile] = None) -> InvoiceForm:
    """Fresh form for *profile*: company fields prefilled, dates set to today."""
    today = today_ddmmyyyy()
    company = profile.company_details if profile else None
    company_state_code = company.state_code if company else ""

    return InvoiceForm(
        company_name=company.company_name if company else "",
        company_address=company.address if company else "",
        company_gstin=company.gstin if company else "",
        company_email=company.email if company else "",
        company_phone=company.phone if company else "",
        company_state=(company.state if company else "") or state_name(company_state_code),
        company_state_code=company_state_code,
        invoice_date=today,
        date_of_supply=today,
        invoice_type=DEFAULT_INVOICE_TYPE,
        reverse_charge=DEFAULT_REVERSE_CHARGE,
        sale_type=classify(company_state_code, "").value,
        transport_mode=TRANSPORT_MODES[0],
        receiver_gstin=UNREGISTERED,
        consignee_gstin=UNREGISTERED,
        items=[build_default_item()],
        terms_and_conditions=profile.terms_and_conditions if profile else DEFAULT_TERMS,
    )


def normalize_items(
    raw_items: Iterable[Any],
    catalog: Optional[HSNCatalog] = None,
) -> list[LineItemInput]:
    """Rebuild rows from loosely-typed data (a restored draft, a JSON body).

    Missing HSN codes fall back to the default code, blank descriptions to the
    catalog description, blank units to the default unit.
    """
    if catalog is None:
        catalog = default_catalog()

    items: list[LineItemInput] = []
    for raw in raw_items:
        if isinstance(raw, LineItemInput):
            raw = raw.model_dump()
        elif not isinstance(raw, dict):
            raw = {}

        hsn_code = normalize_hsn_code(raw.get("hsn_code")) or DEFAULT_HSN_CODE
        entry = catalog.get(hsn_code)

        description = raw.get("description")
        if not isinstance(description, str) or not description.strip():
            description = entry.description if entry else ""

        uom = raw.get("uom")
        if not isinstance(uom, str) or not uom.strip():
            uom = DEFAULT_UOM

        fields = {
            "description": description,
            "hsn_code": hsn_code,
            "quantity": raw.get("quantity"),
            "uom": uom,
            "rate": raw.get("rate"),
            "cess_rate_override": raw.get("cess_rate_override"),
        }
        if raw.get("id"):
            fields["id"] = str(raw["id"])
        items.append(LineItemInput(**fields))
    return items


def copy_receiver_to_consignee(form: InvoiceForm) -> InvoiceForm:
    """Consignee fields take the receiver's values (shipped to = billed to)."""
    return form.model_copy(update={
        "consignee_name": form.receiver_name,
        "consignee_address": form.receiver_address,
        "consignee_gstin": form.receiver_gstin,
        "consignee_state": form.receiver_state,
        "consignee_state_code": form.receiver_state_code,
    })


# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------

def submit(form: InvoiceForm, catalog: Optional[HSNCatalog] = None) -> InvoiceRecord:
    """Freeze the form into an InvoiceRecord.

    The record's sale type is whatever the form carries (blank -> Interstate);
    it is never re-derived here, so a manual choice survives submission.
    """
    sale_type = SaleType.parse(form.sale_type, default=SaleType.INTERSTATE)
    header = form.model_dump(exclude={"items", "sale_type"})

    header.update(
        invoice_type=form.invoice_type.strip() or DEFAULT_INVOICE_TYPE,
        reverse_charge=form.reverse_charge.strip() or DEFAULT_REVERSE_CHARGE,
        eway_bill_number=form.eway_bill_number.strip() or NOT_APPLICABLE,
        invoice_date=normalize_date_input(form.invoice_date, fallback=""),
        date_of_supply=normalize_date_input(form.date_of_supply, fallback=""),
    )
    for party in ("company", "receiver", "consignee"):
        gstin = header[f"{party}_gstin"].strip().upper()
        if party != "company" and not gstin:
            gstin = UNREGISTERED
        header[f"{party}_gstin"] = gstin
        if not header[f"{party}_state"].strip():
            header[f"{party}_state"] = state_name(header[f"{party}_state_code"])

    items = compute_items(form.items, sale_type, catalog)
    logger.info(
        "invoice_builder: submitted %s (%s, %d item(s))",
        header["invoice_number"] or "<unnumbered>", sale_type.value, len(items),
    )
    return InvoiceRecord(**header, sale_type=sale_type, items=items)
