# gst_invoice/domain/models/invoice.py
"""
Invoice records exchanged between the form layer, the tax engine and the
renderers.

LineItemInput / InvoiceForm: raw form state, tolerant of half-typed numbers.
ComputedLineItem / InvoiceRecord / InvoiceTotals: derived, read-only.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

PAGE_LABELS = ("ORIGINAL", "DUPLICATE")
UNREGISTERED = "UNREGISTERED"


class SaleType(str, Enum):
    INTERSTATE = "Interstate"
    INTRASTATE = "Intrastate"

    @classmethod
    def parse(cls, value: Any, default: "SaleType | None" = None) -> "SaleType | None":
        """Case-insensitive lookup; blank or unknown values return *default*."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return default


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce form input to a float; missing, non-numeric and NaN become *default*."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip().replace(",", "")
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

class LineItemInput(BaseModel):
    """One invoice row as typed into the form."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    description: str = ""
    hsn_code: str = ""
    quantity: float = 0.0
    uom: str = ""
    rate: float = 0.0
    cess_rate_override: Optional[float] = None

    @field_validator("quantity", "rate", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> float:
        return to_number(value)

    @field_validator("cess_rate_override", mode="before")
    @classmethod
    def _coerce_cess(cls, value: Any) -> Optional[float]:
        # Unparseable override falls back to the catalog cess
        number = to_number(value, default=math.nan)
        return None if math.isnan(number) else number

    @field_validator("description", "hsn_code", "uom", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)


class ComputedLineItem(BaseModel):
    """Fully computed row. Amounts are unrounded; rounding happens on display."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    hsn_code: str
    quantity: float
    uom: str
    rate: float
    taxable_value: float
    cgst_rate: float
    cgst_amount: float
    sgst_rate: float
    sgst_amount: float
    igst_rate: float
    igst_amount: float
    cess_rate: float
    cess_amount: float
    total_amount: float


class InvoiceTotals(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_quantity: float = 0.0
    total_taxable_value: float = 0.0
    total_cgst: float = 0.0
    total_sgst: float = 0.0
    total_igst: float = 0.0
    total_cess: float = 0.0
    total_tax: float = 0.0
    grand_total: float = 0.0
    amount_in_words: str = "Zero Only"
    currency: str = "INR"


# ---------------------------------------------------------------------------
# Invoice header (shared by the form and the frozen record)
# ---------------------------------------------------------------------------

class InvoiceHeader(BaseModel):
    # Company details
    company_name: str = ""
    company_address: str = ""
    company_gstin: str = ""
    company_email: str = ""
    company_phone: str = ""
    company_state: str = ""
    company_state_code: str = ""
    company_bank_name: str = ""
    company_bank_account: str = ""
    company_bank_ifsc: str = ""
    company_bank_branch: str = ""

    # Invoice metadata
    invoice_number: str = ""
    invoice_date: str = ""
    invoice_type: str = "Tax Invoice"
    reverse_charge: str = "No"

    # Transport details
    transport_mode: str = ""
    vehicle_number: str = ""
    transporter_name: str = ""
    challan_number: str = ""
    lr_number: str = ""
    date_of_supply: str = ""
    place_of_supply: str = ""
    po_number: str = ""
    eway_bill_number: str = ""

    # Receiver (billed to)
    receiver_name: str = ""
    receiver_address: str = ""
    receiver_gstin: str = UNREGISTERED
    receiver_state: str = ""
    receiver_state_code: str = ""

    # Consignee (shipped to)
    consignee_name: str = ""
    consignee_address: str = ""
    consignee_gstin: str = UNREGISTERED
    consignee_state: str = ""
    consignee_state_code: str = ""

    terms_and_conditions: str = ""
    notes: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_blank(cls, value: Any, info: ValidationInfo) -> Any:
        # Form payloads send null for untouched optional inputs
        if value is None and cls.model_fields[info.field_name].annotation is str:
            return ""
        return value


class InvoiceForm(InvoiceHeader):
    """Form state handed to the engine at submit time."""

    sale_type: str = ""
    items: list[LineItemInput] = Field(default_factory=list)


class InvoiceRecord(InvoiceHeader):
    """Submitted invoice: computed items plus everything printed around them."""

    model_config = ConfigDict(frozen=True)

    sale_type: SaleType = SaleType.INTERSTATE
    items: tuple[ComputedLineItem, ...] = ()

    @property
    def is_interstate(self) -> bool:
        return self.sale_type is SaleType.INTERSTATE
