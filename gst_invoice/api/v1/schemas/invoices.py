# gst_invoice/api/v1/schemas/invoices.py
"""Request and response schemas for invoice endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from gst_invoice.domain.models.invoice import InvoiceRecord, InvoiceTotals


class SaleTypeRequest(BaseModel):
    company_state_code: str | None = Field(default=None, max_length=4)
    counterparty_state_code: str | None = Field(default=None, max_length=4)
    override: str | None = Field(default=None, description="Interstate / Intrastate chosen by the user")


class SaleTypeResponse(BaseModel):
    sale_type: str
    is_interstate: bool


class ComputeResponse(BaseModel):
    """Submitted record, its totals and every validation finding."""

    invoice: InvoiceRecord
    totals: InvoiceTotals
    diagnostics: list[dict] = Field(default_factory=list)
    has_blocking_errors: bool = False


class PreviewResponse(BaseModel):
    template: str
    pages: dict[str, str]
