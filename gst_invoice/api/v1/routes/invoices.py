# gst_invoice/api/v1/routes/invoices.py
"""
Invoice computation, HTML preview, and PDF download endpoints.

Nothing is stored: every endpoint takes the full form state, submits it
and works on the resulting record.
"""

from __future__ import annotations

import io
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse, StreamingResponse

from gst_invoice.api.deps import get_catalog, get_template_registry
from gst_invoice.api.v1.envelope import error, ok
from gst_invoice.api.v1.schemas.invoices import (
    ComputeResponse,
    PreviewResponse,
    SaleTypeRequest,
    SaleTypeResponse,
)
from gst_invoice.config.settings import settings
from gst_invoice.domain.models.invoice import InvoiceForm, SaleType
from gst_invoice.domain.services.hsn_catalog import HSNCatalog
from gst_invoice.domain.services.invoice_aggregator import aggregate
from gst_invoice.domain.services.invoice_builder import submit
from gst_invoice.domain.services.invoice_pdf import generate_invoice_pdf, pdf_filename
from gst_invoice.domain.services.invoice_validation import has_blocking_errors, validate_invoice
from gst_invoice.domain.services.preview import InvoicePreviewer
from gst_invoice.domain.services.sale_type import classify
from gst_invoice.domain.services.template_registry import TemplateLoadError, TemplateRegistry

logger = logging.getLogger("api.v1.invoices")

router = APIRouter(prefix="/invoices", tags=["Invoices"])


# ---------------------------------------------------------------------------
# Sale type
# ---------------------------------------------------------------------------

@router.post("/sale-type", response_model=dict)
async def sale_type(body: SaleTypeRequest):
    """Interstate / intrastate for a pair of state codes."""
    if body.override and SaleType.parse(body.override) is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unknown sale type: {body.override}",
        )
    result = classify(body.company_state_code, body.counterparty_state_code, body.override)
    return ok(data=SaleTypeResponse(
        sale_type=result.value,
        is_interstate=result is SaleType.INTERSTATE,
    ).model_dump())


# ---------------------------------------------------------------------------
# Compute + validate
# ---------------------------------------------------------------------------

@router.post("/compute", response_model=dict)
async def compute_invoice(form: InvoiceForm, catalog: HSNCatalog = Depends(get_catalog)):
    """
    Submit the form and return the computed record.

    Validation findings are returned alongside, never raised; the caller
    decides whether ``has_blocking_errors`` should stop printing.
    """
    record = submit(form, catalog)
    totals = aggregate(record.items, settings.CURRENCY)
    diagnostics = validate_invoice(record)

    body = ComputeResponse(
        invoice=record,
        totals=totals,
        diagnostics=[d.to_dict() for d in diagnostics],
        has_blocking_errors=has_blocking_errors(diagnostics),
    )
    return ok(data=body.model_dump(mode="json"))


# ---------------------------------------------------------------------------
# HTML preview
# ---------------------------------------------------------------------------

def _template_error(exc: TemplateLoadError) -> JSONResponse:
    status_code = status.HTTP_404_NOT_FOUND if exc.not_found else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(
        status_code=status_code,
        content=error(str(exc), errors=[{"template": exc.name, "reason": exc.reason}]),
    )


@router.post("/preview", response_model=dict)
async def preview_invoice(
    form: InvoiceForm,
    template: str | None = Query(default=None, description="Template type, e.g. standard, modern"),
    catalog: HSNCatalog = Depends(get_catalog),
    registry: TemplateRegistry = Depends(get_template_registry),
):
    """Render the ORIGINAL and DUPLICATE pages of the invoice as HTML."""
    name = template or settings.DEFAULT_TEMPLATE
    record = submit(form, catalog)
    totals = aggregate(record.items, settings.CURRENCY)

    previewer = InvoicePreviewer(registry)
    try:
        pages = await previewer.preview(record, totals, name)
    except TemplateLoadError as exc:
        logger.warning("api.v1.invoices: preview failed: %s", exc)
        return _template_error(exc)

    if pages is None:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error("Preview superseded by a newer request"),
        )

    return ok(data=PreviewResponse(template=name, pages=pages).model_dump())


# ---------------------------------------------------------------------------
# PDF download
# ---------------------------------------------------------------------------

@router.post("/pdf")
async def download_pdf(form: InvoiceForm, catalog: HSNCatalog = Depends(get_catalog)):
    """Generate and download the two-copy invoice PDF."""
    record = submit(form, catalog)
    totals = aggregate(record.items, settings.CURRENCY)
    pdf_bytes = generate_invoice_pdf(record, totals)

    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{pdf_filename(record)}"'
        },
    )
