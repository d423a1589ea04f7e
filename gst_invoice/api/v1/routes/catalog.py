# gst_invoice/api/v1/routes/catalog.py
"""
Read-only lookup tables: HSN codes, GST state codes, invoice templates.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from gst_invoice.api.deps import get_catalog, get_template_registry
from gst_invoice.api.v1.envelope import ok
from gst_invoice.domain.services.hsn_catalog import HSNCatalog
from gst_invoice.domain.services.state_codes import STATE_CODES
from gst_invoice.domain.services.template_registry import TemplateRegistry

logger = logging.getLogger("api.v1.catalog")

router = APIRouter(prefix="/catalog", tags=["Catalog"])


@router.get("/hsn", response_model=dict)
async def list_hsn_codes(catalog: HSNCatalog = Depends(get_catalog)):
    """All HSN/SAC codes with their default rates."""
    return ok(data=[entry.to_dict() for entry in catalog])


@router.get("/hsn/{code}", response_model=dict)
async def get_hsn_code(code: str, catalog: HSNCatalog = Depends(get_catalog)):
    entry = catalog.get(code)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"HSN code {code} not found")
    return ok(data=entry.to_dict())


@router.get("/states", response_model=dict)
async def list_states():
    return ok(data=[{"code": code, "name": name} for code, name in STATE_CODES.items()])


@router.get("/templates", response_model=dict)
async def list_templates(registry: TemplateRegistry = Depends(get_template_registry)):
    return ok(data=registry.describe())
