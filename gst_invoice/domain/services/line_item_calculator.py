# gst_invoice/domain/services/line_item_calculator.py
"""
Compute one invoice row from form input.

taxable_value = quantity x rate; each tax amount is taxable_value x rate% /
100, left unrounded so that rounding happens once, at display time.
Half-filled rows (zero or unparseable quantity / rate) compute to zeros.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from gst_invoice.domain.models.invoice import (
    ComputedLineItem,
    LineItemInput,
    SaleType,
    to_number,
)
from gst_invoice.domain.services.hsn_catalog import HSNCatalog, default_catalog, normalize_hsn_code
from gst_invoice.domain.services.tax_rate_resolver import resolve_rates

logger = logging.getLogger("line_item_calculator")


def compute_item(
    item: LineItemInput,
    sale_type: SaleType,
    catalog: Optional[HSNCatalog] = None,
) -> ComputedLineItem:
    if catalog is None:
        catalog = default_catalog()

    hsn_code = normalize_hsn_code(item.hsn_code)
    entry = catalog.get(hsn_code)
    if entry is None and hsn_code:
        logger.debug("line_item_calculator: HSN %s not in catalog, applying zero rates", hsn_code)

    quantity = to_number(item.quantity)
    rate = to_number(item.rate)
    taxable_value = quantity * rate

    rates = resolve_rates(entry, sale_type, item.cess_rate_override)
    cgst_amount = taxable_value * rates.cgst_rate / 100
    sgst_amount = taxable_value * rates.sgst_rate / 100
    igst_amount = taxable_value * rates.igst_rate / 100
    cess_amount = taxable_value * rates.cess_rate / 100

    description = item.description if item.description.strip() else ""
    if not description and entry is not None:
        description = entry.description

    return ComputedLineItem(
        id=item.id,
        description=description,
        hsn_code=hsn_code,
        quantity=quantity,
        uom=item.uom,
        rate=rate,
        taxable_value=taxable_value,
        cgst_rate=rates.cgst_rate,
        cgst_amount=cgst_amount,
        sgst_rate=rates.sgst_rate,
        sgst_amount=sgst_amount,
        igst_rate=rates.igst_rate,
        igst_amount=igst_amount,
        cess_rate=rates.cess_rate,
        cess_amount=cess_amount,
        total_amount=taxable_value + cgst_amount + sgst_amount + igst_amount + cess_amount,
    )


def compute_items(
    items: Iterable[LineItemInput],
    sale_type: SaleType,
    catalog: Optional[HSNCatalog] = None,
) -> tuple[ComputedLineItem, ...]:
    """Compute every row, preserving order."""
    return tuple(compute_item(item, sale_type, catalog) for item in items)
