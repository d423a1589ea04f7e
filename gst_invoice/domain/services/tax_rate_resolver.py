# gst_invoice/domain/services/tax_rate_resolver.py
"""
Resolve the four applicable rate fields for one catalog entry.

Intrastate supplies carry CGST + SGST, interstate supplies carry IGST; the
two are never both non-zero. Cess applies under either regime.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from gst_invoice.domain.models.hsn import HSNEntry
from gst_invoice.domain.models.invoice import SaleType, to_number

_NOT_SET = float("nan")


@dataclass(frozen=True)
class ResolvedRates:
    cgst_rate: float = 0.0
    sgst_rate: float = 0.0
    igst_rate: float = 0.0
    cess_rate: float = 0.0

    @property
    def gst_rate(self) -> float:
        return self.cgst_rate + self.sgst_rate + self.igst_rate


def resolve_rates(
    entry: Optional[HSNEntry],
    sale_type: SaleType,
    cess_override: Optional[Any] = None,
) -> ResolvedRates:
    """Rates for *entry* under *sale_type*.

    An unknown code (``entry is None``) resolves to all zeros; a bad code
    must never block invoice creation. Only a cess override is honoured for
    such rows, so a manual cess on a custom code still applies.
    """
    cess_rate = _cess_rate(entry, cess_override)
    if entry is None:
        return ResolvedRates(cess_rate=cess_rate)

    cgst = entry.cgst_rate or 0.0
    sgst = entry.sgst_rate or 0.0
    igst = entry.igst_rate or 0.0

    if sale_type is SaleType.INTRASTATE:
        # Catalog rows holding only IGST are split evenly
        if cgst == 0 and sgst == 0 and igst > 0:
            cgst = sgst = igst / 2
        return ResolvedRates(cgst_rate=cgst, sgst_rate=sgst, igst_rate=0.0, cess_rate=cess_rate)

    # Catalog rows holding only CGST/SGST are summed
    if igst == 0 and (cgst > 0 or sgst > 0):
        igst = cgst + sgst
    return ResolvedRates(cgst_rate=0.0, sgst_rate=0.0, igst_rate=igst, cess_rate=cess_rate)


def _cess_rate(entry: Optional[HSNEntry], override: Optional[Any]) -> float:
    rate = to_number(override, default=_NOT_SET)
    if math.isnan(rate):  # no usable override
        rate = entry.cess_rate if entry is not None else 0.0
    return max(0.0, rate or 0.0)
