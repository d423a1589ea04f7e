# gst_invoice/domain/services/invoice_aggregator.py
"""Sum computed rows into invoice-level totals."""

from __future__ import annotations

from typing import Iterable

from gst_invoice.domain.models.invoice import ComputedLineItem, InvoiceTotals
from gst_invoice.domain.services.amount_in_words import amount_in_words


def aggregate(items: Iterable[ComputedLineItem], currency: str = "INR") -> InvoiceTotals:
    """Invoice totals for *items*; an empty invoice totals to zero.

    total_tax = CGST + SGST + IGST + Cess
    grand_total = total_taxable_value + total_tax
    """
    quantity = taxable = cgst = sgst = igst = cess = 0.0
    for item in items:
        quantity += item.quantity
        taxable += item.taxable_value
        cgst += item.cgst_amount
        sgst += item.sgst_amount
        igst += item.igst_amount
        cess += item.cess_amount

    total_tax = cgst + sgst + igst + cess
    grand_total = taxable + total_tax

    return InvoiceTotals(
        total_quantity=quantity,
        total_taxable_value=taxable,
        total_cgst=cgst,
        total_sgst=sgst,
        total_igst=igst,
        total_cess=cess,
        total_tax=total_tax,
        grand_total=grand_total,
        amount_in_words=amount_in_words(grand_total, currency),
        currency=currency.upper(),
    )
