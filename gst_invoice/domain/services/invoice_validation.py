# gst_invoice/domain/services/invoice_validation.py
"""
Pre-print checks for a submitted invoice.

Every finding becomes a Diagnostic tagged error / warning / info with a
suggested fix. Nothing here raises: the caller decides whether errors block
printing (see ``has_blocking_errors``).
"""

from __future__ import annotations

import logging
from typing import Iterable

from gst_invoice.domain.models.diagnostics import Diagnostic, Severity
from gst_invoice.domain.models.invoice import ComputedLineItem, InvoiceRecord, SaleType
from gst_invoice.domain.services.gstin_validation import (
    is_valid_date,
    is_valid_email,
    is_valid_gstin,
    is_valid_gstin_or_unregistered,
    is_valid_phone,
)
from gst_invoice.domain.services.sale_type import classify
from gst_invoice.domain.services.state_codes import normalize_state_code, state_code_from_gstin

logger = logging.getLogger("invoice_validation")

TAXABLE_VALUE_TOLERANCE = 0.01


def has_blocking_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.is_blocking for d in diagnostics)


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

def validate_item(item: ComputedLineItem, sale_type: SaleType) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    prefix = f"item.{item.id}"

    if not item.description.strip():
        diagnostics.append(Diagnostic(
            field=f"{prefix}.description",
            message="Item description is required",
            severity=Severity.ERROR,
            suggestion="Please provide a description for this item",
        ))

    if not item.hsn_code.strip():
        diagnostics.append(Diagnostic(
            field=f"{prefix}.hsn_code",
            message="HSN code is required",
            severity=Severity.ERROR,
            suggestion="Please select or enter an HSN code",
        ))

    if item.quantity <= 0:
        diagnostics.append(Diagnostic(
            field=f"{prefix}.quantity",
            message="Quantity must be greater than 0",
            severity=Severity.ERROR,
            suggestion="Enter a positive quantity",
            value=item.quantity,
        ))

    if item.rate <= 0:
        diagnostics.append(Diagnostic(
            field=f"{prefix}.rate",
            message="Rate must be greater than 0",
            severity=Severity.ERROR,
            suggestion="Enter a positive rate",
            value=item.rate,
        ))

    gst_rate = item.cgst_rate + item.sgst_rate + item.igst_rate
    if item.hsn_code.strip() and gst_rate == 0:
        # Unknown HSN codes compute at zero rates instead of failing
        diagnostics.append(Diagnostic(
            field=f"{prefix}.hsn_code",
            message=f"No GST rate found for HSN {item.hsn_code}; item is zero-rated",
            severity=Severity.INFO,
            suggestion="Check the HSN code if tax should apply",
            value=item.hsn_code,
        ))

    if sale_type is SaleType.INTERSTATE:
        if item.cgst_rate > 0 or item.sgst_rate > 0:
            diagnostics.append(Diagnostic(
                field=f"{prefix}.taxes",
                message="CGST/SGST should not be applied in interstate sales",
                severity=Severity.WARNING,
                suggestion="Set CGST and SGST to 0 for interstate sales",
            ))
    else:
        if item.cgst_rate != item.sgst_rate:
            diagnostics.append(Diagnostic(
                field=f"{prefix}.taxes",
                message="CGST and SGST rates must be equal",
                severity=Severity.ERROR,
                suggestion="Set equal CGST and SGST rates",
                value={"cgst": item.cgst_rate, "sgst": item.sgst_rate},
            ))
        if item.igst_rate > 0:
            diagnostics.append(Diagnostic(
                field=f"{prefix}.igst_rate",
                message="IGST should not be applied in intrastate sales",
                severity=Severity.WARNING,
                suggestion="Set IGST to 0 for intrastate sales",
            ))

    expected = item.quantity * item.rate
    if abs(item.taxable_value - expected) > TAXABLE_VALUE_TOLERANCE:
        diagnostics.append(Diagnostic(
            field=f"{prefix}.taxable_value",
            message="Taxable value calculation mismatch",
            severity=Severity.WARNING,
            suggestion="Recalculate the item totals",
            value={"expected": expected, "actual": item.taxable_value},
        ))

    return diagnostics


# ---------------------------------------------------------------------------
# Whole invoice
# ---------------------------------------------------------------------------

def _required(value: str, field: str, message: str, suggestion: str) -> list[Diagnostic]:
    if value.strip():
        return []
    return [Diagnostic(field=field, message=message, severity=Severity.ERROR, suggestion=suggestion)]


def _state_code_matches_gstin(gstin: str, declared: str, field: str, party: str) -> list[Diagnostic]:
    gstin_code = state_code_from_gstin(gstin)
    declared = normalize_state_code(declared)
    if not gstin_code or gstin_code == declared:
        return []
    return [Diagnostic(
        field=field,
        message=f"{party} state code does not match GSTIN" if party else "State code does not match GSTIN",
        severity=Severity.ERROR,
        suggestion=f"State code should be {gstin_code} to match GSTIN",
        value={"gstin": gstin_code, "state_code": declared},
    )]


def validate_invoice(record: InvoiceRecord) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []

    # Company
    diagnostics += _required(
        record.company_name, "company_name",
        "Company name is required", "Enter your company name",
    )
    if not is_valid_gstin(record.company_gstin):
        diagnostics.append(Diagnostic(
            field="company_gstin",
            message="Invalid company GSTIN format",
            severity=Severity.ERROR,
            suggestion="GSTIN should be 15 characters (e.g., 27AABCU9603R1ZM)",
            value=record.company_gstin,
        ))
    diagnostics += _state_code_matches_gstin(
        record.company_gstin, record.company_state_code, "company_state_code", "",
    )
    if record.company_email and not is_valid_email(record.company_email):
        diagnostics.append(Diagnostic(
            field="company_email",
            message="Invalid email format",
            severity=Severity.ERROR,
            suggestion="Enter a valid email address",
            value=record.company_email,
        ))
    if record.company_phone and not is_valid_phone(record.company_phone):
        diagnostics.append(Diagnostic(
            field="company_phone",
            message="Invalid phone number format",
            severity=Severity.WARNING,
            suggestion="Phone should be 10 digits starting with 6-9",
            value=record.company_phone,
        ))

    # Receiver / consignee
    diagnostics += _required(
        record.receiver_name, "receiver_name",
        "Receiver name is required", "Enter the bill-to party name",
    )
    for party, label in (("receiver", "Receiver"), ("consignee", "Consignee")):
        gstin = getattr(record, f"{party}_gstin")
        if party == "consignee" and not gstin.strip():
            continue  # consignee is optional
        if not is_valid_gstin_or_unregistered(gstin):
            diagnostics.append(Diagnostic(
                field=f"{party}_gstin",
                message=f"Invalid {party} GSTIN format",
                severity=Severity.ERROR,
                suggestion="Enter a valid 15-character GSTIN or UNREGISTERED",
                value=gstin,
            ))
        else:
            diagnostics += _state_code_matches_gstin(
                gstin, getattr(record, f"{party}_state_code"), f"{party}_state_code", label,
            )

    # Metadata
    diagnostics += _required(
        record.invoice_number, "invoice_number",
        "Invoice number is required", "Enter an invoice number",
    )
    if not is_valid_date(record.invoice_date):
        diagnostics.append(Diagnostic(
            field="invoice_date",
            message="Invalid invoice date format",
            severity=Severity.ERROR,
            suggestion="Date should be in DD/MM/YYYY format",
            value=record.invoice_date,
        ))
    if record.date_of_supply and not is_valid_date(record.date_of_supply):
        diagnostics.append(Diagnostic(
            field="date_of_supply",
            message="Invalid date of supply format",
            severity=Severity.ERROR,
            suggestion="Date should be in DD/MM/YYYY format",
            value=record.date_of_supply,
        ))

    # Items
    if not record.items:
        diagnostics.append(Diagnostic(
            field="items",
            message="At least one item is required",
            severity=Severity.ERROR,
            suggestion="Add items to the invoice",
        ))
    for item in record.items:
        diagnostics += validate_item(item, record.sale_type)

    # Declared sale type vs state codes; the declared value still wins
    company_code = normalize_state_code(record.company_state_code)
    receiver_code = normalize_state_code(record.receiver_state_code)
    if company_code and receiver_code:
        derived = classify(company_code, receiver_code)
        if derived is not record.sale_type:
            diagnostics.append(Diagnostic(
                field="sale_type",
                message=(
                    f"Sale type mismatch: set as {record.sale_type.value} "
                    f"but state codes indicate {derived.value}"
                ),
                severity=Severity.WARNING,
                suggestion=f"Consider changing to {derived.value} or verify state codes",
                value={"stored": record.sale_type.value, "derived": derived.value},
            ))

    if diagnostics:
        logger.debug(
            "invoice_validation: %s -> %d finding(s), blocking=%s",
            record.invoice_number or "<unnumbered>", len(diagnostics), has_blocking_errors(diagnostics),
        )
    return diagnostics
