# gst_invoice/domain/services/formatters.py
"""
Display formatting for invoice documents.

Amounts stay unrounded through the engine; this is the one place they are
rounded (half-up, two decimals) for printing.
"""

from __future__ import annotations

import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any, Optional

from gst_invoice.domain.models.invoice import to_number

RUPEE = "₹"

_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")


def quantize_half_up(value: float, decimals: int = 2) -> Decimal:
    """Round half-up to *decimals* places.

    Precision grows with the magnitude, so very large amounts round instead
    of overflowing the default 28-digit context.
    """
    number = Decimal(str(value))
    exponent = Decimal(1).scaleb(-decimals)
    with localcontext() as ctx:
        ctx.prec = max(28, number.adjusted() + decimals + 2)
        return number.quantize(exponent, rounding=ROUND_HALF_UP)


def _group_indian(digits: str) -> str:
    """12345678 -> 1,23,45,678 (last three digits, then pairs)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_indian_number(value: Any, decimals: int = 2) -> str:
    number = quantize_half_up(to_number(value), decimals)
    sign = "-" if number < 0 else ""
    text = str(number.copy_abs())
    integer, _, fraction = text.partition(".")
    grouped = _group_indian(integer)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_currency(amount: Any, show_symbol: bool = True, allow_zero: bool = True) -> str:
    """₹12,34,567.00 style. With ``allow_zero=False`` a zero amount renders ''."""
    if not allow_zero and to_number(amount) == 0:
        return ""
    formatted = format_indian_number(amount, 2)
    return f"{RUPEE}{formatted}" if show_symbol else formatted


def format_amount(amount: Any) -> str:
    """Plain two-decimal amount, no grouping: the form used inside templates."""
    return str(quantize_half_up(to_number(amount), 2))


def format_quantity(quantity: Any, decimals: int = 2) -> str:
    return format_indian_number(quantity, decimals)


def format_percent(rate: Any, decimals: int = 2) -> str:
    return f"{quantize_half_up(to_number(rate), decimals)}%"


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def format_ddmmyyyy(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def today_ddmmyyyy() -> str:
    return format_ddmmyyyy(date.today())


def normalize_date_input(value: Optional[str], fallback: str = "") -> str:
    """Turn an HTML date input (YYYY-MM-DD) into DD/MM/YYYY.

    Values already containing '/' pass through; blank values give *fallback*.
    """
    if not value or not str(value).strip():
        return fallback
    text = str(value).strip()
    if "/" in text:
        return text
    match = _ISO_DATE.match(text)
    if match:
        year, month, day = match.groups()
        return f"{day.zfill(2)}/{month.zfill(2)}/{year}"
    return text


def format_date(value: Any) -> str:
    if value is None or value == "":
        return ""
    if isinstance(value, date):
        return format_ddmmyyyy(value)
    return normalize_date_input(str(value), fallback="")


def safe_text(text: Optional[str], fallback: str = "---") -> str:
    if not text or not text.strip():
        return fallback
    return text
