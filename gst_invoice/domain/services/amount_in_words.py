# gst_invoice/domain/services/amount_in_words.py
"""
Amount in words, Indian numbering system (lakh / crore, not million / billion).

    1,23,45,678.50 -> "One Crore Twenty Three Lakh Forty Five Thousand
                       Six Hundred Seventy Eight Rupees and Fifty Paise Only"
"""

from __future__ import annotations

from typing import Any

from gst_invoice.domain.models.invoice import to_number
from gst_invoice.domain.services.formatters import quantize_half_up

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine",
    "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen", "Sixteen",
    "Seventeen", "Eighteen", "Nineteen",
]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# currency -> (major unit, minor unit)
CURRENCY_UNITS: dict[str, tuple[str, str]] = {
    "INR": ("Rupees", "Paise"),
    "USD": ("Dollars", "Cents"),
}


def _below_thousand(n: int) -> str:
    if n == 0:
        return ""
    if n < 20:
        return _ONES[n]
    if n < 100:
        tens, ones = divmod(n, 10)
        return _TENS[tens] + (f" {_ONES[ones]}" if ones else "")
    hundreds, rest = divmod(n, 100)
    return f"{_ONES[hundreds]} Hundred" + (f" {_below_thousand(rest)}" if rest else "")


def integer_to_words(n: int) -> str:
    """Words for a non-negative integer, banded by crore / lakh / thousand."""
    if n == 0:
        return ""
    if n >= CRORE:
        words = f"{integer_to_words(n // CRORE)} Crore {integer_to_words(n % CRORE)}"
    elif n >= LAKH:
        words = f"{integer_to_words(n // LAKH)} Lakh {integer_to_words(n % LAKH)}"
    elif n >= THOUSAND:
        words = f"{integer_to_words(n // THOUSAND)} Thousand {integer_to_words(n % THOUSAND)}"
    else:
        words = _below_thousand(n)
    return " ".join(words.split())


def amount_in_words(amount: Any, currency: str = "INR") -> str:
    """Convert a money amount to words.

    The amount is rounded half-up to two decimals first, so the paise part
    can never round up to 100.
    """
    try:
        major, minor = CURRENCY_UNITS[currency.upper()]
    except KeyError:
        raise ValueError(f"Unsupported currency for amount in words: {currency!r}") from None

    value = quantize_half_up(to_number(amount), 2)
    if value == 0:
        return "Zero Only"

    prefix = ""
    if value < 0:
        prefix, value = "Minus ", value.copy_negate()

    rupees = int(value)
    paise = int((value - rupees) * 100)

    parts: list[str] = []
    if rupees:
        parts.append(f"{integer_to_words(rupees)} {major}")
    if paise:
        if rupees:
            parts.append("and")
        parts.append(f"{integer_to_words(paise)} {minor}")
    parts.append("Only")

    return prefix + " ".join(parts)
