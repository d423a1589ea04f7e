# gst_invoice/domain/services/gstin_validation.py

import re
from datetime import datetime

from gst_invoice.domain.models.invoice import UNREGISTERED

PAN_REGEX = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
GSTIN_REGEX = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")
EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DATE_REGEX = re.compile(r"^(0[1-9]|[12][0-9]|3[01])/(0[1-9]|1[0-2])/\d{4}$")

_INDIAN_PHONE_REGEX = re.compile(r"^[6-9]\d{9}$")


def is_valid_pan(pan: str | None) -> bool:
    if not pan:
        return False
    pan = pan.strip().upper()
    return bool(PAN_REGEX.match(pan))


def is_valid_gstin(gstin: str | None) -> bool:
    if not gstin:
        return False
    gstin = gstin.strip().upper()
    if not GSTIN_REGEX.match(gstin):
        return False

    # PAN sits at chars 3-12
    pan_part = gstin[2:12]
    return is_valid_pan(pan_part)


def is_valid_gstin_or_unregistered(gstin: str | None) -> bool:
    """Counterparties without a registration carry the UNREGISTERED placeholder."""
    if gstin and gstin.strip().upper() == UNREGISTERED:
        return True
    return is_valid_gstin(gstin)


# ---------------------------------------------------------------------------
# Contact / date helpers
# ---------------------------------------------------------------------------

def is_valid_email(email: str | None) -> bool:
    if not email:
        return False
    return bool(EMAIL_REGEX.match(email.strip()))


def is_valid_phone(phone: str | None) -> bool:
    """10-digit Indian number starting 6-9; spaces, dashes and brackets ignored."""
    if not phone:
        return False
    digits = re.sub(r"[\s\-()]", "", phone)
    return bool(_INDIAN_PHONE_REGEX.match(digits))


def is_valid_date(value: str | None) -> bool:
    """DD/MM/YYYY that names a real calendar day (no 31/02)."""
    if not value or not DATE_REGEX.match(value.strip()):
        return False
    try:
        datetime.strptime(value.strip(), "%d/%m/%Y")
    except ValueError:
        return False
    return True
