# gst_invoice/domain/services/state_codes.py
"""
GST state codes.

The first two characters of a GSTIN are the registering state's code; the
sale-type classifier and the validation module compare these codes.
"""

from __future__ import annotations

from typing import Optional

STATE_CODES: dict[str, str] = {
    "01": "Jammu & Kashmir", "02": "Himachal Pradesh", "03": "Punjab",
    "04": "Chandigarh", "05": "Uttarakhand", "06": "Haryana",
    "07": "Delhi", "08": "Rajasthan", "09": "Uttar Pradesh",
    "10": "Bihar", "11": "Sikkim", "12": "Arunachal Pradesh",
    "13": "Nagaland", "14": "Manipur", "15": "Mizoram",
    "16": "Tripura", "17": "Meghalaya", "18": "Assam",
    "19": "West Bengal", "20": "Jharkhand", "21": "Odisha",
    "22": "Chhattisgarh", "23": "Madhya Pradesh", "24": "Gujarat",
    "26": "Dadra & Nagar Haveli and Daman & Diu", "27": "Maharashtra",
    "28": "Andhra Pradesh (Old)", "29": "Karnataka", "30": "Goa",
    "31": "Lakshadweep", "32": "Kerala", "33": "Tamil Nadu",
    "34": "Puducherry", "35": "Andaman & Nicobar", "36": "Telangana",
    "37": "Andhra Pradesh", "38": "Ladakh", "97": "Other Territory",
}


def normalize_state_name(value: Optional[str]) -> str:
    return " ".join((value or "").split()).lower()


def normalize_state_code(value: Optional[str]) -> str:
    return (value or "").strip().upper()


_NAME_LOOKUP: dict[str, str] = {
    normalize_state_name(name): code for code, name in STATE_CODES.items()
}


def state_name(code: Optional[str]) -> str:
    """Map a state code to its name; unknown codes return ''."""
    return STATE_CODES.get(normalize_state_code(code), "")


def state_code(name: Optional[str]) -> str:
    """Map a state name (any case / spacing) to its code; unknown names return ''."""
    return _NAME_LOOKUP.get(normalize_state_name(name), "")


def state_code_from_gstin(gstin: Optional[str]) -> str:
    """Extract the state code (first 2 characters) from a GSTIN."""
    gstin = normalize_state_code(gstin)
    if len(gstin) >= 2 and gstin[:2].isdigit():
        return gstin[:2]
    return ""
