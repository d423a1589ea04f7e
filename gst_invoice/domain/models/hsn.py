# gst_invoice/domain/models/hsn.py
"""Domain dataclass for one HSN/SAC catalog row."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class HSNEntry:
    """Default rates (percent) for one classification code."""

    code: str
    description: str
    cgst_rate: float = 0.0
    sgst_rate: float = 0.0
    igst_rate: float = 0.0
    cess_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "description": self.description,
            "cgst_rate": self.cgst_rate,
            "sgst_rate": self.sgst_rate,
            "igst_rate": self.igst_rate,
            "cess_rate": self.cess_rate,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HSNEntry:
        return cls(
            code=str(data["code"]),
            description=str(data.get("description", "")),
            cgst_rate=float(data.get("cgst_rate", 0) or 0),
            sgst_rate=float(data.get("sgst_rate", 0) or 0),
            igst_rate=float(data.get("igst_rate", 0) or 0),
            cess_rate=float(data.get("cess_rate", 0) or 0),
        )
