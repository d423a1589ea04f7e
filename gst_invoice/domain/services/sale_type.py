# gst_invoice/domain/services/sale_type.py
"""
Interstate vs intrastate classification.

Same state code on both sides -> CGST + SGST (intrastate); different codes
-> IGST (interstate). A missing code defaults to interstate.

SaleTypeTracker keeps the user's manual choice from being overwritten when
GSTIN/state-code edits would derive a different value. The manual flag
clears on its own once the codes agree with the chosen value again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from gst_invoice.domain.models.diagnostics import Diagnostic, Severity
from gst_invoice.domain.models.invoice import SaleType
from gst_invoice.domain.services.state_codes import normalize_state_code

logger = logging.getLogger("sale_type")


def classify(
    company_state_code: Optional[str],
    counterparty_state_code: Optional[str],
    override: Optional[SaleType | str] = None,
) -> SaleType:
    """Decide the tax regime for a pair of state codes.

    An explicit *override* (the user picked a sale type) wins.
    """
    chosen = SaleType.parse(override)
    if chosen is not None:
        return chosen

    company = normalize_state_code(company_state_code)
    counterparty = normalize_state_code(counterparty_state_code)
    if company and counterparty:
        return SaleType.INTRASTATE if company == counterparty else SaleType.INTERSTATE
    return SaleType.INTERSTATE


@dataclass
class SaleTypeTracker:
    """Stored sale type plus whether the user set it by hand."""

    sale_type: SaleType = SaleType.INTERSTATE
    manually_set: bool = False

    @classmethod
    def from_stored(
        cls,
        sale_type: Optional[SaleType | str],
        company_state_code: Optional[str],
        counterparty_state_code: Optional[str],
    ) -> SaleTypeTracker:
        """Restore a tracker for a saved record.

        A stored value that disagrees with its own state codes can only have
        come from a manual pick, so it starts flagged manual.
        """
        stored = SaleType.parse(sale_type)
        if stored is None:
            return cls(sale_type=classify(company_state_code, counterparty_state_code))

        tracker = cls(sale_type=stored)
        if _both_present(company_state_code, counterparty_state_code):
            tracker.manually_set = stored is not classify(company_state_code, counterparty_state_code)
        return tracker

    def choose(self, sale_type: SaleType | str) -> None:
        chosen = SaleType.parse(sale_type)
        if chosen is None:
            raise ValueError(f"Unknown sale type: {sale_type!r}")
        self.sale_type = chosen
        self.manually_set = True

    def reset(self) -> None:
        self.sale_type = SaleType.INTERSTATE
        self.manually_set = False

    def sync(
        self,
        company_state_code: Optional[str],
        counterparty_state_code: Optional[str],
    ) -> Optional[Diagnostic]:
        """Re-derive after a state-code change.

        Returns an ``info`` notice when the stored value was auto-updated, a
        ``warning`` when a manual choice disagrees with the codes, or None.
        """
        if not _both_present(company_state_code, counterparty_state_code):
            return None

        derived = classify(company_state_code, counterparty_state_code)

        if self.manually_set:
            if derived is self.sale_type:
                self.manually_set = False
                logger.debug("sale_type: manual choice %s realigned with state codes", derived.value)
                return None
            return Diagnostic(
                field="sale_type",
                message=(
                    f"Sale type mismatch: set as {self.sale_type.value} "
                    f"but state codes indicate {derived.value}"
                ),
                severity=Severity.WARNING,
                suggestion=f"Consider changing to {derived.value} or verify state codes",
                value={"stored": self.sale_type.value, "derived": derived.value},
            )

        if derived is not self.sale_type:
            self.sale_type = derived
            logger.info("sale_type: auto-updated to %s", derived.value)
            return Diagnostic(
                field="sale_type",
                message=f"Sale type updated to {derived.value}",
                severity=Severity.INFO,
            )
        return None


def _both_present(a: Optional[str], b: Optional[str]) -> bool:
    return bool(normalize_state_code(a)) and bool(normalize_state_code(b))
