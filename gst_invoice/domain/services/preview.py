# gst_invoice/domain/services/preview.py
"""
Async preview: load a template off the event loop, then render both pages.

Switching templates quickly can leave an older load still in flight. Each
call takes a generation number; a load that finishes after a newer call
started is discarded (the call returns None) instead of overwriting the
newer preview. In-flight loads are not cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from gst_invoice.config.settings import settings
from gst_invoice.domain.models.invoice import InvoiceRecord, InvoiceTotals
from gst_invoice.domain.services.template_engine import render_pages
from gst_invoice.domain.services.template_registry import (
    TemplateLoadError,
    TemplateRegistry,
    TemplateType,
)

logger = logging.getLogger("preview")


class InvoicePreviewer:
    def __init__(self, registry: Optional[TemplateRegistry] = None):
        self.registry = registry or TemplateRegistry()
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def preview(
        self,
        invoice: InvoiceRecord,
        totals: Optional[InvoiceTotals] = None,
        template_type: TemplateType | str | None = None,
    ) -> Optional[dict[str, str]]:
        """Rendered ``{"ORIGINAL": html, "DUPLICATE": html}``, or None if superseded.

        Raises TemplateLoadError when the current (not superseded) load fails.
        """
        self._generation += 1
        generation = self._generation
        name = template_type or settings.DEFAULT_TEMPLATE

        try:
            template = await asyncio.to_thread(self.registry.load, name)
        except TemplateLoadError:
            if generation != self._generation:
                logger.debug("preview: stale load of %s failed after being superseded", name)
                return None
            raise

        if generation != self._generation:
            logger.debug("preview: discarding stale load of %s (gen %d < %d)", name, generation, self._generation)
            return None

        return render_pages(template, invoice, totals)
