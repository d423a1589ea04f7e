"""Shared test fixtures for the GST invoice engine test suite."""

import asyncio

import pytest

from gst_invoice.domain.models.invoice import InvoiceForm, LineItemInput
from gst_invoice.domain.models.profile import SAMPLE_PROFILE
from gst_invoice.domain.services.template_registry import TemplateRegistry


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def sample_profile():
    return SAMPLE_PROFILE


@pytest.fixture
def casuarina_item() -> LineItemInput:
    """30 MTS of casuarina poles (HSN 4404, 12% GST) at 1400."""
    return LineItemInput(
        id="item-1",
        description="Casuarina Poles",
        hsn_code="4404",
        quantity=30,
        uom="MTS",
        rate=1400,
    )


def _form(receiver_gstin: str, receiver_state_code: str, sale_type: str, items) -> InvoiceForm:
    return InvoiceForm(
        company_name="SAMPLE TIMBER TRADERS",
        company_address="12, Market Road, Gudur",
        company_gstin="37AABCS1234F1Z5",
        company_email="accounts@example.com",
        company_phone="9876543210",
        company_state="Andhra Pradesh",
        company_state_code="37",
        invoice_number="INV-2025-001",
        invoice_date="15/01/2025",
        date_of_supply="15/01/2025",
        sale_type=sale_type,
        receiver_name="Buyer & Sons",
        receiver_address="Main Road",
        receiver_gstin=receiver_gstin,
        receiver_state_code=receiver_state_code,
        consignee_name="Buyer & Sons",
        consignee_gstin=receiver_gstin,
        consignee_state_code=receiver_state_code,
        items=items,
        terms_and_conditions="1. Goods once sold cannot be taken back.\n2. Subject to Gudur jurisdiction.",
    )


@pytest.fixture
def intrastate_form(casuarina_item) -> InvoiceForm:
    return _form("37AADCB2230M1ZP", "37", "Intrastate", [casuarina_item])


@pytest.fixture
def interstate_form(casuarina_item) -> InvoiceForm:
    return _form("29AADCB2230M1ZP", "29", "Interstate", [casuarina_item])


@pytest.fixture
def registry() -> TemplateRegistry:
    """Registry over the bundled templates."""
    return TemplateRegistry()
