# gst_invoice/domain/models/profile.py
"""
Company profiles. Storage lives outside the engine; a profile only supplies
default company fields and terms for a new invoice.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_TERMS = (
    "1. This is an electronically generated invoice.\n"
    "2. All disputes are subject to local jurisdiction only.\n"
    "3. If the Consignee makes any Inter State Sale, he has to pay GST himself.\n"
    "4. Goods once sold cannot be taken back or exchanged.\n"
    "5. Payment terms as per agreement between buyer and seller."
)


class ProfileCompanyDetails(BaseModel):
    company_name: str
    address: str = ""
    city: str = ""
    state: str = ""
    state_code: str = ""
    pincode: str = ""
    gstin: str = ""
    email: str = ""
    phone: str = ""


class Profile(BaseModel):
    id: str = Field(min_length=1)
    name: str
    company_details: ProfileCompanyDetails
    terms_and_conditions: str = DEFAULT_TERMS


SAMPLE_PROFILE = Profile(
    id="sample",
    name="Sample Trader",
    company_details=ProfileCompanyDetails(
        company_name="SAMPLE TIMBER TRADERS",
        address="12, Market Road, Gudur, Tirupati Dist., Andhra Pradesh - 524101",
        city="Gudur",
        state="Andhra Pradesh",
        state_code="37",
        pincode="524101",
        gstin="37AABCS1234F1Z5",
        email="accounts@example.com",
        phone="9876543210",
    ),
)
