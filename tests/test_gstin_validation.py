"""Tests for GSTIN / PAN / contact validation."""

import pytest

from gst_invoice.domain.services.gstin_validation import (
    is_valid_date,
    is_valid_email,
    is_valid_gstin,
    is_valid_gstin_or_unregistered,
    is_valid_pan,
    is_valid_phone,
)


class TestGstin:
    def test_valid(self):
        assert is_valid_gstin("37AABCS1234F1Z5")
        assert is_valid_gstin(" 27aabcu9603r1zm ")

    @pytest.mark.parametrize("gstin", ["", None, "37AABCS1234F1Z", "37AABCS1234F0Z5", "3XAABCS1234F1Z5", "UNREGISTERED"])
    def test_invalid(self, gstin):
        assert not is_valid_gstin(gstin)

    def test_unregistered_accepted_for_counterparties(self):
        assert is_valid_gstin_or_unregistered("UNREGISTERED")
        assert is_valid_gstin_or_unregistered("unregistered")
        assert is_valid_gstin_or_unregistered("29AADCB2230M1ZP")
        assert not is_valid_gstin_or_unregistered("")

    def test_pan(self):
        assert is_valid_pan("AABCS1234F")
        assert not is_valid_pan("AABC1234F")


class TestContact:
    def test_phone(self):
        assert is_valid_phone("9876543210")
        assert is_valid_phone("98765 43210")
        assert is_valid_phone("(987) 654-3210")
        assert not is_valid_phone("1234567890")
        assert not is_valid_phone("98765")

    def test_email(self):
        assert is_valid_email("accounts@example.com")
        assert not is_valid_email("accounts@example")
        assert not is_valid_email("")


class TestDate:
    def test_valid(self):
        assert is_valid_date("29/02/2024")

    @pytest.mark.parametrize("value", ["29/02/2025", "31/04/2025", "2025-01-15", "1/1/2025", ""])
    def test_invalid(self, value):
        assert not is_valid_date(value)
