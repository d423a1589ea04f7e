"""Tests for rate resolution per sale type."""

import pytest

from gst_invoice.domain.models.hsn import HSNEntry
from gst_invoice.domain.models.invoice import SaleType
from gst_invoice.domain.services.hsn_catalog import default_catalog, lookup_hsn
from gst_invoice.domain.services.tax_rate_resolver import resolve_rates


class TestResolveRates:
    def test_intrastate_uses_cgst_sgst(self):
        rates = resolve_rates(lookup_hsn("4404"), SaleType.INTRASTATE)
        assert (rates.cgst_rate, rates.sgst_rate, rates.igst_rate) == (6, 6, 0)

    def test_interstate_uses_igst(self):
        rates = resolve_rates(lookup_hsn("4404"), SaleType.INTERSTATE)
        assert (rates.cgst_rate, rates.sgst_rate, rates.igst_rate) == (0, 0, 12)

    @pytest.mark.parametrize("sale_type", list(SaleType))
    def test_regimes_are_mutually_exclusive(self, sale_type):
        for entry in default_catalog():
            rates = resolve_rates(entry, sale_type)
            assert not ((rates.cgst_rate or rates.sgst_rate) and rates.igst_rate), entry.code

    def test_igst_only_entry_is_split_for_intrastate(self):
        entry = HSNEntry("X1", "igst only", igst_rate=18)
        rates = resolve_rates(entry, SaleType.INTRASTATE)
        assert rates.cgst_rate == 9
        assert rates.sgst_rate == 9

    def test_split_only_entry_is_summed_for_interstate(self):
        entry = HSNEntry("X2", "split only", cgst_rate=2.5, sgst_rate=2.5)
        assert resolve_rates(entry, SaleType.INTERSTATE).igst_rate == 5

    def test_unknown_entry_is_zero_rated(self):
        rates = resolve_rates(None, SaleType.INTRASTATE)
        assert rates.gst_rate == 0
        assert rates.cess_rate == 0


class TestCess:
    def test_catalog_cess(self):
        assert resolve_rates(lookup_hsn("2202"), SaleType.INTERSTATE).cess_rate == 12

    def test_override_wins(self):
        assert resolve_rates(lookup_hsn("2202"), SaleType.INTERSTATE, cess_override=5).cess_rate == 5

    def test_zero_override_is_honoured(self):
        assert resolve_rates(lookup_hsn("2202"), SaleType.INTERSTATE, cess_override=0).cess_rate == 0

    def test_non_numeric_override_falls_back_to_catalog(self):
        assert resolve_rates(lookup_hsn("2202"), SaleType.INTERSTATE, cess_override="abc").cess_rate == 12

    def test_negative_cess_clamped(self):
        assert resolve_rates(lookup_hsn("4404"), SaleType.INTERSTATE, cess_override=-3).cess_rate == 0

    def test_override_applies_to_unknown_code(self):
        rates = resolve_rates(None, SaleType.INTERSTATE, cess_override=1)
        assert rates.gst_rate == 0
        assert rates.cess_rate == 1
