"""Tests for invoice diagnostics."""

from gst_invoice.domain.models.diagnostics import Severity
from gst_invoice.domain.models.invoice import ComputedLineItem, LineItemInput, SaleType
from gst_invoice.domain.services.invoice_builder import submit
from gst_invoice.domain.services.invoice_validation import (
    has_blocking_errors,
    validate_invoice,
    validate_item,
)
from gst_invoice.domain.services.line_item_calculator import compute_item


def _fields(diagnostics, severity=None):
    return {d.field for d in diagnostics if severity is None or d.severity is severity}


class TestValidateInvoice:
    def test_clean_intrastate_invoice(self, intrastate_form):
        diagnostics = validate_invoice(submit(intrastate_form))
        assert diagnostics == []
        assert not has_blocking_errors(diagnostics)

    def test_clean_interstate_invoice(self, interstate_form):
        assert validate_invoice(submit(interstate_form)) == []

    def test_company_state_code_mismatch(self, intrastate_form):
        form = intrastate_form.model_copy(update={"company_state_code": "36", "receiver_state_code": "36"})
        diagnostics = validate_invoice(submit(form))
        mismatch = [d for d in diagnostics if d.field == "company_state_code"]
        assert mismatch[0].severity is Severity.ERROR
        assert mismatch[0].suggestion == "State code should be 37 to match GSTIN"

    def test_unregistered_receiver_is_valid(self, intrastate_form):
        form = intrastate_form.model_copy(update={"receiver_gstin": "UNREGISTERED"})
        assert "receiver_gstin" not in _fields(validate_invoice(submit(form)))

    def test_required_fields(self, intrastate_form):
        form = intrastate_form.model_copy(update={
            "company_name": "",
            "receiver_name": " ",
            "invoice_number": "",
            "invoice_date": "31/02/2025",
            "items": [],
        })
        errors = _fields(validate_invoice(submit(form)), Severity.ERROR)
        assert {"company_name", "receiver_name", "invoice_number", "invoice_date", "items"} <= errors

    def test_bad_phone_is_only_a_warning(self, intrastate_form):
        form = intrastate_form.model_copy(update={"company_phone": "12345"})
        diagnostics = validate_invoice(submit(form))
        assert _fields(diagnostics) == {"company_phone"}
        assert not has_blocking_errors(diagnostics)

    def test_bad_email_is_an_error(self, intrastate_form):
        form = intrastate_form.model_copy(update={"company_email": "not-an-email"})
        assert "company_email" in _fields(validate_invoice(submit(form)), Severity.ERROR)

    def test_sale_type_mismatch_is_a_warning(self, intrastate_form):
        form = intrastate_form.model_copy(update={"sale_type": "Interstate"})
        record = submit(form)
        diagnostics = validate_invoice(record)
        assert record.sale_type is SaleType.INTERSTATE
        sale_type = [d for d in diagnostics if d.field == "sale_type"]
        assert sale_type[0].severity is Severity.WARNING
        assert "state codes indicate Intrastate" in sale_type[0].message
        assert not has_blocking_errors(diagnostics)


class TestValidateItem:
    def test_zero_rated_unknown_hsn_is_info(self):
        item = compute_item(LineItemInput(id="x", description="Misc", hsn_code="9999", quantity=1, rate=10), SaleType.INTRASTATE)
        diagnostics = validate_item(item, SaleType.INTRASTATE)
        assert [d.severity for d in diagnostics] == [Severity.INFO]

    def test_non_positive_quantity_and_rate(self):
        item = compute_item(LineItemInput(id="x", description="Poles", hsn_code="4404", quantity=0, rate=-5), SaleType.INTRASTATE)
        errors = _fields(validate_item(item, SaleType.INTRASTATE), Severity.ERROR)
        assert errors == {"item.x.quantity", "item.x.rate"}

    def _item(self, **rates) -> ComputedLineItem:
        base = dict(
            id="x", description="Poles", hsn_code="4404", quantity=1, uom="MTS", rate=100,
            taxable_value=100, cgst_rate=0, cgst_amount=0, sgst_rate=0, sgst_amount=0,
            igst_rate=0, igst_amount=0, cess_rate=0, cess_amount=0, total_amount=100,
        )
        base.update(rates)
        return ComputedLineItem(**base)

    def test_unequal_cgst_sgst(self):
        diagnostics = validate_item(self._item(cgst_rate=6, sgst_rate=9), SaleType.INTRASTATE)
        assert "item.x.taxes" in _fields(diagnostics, Severity.ERROR)

    def test_cross_regime_rates_warn(self):
        assert "item.x.taxes" in _fields(
            validate_item(self._item(cgst_rate=6, sgst_rate=6), SaleType.INTERSTATE), Severity.WARNING
        )
        assert "item.x.igst_rate" in _fields(
            validate_item(self._item(cgst_rate=6, sgst_rate=6, igst_rate=12), SaleType.INTRASTATE), Severity.WARNING
        )

    def test_taxable_value_drift(self):
        diagnostics = validate_item(self._item(igst_rate=12, taxable_value=100.5), SaleType.INTERSTATE)
        assert "item.x.taxable_value" in _fields(diagnostics, Severity.WARNING)

    def test_diagnostic_to_dict(self):
        diagnostics = validate_item(self._item(igst_rate=12, taxable_value=100.5), SaleType.INTERSTATE)
        data = diagnostics[0].to_dict()
        assert data["severity"] == "warning"
        assert data["value"] == {"expected": 100, "actual": 100.5}
