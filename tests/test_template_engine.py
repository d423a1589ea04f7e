"""Tests for token substitution and the generated table blocks."""

import pytest

from gst_invoice.domain.services.invoice_aggregator import aggregate
from gst_invoice.domain.services.invoice_builder import submit
from gst_invoice.domain.services.template_engine import (
    build_contact_line,
    build_items_rows,
    build_substitutions,
    build_tax_headers,
    render,
    render_pages,
    resolve_mode,
    substitute,
)
from gst_invoice.domain.services.template_registry import ContactStyle, LoadedTemplate, TemplateMode


@pytest.fixture
def intrastate(intrastate_form):
    record = submit(intrastate_form)
    return record, aggregate(record.items)


@pytest.fixture
def interstate(interstate_form):
    record = submit(interstate_form)
    return record, aggregate(record.items)


class TestSubstitute:
    def test_unknown_tokens_are_left_intact(self):
        assert substitute("{{A}} {{MISSING}}", {"A": "x"}) == "x {{MISSING}}"

    def test_values_are_not_expanded_again(self):
        assert substitute("{{A}}", {"A": "{{B}}", "B": "boom"}) == "{{B}}"

    def test_lowercase_braces_are_not_tokens(self):
        assert substitute("{{ a }}", {"a": "x"}) == "{{ a }}"


class TestSubstitutions:
    def test_text_values_are_escaped(self, intrastate):
        record, totals = intrastate
        subs = build_substitutions(record, totals, "ORIGINAL")
        assert subs["RECEIVER_NAME"] == "Buyer &amp; Sons"
        assert subs["PAGE_TYPE"] == "ORIGINAL"

    def test_terms_keep_line_breaks(self, intrastate):
        record, totals = intrastate
        subs = build_substitutions(record, totals, "DUPLICATE")
        assert subs["TERMS_AND_CONDITIONS"] == (
            "1. Goods once sold cannot be taken back.<br>2. Subject to Gudur jurisdiction."
        )

    def test_totals(self, intrastate):
        record, totals = intrastate
        subs = build_substitutions(record, totals, "ORIGINAL")
        assert subs["TOTAL_TAXABLE_VALUE"] == "42000.00"
        assert subs["TOTAL_CGST"] == subs["TOTAL_SGST"] == "2520.00"
        assert subs["TOTAL_IGST"] == "0.00"
        assert subs["GRAND_TOTAL"] == "47040.00"
        assert subs["AMOUNT_IN_WORDS"] == totals.amount_in_words

    @pytest.mark.parametrize("label", ["", "original", "TRIPLICATE"])
    def test_bad_page_label(self, intrastate, label):
        record, totals = intrastate
        with pytest.raises(ValueError):
            build_substitutions(record, totals, label)

    def test_composition_collects_no_tax(self, intrastate):
        record, totals = intrastate
        subs = build_substitutions(record, totals, "ORIGINAL", mode=TemplateMode.COMPOSITION)
        assert subs["GRAND_TOTAL"] == "42000.00"
        assert subs["TOTAL_CGST"] == subs["TOTAL_SGST"] == subs["TOTAL_TAX"] == "0.00"
        assert subs["AMOUNT_IN_WORDS"] == "Forty Two Thousand Rupees Only"
        assert subs["TAX_HEADERS"] == ""
        assert subs["TAX_TOTALS"] == ""


class TestTaxBlocks:
    def test_standard_has_all_columns(self, intrastate):
        record, _ = intrastate
        headers = build_tax_headers(record, TemplateMode.STANDARD)
        for label in ("CGST %", "SGST Amt", "IGST %", "Cess Amt"):
            assert label in headers
        row = build_items_rows(record, TemplateMode.STANDARD)
        assert row.count("<td") == 6 + 8 + 1

    def test_dynamic_follows_sale_type(self, intrastate, interstate):
        intra, _ = intrastate
        inter, _ = interstate
        assert "CGST" in build_tax_headers(intra, TemplateMode.DYNAMIC)
        assert "IGST" not in build_tax_headers(intra, TemplateMode.DYNAMIC)
        assert "IGST" in build_tax_headers(inter, TemplateMode.DYNAMIC)
        assert "CGST" not in build_tax_headers(inter, TemplateMode.DYNAMIC)

    def test_interstate_row(self, interstate):
        record, _ = interstate
        row = build_items_rows(record, TemplateMode.INTERSTATE)
        assert "5040.00" in row
        assert "<strong>47040.00</strong>" in row

    def test_composition_row_total_is_taxable_value(self, intrastate):
        record, _ = intrastate
        row = build_items_rows(record, TemplateMode.COMPOSITION)
        assert "<strong>42000.00</strong>" in row
        assert "2520.00" not in row

    def test_item_row_escapes_description(self, intrastate_form):
        item = intrastate_form.items[0].model_copy(update={"description": "Poles <8ft>"})
        record = submit(intrastate_form.model_copy(update={"items": [item]}))
        assert "Poles &lt;8ft&gt;" in build_items_rows(record, TemplateMode.DYNAMIC)


class TestContactLine:
    def test_styles(self, intrastate):
        record, _ = intrastate
        assert build_contact_line(record, ContactStyle.PARAGRAPH) == (
            "<p>Email: accounts@example.com</p><p>Phone: 9876543210</p>"
        )
        assert build_contact_line(record, ContactStyle.INLINE_STRONG) == (
            "<strong>Email:</strong> accounts@example.com | <strong>Phone:</strong> 9876543210"
        )
        assert 'class="detail-label">Phone:</span>' in build_contact_line(record, ContactStyle.DETAIL_SPAN)

    def test_blank_contact(self, intrastate):
        record, _ = intrastate
        record = record.model_copy(update={"company_email": "", "company_phone": " "})
        assert build_contact_line(record, ContactStyle.PARAGRAPH) == ""

    def test_only_phone(self, intrastate):
        record, _ = intrastate
        record = record.model_copy(update={"company_email": ""})
        assert build_contact_line(record, ContactStyle.INLINE_STRONG) == "<strong>Phone:</strong> 9876543210"


class TestRender:
    def test_render_replaces_known_tokens(self, intrastate):
        record, totals = intrastate
        html = render("<h1>{{COMPANY_NAME}}</h1>{{CUSTOM_FIELD}}", record, totals, "ORIGINAL")
        assert html == "<h1>SAMPLE TIMBER TRADERS</h1>{{CUSTOM_FIELD}}"

    @pytest.mark.parametrize("name", ["standard", "professional", "composition", "interstate", "modern"])
    def test_bundled_templates_render_both_pages(self, registry, intrastate, name):
        record, _ = intrastate
        pages = render_pages(registry.load(name), record)
        assert list(pages) == ["ORIGINAL", "DUPLICATE"]
        assert "ORIGINAL" in pages["ORIGINAL"]
        assert "DUPLICATE" in pages["DUPLICATE"]
        for page in pages.values():
            assert "{{" not in page
            assert "INV-2025-001" in page

    def test_custom_template(self, interstate):
        record, totals = interstate
        template = LoadedTemplate(
            name="mini",
            source="<tr>{{TAX_HEADERS}}</tr>|{{GRAND_TOTAL}}",
            mode=TemplateMode.DYNAMIC,
            contact_style=ContactStyle.PARAGRAPH,
        )
        pages = render_pages(template, record, totals)
        assert pages["ORIGINAL"].endswith("|47040.00")
        assert "IGST" in pages["DUPLICATE"]


class TestInterstateLayoutFallback:
    def test_intrastate_invoice_keeps_its_cgst_sgst(self, registry, intrastate):
        record, _ = intrastate
        page = render_pages(registry.load("interstate"), record)["ORIGINAL"]
        assert "2520.00" in page
        assert "<th class=\"text-right\">CGST</th>" in page
        assert "IGST %" not in page
        assert "Intrastate Supply" in page

    def test_blocks_fall_back_to_dynamic(self, intrastate):
        record, totals = intrastate
        assert resolve_mode(record, TemplateMode.INTERSTATE) is TemplateMode.DYNAMIC
        assert build_tax_headers(record, TemplateMode.INTERSTATE) == build_tax_headers(record, TemplateMode.DYNAMIC)
        subs = build_substitutions(record, totals, "ORIGINAL", mode=TemplateMode.INTERSTATE)
        assert subs["TAX_TOTALS"].count("2520.00") == 2

    def test_interstate_invoice_keeps_igst_layout(self, registry, interstate):
        record, _ = interstate
        assert resolve_mode(record, TemplateMode.INTERSTATE) is TemplateMode.INTERSTATE
        page = render_pages(registry.load("interstate"), record)["ORIGINAL"]
        assert "IGST %" in page
        assert "Interstate Supply" in page


class TestCompositionCurrency:
    def test_words_follow_totals_currency(self, intrastate):
        record, _ = intrastate
        totals = aggregate(record.items, "USD")
        subs = build_substitutions(record, totals, "ORIGINAL", mode=TemplateMode.COMPOSITION)
        assert subs["AMOUNT_IN_WORDS"] == "Forty Two Thousand Dollars Only"
