"""Tests for template lookup and mode / contact-style resolution."""

import pytest

from gst_invoice.domain.services.template_registry import (
    BUILTIN_TEMPLATES,
    ContactStyle,
    TemplateLoadError,
    TemplateMode,
    TemplateRegistry,
    TemplateType,
    sniff_contact_style,
    sniff_mode,
)


class TestBuiltins:
    def test_every_type_has_a_template(self, registry):
        assert registry.available() == [t.value for t in TemplateType]

    @pytest.mark.parametrize("template_type", list(TemplateType))
    def test_every_builtin_loads(self, registry, template_type):
        template = registry.load(template_type)
        assert template.name == template_type.value
        assert "{{ITEMS_ROWS}}" in template.source
        assert "{{PAGE_TYPE}}" in template.source

    def test_modes_are_fixed_per_type(self, registry):
        assert registry.load("standard").mode is TemplateMode.STANDARD
        assert registry.load("interstate").mode is TemplateMode.INTERSTATE
        assert registry.load("composition").mode is TemplateMode.COMPOSITION
        assert registry.load("professional").contact_style is ContactStyle.DETAIL_SPAN
        assert registry.load("modern").contact_style is ContactStyle.INLINE_STRONG

    def test_name_is_case_insensitive(self, registry):
        assert registry.load(" Modern ").name == "modern"

    def test_describe(self, registry):
        names = [entry["name"] for entry in registry.describe()]
        assert names == list(BUILTIN_TEMPLATES)


class TestLoadErrors:
    def test_unknown_type(self, registry):
        with pytest.raises(TemplateLoadError) as exc:
            registry.load("fancy")
        assert exc.value.not_found
        assert exc.value.name == "fancy"

    def test_missing_file_is_not_a_not_found(self, tmp_path):
        registry = TemplateRegistry(template_dir=tmp_path)
        with pytest.raises(TemplateLoadError) as exc:
            registry.load(TemplateType.STANDARD)
        assert not exc.value.not_found
        assert "standard-template.html" in exc.value.reason

    def test_template_dir_override(self, tmp_path):
        (tmp_path / "modern-template.html").write_text("<p>{{COMPANY_NAME}}</p>", encoding="utf-8")
        template = TemplateRegistry(template_dir=tmp_path).load("modern")
        assert template.source == "<p>{{COMPANY_NAME}}</p>"
        assert template.mode is TemplateMode.DYNAMIC


class TestCustomTemplates:
    def test_register_sniffs_once(self, registry):
        template = registry.register(
            "Letterhead",
            '<table><tr>{{TAX_HEADERS}}</tr></table><span class="detail-label">x</span>',
        )
        assert template.name == "letterhead"
        assert template.mode is TemplateMode.DYNAMIC
        assert template.contact_style is ContactStyle.DETAIL_SPAN
        assert registry.load("letterhead") is template
        assert "letterhead" in registry.available()

    def test_explicit_mode_wins(self, registry):
        template = registry.register("plain", "<p>{{ITEMS_ROWS}}</p>", mode=TemplateMode.INTERSTATE)
        assert template.mode is TemplateMode.INTERSTATE

    def test_custom_shadows_builtin(self, registry):
        registry.register("standard", "<p>mine</p>")
        assert registry.load("standard").source == "<p>mine</p>"
        assert registry.available().count("standard") == 1

    def test_blank_name_rejected(self, registry):
        with pytest.raises(ValueError):
            registry.register("  ", "<p></p>")


class TestSniffing:
    def test_mode_attribute_wins(self):
        source = '<div data-template-mode="composition">{{TAX_HEADERS}}</div>'
        assert sniff_mode(source) is TemplateMode.COMPOSITION

    def test_unknown_mode_attribute_falls_through(self):
        assert sniff_mode('<div data-template-mode="weird"></div>') is TemplateMode.STANDARD

    def test_contact_styles(self):
        assert sniff_contact_style('<div class="contact-inline"></div>') is ContactStyle.INLINE_STRONG
        assert sniff_contact_style("<div></div>") is ContactStyle.PARAGRAPH
