# gst_invoice/domain/services/template_registry.py
"""
Invoice template registry.

Each template type maps to an HTML file plus two rendering decisions made
here, once, instead of by inspecting the template at render time:

    TemplateMode:  which tax-column layout the row generators produce
    ContactStyle:  how the company email / phone line is marked up

Custom templates registered at runtime are sniffed for both decisions when
they are registered.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from gst_invoice.config.settings import settings

logger = logging.getLogger("template_registry")


class TemplateType(str, Enum):
    STANDARD = "standard"
    PROFESSIONAL = "professional"
    COMPOSITION = "composition"
    INTERSTATE = "interstate"
    MODERN = "modern"


class TemplateMode(str, Enum):
    STANDARD = "standard"        # all four tax column pairs on every row
    DYNAMIC = "dynamic"          # IGST + Cess, or CGST + SGST + Cess
    INTERSTATE = "interstate"    # IGST only
    COMPOSITION = "composition"  # bill of supply, no tax columns


class ContactStyle(str, Enum):
    PARAGRAPH = "paragraph"
    DETAIL_SPAN = "detail_span"
    INLINE_STRONG = "inline_strong"


class TemplateLoadError(Exception):
    """Template could not be resolved or read. Render must not be attempted."""

    def __init__(self, name: str, reason: str, not_found: bool = False):
        self.name = name
        self.reason = reason
        self.not_found = not_found
        super().__init__(f"Failed to load template {name!r}: {reason}")


@dataclass(frozen=True)
class TemplateSpec:
    name: str
    title: str
    filename: str
    mode: TemplateMode
    contact_style: ContactStyle

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "title": self.title,
            "mode": self.mode.value,
            "contact_style": self.contact_style.value,
        }


@dataclass(frozen=True)
class LoadedTemplate:
    name: str
    source: str
    mode: TemplateMode
    contact_style: ContactStyle


BUILTIN_TEMPLATES: dict[str, TemplateSpec] = {
    spec.name: spec
    for spec in (
        TemplateSpec(
            TemplateType.STANDARD.value, "Standard (detailed tax columns)",
            "standard-template.html", TemplateMode.STANDARD, ContactStyle.PARAGRAPH,
        ),
        TemplateSpec(
            TemplateType.PROFESSIONAL.value, "Professional",
            "professional-template.html", TemplateMode.DYNAMIC, ContactStyle.DETAIL_SPAN,
        ),
        TemplateSpec(
            TemplateType.COMPOSITION.value, "Composition (Bill of Supply)",
            "composition-template.html", TemplateMode.COMPOSITION, ContactStyle.PARAGRAPH,
        ),
        TemplateSpec(
            TemplateType.INTERSTATE.value, "Interstate (IGST)",
            "interstate-template.html", TemplateMode.INTERSTATE, ContactStyle.INLINE_STRONG,
        ),
        TemplateSpec(
            TemplateType.MODERN.value, "Modern",
            "modern-template.html", TemplateMode.DYNAMIC, ContactStyle.INLINE_STRONG,
        ),
    )
}

_MODE_MARKER = re.compile(r'data-template-mode="([a-z_]+)"')


def _normalize_name(name: TemplateType | str) -> str:
    if isinstance(name, TemplateType):
        return name.value
    return str(name or "").strip().lower()


def sniff_mode(source: str) -> TemplateMode:
    """Pick a mode for a custom template.

    An explicit ``data-template-mode="..."`` attribute wins; otherwise a
    ``{{TAX_HEADERS}}`` slot means the dynamic column block.
    """
    match = _MODE_MARKER.search(source)
    if match:
        try:
            return TemplateMode(match.group(1))
        except ValueError:
            logger.warning("template_registry: unknown data-template-mode %r", match.group(1))
    if "{{TAX_HEADERS}}" in source:
        return TemplateMode.DYNAMIC
    return TemplateMode.STANDARD


def sniff_contact_style(source: str) -> ContactStyle:
    if 'class="detail-label"' in source:
        return ContactStyle.DETAIL_SPAN
    if 'class="contact-inline"' in source:
        return ContactStyle.INLINE_STRONG
    return ContactStyle.PARAGRAPH


class TemplateRegistry:
    """Template type -> template text + rendering decisions."""

    def __init__(self, template_dir: Optional[Path | str] = None):
        self.template_dir = Path(template_dir) if template_dir else Path(settings.TEMPLATE_DIR)
        self._specs: dict[str, TemplateSpec] = dict(BUILTIN_TEMPLATES)
        self._custom: dict[str, LoadedTemplate] = {}

    def available(self) -> list[str]:
        return [*self._specs, *(name for name in self._custom if name not in self._specs)]

    def describe(self) -> list[dict]:
        entries = [spec.to_dict() for spec in self._specs.values()]
        for name, template in self._custom.items():
            if name in self._specs:
                continue
            entries.append({
                "name": name,
                "title": name,
                "mode": template.mode.value,
                "contact_style": template.contact_style.value,
            })
        return entries

    def spec(self, name: TemplateType | str) -> TemplateSpec:
        key = _normalize_name(name)
        try:
            return self._specs[key]
        except KeyError:
            raise TemplateLoadError(key, "unknown template type", not_found=True) from None

    def register(
        self,
        name: str,
        source: str,
        mode: Optional[TemplateMode] = None,
        contact_style: Optional[ContactStyle] = None,
    ) -> LoadedTemplate:
        """Add a custom template held in memory.

        Mode and contact style not given explicitly are sniffed here, once.
        A custom template shadows a built-in of the same name.
        """
        key = _normalize_name(name)
        if not key:
            raise ValueError("Template name must not be blank")
        template = LoadedTemplate(
            name=key,
            source=source,
            mode=mode or sniff_mode(source),
            contact_style=contact_style or sniff_contact_style(source),
        )
        self._custom[key] = template
        logger.info(
            "template_registry: registered %s (mode=%s, contact=%s)",
            key, template.mode.value, template.contact_style.value,
        )
        return template

    def load(self, name: TemplateType | str) -> LoadedTemplate:
        key = _normalize_name(name)
        if key in self._custom:
            return self._custom[key]

        spec = self.spec(key)
        path = self.template_dir / spec.filename
        try:
            source = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("template_registry: cannot read %s: %s", path, exc)
            raise TemplateLoadError(key, f"cannot read {spec.filename}") from exc

        return LoadedTemplate(
            name=spec.name,
            source=source,
            mode=spec.mode,
            contact_style=spec.contact_style,
        )
