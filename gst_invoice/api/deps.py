# gst_invoice/api/deps.py
"""
Shared FastAPI dependencies used across route modules.

The template registry is built once per process; tests swap it out through
``app.dependency_overrides[get_template_registry]``.
"""

import logging
from functools import lru_cache

from gst_invoice.domain.services.hsn_catalog import HSNCatalog, default_catalog
from gst_invoice.domain.services.template_registry import TemplateRegistry

logger = logging.getLogger("api.deps")


@lru_cache(maxsize=1)
def get_template_registry() -> TemplateRegistry:
    registry = TemplateRegistry()
    logger.info("api.deps: template registry at %s", registry.template_dir)
    return registry


def get_catalog() -> HSNCatalog:
    return default_catalog()
