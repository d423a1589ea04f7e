# gst_invoice/domain/services/hsn_catalog.py
"""
HSN/SAC catalog: fixed table loaded once at import.

Lookups normalise the code (surrounding and inner whitespace stripped,
upper-cased), so "4404", " 4404 " and "44 04" resolve to the same entry.
Unknown codes return None; callers treat that as a zero-rated item.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Iterable, Iterator, Optional

from gst_invoice.domain.models.hsn import HSNEntry

logger = logging.getLogger("hsn_catalog")

_DEFAULT_ENTRIES: tuple[HSNEntry, ...] = (
    HSNEntry("4401", "Wood in chips or particles; sawdust and wood waste", 2.5, 2.5, 5),
    HSNEntry("4404", "Hoopwood; split poles; piles, pickets and stakes (Casuarina Poles)", 6, 6, 12),
    HSNEntry("4405", "Wood wool; wood flour", 6, 6, 12),
    HSNEntry("4406", "Railway or tramway sleepers of wood", 6, 6, 12),
    HSNEntry("4408", "Sheets for veneering, for plywood", 6, 6, 12),
    HSNEntry("4409", "Bamboo flooring", 6, 6, 12),
    HSNEntry("4601", "Mats, matting and screens of vegetable material", 2.5, 2.5, 5),
    HSNEntry("4823", "Articles made of paper mache", 2.5, 2.5, 5),
    HSNEntry("2202", "Aerated waters, containing added sugar or flavouring", 14, 14, 28, 12),
    HSNEntry("9965", "Goods transport services (GTA)", 2.5, 2.5, 5),
)

DEFAULT_HSN_CODE = "4404"


def normalize_hsn_code(code: Optional[str]) -> str:
    if not code:
        return ""
    return "".join(str(code).split()).upper()


class HSNCatalog:
    """Immutable code -> HSNEntry lookup."""

    def __init__(self, entries: Iterable[HSNEntry]) -> None:
        self._entries: dict[str, HSNEntry] = {}
        for entry in entries:
            key = normalize_hsn_code(entry.code)
            if key in self._entries:
                logger.warning("hsn_catalog: duplicate code %s, keeping first entry", key)
                continue
            self._entries[key] = entry

    def get(self, code: Optional[str]) -> Optional[HSNEntry]:
        return self._entries.get(normalize_hsn_code(code))

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and normalize_hsn_code(code) in self._entries

    def __iter__(self) -> Iterator[HSNEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def descriptions(self) -> list[str]:
        """Distinct non-blank descriptions, sorted (the description suggestion list)."""
        return sorted({e.description for e in self if e.description.strip()})


@lru_cache(maxsize=1)
def default_catalog() -> HSNCatalog:
    return HSNCatalog(_DEFAULT_ENTRIES)


def lookup_hsn(code: Optional[str]) -> Optional[HSNEntry]:
    return default_catalog().get(code)
