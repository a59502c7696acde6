"""
Row normalization for product imports.

Turns one loosely formatted tabular row into a canonical product candidate,
filling the catalog defaults.
"""

import re
from dataclasses import dataclass
from typing import Mapping, Optional

from inventory_backend.db.product import MAX_STOCK

DEFAULT_UNIT = "pcs"
DEFAULT_CATEGORY = "Uncategorized"
IN_STOCK = "In Stock"
OUT_OF_STOCK = "Out of Stock"

_LEADING_INT = re.compile(r"^[+-]?[0-9]+")


class RowRejected(Exception):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


@dataclass(frozen=True)
class ProductCandidate:
    name: str
    unit: str
    category: str
    brand: str
    stock: int
    status: str
    image: Optional[str] = None


def _field(raw: Mapping[str, Optional[str]], key: str) -> str:
    v = raw.get(key)
    if v is None:
        return ""
    return str(v).strip()


def parse_stock(value: Optional[str]) -> int:
    """Best-effort integer parse: leading digits win, anything else is 0.

    "12", " 12 ", "12 boxes" and "12.9" all give 12. Negative values clamp to 0
    and values above MAX_STOCK clamp to MAX_STOCK.
    """
    m = _LEADING_INT.match((value or "").strip())
    if not m:
        return 0
    text = m.group(0)
    if text.startswith("-"):
        return 0
    digits = text.lstrip("+").lstrip("0") or "0"
    # int() refuses very long digit strings, so cap by length first
    if len(digits) > len(str(MAX_STOCK)):
        return MAX_STOCK
    return min(int(digits), MAX_STOCK)


def derive_status(stock: int) -> str:
    return IN_STOCK if stock > 0 else OUT_OF_STOCK


def canonical_keys(raw: Mapping) -> dict[str, Optional[str]]:
    """Header names are matched trimmed and lower-cased."""
    out: dict[str, Optional[str]] = {}
    for k, v in raw.items():
        if not isinstance(k, str):
            continue
        if v is not None and not isinstance(v, str):
            v = str(v)
        out[k.strip().lower()] = v
    return out


def normalize_row(raw: Mapping[str, Optional[str]]) -> ProductCandidate:
    row = canonical_keys(raw)

    name = _field(row, "name")
    if not name:
        raise RowRejected("missing name")

    stock = parse_stock(row.get("stock"))

    return ProductCandidate(
        name=name,
        unit=_field(row, "unit") or DEFAULT_UNIT,
        category=_field(row, "category") or DEFAULT_CATEGORY,
        brand=_field(row, "brand"),
        stock=stock,
        status=_field(row, "status") or derive_status(stock),
        image=_field(row, "image") or None,
    )
