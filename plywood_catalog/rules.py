"""
Catalog conventions.

The decoder is column-agnostic; these are the names the pages and the admin
panel read by convention.
"""

from __future__ import annotations

from typing import Mapping

COLUMNS = (
    "id",
    "category",
    "photo_url",
    "description",
    "price_18mm",
    "price_12mm",
    "price_8mm",
    "price_6mm",
    "stock",
    "visible",
)

PRICE_SIZES = (
    ("18mm", "price_18mm"),
    ("12mm", "price_12mm"),
    ("8mm", "price_8mm"),
    ("6mm", "price_6mm"),
)

# literal values only, no case folding
VISIBLE_VALUES = frozenset({"", "true", "1"})

ADMIN_ACTIONS = frozenset({"upsert", "delete"})

CURRENCY_SYMBOL = "₹"
MISSING_PRICE = "—"

PLACEHOLDER_MARKER = "REPLACE_WITH"


def is_visible(record: Mapping[str, str]) -> bool:
    return record.get("visible", "") in VISIBLE_VALUES


def record_key(record: Mapping[str, str]) -> str:
    return record.get("id") or record.get("category") or ""


def price_label(value: str) -> str:
    if not value:
        return MISSING_PRICE
    return f"{CURRENCY_SYMBOL} {value}"
