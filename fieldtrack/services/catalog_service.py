from __future__ import annotations

import csv
import io
import math
import re
from typing import List, Optional

from sqlalchemy.orm import Session

from fieldtrack.models.material_catalog import MaterialCatalogItem

EXPORT_HEADERS = [
    "Material Name",
    "SKU",
    "Category",
    "Length",
    "Purchase Cost",
    "Unit Price",
    "Markup %",
]

_COMMON_FRACTIONS = [
    (0.25, "1/4"),
    (0.5, "1/2"),
    (0.75, "3/4"),
    (0.125, "1/8"),
    (0.375, "3/8"),
    (0.625, "5/8"),
    (0.875, "7/8"),
]

_LEADING_FLOAT = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)")
_LEADING_INT = re.compile(r"^\s*[+-]?\d+")


def _leading_float(value: str) -> Optional[float]:
    m = _LEADING_FLOAT.match(value)
    return float(m.group(0)) if m else None


def _leading_int(value: str) -> Optional[int]:
    m = _LEADING_INT.match(value)
    return int(m.group(0)) if m else None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clean_category(category: Optional[str]) -> Optional[str]:
    """Strip the accounting noise ("USD -", "Sales:") from an Account category."""
    if not category:
        return None
    cleaned = re.sub(r"^USD\s*[-:]?\s*", "", category, flags=re.IGNORECASE)
    cleaned = re.sub(r"Sales\s*[-:]?\s*", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"^[-:]\s*", "", cleaned)
    return cleaned.strip() or None


def _feet_inches(feet: int, inches: int) -> str:
    if inches == 0:
        return f"{feet}'"
    return f"{feet}' {inches}\""


def format_length(length: Optional[str], category: Optional[str]) -> str:
    if not length:
        return ""
    if "'" in length or '"' in length:
        return length

    cleaned = length.strip()

    # fastener lengths are inches
    if clean_category(category) == "Fastener":
        num = _leading_float(cleaned)
        if num is not None:
            whole = math.floor(num)
            if num == whole:
                return f'{int(whole)}"'
            decimal = num - whole
            for value, label in _COMMON_FRACTIONS:
                if abs(decimal - value) < 0.01:
                    return f'{int(whole)} {label}"' if whole > 0 else f'{label}"'
            return f'{num}"'
        return f'{length}"'

    if "." in cleaned:
        num = _leading_float(cleaned)
        if num is not None:
            feet = math.floor(num)
            return _feet_inches(int(feet), _round_half_up((num - feet) * 12))

    parts = re.split(r"[\s-]+", cleaned)
    if len(parts) == 2:
        feet, inches = _leading_int(parts[0]), _leading_int(parts[1])
        if feet is not None and inches is not None:
            return _feet_inches(feet, inches)

    num = _leading_float(cleaned)
    if num is not None:
        feet = math.floor(num)
        return _feet_inches(int(feet), _round_half_up((num - feet) * 12))

    return length


def display_name(item: MaterialCatalogItem) -> str:
    if item.part_length:
        return f"{item.material_name} : {item.part_length}"
    return item.material_name


def list_catalog(
    db: Session,
    *,
    search: Optional[str] = None,
    category: Optional[str] = None,
) -> List[MaterialCatalogItem]:
    rows = db.query(MaterialCatalogItem).order_by(MaterialCatalogItem.material_name.asc()).all()

    if category:
        rows = [r for r in rows if clean_category(r.category) == category]

    if search:
        term = search.lower()
        rows = [
            r
            for r in rows
            if term in r.material_name.lower()
            or term in r.sku.lower()
            or term in (r.part_length or "").lower()
        ]

    return sorted(rows, key=lambda r: (r.material_name, r.part_length or ""))


def list_categories(db: Session) -> List[str]:
    cats = set()
    for (category,) in db.query(MaterialCatalogItem.category).filter(MaterialCatalogItem.category.isnot(None)):
        cleaned = clean_category(category)
        # numeric leftovers are costs that landed in Account, not categories
        if cleaned and not re.fullmatch(r"[\d$,.\s]+", cleaned):
            cats.add(cleaned)
    return sorted(cats)


def export_catalog_csv(db: Session) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)

    for item in list_catalog(db):
        purchase_cost = item.purchase_cost or 0.0
        unit_price = item.unit_price or 0.0
        markup = ((unit_price - purchase_cost) / purchase_cost) * 100 if purchase_cost > 0 else 0.0
        writer.writerow(
            [
                item.material_name or "",
                item.sku or "",
                clean_category(item.category) or "",
                format_length(item.part_length, item.category),
                f"{purchase_cost:.2f}",
                f"{unit_price:.2f}",
                f"{markup:.1f}",
            ]
        )

    return buf.getvalue()


def export_raw_rows_csv(db: Session) -> Optional[str]:
    """Rebuild the imported spreadsheet from every stored ``raw_metadata`` row.

    Returns None when the catalog holds no source rows.
    """
    items = (
        db.query(MaterialCatalogItem)
        .order_by(MaterialCatalogItem.category.asc(), MaterialCatalogItem.material_name.asc())
        .all()
    )
    rows = [row for item in items for row in (item.raw_metadata or [])]
    if not rows:
        return None

    headers = list(rows[0].keys())
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow([row.get(h) or "" for h in headers])
    return buf.getvalue()
