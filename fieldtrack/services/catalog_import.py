"""Spreadsheet import into ``materials_catalog``.

Rows are grouped by SKU: the first row of a SKU supplies the catalog fields and
every row (first included) is kept verbatim in ``raw_metadata`` so the original
sheet can be rebuilt on export.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from fieldtrack.core.config import catalog_batch_size
from fieldtrack.core.errors import MissingColumnsError, ValidationError
from fieldtrack.models.material_catalog import MaterialCatalogItem

logger = logging.getLogger(__name__)

_USD_PREFIX = re.compile(r"USD\s*", re.IGNORECASE)
_NUMERIC_ONLY = re.compile(r"^[\d$,.\s]+$")


class ImportMode(str, Enum):
    REPLACE = "replace"
    ADD = "add"


@dataclass(frozen=True)
class ColumnMap:
    item_name: int
    sku: int
    rate: Optional[int] = None
    purchase_rate: Optional[int] = None
    account: Optional[int] = None
    part_length: Optional[int] = None


@dataclass(frozen=True)
class AccountValue:
    category: Optional[str] = None
    cost: Optional[float] = None


@dataclass
class ParsedCatalog:
    headers: List[str]
    records: List[Dict[str, Any]] = field(default_factory=list)
    total_rows: int = 0


@dataclass(frozen=True)
class ImportResult:
    mode: ImportMode
    total_rows: int
    unique_materials: int
    imported: int


def parse_csv_line(line: str) -> List[str]:
    """Split on commas outside double quotes.

    Quote characters only toggle quoting; a doubled quote is not unescaped.
    """
    result: List[str] = []
    current: List[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    result.append("".join(current).strip())
    return result


def _clean_cell(value: str) -> str:
    return value.replace('"', "").strip()


def _find(headers: Sequence[str], predicate) -> Optional[int]:
    for idx, header in enumerate(headers):
        if predicate(header.lower()):
            return idx
    return None


def detect_columns(headers: Sequence[str]) -> ColumnMap:
    item_name = _find(headers, lambda h: "item" in h and "name" in h)
    sku = _find(headers, lambda h: h == "sku")

    if item_name is None or sku is None:
        raise MissingColumnsError(headers)

    return ColumnMap(
        item_name=item_name,
        sku=sku,
        rate=_find(headers, lambda h: h == "rate"),
        purchase_rate=_find(headers, lambda h: "purchase" in h and "rate" in h),
        account=_find(headers, lambda h: h == "account"),
        part_length=_find(headers, lambda h: "cf.part" in h and "length" in h),
    )


def parse_price(value: Optional[str]) -> float:
    if not value:
        return 0.0
    cleaned = _USD_PREFIX.sub("", value, count=1).replace("$", "").replace(",", "").strip()
    match = re.match(r"^[+-]?(\d+\.?\d*|\.\d+)", cleaned)
    if match is None:
        return 0.0
    return float(match.group(0))


def classify_account_value(raw: Optional[str]) -> AccountValue:
    """An Account cell holds either a category name or a purchase cost."""
    if not raw or not raw.strip():
        return AccountValue()

    trimmed = raw.strip()
    amount = parse_price(trimmed)
    without_prefix = _USD_PREFIX.sub("", trimmed, count=1)
    if amount > 0 and _NUMERIC_ONLY.match(without_prefix):
        return AccountValue(cost=amount)
    return AccountValue(category=raw)


def _cell(values: List[str], idx: Optional[int]) -> str:
    if idx is None or idx >= len(values):
        return ""
    return values[idx]


def parse_catalog_csv(text: str) -> ParsedCatalog:
    lines = [line for line in text.replace("\r\n", "\n").replace("\r", "\n").split("\n") if line.strip()]
    if not lines:
        raise ValidationError("CSV file is empty")

    headers = [_clean_cell(h) for h in parse_csv_line(lines[0])]
    columns = detect_columns(headers)

    by_sku: Dict[str, Dict[str, Any]] = {}
    parsed = ParsedCatalog(headers=headers)

    for line in lines[1:]:
        values = [_clean_cell(v) for v in parse_csv_line(line.strip())]

        item_name = _cell(values, columns.item_name)
        sku = _cell(values, columns.sku)
        if not item_name or not sku:
            continue

        parsed.total_rows += 1

        metadata = {header: _cell(values, idx) for idx, header in enumerate(headers)}

        existing = by_sku.get(sku)
        if existing is not None:
            existing["raw_metadata"].append(metadata)
            continue

        account = classify_account_value(_cell(values, columns.account) if columns.account is not None else None)
        purchase_rate_cost = parse_price(_cell(values, columns.purchase_rate)) if columns.purchase_rate is not None else 0.0
        purchase_cost = account.cost if account.cost else purchase_rate_cost

        by_sku[sku] = {
            "sku": sku,
            "material_name": item_name,
            "category": account.category,
            "unit_price": parse_price(_cell(values, columns.rate)) if columns.rate is not None else 0.0,
            "purchase_cost": purchase_cost,
            "part_length": _cell(values, columns.part_length) if columns.part_length is not None else None,
            "raw_metadata": [metadata],
        }

    parsed.records = list(by_sku.values())
    return parsed


def _batches(records: List[Dict[str, Any]], size: int):
    for i in range(0, len(records), size):
        yield records[i:i + size]


def _upsert_batch(db: Session, batch: List[Dict[str, Any]]) -> None:
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        dialect_insert = postgresql.insert
    elif dialect == "sqlite":
        dialect_insert = sqlite.insert
    else:
        raise RuntimeError(f"Upsert not supported for dialect: {dialect}")

    stmt = dialect_insert(MaterialCatalogItem).values(batch)
    stmt = stmt.on_conflict_do_update(
        index_elements=[MaterialCatalogItem.sku],
        set_={
            "material_name": stmt.excluded.material_name,
            "category": stmt.excluded.category,
            "unit_price": stmt.excluded.unit_price,
            "purchase_cost": stmt.excluded.purchase_cost,
            "part_length": stmt.excluded.part_length,
            "raw_metadata": stmt.excluded.raw_metadata,
        },
    )
    db.execute(stmt)


def import_catalog(
    db: Session,
    text: str,
    mode: ImportMode,
    *,
    batch_size: Optional[int] = None,
) -> ImportResult:
    """Merge a catalog spreadsheet into ``materials_catalog``.

    ``replace`` clears the table and inserts; ``add`` upserts on SKU, replacing
    every field of an existing SKU. Parsing finishes before the first write.
    Each batch commits on its own, so a failure leaves earlier batches in place.
    """
    mode = ImportMode(mode)
    size = batch_size or catalog_batch_size()
    parsed = parse_catalog_csv(text)

    if mode == ImportMode.REPLACE:
        removed = db.query(MaterialCatalogItem).delete(synchronize_session=False)
        db.commit()
        logger.info("Materials catalog cleared", extra={"removed": removed})

    imported = 0
    for batch in _batches(parsed.records, size):
        if mode == ImportMode.REPLACE:
            db.execute(insert(MaterialCatalogItem), batch)
        else:
            _upsert_batch(db, batch)
        db.commit()
        imported += len(batch)

    logger.info(
        "Materials catalog imported",
        extra={
            "mode": mode.value,
            "total_rows": parsed.total_rows,
            "unique_materials": len(parsed.records),
            "imported": imported,
        },
    )
    return ImportResult(
        mode=mode,
        total_rows=parsed.total_rows,
        unique_materials=len(parsed.records),
        imported=imported,
    )
