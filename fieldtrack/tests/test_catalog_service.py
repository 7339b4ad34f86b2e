import csv
import io

import pytest

from fieldtrack.models.material_catalog import MaterialCatalogItem
from fieldtrack.services.catalog_service import (
    EXPORT_HEADERS,
    clean_category,
    display_name,
    export_catalog_csv,
    export_raw_rows_csv,
    format_length,
    list_catalog,
    list_categories,
)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Sales - Fastener", "Fastener"),
        ("USD - Lumber", "Lumber"),
        ("Sales:Hardware", "Hardware"),
        ("", None),
        (None, None),
    ],
)
def test_clean_category(raw, expected):
    assert clean_category(raw) == expected


@pytest.mark.parametrize(
    "length,category,expected",
    [
        ("2.5", "Sales - Fastener", '2 1/2"'),
        ("3", "Sales - Fastener", '3"'),
        ("0.75", "Sales - Fastener", '3/4"'),
        ("8.5", "Sales - Lumber", "8' 6\""),
        ("12", "Sales - Lumber", "12'"),
        ("10 4", "Sales - Lumber", "10' 4\""),
        ("6'", "Sales - Lumber", "6'"),
        ("", "Sales - Lumber", ""),
        (None, None, ""),
    ],
)
def test_format_length(length, category, expected):
    assert format_length(length, category) == expected


def test_display_name_includes_length():
    assert display_name(MaterialCatalogItem(material_name="Stud", part_length="8")) == "Stud : 8"
    assert display_name(MaterialCatalogItem(material_name="Glue", part_length=None)) == "Glue"


def _add(db, **values):
    values.setdefault("raw_metadata", [])
    db.add(MaterialCatalogItem(**values))
    db.commit()


def test_list_filters_by_search_and_clean_category(db):
    _add(db, sku="S-1", material_name="Stud", category="Sales - Lumber", part_length="8")
    _add(db, sku="B-1", material_name="Hex Bolt", category="Sales - Fastener", part_length="2.5")
    _add(db, sku="G-1", material_name="Glue", category=None)

    assert [r.sku for r in list_catalog(db)] == ["G-1", "B-1", "S-1"]
    assert [r.sku for r in list_catalog(db, category="Fastener")] == ["B-1"]
    assert [r.sku for r in list_catalog(db, search="s-1")] == ["S-1"]
    assert list_categories(db) == ["Fastener", "Lumber"]


def test_export_catalog_csv(db):
    _add(
        db,
        sku="B-1",
        material_name="Hex Bolt",
        category="Sales - Fastener",
        part_length="2.5",
        purchase_cost=0.5,
        unit_price=1.0,
    )
    _add(db, sku="G-1", material_name="Glue", unit_price=4.0)

    rows = list(csv.reader(io.StringIO(export_catalog_csv(db))))
    assert rows[0] == EXPORT_HEADERS
    assert rows[1] == ["Glue", "G-1", "", "", "0.00", "4.00", "0.0"]
    assert rows[2] == ["Hex Bolt", "B-1", "Fastener", '2 1/2"', "0.50", "1.00", "100.0"]


def test_export_raw_rows_rebuilds_source_sheet(db):
    _add(
        db,
        sku="B-1",
        material_name="Hex Bolt",
        raw_metadata=[
            {"Item Name": "Hex Bolt", "SKU": "B-1", "Rate": "1.00"},
            {"Item Name": "Hex Bolt (alt)", "SKU": "B-1", "Rate": "9.00"},
        ],
    )

    rows = list(csv.reader(io.StringIO(export_raw_rows_csv(db))))
    assert rows == [
        ["Item Name", "SKU", "Rate"],
        ["Hex Bolt", "B-1", "1.00"],
        ["Hex Bolt (alt)", "B-1", "9.00"],
    ]


def test_export_raw_rows_empty_catalog(db):
    assert export_raw_rows_csv(db) is None
