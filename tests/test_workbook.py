from datetime import datetime

import pytest
from openpyxl import load_workbook

from app.core.exceptions import SchemaError, ValidationError
from app.services.catalog_stores import LotStore, ProductStore, VariantStore, sheet_headers
from app.services.excel_workbook import ExcelWorkbook
from app.services.product_catalog_service import ProductCatalogService
from app.services.workbook import InMemorySheet, cell_matches


def test_in_memory_sheet_extents():
    sheet = InMemorySheet("s", [["a", "b", None], ["1", "", ""], [None, None]])
    assert sheet.last_row() == 2
    assert sheet.last_column() == 2


def test_in_memory_sheet_pads_reads():
    sheet = InMemorySheet("s", [["a", "b"], ["1"]])
    assert sheet.get_values(1, 1, 3, 3) == [["a", "b", None], ["1", None, None], [None, None, None]]


def test_in_memory_append_after_trailing_blank_rows():
    sheet = InMemorySheet("s", [["a"], ["1"], [""], [None]])
    assert sheet.append_row(["2"]) == 3
    assert sheet.rows() == [["a"], ["1"], ["2"]]


def test_find_in_column_skips_rows_before_start():
    sheet = InMemorySheet("s", [["id"], ["x"], ["id"], ["y"]])
    assert sheet.find_in_column(1, "id", start_row=2) == 3
    assert sheet.find_in_column(1, "z", start_row=2) is None


@pytest.mark.parametrize("cell, value, expected", [
    ("A1", "A1", True),
    (" A1 ", "A1", True),
    (7.0, "7", True),
    (7, 7.0, True),
    ("", "", False),
    (None, "x", False),
    ("a1", "A1", False),
])
def test_cell_matches(cell, value, expected):
    assert cell_matches(cell, value) is expected


@pytest.fixture
def excel_workbook(tmp_path, config):
    path = tmp_path / "catalog.xlsx"
    return ExcelWorkbook.create(str(path), sheet_headers(config))


def test_missing_workbook_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ExcelWorkbook(str(tmp_path / "missing.xlsx")).get_sheet("Products")


def test_excel_missing_sheet_is_none(excel_workbook):
    assert excel_workbook.get_sheet("Nope") is None


def test_excel_store_round_trip_is_persisted(excel_workbook, config):
    store = ProductStore(excel_workbook, config)
    store.create({"product_id": "P1", "name": "Almonds"})
    store.create({"product_id": "P2", "name": "Cashews"})
    store.update("P1", {"name": "Roasted almonds"})
    assert store.delete("P2") is True

    reopened = ProductStore(ExcelWorkbook(excel_workbook.file_path), config)
    records = reopened.get_all()
    assert [r["product_id"] for r in records] == ["P1"]
    assert records[0]["name"] == "Roasted almonds"


def test_excel_lot_column_search_and_details(excel_workbook, config):
    products = ProductStore(excel_workbook, config)
    variants = VariantStore(excel_workbook, config)
    lots = LotStore(excel_workbook, config)

    products.create({"product_id": "P1"})
    variants.create({"variant_id": "V1", "product_id": "P1"})
    created = lots.create({"variant_id": "V1", "package_count": 2, "actual_weight_kg": 1.5})
    lots.create({"variant_id": "V1", "status": "shipped", "package_count": 4})

    assert lots.get_by_id(created["lot_id"])["package_count"] == 2

    details = ProductCatalogService(products, variants, lots).get_product_with_details("P1")
    assert details["variants"][0]["stock_info"] == {"total_package_count": 2, "total_actual_weight_kg": 1.5}


def test_excel_dates_are_normalized(tmp_path, config):
    path = tmp_path / "dated.xlsx"
    book = ExcelWorkbook.create(str(path), {"Products": ["product_id", "created_at"]})
    raw = load_workbook(str(path))
    raw["Products"].append(["P1", datetime(2026, 2, 3)])
    raw.save(str(path))
    book.reload()

    record = ProductStore(book, config).get_by_id("P1")
    assert record["created_at"] == "2026-02-03T00:00:00.000Z"


def test_excel_without_autosave_keeps_file_unchanged(tmp_path, config):
    path = tmp_path / "manual.xlsx"
    book = ExcelWorkbook.create(str(path), sheet_headers(config), autosave=False)
    ProductStore(book, config).create({"product_id": "P1"})

    assert ProductStore(ExcelWorkbook(str(path)), config).get_all() == []
    book.save()
    assert len(ProductStore(ExcelWorkbook(str(path)), config).get_all()) == 1


def test_missing_workbook_file_is_schema_error(tmp_path, config):
    with pytest.raises(SchemaError, match="Workbook not found"):
        ProductStore(ExcelWorkbook(str(tmp_path / "missing.xlsx")), config)


def test_excel_create_rejects_nested_values_without_writing(excel_workbook, config):
    store = ProductStore(excel_workbook, config)
    with pytest.raises(ValidationError) as exc_info:
        store.create({"product_id": "P9", "name": ["nested"]})
    assert exc_info.value.field == "name"
    assert store.count() == 0
    assert store.get_all() == []

    assert store.create({"product_id": "P9", "name": "Dates"})["name"] == "Dates"
    reopened = ProductStore(ExcelWorkbook(excel_workbook.file_path), config)
    assert [r["product_id"] for r in reopened.get_all()] == ["P9"]


def test_excel_update_rejects_nested_values_without_writing(excel_workbook, config):
    store = ProductStore(excel_workbook, config)
    store.create({"product_id": "P1", "name": "A", "category": "Nuts"})

    with pytest.raises(ValidationError):
        store.update("P1", {"name": "B", "category": {"x": 1}})

    record = store.get_by_id("P1")
    assert record["name"] == "A"
    assert record["category"] == "Nuts"


def test_excel_sheet_drops_partial_row_when_a_cell_is_rejected(excel_workbook):
    sheet = excel_workbook.get_sheet("Products")
    with pytest.raises(ValueError):
        sheet.append_row(["P9", ["nested"]])
    assert sheet.last_row() == 1


def test_excel_sheet_restores_cells_when_a_batch_is_rejected(excel_workbook):
    sheet = excel_workbook.get_sheet("Products")
    sheet.append_row(["P1", "A", "Nuts"])
    with pytest.raises(ValueError):
        sheet.set_values(2, {2: "B", 3: {"x": 1}})
    assert sheet.get_values(2, 1, 1, 3) == [["P1", "A", "Nuts"]]


def test_excel_update_saves_file_once(excel_workbook, config, monkeypatch):
    store = ProductStore(excel_workbook, config)
    store.create({"product_id": "P1", "name": "A"})

    saves = []
    original_save = excel_workbook.save

    def counting_save():
        saves.append(1)
        original_save()

    monkeypatch.setattr(excel_workbook, "save", counting_save)
    store.update("P1", {"name": "B", "category": "Nuts", "description": "Raw"})
    assert len(saves) == 1
