import sys
from datetime import datetime
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.core.config import Settings
from app.services.catalog_stores import DEFAULT_HEADERS, LotStore, ProductStore, VariantStore
from app.services.product_catalog_service import ProductCatalogService
from app.services.workbook import InMemoryWorkbook

PRODUCT_HEADER = DEFAULT_HEADERS["product"]
VARIANT_HEADER = DEFAULT_HEADERS["variant"]
LOT_HEADER = DEFAULT_HEADERS["lot"]

STAMP = datetime(2026, 1, 5, 9, 30, 0)


@pytest.fixture
def config():
    return Settings(_env_file=None)


@pytest.fixture
def workbook():
    return InMemoryWorkbook({
        "Products": [
            PRODUCT_HEADER,
            ["P1", "Almonds", "Nuts", "Californian almonds", STAMP, STAMP],
            ["P2", "Cashews", "Nuts", "W320 cashews", STAMP, STAMP],
        ],
        "Variants": [
            VARIANT_HEADER,
            ["V1", "P1", "Almonds 250g", "A", "dynamic", STAMP, STAMP],
            ["V2", "P1", "Almonds 1kg", "B", "fixed", STAMP, STAMP],
        ],
        "Lots": [
            LOT_HEADER,
            ["L1", "V1", "in_stock", 1, 1.2, "Shelf 1", STAMP, STAMP],
            ["L2", "V1", "in_stock", 1, 1.3, "Shelf 1", STAMP, STAMP],
            ["L3", "V1", "shipped", 1, 1.1, "Shelf 2", STAMP, STAMP],
            ["L4", "V9", "in_stock", 5, 9.0, "Shelf 3", STAMP, STAMP],
        ],
    })


@pytest.fixture
def product_store(workbook, config):
    return ProductStore(workbook, config)


@pytest.fixture
def variant_store(workbook, config):
    return VariantStore(workbook, config)


@pytest.fixture
def lot_store(workbook, config):
    return LotStore(workbook, config)


@pytest.fixture
def catalog(product_store, variant_store, lot_store):
    return ProductCatalogService(product_store, variant_store, lot_store)
