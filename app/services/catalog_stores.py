"""
Row stores for the three catalog tables: products, variants and lots.
"""

from typing import Dict, List

from app.core.config import Settings, settings
from app.services.id_policy import lot_id_generator
from app.services.row_store import RowStore
from app.services.table_schema import CREATED_AT, UPDATED_AT, TableDefinition
from app.services.workbook import InMemoryWorkbook, Workbook

# Header rows written when a fresh workbook is created
DEFAULT_HEADERS: Dict[str, List[str]] = {
    "product": ["product_id", "name", "category", "description", CREATED_AT, UPDATED_AT],
    "variant": ["variant_id", "product_id", "name", "grade", "variant_status", CREATED_AT, UPDATED_AT],
    "lot": [
        "lot_id", "variant_id", "status", "package_count", "actual_weight_kg",
        "location", CREATED_AT, UPDATED_AT,
    ],
}


def product_table(config: Settings = settings) -> TableDefinition:
    return TableDefinition(
        name="product",
        sheet_name=config.PRODUCT_SHEET,
        primary_key="product_id",
    )


def variant_table(config: Settings = settings) -> TableDefinition:
    return TableDefinition(
        name="variant",
        sheet_name=config.VARIANT_SHEET,
        primary_key="variant_id",
        foreign_key="product_id",
        defaults={"variant_status": config.VARIANT_STATUS_DEFAULT},
    )


def lot_table(config: Settings = settings) -> TableDefinition:
    # Lot sheets are the largest, so key lookups use the column search
    return TableDefinition(
        name="lot",
        sheet_name=config.LOT_SHEET,
        primary_key="lot_id",
        foreign_key="variant_id",
        defaults={"status": config.LOT_STATUS_DEFAULT},
        key_generator=lot_id_generator(config.LOT_ID_PREFIX, config.LOT_ID_SUFFIX_LENGTH),
        key_attempts=config.LOT_ID_MAX_ATTEMPTS,
        use_column_search=True,
    )


class ProductStore(RowStore):
    """Row store for the product sheet"""

    def __init__(self, workbook: Workbook, config: Settings = settings):
        super().__init__(workbook, product_table(config))


class VariantStore(RowStore):
    """Row store for the variant sheet (child of products)"""

    def __init__(self, workbook: Workbook, config: Settings = settings):
        super().__init__(workbook, variant_table(config))


class LotStore(RowStore):
    """Row store for the lot sheet (child of variants)"""

    def __init__(self, workbook: Workbook, config: Settings = settings):
        super().__init__(workbook, lot_table(config))


def sheet_headers(config: Settings = settings) -> Dict[str, List[str]]:
    """Default header rows keyed by the configured sheet names"""
    return {
        config.PRODUCT_SHEET: DEFAULT_HEADERS["product"],
        config.VARIANT_SHEET: DEFAULT_HEADERS["variant"],
        config.LOT_SHEET: DEFAULT_HEADERS["lot"],
    }


def empty_workbook(config: Settings = settings) -> InMemoryWorkbook:
    """In-memory workbook holding only the default header rows"""
    return InMemoryWorkbook({name: [headers] for name, headers in sheet_headers(config).items()})
