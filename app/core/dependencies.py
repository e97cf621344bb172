"""
Workbook handle and store dependencies for the request layer.
"""

import logging
from functools import lru_cache

from fastapi import Depends

from app.core.config import settings
from app.services.catalog_stores import LotStore, ProductStore, VariantStore, empty_workbook
from app.services.excel_workbook import ExcelWorkbook
from app.services.product_catalog_service import ProductCatalogService
from app.services.workbook import Workbook

logger = logging.getLogger(__name__)


@lru_cache()
def get_workbook() -> Workbook:
    """Shared workbook handle, opened once per process"""
    if settings.WORKBOOK_PATH:
        logger.info(f"Using workbook file {settings.WORKBOOK_PATH}")
        return ExcelWorkbook(settings.WORKBOOK_PATH, autosave=settings.WORKBOOK_AUTOSAVE)
    logger.warning("WORKBOOK_PATH not set, using an in-memory workbook")
    return empty_workbook(settings)


def get_product_store(workbook: Workbook = Depends(get_workbook)) -> ProductStore:
    return ProductStore(workbook, settings)


def get_variant_store(workbook: Workbook = Depends(get_workbook)) -> VariantStore:
    return VariantStore(workbook, settings)


def get_lot_store(workbook: Workbook = Depends(get_workbook)) -> LotStore:
    return LotStore(workbook, settings)


def get_catalog_service(
    product_store: ProductStore = Depends(get_product_store),
    variant_store: VariantStore = Depends(get_variant_store),
    lot_store: LotStore = Depends(get_lot_store),
) -> ProductCatalogService:
    return ProductCatalogService(
        product_store,
        variant_store,
        lot_store,
        in_stock_status=settings.IN_STOCK_STATUS,
    )
