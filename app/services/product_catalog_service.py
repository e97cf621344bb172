"""
Aggregation over the product, variant and lot stores.
Builds the denormalized product view with per-variant lots and stock totals.
"""

import logging
import math
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.services.row_store import RowStore
from app.services.workbook import cell_text, is_blank

logger = logging.getLogger(__name__)


def to_number(value: Any) -> float:
    """Numeric cell value; blanks, text and NaN count as 0"""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return 0 if isinstance(value, float) and math.isnan(value) else value
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0
        if math.isnan(number) or math.isinf(number):
            return 0
        return int(number) if number.is_integer() else number
    return 0


def group_by_field(records: Iterable[Mapping[str, Any]], field: str) -> Dict[str, List[Mapping[str, Any]]]:
    """
    Grouping index: field value -> records sharing it, in input order.

    Records with a blank value for field are left out.
    """
    groups: Dict[str, List[Mapping[str, Any]]] = defaultdict(list)
    for record in records:
        value = record.get(field)
        if is_blank(value):
            continue
        groups[cell_text(value)].append(record)
    return groups


def summarize_stock(lots: Iterable[Mapping[str, Any]], in_stock_status: str = "in_stock") -> Dict[str, Any]:
    """Package and weight totals over the lots whose status is in stock"""
    total_packages = 0
    total_weight = 0
    for lot in lots:
        if lot.get("status") != in_stock_status:
            continue
        total_packages += to_number(lot.get("package_count"))
        total_weight += to_number(lot.get("actual_weight_kg"))
    return {
        "total_package_count": total_packages,
        "total_actual_weight_kg": total_weight,
    }


class ProductCatalogService:
    """Read-only join of products, variants and lots"""

    def __init__(
        self,
        product_store: RowStore,
        variant_store: RowStore,
        lot_store: RowStore,
        in_stock_status: str = "in_stock",
    ):
        self.product_store = product_store
        self.variant_store = variant_store
        self.lot_store = lot_store
        self.in_stock_status = in_stock_status

    def list_products(self) -> List[Dict[str, Any]]:
        return self.product_store.get_all()

    def _enrich_variant(self, variant: Mapping[str, Any], lots: List[Mapping[str, Any]]) -> Dict[str, Any]:
        enriched = dict(variant)
        enriched["lots"] = [dict(lot) for lot in lots]
        enriched["stock_info"] = summarize_stock(lots, self.in_stock_status)
        return enriched

    def get_product_with_details(self, product_id: Any) -> Optional[Dict[str, Any]]:
        """
        Product with its variants, each carrying its lots and stock totals.

        The lot sheet is read once and grouped by variant_id, so the cost is
        one pass over the lots regardless of the number of variants.

        Returns:
            The enriched product, or None if the product does not exist
        """
        product = self.product_store.get_by_id(product_id)
        if product is None:
            return None

        result = dict(product)
        variants = self.variant_store.get_by_foreign_key(product_id)
        if not variants:
            result["variants"] = []
            return result

        lots_by_variant = group_by_field(self.lot_store.get_all(), "variant_id")
        result["variants"] = [
            self._enrich_variant(variant, lots_by_variant.get(cell_text(variant.get("variant_id")), []))
            for variant in variants
        ]
        logger.debug(f"Built details for product {product_id} with {len(variants)} variant(s)")
        return result

    def get_variant_with_lots(self, variant_id: Any) -> Optional[Dict[str, Any]]:
        """Single variant with its lots and stock totals, or None"""
        variant = self.variant_store.get_by_id(variant_id)
        if variant is None:
            return None
        return self._enrich_variant(variant, self.lot_store.get_by_foreign_key(variant_id))
