"""
API Router for the product / variant / lot catalog.
CRUD over the three sheets plus the aggregated product detail view.
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status

from app.core.dependencies import (
    get_catalog_service,
    get_lot_store,
    get_product_store,
    get_variant_store,
)
from app.schemas.catalog import RecordListResponse, SuccessResponse
from app.services.catalog_stores import LotStore, ProductStore, VariantStore
from app.services.product_catalog_service import ProductCatalogService

router = APIRouter(tags=["Catalog"])


def not_found(kind: str, key: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"{kind} with ID {key} not found"
    )


# ============================================================================
# ACTION ENDPOINT (single URL, action selected by query parameter)
# ============================================================================

@router.get("/catalog", response_model=SuccessResponse)
def dispatch_action(
    action: str = Query(..., description="getProducts or getProductDetails"),
    id: Optional[str] = Query(None, description="Product ID for getProductDetails"),
    service: ProductCatalogService = Depends(get_catalog_service),
):
    """Dispatch a read action by name"""
    if action == "getProducts":
        return SuccessResponse(data=service.list_products())

    if action == "getProductDetails":
        if not id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Parameter 'id' is required for getProductDetails"
            )
        product = service.get_product_with_details(id)
        if product is None:
            raise not_found("Product", id)
        return SuccessResponse(data=product)

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Unknown action: {action}"
    )


# ============================================================================
# PRODUCT ENDPOINTS
# ============================================================================

@router.get("/products", response_model=RecordListResponse)
def get_all_products(service: ProductCatalogService = Depends(get_catalog_service)):
    """Get all products"""
    products = service.list_products()
    return RecordListResponse(data=products, total=len(products))


@router.post("/products", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    record: Dict[str, Any] = Body(...),
    store: ProductStore = Depends(get_product_store),
):
    """Create a new product"""
    return SuccessResponse(data=store.create(record))


@router.get("/products/{product_id}", response_model=SuccessResponse)
def get_product(
    product_id: str,
    service: ProductCatalogService = Depends(get_catalog_service),
):
    """Get product with its variants, lots and stock totals"""
    product = service.get_product_with_details(product_id)
    if product is None:
        raise not_found("Product", product_id)
    return SuccessResponse(data=product)


@router.put("/products/{product_id}", response_model=SuccessResponse)
def update_product(
    product_id: str,
    changes: Dict[str, Any] = Body(...),
    store: ProductStore = Depends(get_product_store),
):
    """Update product"""
    updated = store.update(product_id, changes)
    if updated is None:
        raise not_found("Product", product_id)
    return SuccessResponse(data=updated)


@router.delete("/products/{product_id}", response_model=SuccessResponse)
def delete_product(product_id: str, store: ProductStore = Depends(get_product_store)):
    """Delete product"""
    if not store.delete(product_id):
        raise not_found("Product", product_id)
    return SuccessResponse(message=f"Product {product_id} deleted successfully")


@router.get("/products/{product_id}/variants", response_model=RecordListResponse)
def get_product_variants(product_id: str, store: VariantStore = Depends(get_variant_store)):
    """Get all variants of a product"""
    variants = store.get_by_foreign_key(product_id)
    return RecordListResponse(data=variants, total=len(variants))


# ============================================================================
# VARIANT ENDPOINTS
# ============================================================================

@router.post("/variants", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
def create_variant(
    record: Dict[str, Any] = Body(...),
    store: VariantStore = Depends(get_variant_store),
):
    """Create a new variant"""
    return SuccessResponse(data=store.create(record))


@router.get("/variants/{variant_id}", response_model=SuccessResponse)
def get_variant(
    variant_id: str,
    service: ProductCatalogService = Depends(get_catalog_service),
):
    """Get variant with its lots and stock totals"""
    variant = service.get_variant_with_lots(variant_id)
    if variant is None:
        raise not_found("Variant", variant_id)
    return SuccessResponse(data=variant)


@router.put("/variants/{variant_id}", response_model=SuccessResponse)
def update_variant(
    variant_id: str,
    changes: Dict[str, Any] = Body(...),
    store: VariantStore = Depends(get_variant_store),
):
    """Update variant"""
    updated = store.update(variant_id, changes)
    if updated is None:
        raise not_found("Variant", variant_id)
    return SuccessResponse(data=updated)


@router.delete("/variants/{variant_id}", response_model=SuccessResponse)
def delete_variant(variant_id: str, store: VariantStore = Depends(get_variant_store)):
    """Delete variant"""
    if not store.delete(variant_id):
        raise not_found("Variant", variant_id)
    return SuccessResponse(message=f"Variant {variant_id} deleted successfully")


@router.get("/variants/{variant_id}/lots", response_model=RecordListResponse)
def get_variant_lots(variant_id: str, store: LotStore = Depends(get_lot_store)):
    """Get all lots of a variant"""
    lots = store.get_by_foreign_key(variant_id)
    return RecordListResponse(data=lots, total=len(lots))


# ============================================================================
# LOT ENDPOINTS
# ============================================================================

@router.post("/lots", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
def create_lot(
    record: Dict[str, Any] = Body(...),
    store: LotStore = Depends(get_lot_store),
):
    """Create a new lot (lot_id is generated when omitted)"""
    return SuccessResponse(data=store.create(record))


@router.get("/lots/{lot_id}", response_model=SuccessResponse)
def get_lot(lot_id: str, store: LotStore = Depends(get_lot_store)):
    """Get lot by ID"""
    lot = store.get_by_id(lot_id)
    if lot is None:
        raise not_found("Lot", lot_id)
    return SuccessResponse(data=lot)


@router.put("/lots/{lot_id}", response_model=SuccessResponse)
def update_lot(
    lot_id: str,
    changes: Dict[str, Any] = Body(...),
    store: LotStore = Depends(get_lot_store),
):
    """Update lot"""
    updated = store.update(lot_id, changes)
    if updated is None:
        raise not_found("Lot", lot_id)
    return SuccessResponse(data=updated)


@router.delete("/lots/{lot_id}", response_model=SuccessResponse)
def delete_lot(lot_id: str, store: LotStore = Depends(get_lot_store)):
    """Delete lot"""
    if not store.delete(lot_id):
        raise not_found("Lot", lot_id)
    return SuccessResponse(message=f"Lot {lot_id} deleted successfully")
