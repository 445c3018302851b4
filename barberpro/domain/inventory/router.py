"""Inventory router - FastAPI endpoints for products and counter sales"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile, require_admin
from ...database import get_db
from ...models import Profile
from .schemas import PRODUCT_CATEGORIES, ProductCreate, ProductResponse, ProductUpdate, SellRequest
from .service import InventoryService, to_response

router = APIRouter(prefix="/products", tags=["Inventory"])


def get_inventory_service(db: Session = Depends(get_db)) -> InventoryService:
    """Dependency injection for InventoryService"""
    return InventoryService(db)


@router.get("", response_model=list[ProductResponse])
async def get_products(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    current_profile: Profile = Depends(get_current_profile),
    service: InventoryService = Depends(get_inventory_service),
):
    return [to_response(p) for p in service.get_products(current_profile, category, search)]


@router.get("/categories")
async def get_categories():
    """Suggested categories for the product form"""
    return PRODUCT_CATEGORIES


@router.get("/low-stock", response_model=list[ProductResponse])
async def get_low_stock(
    current_profile: Profile = Depends(get_current_profile),
    service: InventoryService = Depends(get_inventory_service),
):
    """Products at or below their minimum stock"""
    return [to_response(p) for p in service.get_low_stock(current_profile)]


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    data: ProductCreate,
    current_profile: Profile = Depends(require_admin),
    service: InventoryService = Depends(get_inventory_service),
):
    return to_response(service.create_product(data, current_profile))


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    data: ProductUpdate,
    current_profile: Profile = Depends(require_admin),
    service: InventoryService = Depends(get_inventory_service),
):
    return to_response(service.update_product(product_id, data, current_profile))


@router.post("/{product_id}/sell", response_model=ProductResponse)
async def sell_product(
    product_id: str,
    data: SellRequest,
    current_profile: Profile = Depends(get_current_profile),
    service: InventoryService = Depends(get_inventory_service),
):
    """Record a counter sale: stock down (never below 0), sold count up"""
    return to_response(service.sell_product(product_id, data.quantity, current_profile))


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    current_profile: Profile = Depends(require_admin),
    service: InventoryService = Depends(get_inventory_service),
):
    return service.delete_product(product_id, current_profile)
