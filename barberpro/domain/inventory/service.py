"""Inventory service - stock keeping and counter sales"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Product, Profile
from ..reports import aggregator
from .repository import ProductRepository
from .schemas import ProductCreate, ProductResponse, ProductUpdate

logger = logging.getLogger(__name__)


def to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,
        name=product.name,
        category=product.category or "",
        price=product.price,
        cost=product.cost,
        stock=product.stock,
        minStock=product.min_stock,
        soldCount=product.sold_count,
        lowStock=product.stock <= product.min_stock,
    )


def apply_sale(product: Product, quantity: int) -> None:
    """Stock never goes negative; soldCount grows by exactly the sold quantity"""
    if quantity <= 0:
        raise HTTPException(status_code=400, detail="Quantity must be greater than 0")
    product.stock = max(0, product.stock - quantity)
    product.sold_count = product.sold_count + quantity


class InventoryService:
    """Service layer for product business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProductRepository()

    def get_products(
        self, profile: Profile, category: Optional[str] = None, search: Optional[str] = None
    ) -> list[Product]:
        return self.repo.get_products(self.db, profile.id, category, search)

    def get_low_stock(self, profile: Profile) -> list[Product]:
        return aggregator.low_stock(self.repo.get_products(self.db, profile.id))

    def get_product(self, product_id: str, profile: Profile) -> Product:
        product = self.repo.get_product_by_id(self.db, product_id, profile.id)
        if not product:
            raise HTTPException(status_code=404, detail="Product not found")
        return product

    def create_product(self, data: ProductCreate, profile: Profile) -> Product:
        logger.info(f"📦 Creating product '{data.name}' for user_id: {profile.id}")
        try:
            return self.repo.create_product(
                self.db,
                profile.id,
                name=data.name,
                category=data.category or None,
                price=data.price,
                cost=data.cost,
                stock=data.stock,
                min_stock=data.minStock,
                sold_count=data.soldCount,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create product for user {profile.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save product") from e

    def update_product(self, product_id: str, data: ProductUpdate, profile: Profile) -> Product:
        product = self.get_product(product_id, profile)
        updates = {
            "name": data.name,
            "category": data.category,
            "price": data.price,
            "cost": data.cost,
            "stock": data.stock,
            "min_stock": data.minStock,
        }
        try:
            return self.repo.update_product(self.db, product, **updates)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update product {product_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save product") from e

    def sell_product(self, product_id: str, quantity: int, profile: Profile) -> Product:
        product = self.get_product(product_id, profile)
        apply_sale(product, quantity)
        try:
            self.db.commit()
            self.db.refresh(product)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to record sale of product {product_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to record sale") from e

        logger.info(f"💰 Sold {quantity}x {product.name} (stock now {product.stock})")
        if product.stock <= product.min_stock:
            logger.warning(f"⚠️ Product {product.name} is at or below minimum stock")
        return product

    def delete_product(self, product_id: str, profile: Profile) -> dict:
        product = self.get_product(product_id, profile)
        try:
            self.repo.delete_product(self.db, product)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete product {product_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete product") from e
        return {"message": "Product deleted"}
