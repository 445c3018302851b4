"""Inventory repository - Database operations for products"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Product


class ProductRepository:
    """Repository for product database operations"""

    @staticmethod
    def get_products(
        db: Session,
        user_id: str,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Product]:
        query = db.query(Product).filter(Product.user_id == user_id)

        if category and category != "all":
            query = query.filter(Product.category == category)
        if search:
            query = query.filter(Product.name.icontains(search, autoescape=True))

        return query.order_by(Product.name.asc()).all()

    @staticmethod
    def get_product_by_id(db: Session, product_id: str, user_id: str) -> Optional[Product]:
        return db.query(Product).filter(Product.id == product_id, Product.user_id == user_id).first()

    @staticmethod
    def create_product(db: Session, user_id: str, **product_data) -> Product:
        product = Product(user_id=user_id, **product_data)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def update_product(db: Session, product: Product, **updates) -> Product:
        for key, value in updates.items():
            if value is not None and hasattr(product, key):
                setattr(product, key, value)

        db.commit()
        db.refresh(product)
        return product

    @staticmethod
    def delete_product(db: Session, product: Product) -> None:
        db.delete(product)
        db.commit()
