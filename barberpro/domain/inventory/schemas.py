"""Inventory schemas - Pydantic models for products sold at the counter"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

PRODUCT_CATEGORIES = [
    "Gel",
    "Pomade",
    "Shampoo",
    "Lotion",
    "Perfume",
    "Cream",
    "Comb",
    "Oil",
    "Other",
]


class ProductCreate(BaseModel):
    """Schema for adding a product to the inventory"""

    name: str = Field(..., min_length=1, max_length=255)
    category: Optional[str] = None
    price: float = Field(..., ge=0)
    cost: float = Field(0.0, ge=0)
    stock: int = Field(0, ge=0)
    minStock: int = Field(0, ge=0)
    soldCount: int = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def require_name(cls, v):
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    minStock: Optional[int] = Field(None, ge=0)

    @field_validator("name")
    @classmethod
    def require_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name is required")
        return v.strip() if v else v


class SellRequest(BaseModel):
    quantity: int = Field(..., gt=0)


class ProductResponse(BaseModel):
    id: str
    name: str
    category: str
    price: float
    cost: float
    stock: int
    minStock: int
    soldCount: int
    lowStock: bool
