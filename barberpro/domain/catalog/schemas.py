"""Service catalog schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ServiceCreate(BaseModel):
    """Schema for creating a catalog service"""

    name: str = Field(..., min_length=1, max_length=255)
    duration: int = Field(..., gt=0, le=24 * 60, description="Minutes")
    price: float = Field(..., ge=0)
    isActive: bool = True

    @field_validator("name")
    @classmethod
    def require_name(cls, v):
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()


class ServiceUpdate(BaseModel):
    """Schema for editing a catalog service (never touches booked snapshots)"""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    duration: Optional[int] = Field(None, gt=0, le=24 * 60)
    price: Optional[float] = Field(None, ge=0)
    isActive: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def require_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name is required")
        return v.strip() if v else v


class ServiceResponse(BaseModel):
    id: str
    name: str
    duration: int
    price: float
    isActive: bool
    createdAt: Optional[datetime] = None
