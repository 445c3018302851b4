"""Account schemas - Pydantic models for the signed-in profile"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    fullName: Optional[str] = None
    role: str
    shopName: Optional[str] = None


class RegisterRequest(BaseModel):
    """Completes sign-up: names the owner and, optionally, the shop"""

    fullName: str = Field(..., min_length=1, max_length=255)
    shopName: Optional[str] = Field(None, max_length=255)

    @field_validator("fullName")
    @classmethod
    def require_full_name(cls, v):
        if not v.strip():
            raise ValueError("Full name is required")
        return v.strip()

    @field_validator("shopName")
    @classmethod
    def strip_shop_name(cls, v):
        if v is not None:
            return v.strip() or None
        return v
