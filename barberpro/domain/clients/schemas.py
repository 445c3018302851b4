"""Client domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_phone


class ClientCreate(BaseModel):
    """Schema for creating a new client"""

    name: str
    phone: str
    email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def require_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(v)


class ClientUpdate(BaseModel):
    """Schema for updating an existing client"""

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def require_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name is required")
        return v.strip() if v else v

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v):
        if v is not None:
            return validate_phone(v)
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        # "" clears the email
        if v is not None:
            return validate_email(v) or ""
        return v


class ClientResponse(BaseModel):
    """Schema for client response"""

    id: str
    name: str
    phone: str
    email: Optional[str] = None
    createdAt: Optional[datetime] = None
    totalAppointments: int = 0
    completedAppointments: int = 0
    totalSpent: float = 0.0
    lastVisit: Optional[date] = None
    activity: str = "new"
