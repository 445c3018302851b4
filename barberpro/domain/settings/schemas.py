"""Business settings schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_time_of_day, validate_webhook_url


class BusinessSettingsUpdate(BaseModel):
    """Schema for a partial settings update"""

    shopName: Optional[str] = Field(None, min_length=1, max_length=255)
    openTime: Optional[str] = None
    closeTime: Optional[str] = None
    appointmentDuration: Optional[int] = Field(None, gt=0, le=24 * 60)
    notifications: Optional[bool] = None
    googleCalendarSync: Optional[bool] = None
    n8nWebhook: Optional[str] = None

    @field_validator("openTime", "closeTime")
    @classmethod
    def validate_time(cls, v):
        if v is not None:
            return validate_time_of_day(v)
        return v

    @field_validator("n8nWebhook")
    @classmethod
    def validate_webhook(cls, v):
        # Empty string clears the webhook
        if v is not None:
            return validate_webhook_url(v) or ""
        return v

    @model_validator(mode="after")
    def validate_window(self):
        if self.openTime and self.closeTime and self.openTime >= self.closeTime:
            raise ValueError("Opening time must be before closing time")
        return self


class BusinessSettingsResponse(BaseModel):
    """Schema for settings response"""

    shopName: str
    openTime: str
    closeTime: str
    appointmentDuration: int
    notifications: bool
    googleCalendarSync: bool
    n8nWebhook: str
