"""Scheduling schemas - Pydantic models for appointment booking"""

from datetime import date as calendar_date
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_time_of_day


class AppointmentCreate(BaseModel):
    """Schema for booking an appointment (at least one service)"""

    clientId: str
    date: calendar_date
    startTime: str
    serviceIds: list[str] = Field(..., min_length=1)
    notes: Optional[str] = None

    @field_validator("startTime")
    @classmethod
    def check_start_time(cls, v):
        return validate_time_of_day(v)


class AppointmentUpdate(BaseModel):
    """
    Schema for editing an appointment.

    serviceIds replaces the whole service list when present.
    """

    clientId: Optional[str] = None
    date: Optional[calendar_date] = None
    startTime: Optional[str] = None
    serviceIds: Optional[list[str]] = None
    notes: Optional[str] = None

    @field_validator("startTime")
    @classmethod
    def check_start_time(cls, v):
        if v is not None:
            return validate_time_of_day(v)
        return v

    @field_validator("serviceIds")
    @classmethod
    def check_services(cls, v):
        if v is not None and len(v) == 0:
            raise ValueError("Select at least one service")
        return v


class StatusChange(BaseModel):
    status: str = Field(..., pattern="^(scheduled|confirmed|completed|cancelled)$")
    cancelReason: Optional[str] = None


class BookedService(BaseModel):
    """Service snapshot as captured at booking time"""

    id: Optional[str] = None
    name: str
    duration: int
    price: float


class AppointmentResponse(BaseModel):
    id: str
    clientId: Optional[str] = None
    clientName: str
    clientPhone: str
    date: calendar_date
    startTime: str
    endTime: str
    services: list[BookedService]
    total: float
    status: str
    notes: Optional[str] = None
    cancelledAt: Optional[datetime] = None
    cancelReason: Optional[str] = None
    completedAt: Optional[datetime] = None


class SlotResponse(BaseModel):
    time: str
    available: bool
