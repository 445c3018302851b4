"""Scheduling router - FastAPI endpoints for appointments, slots and agenda"""

from datetime import date as calendar_date
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from ...services.webhook_service import send_appointment_event, serialize_appointment
from .schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    SlotResponse,
    StatusChange,
)
from .service import SchedulingService, to_response

router = APIRouter(prefix="/appointments", tags=["Scheduling"])


def get_scheduling_service(db: Session = Depends(get_db)) -> SchedulingService:
    """Dependency injection for SchedulingService"""
    return SchedulingService(db)


def _queue_webhook(
    background_tasks: BackgroundTasks,
    service: SchedulingService,
    profile: Profile,
    event: str,
    appointment_data: dict,
) -> None:
    webhook_url = service.settings.get_settings(profile).n8n_webhook
    if webhook_url:
        background_tasks.add_task(send_appointment_event, webhook_url, event, appointment_data)


@router.get("", response_model=list[AppointmentResponse])
async def get_appointments(
    date: Optional[calendar_date] = Query(None),
    status: Optional[str] = Query(None, description="scheduled, confirmed, completed, cancelled or all"),
    search: Optional[str] = Query(None, description="Client name or phone fragment"),
    current_profile: Profile = Depends(get_current_profile),
    service: SchedulingService = Depends(get_scheduling_service),
):
    appointments = service.get_appointments(current_profile, day=date, status=status, search=search)
    return [to_response(a) for a in appointments]


@router.get("/slots", response_model=list[SlotResponse])
async def get_slots(
    date: calendar_date = Query(...),
    duration: Optional[int] = Query(None, description="Minutes; defaults to the shop's slot length"),
    exclude_id: Optional[str] = Query(None, description="Appointment being edited"),
    current_profile: Profile = Depends(get_current_profile),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Start times for the day, each flagged available or not"""
    return service.get_slots(current_profile, date, duration, exclude_id)


@router.get("/agenda", response_model=list[AppointmentResponse])
async def get_agenda(
    date: Optional[calendar_date] = Query(None, description="Defaults to today"),
    current_profile: Profile = Depends(get_current_profile),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return [to_response(a) for a in service.get_agenda(current_profile, date)]


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: str,
    current_profile: Profile = Depends(get_current_profile),
    service: SchedulingService = Depends(get_scheduling_service),
):
    return to_response(service.get_appointment(appointment_id, current_profile))


@router.post("", response_model=AppointmentResponse, status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    background_tasks: BackgroundTasks,
    current_profile: Profile = Depends(get_current_profile),
    service: SchedulingService = Depends(get_scheduling_service),
):
    appointment = service.create_appointment(data, current_profile)
    _queue_webhook(
        background_tasks,
        service,
        current_profile,
        "appointment.created",
        serialize_appointment(appointment),
    )
    return to_response(appointment)


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    background_tasks: BackgroundTasks,
    current_profile: Profile = Depends(get_current_profile),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Edit client, date, time, notes or the service list; end time is recomputed"""
    appointment = service.edit_appointment(appointment_id, data, current_profile)
    _queue_webhook(
        background_tasks,
        service,
        current_profile,
        "appointment.updated",
        serialize_appointment(appointment),
    )
    return to_response(appointment)


@router.post("/{appointment_id}/status", response_model=AppointmentResponse)
async def change_status(
    appointment_id: str,
    data: StatusChange,
    background_tasks: BackgroundTasks,
    current_profile: Profile = Depends(get_current_profile),
    service: SchedulingService = Depends(get_scheduling_service),
):
    appointment, changed = service.change_status(
        appointment_id, data.status, current_profile, data.cancelReason
    )
    if changed:
        _queue_webhook(
            background_tasks,
            service,
            current_profile,
            "appointment.status_changed",
            serialize_appointment(appointment),
        )
    return to_response(appointment)


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: str,
    background_tasks: BackgroundTasks,
    current_profile: Profile = Depends(get_current_profile),
    service: SchedulingService = Depends(get_scheduling_service),
):
    last_state = service.delete_appointment(appointment_id, current_profile)
    _queue_webhook(background_tasks, service, current_profile, "appointment.deleted", last_state)
    return {"message": "Appointment deleted"}
