"""Scheduling service - booking, editing and status changes for appointments"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import SLOT_GRANULARITY_MINUTES
from ...models import Appointment, AppointmentService, Client, Profile, Service
from ...services.webhook_service import serialize_appointment
from ...shared.errors import SchedulingConflict, ValidationFailed
from ..clients.repository import ClientRepository
from ..reports import aggregator
from ..settings.service import SettingsService
from . import availability_service, lifecycle, time_calculator
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentResponse, AppointmentUpdate, BookedService

logger = logging.getLogger(__name__)


def to_response(appointment: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=appointment.id,
        clientId=appointment.client_id,
        clientName=appointment.client_name,
        clientPhone=appointment.client_phone,
        date=appointment.date,
        startTime=appointment.start_time,
        endTime=appointment.end_time,
        services=[
            BookedService(
                id=s.service_id, name=s.service_name, duration=s.duration, price=s.price_at_time
            )
            for s in appointment.services
        ],
        total=aggregator.appointment_total(appointment),
        status=appointment.status,
        notes=appointment.notes,
        cancelledAt=appointment.cancelled_at,
        cancelReason=appointment.cancel_reason,
        completedAt=appointment.completed_at,
    )


class SchedulingService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.clients = ClientRepository()
        self.settings = SettingsService(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_appointments(
        self,
        profile: Profile,
        day: Optional[date] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Appointment]:
        if status and status != "all":
            lifecycle.validate_status(status)
        return self.repo.get_appointments(self.db, profile.id, day=day, status=status, search=search)

    def get_agenda(self, profile: Profile, day: Optional[date] = None) -> list[Appointment]:
        """One day's appointments ordered by start time"""
        day = day or time_calculator.today_local()
        return aggregator.appointments_for_day(
            self.repo.get_day_appointments(self.db, profile.id, day), day
        )

    def get_appointment(self, appointment_id: str, profile: Profile) -> Appointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id, profile.id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    def get_slots(
        self,
        profile: Profile,
        day: date,
        duration: Optional[int] = None,
        exclude_id: Optional[str] = None,
    ) -> list[dict]:
        """Bookable start times for the business window, flagged by availability"""
        settings = self.settings.get_settings(profile)
        duration = duration or settings.appointment_duration
        if duration <= 0:
            raise ValidationFailed("Duration must be positive")

        slots = time_calculator.generate_slots(
            settings.open_time, settings.close_time, SLOT_GRANULARITY_MINUTES
        )
        existing = self.repo.get_day_appointments(self.db, profile.id, day)
        return availability_service.slot_availability(
            day, slots, duration, existing, close_time=settings.close_time, exclude_id=exclude_id
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_appointment(self, data: AppointmentCreate, profile: Profile) -> Appointment:
        logger.info(
            f"📅 Booking for user_id: {profile.id}, client: {data.clientId}, "
            f"{data.date} {data.startTime}"
        )

        client = self._get_client(data.clientId, profile)
        services = self._get_catalog_services(data.serviceIds, profile)
        snapshots = self.repo.build_snapshots(services)

        end_time = self._validate_slot(
            profile, data.date, data.startTime, [s.duration for s in snapshots]
        )

        appointment = Appointment(
            user_id=profile.id,
            client_id=client.id,
            client_name=client.name,
            client_phone=client.phone,
            date=data.date,
            start_time=data.startTime,
            end_time=end_time,
            status="scheduled",
            notes=(data.notes or "").strip() or None,
        )
        appointment.services.extend(snapshots)

        try:
            self.repo.add_appointment(self.db, appointment)
            self.db.commit()
            self.db.refresh(appointment)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create appointment for user {profile.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create appointment") from e

        logger.info(f"✅ Appointment {appointment.id} booked {appointment.start_time}-{end_time}")
        return appointment

    def edit_appointment(
        self, appointment_id: str, data: AppointmentUpdate, profile: Profile
    ) -> Appointment:
        """
        Partial edit. Replacing services, moving the day/time and updating end
        time happen in one transaction: any failure leaves the row untouched.
        """
        appointment = self.get_appointment(appointment_id, profile)

        new_date = data.date or appointment.date
        new_start = data.startTime or appointment.start_time

        snapshots: Optional[list[AppointmentService]] = None
        if data.serviceIds is not None:
            snapshots = self._resnapshot(appointment, data.serviceIds, profile)
            durations = [s.duration for s in snapshots]
        else:
            durations = [s.duration for s in appointment.services]

        timing_changed = (
            new_date != appointment.date
            or new_start != appointment.start_time
            or snapshots is not None
        )

        new_end = appointment.end_time
        if timing_changed:
            if appointment.status == "cancelled":
                # Cancelled bookings don't hold their slot, but must still fit the opening hours
                new_end = time_calculator.compute_end_time(new_start, durations)
                self._check_business_hours(profile, new_start, new_end)
            else:
                new_end = self._validate_slot(
                    profile, new_date, new_start, durations, exclude_id=appointment.id
                )

        client: Optional[Client] = None
        if data.clientId is not None and data.clientId != appointment.client_id:
            client = self._get_client(data.clientId, profile)

        try:
            if snapshots is not None:
                self.repo.replace_services(self.db, appointment, snapshots)
            if client is not None:
                appointment.client_id = client.id
                appointment.client_name = client.name
                appointment.client_phone = client.phone
            appointment.date = new_date
            appointment.start_time = new_start
            appointment.end_time = new_end
            if data.notes is not None:
                appointment.notes = data.notes.strip() or None
            self.db.commit()
            self.db.refresh(appointment)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to edit appointment {appointment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update appointment") from e

        logger.info(f"✅ Appointment {appointment_id} updated")
        return appointment

    def change_status(
        self,
        appointment_id: str,
        status: str,
        profile: Profile,
        cancel_reason: Optional[str] = None,
    ) -> tuple[Appointment, bool]:
        """Apply a status transition. Returns (appointment, changed)"""
        appointment = self.get_appointment(appointment_id, profile)
        lifecycle.validate_status(status)

        if lifecycle.reenters_schedule(appointment.status, status):
            self._validate_slot(
                profile,
                appointment.date,
                appointment.start_time,
                [self._duration_of(appointment)],
                exclude_id=appointment.id,
            )

        changed = lifecycle.apply_status_transition(appointment, status, cancel_reason)
        if not changed:
            return appointment, False

        try:
            self.db.commit()
            self.db.refresh(appointment)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to change status of appointment {appointment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update appointment") from e

        return appointment, True

    def delete_appointment(self, appointment_id: str, profile: Profile) -> dict:
        """Delete the row; returns its last state for the lifecycle webhook"""
        appointment = self.get_appointment(appointment_id, profile)
        last_state = serialize_appointment(appointment)
        try:
            self.repo.delete_appointment(self.db, appointment)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete appointment {appointment_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete appointment") from e

        logger.info(f"🗑️ Appointment {appointment_id} deleted")
        return last_state

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_client(self, client_id: str, profile: Profile) -> Client:
        client = self.clients.get_client_by_id(self.db, client_id, profile.id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def _get_catalog_services(self, service_ids: list[str], profile: Profile) -> list[Service]:
        if not service_ids:
            raise ValidationFailed("Select at least one service")

        services = self.repo.get_services_by_ids(self.db, service_ids, profile.id)
        missing = set(service_ids) - {s.id for s in services}
        if missing:
            raise ValidationFailed(f"Unknown service(s): {', '.join(sorted(missing))}")
        return services

    def _resnapshot(
        self, appointment: Appointment, service_ids: list[str], profile: Profile
    ) -> list[AppointmentService]:
        """
        New service list for an edit. Services already on the appointment keep
        their booked snapshot; only newly added ones take the current catalog price.
        """
        booked = {s.service_id: s for s in appointment.services if s.service_id}
        new_ids = [sid for sid in service_ids if sid not in booked]
        catalog = {s.id: s for s in self._get_catalog_services(new_ids, profile)} if new_ids else {}

        snapshots = []
        for index, sid in enumerate(service_ids):
            if sid in booked:
                old = booked[sid]
                snapshots.append(
                    AppointmentService(
                        service_id=old.service_id,
                        service_name=old.service_name,
                        duration=old.duration,
                        price_at_time=old.price_at_time,
                        position=index,
                    )
                )
            else:
                snapshot = self.repo.build_snapshots([catalog[sid]])[0]
                snapshot.position = index
                snapshots.append(snapshot)
        return snapshots

    def _validate_slot(
        self,
        profile: Profile,
        day: date,
        start_time: str,
        durations: list[int],
        exclude_id: Optional[str] = None,
    ) -> str:
        """Business hours + overlap checks. Returns the computed end time"""
        end_time = time_calculator.compute_end_time(start_time, durations)
        self._check_business_hours(profile, start_time, end_time)

        existing = self.repo.get_day_appointments(self.db, profile.id, day)
        try:
            availability_service.ensure_no_conflict(
                day, start_time, time_calculator.total_duration(durations), existing, exclude_id
            )
        except SchedulingConflict as e:
            logger.warning(f"⚠️ Scheduling conflict on {day} at {start_time}: {e.conflicting_ids}")
            raise

        return end_time

    def _check_business_hours(self, profile: Profile, start_time: str, end_time: str) -> None:
        settings = self.settings.get_settings(profile)
        if not time_calculator.within_business_hours(
            start_time, end_time, settings.open_time, settings.close_time
        ):
            logger.warning(
                f"⚠️ Booking {start_time}-{end_time} outside business hours "
                f"{settings.open_time}-{settings.close_time}"
            )
            raise ValidationFailed(
                f"Appointment must fit within business hours "
                f"({settings.open_time[:5]}-{settings.close_time[:5]})"
            )

    @staticmethod
    def _duration_of(appointment: Appointment) -> int:
        return time_calculator.end_minutes(appointment.end_time) - time_calculator.to_minutes(
            appointment.start_time
        )
