"""Appointment repository - Database operations for appointments and their service snapshots"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import Appointment, AppointmentService, Service


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_appointments(
        db: Session,
        user_id: str,
        day: Optional[date] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[Appointment]:
        """Appointments for a business account, newest day first"""
        query = (
            db.query(Appointment)
            .options(selectinload(Appointment.services))
            .filter(Appointment.user_id == user_id)
        )

        if day is not None:
            query = query.filter(Appointment.date == day)
        if start is not None:
            query = query.filter(Appointment.date >= start)
        if end is not None:
            query = query.filter(Appointment.date <= end)
        if status and status != "all":
            query = query.filter(Appointment.status == status)
        if search:
            query = query.filter(
                Appointment.client_name.icontains(search, autoescape=True)
                | Appointment.client_phone.contains(search, autoescape=True)
            )

        return query.order_by(Appointment.date.desc(), Appointment.start_time.asc()).all()

    @staticmethod
    def get_day_appointments(db: Session, user_id: str, day: date) -> list[Appointment]:
        """Every appointment of one day (cancelled included, callers filter)"""
        return (
            db.query(Appointment)
            .filter(Appointment.user_id == user_id, Appointment.date == day)
            .order_by(Appointment.start_time.asc())
            .all()
        )

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: str, user_id: str) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .options(selectinload(Appointment.services))
            .filter(Appointment.id == appointment_id, Appointment.user_id == user_id)
            .first()
        )

    @staticmethod
    def get_services_by_ids(db: Session, service_ids: list[str], user_id: str) -> list[Service]:
        """Catalog services in the order the ids were given"""
        found = {
            s.id: s
            for s in db.query(Service)
            .filter(Service.id.in_(service_ids), Service.user_id == user_id)
            .all()
        }
        return [found[sid] for sid in service_ids if sid in found]

    @staticmethod
    def build_snapshots(services: list[Service]) -> list[AppointmentService]:
        """Copy name, duration and current price so later catalog edits don't leak in"""
        return [
            AppointmentService(
                service_id=s.id,
                service_name=s.name,
                duration=s.duration,
                price_at_time=s.price,
                position=index,
            )
            for index, s in enumerate(services)
        ]

    @staticmethod
    def add_appointment(db: Session, appointment: Appointment) -> Appointment:
        """Stage a new appointment with its snapshots (caller commits)"""
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def replace_services(
        db: Session, appointment: Appointment, snapshots: list[AppointmentService]
    ) -> None:
        """Swap the service list inside the caller's transaction (delete-orphan removes old rows)"""
        appointment.services.clear()
        db.flush()
        appointment.services.extend(snapshots)

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()
