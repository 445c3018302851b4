"""Service catalog repository - Database operations for services"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import AppointmentService, Service


class ServiceRepository:
    """Repository for catalog service database operations"""

    @staticmethod
    def get_services(db: Session, user_id: str, active_only: bool = False) -> list[Service]:
        query = db.query(Service).filter(Service.user_id == user_id)
        if active_only:
            query = query.filter(Service.is_active.is_(True))
        return query.order_by(Service.name.asc()).all()

    @staticmethod
    def get_service_by_id(db: Session, service_id: str, user_id: str) -> Optional[Service]:
        return db.query(Service).filter(Service.id == service_id, Service.user_id == user_id).first()

    @staticmethod
    def create_service(db: Session, user_id: str, **service_data) -> Service:
        service = Service(user_id=user_id, **service_data)
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def update_service(db: Session, service: Service, **updates) -> Service:
        for key, value in updates.items():
            if value is not None and hasattr(service, key):
                setattr(service, key, value)

        db.commit()
        db.refresh(service)
        return service

    @staticmethod
    def delete_service(db: Session, service: Service) -> None:
        """Delete the catalog row; booked snapshots keep name/duration/price"""
        db.query(AppointmentService).filter(AppointmentService.service_id == service.id).update(
            {AppointmentService.service_id: None}, synchronize_session=False
        )
        db.delete(service)
        db.commit()
