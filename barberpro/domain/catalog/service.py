"""Service catalog service - Business logic for the services offered by the shop"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Profile, Service
from .repository import ServiceRepository
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate

logger = logging.getLogger(__name__)


def to_response(service: Service) -> ServiceResponse:
    return ServiceResponse(
        id=service.id,
        name=service.name,
        duration=service.duration,
        price=service.price,
        isActive=service.is_active,
        createdAt=service.created_at,
    )


class CatalogService:
    """Service layer for catalog business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ServiceRepository()

    def get_services(self, profile: Profile, active_only: bool = False) -> list[Service]:
        return self.repo.get_services(self.db, profile.id, active_only)

    def get_service(self, service_id: str, profile: Profile) -> Service:
        service = self.repo.get_service_by_id(self.db, service_id, profile.id)
        if not service:
            raise HTTPException(status_code=404, detail="Service not found")
        return service

    def create_service(self, data: ServiceCreate, profile: Profile) -> Service:
        logger.info(f"✂️ Creating service '{data.name}' for user_id: {profile.id}")
        try:
            return self.repo.create_service(
                self.db,
                profile.id,
                name=data.name,
                duration=data.duration,
                price=data.price,
                is_active=data.isActive,
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create service for user {profile.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save service") from e

    def update_service(self, service_id: str, data: ServiceUpdate, profile: Profile) -> Service:
        service = self.get_service(service_id, profile)
        updates = {
            "name": data.name.strip() if data.name else None,
            "duration": data.duration,
            "price": data.price,
            "is_active": data.isActive,
        }
        try:
            service = self.repo.update_service(self.db, service, **updates)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update service {service_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save service") from e

        logger.info(f"✅ Service {service_id} updated")
        return service

    def delete_service(self, service_id: str, profile: Profile) -> dict:
        service = self.get_service(service_id, profile)
        try:
            self.repo.delete_service(self.db, service)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete service {service_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete service") from e
        return {"message": "Service deleted"}
