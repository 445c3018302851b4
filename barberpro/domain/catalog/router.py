"""Service catalog router - FastAPI endpoints for the services page"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile, require_admin
from ...database import get_db
from ...models import Profile
from .schemas import ServiceCreate, ServiceResponse, ServiceUpdate
from .service import CatalogService, to_response

router = APIRouter(prefix="/services", tags=["Services"])


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


@router.get("", response_model=list[ServiceResponse])
async def get_services(
    active_only: bool = Query(False),
    current_profile: Profile = Depends(get_current_profile),
    service: CatalogService = Depends(get_catalog_service),
):
    return [to_response(s) for s in service.get_services(current_profile, active_only)]


@router.post("", response_model=ServiceResponse, status_code=201)
async def create_service(
    data: ServiceCreate,
    current_profile: Profile = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return to_response(service.create_service(data, current_profile))


@router.patch("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: str,
    data: ServiceUpdate,
    current_profile: Profile = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    """Edit a service; already booked appointments keep their snapshot"""
    return to_response(service.update_service(service_id, data, current_profile))


@router.delete("/{service_id}")
async def delete_service(
    service_id: str,
    current_profile: Profile = Depends(require_admin),
    service: CatalogService = Depends(get_catalog_service),
):
    return service.delete_service(service_id, current_profile)
