"""Client router - FastAPI endpoints for client operations"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import ClientCreate, ClientResponse, ClientUpdate
from .service import ClientService

router = APIRouter(prefix="/clients", tags=["Clients"])


def get_client_service(db: Session = Depends(get_db)) -> ClientService:
    """Dependency injection for ClientService"""
    return ClientService(db)


@router.get("", response_model=list[ClientResponse])
async def get_clients(
    search: Optional[str] = Query(None, description="Name or phone fragment"),
    current_profile: Profile = Depends(get_current_profile),
    service: ClientService = Depends(get_client_service),
):
    """Get all clients with visit stats and activity bucket"""
    return service.get_clients(current_profile, search)


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    current_profile: Profile = Depends(get_current_profile),
    service: ClientService = Depends(get_client_service),
):
    return service.get_client_detail(client_id, current_profile)


@router.post("", response_model=ClientResponse, status_code=201)
async def create_client(
    data: ClientCreate,
    current_profile: Profile = Depends(get_current_profile),
    service: ClientService = Depends(get_client_service),
):
    """Create a new client"""
    return service.create_client(data, current_profile)


@router.patch("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    data: ClientUpdate,
    current_profile: Profile = Depends(get_current_profile),
    service: ClientService = Depends(get_client_service),
):
    """Update a client"""
    return service.update_client(client_id, data, current_profile)


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    current_profile: Profile = Depends(get_current_profile),
    service: ClientService = Depends(get_client_service),
):
    """Delete a client (historical appointments are kept)"""
    return service.delete_client(client_id, current_profile)
