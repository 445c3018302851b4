"""Client service - Business logic for client operations"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Client, Profile
from ..reports import aggregator
from ..scheduling.repository import AppointmentRepository
from .repository import ClientRepository
from .schemas import ClientCreate, ClientResponse, ClientUpdate

logger = logging.getLogger(__name__)


class ClientService:
    """Service layer for client business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ClientRepository()
        self.appointments = AppointmentRepository()

    def get_clients(self, profile: Profile, search: Optional[str] = None) -> list[ClientResponse]:
        """Clients with their visit statistics and recency bucket"""
        clients = self.repo.search_clients(self.db, profile.id, search)
        appointments = self.appointments.get_appointments(self.db, profile.id)
        return [self.to_response(c, appointments) for c in clients]

    def get_client(self, client_id: str, profile: Profile) -> Client:
        client = self.repo.get_client_by_id(self.db, client_id, profile.id)
        if not client:
            raise HTTPException(status_code=404, detail="Client not found")
        return client

    def get_client_detail(self, client_id: str, profile: Profile) -> ClientResponse:
        client = self.get_client(client_id, profile)
        appointments = self.appointments.get_appointments(self.db, profile.id)
        return self.to_response(client, appointments)

    def create_client(self, data: ClientCreate, profile: Profile) -> ClientResponse:
        logger.info(f"📥 Creating client for user_id: {profile.id}")
        try:
            client = self.repo.create_client(
                self.db, profile.id, name=data.name, phone=data.phone, email=data.email
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create client for user {profile.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save client") from e

        logger.info(f"✅ Client {client.id} created")
        return self.to_response(client, [])

    def update_client(self, client_id: str, data: ClientUpdate, profile: Profile) -> ClientResponse:
        client = self.get_client(client_id, profile)

        updates = {}
        if data.name is not None:
            updates["name"] = data.name
        if data.phone is not None:
            updates["phone"] = data.phone

        try:
            if data.email is not None:
                client.email = data.email or None
            client = self.repo.update_client(self.db, client, **updates)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update client {client_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save client") from e

        appointments = self.appointments.get_appointments(self.db, profile.id)
        return self.to_response(client, appointments)

    def delete_client(self, client_id: str, profile: Profile) -> dict:
        """Delete a client; their past appointments stay with the copied name/phone"""
        client = self.get_client(client_id, profile)
        try:
            detached = self.repo.delete_client(self.db, client)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to delete client {client_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete client") from e

        logger.info(f"🗑️ Client {client_id} deleted ({detached} appointments kept)")
        return {"message": "Client deleted", "appointmentsKept": detached}

    @staticmethod
    def to_response(client: Client, appointments: list) -> ClientResponse:
        stats = aggregator.client_stats(client.id, appointments)
        return ClientResponse(
            id=client.id,
            name=client.name,
            phone=client.phone,
            email=client.email,
            createdAt=client.created_at,
            totalAppointments=stats["totalAppointments"],
            completedAppointments=stats["completedAppointments"],
            totalSpent=stats["totalSpent"],
            lastVisit=stats["lastVisit"],
            activity=stats["activity"],
        )
