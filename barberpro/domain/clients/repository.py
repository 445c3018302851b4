"""Client repository - Database operations for clients"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Client


class ClientRepository:
    """Repository for client database operations"""

    @staticmethod
    def get_clients(db: Session, user_id: str) -> list[Client]:
        """Get all clients for a business account"""
        return db.query(Client).filter(Client.user_id == user_id).order_by(Client.name.asc()).all()

    @staticmethod
    def get_client_by_id(db: Session, client_id: str, user_id: str) -> Optional[Client]:
        return db.query(Client).filter(Client.id == client_id, Client.user_id == user_id).first()

    @staticmethod
    def search_clients(db: Session, user_id: str, search: Optional[str] = None) -> list[Client]:
        """Name substring (case-insensitive) or phone substring"""
        query = db.query(Client).filter(Client.user_id == user_id)

        if search:
            query = query.filter(
                Client.name.icontains(search, autoescape=True)
                | Client.phone.contains(search, autoescape=True)
            )

        return query.order_by(Client.name.asc()).all()

    @staticmethod
    def create_client(db: Session, user_id: str, **client_data) -> Client:
        client = Client(user_id=user_id, **client_data)
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def update_client(db: Session, client: Client, **updates) -> Client:
        """Update a client with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(client, key):
                setattr(client, key, value)

        db.commit()
        db.refresh(client)
        return client

    @staticmethod
    def delete_client(db: Session, client: Client) -> int:
        """
        Delete a client row only.
        Returns the number of historical appointments detached from it.
        """
        detached = (
            db.query(Appointment)
            .filter(Appointment.client_id == client.id)
            .update({Appointment.client_id: None}, synchronize_session=False)
        )
        db.delete(client)
        db.commit()
        return detached
