import uuid

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

APPOINTMENT_STATUSES = ("scheduled", "confirmed", "completed", "cancelled")
ROLES = ("admin", "barber")


def generate_uuid():
    """Generate a UUID string primary key (matches the hosted auth user ids)"""
    return str(uuid.uuid4())


class Profile(Base):
    __tablename__ = "profiles"

    # Same value as the auth provider's user id (token "sub" claim)
    id = Column(String(36), primary_key=True)
    email = Column(String(255), index=True, nullable=True)
    full_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    roles = relationship("UserRole", back_populates="profile", cascade="all, delete-orphan")
    business_settings = relationship(
        "BusinessSettings", back_populates="profile", uselist=False, cascade="all, delete-orphan"
    )

    @property
    def role(self) -> str:
        names = {r.role for r in self.roles}
        return "admin" if "admin" in names else (next(iter(names)) if names else "barber")


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role", name="uq_user_roles_user_role"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    role = Column(String(20), nullable=False, default="admin")  # admin, barber
    created_at = Column(DateTime, server_default=func.now())

    profile = relationship("Profile", back_populates="roles")


class BusinessSettings(Base):
    __tablename__ = "business_settings"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    shop_name = Column(String(255), nullable=False, default="BarberPro")
    open_time = Column(String(5), nullable=False, default="08:00")  # HH:MM
    close_time = Column(String(5), nullable=False, default="20:00")  # HH:MM
    appointment_duration = Column(Integer, nullable=False, default=90)  # minutes
    notifications_enabled = Column(Boolean, nullable=False, default=True)
    google_calendar_sync = Column(Boolean, nullable=False, default=False)
    n8n_webhook = Column(String(500), nullable=True)  # lifecycle events endpoint
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    profile = relationship("Profile", back_populates="business_settings")


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)  # (99) 99999-9999
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Service(Base):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    duration = Column(Integer, nullable=False)  # minutes
    price = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), index=True, nullable=False)
    # Historical appointments survive client deletion through the denormalized copy below
    client_id = Column(String(36), ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    client_name = Column(String(255), nullable=False)
    client_phone = Column(String(20), nullable=False, default="")
    date = Column(Date, index=True, nullable=False)  # plain calendar day, no zone
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM
    status = Column(String(20), nullable=False, default="scheduled")
    notes = Column(Text, nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancel_reason = Column(Text, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    services = relationship(
        "AppointmentService",
        back_populates="appointment",
        cascade="all, delete-orphan",
        order_by="AppointmentService.position",
    )


class AppointmentService(Base):
    """Value snapshot of a catalog service at booking time"""

    __tablename__ = "appointment_services"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    appointment_id = Column(
        String(36), ForeignKey("appointments.id", ondelete="CASCADE"), index=True, nullable=False
    )
    service_id = Column(String(36), ForeignKey("services.id", ondelete="SET NULL"), nullable=True)
    service_name = Column(String(255), nullable=False)
    duration = Column(Integer, nullable=False)
    price_at_time = Column(Float, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    appointment = relationship("Appointment", back_populates="services")


class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("profiles.id"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    cost = Column(Float, nullable=False, default=0.0)
    stock = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=False, default=0)
    sold_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
