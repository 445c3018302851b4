"""
Pytest configuration and fixtures.

Tests run against an in-memory SQLite database (one shared connection) and
authenticate with real HS256 tokens signed with the test secret below.
"""

import os

# Must be set before barberpro.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret-for-barberpro"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"

import time
from datetime import date

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from barberpro.config import SUPABASE_JWT_AUDIENCE, SUPABASE_JWT_SECRET
from barberpro.database import Base, SessionLocal, engine
from barberpro.main import app
from barberpro.models import Appointment, AppointmentService, Product

OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_ID = "22222222-2222-2222-2222-222222222222"
BOOKING_DAY = "2030-03-12"


def make_token(sub: str, email: str = None, expires_in: int = 3600, **claims) -> str:
    now = int(time.time())
    payload = {
        "sub": sub,
        "aud": SUPABASE_JWT_AUDIENCE,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    if email:
        payload["email"] = email
    payload.update(claims)
    return jwt.encode(payload, SUPABASE_JWT_SECRET, algorithm="HS256")


# ============================================================================
# DATABASE / CLIENT
# ============================================================================


@pytest.fixture
def client():
    """TestClient over a freshly created schema"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with TestClient(app) as test_client:
        yield test_client
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(client):
    """Session for direct assertions on stored rows"""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def auth_headers():
    token = make_token(OWNER_ID, "owner@barberpro.test", user_metadata={"full_name": "Carlos Dono"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers():
    token = make_token(OTHER_ID, "other@barberpro.test")
    return {"Authorization": f"Bearer {token}"}


# ============================================================================
# API FACTORIES
# ============================================================================


@pytest.fixture
def new_client(client, auth_headers):
    def _create(name="João Silva", phone="11987654321", **extra):
        resp = client.post(
            "/clients", json={"name": name, "phone": phone, **extra}, headers=auth_headers
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create


@pytest.fixture
def new_service(client, auth_headers):
    def _create(name="Corte", duration=30, price=35.0, **extra):
        resp = client.post(
            "/services",
            json={"name": name, "duration": duration, "price": price, **extra},
            headers=auth_headers,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create


@pytest.fixture
def book(client, auth_headers):
    """Book an appointment; returns the raw response"""

    def _book(client_id, service_ids, start_time="09:00", day=BOOKING_DAY, **extra):
        return client.post(
            "/appointments",
            json={
                "clientId": client_id,
                "date": day,
                "startTime": start_time,
                "serviceIds": service_ids,
                **extra,
            },
            headers=auth_headers,
        )

    return _book


# ============================================================================
# IN-MEMORY OBJECTS (no session)
# ============================================================================


@pytest.fixture
def make_appointment():
    def _make(
        appointment_id="a1",
        start_time="09:00",
        end_time="10:30",
        status="scheduled",
        day=date(2030, 3, 12),
        client_id="c1",
        client_name="João Silva",
        prices=(35.0,),
        durations=None,
    ):
        appointment = Appointment(
            id=appointment_id,
            user_id=OWNER_ID,
            client_id=client_id,
            client_name=client_name,
            client_phone="(11) 98765-4321",
            date=day,
            start_time=start_time,
            end_time=end_time,
            status=status,
        )
        durations = durations or [30] * len(prices)
        appointment.services = [
            AppointmentService(
                service_id=f"s{index}",
                service_name=f"Service {index}",
                duration=durations[index],
                price_at_time=price,
                position=index,
            )
            for index, price in enumerate(prices)
        ]
        return appointment

    return _make


@pytest.fixture
def make_product():
    def _make(name="Pomada", price=30.0, cost=12.0, stock=10, min_stock=3, sold=0, category="Pomade"):
        return Product(
            id=f"p-{name}",
            user_id=OWNER_ID,
            name=name,
            category=category,
            price=price,
            cost=cost,
            stock=stock,
            min_stock=min_stock,
            sold_count=sold,
        )

    return _make
