"""
Outbound automation webhook
Posts appointment lifecycle events to the URL configured in business settings
(n8n or any other automation endpoint). Fire-and-forget: failures are logged only.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from ..config import WEBHOOK_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

APPOINTMENT_EVENTS = (
    "appointment.created",
    "appointment.updated",
    "appointment.status_changed",
    "appointment.deleted",
)


def serialize_appointment(appointment) -> dict:
    """JSON-safe snapshot of an appointment for external consumers"""
    return {
        "id": appointment.id,
        "clientId": appointment.client_id,
        "clientName": appointment.client_name,
        "clientPhone": appointment.client_phone,
        "date": appointment.date.isoformat(),
        "startTime": appointment.start_time,
        "endTime": appointment.end_time,
        "status": appointment.status,
        "notes": appointment.notes,
        "cancelReason": appointment.cancel_reason,
        "cancelledAt": appointment.cancelled_at.isoformat() if appointment.cancelled_at else None,
        "completedAt": appointment.completed_at.isoformat() if appointment.completed_at else None,
        "services": [
            {
                "id": s.service_id,
                "name": s.service_name,
                "duration": s.duration,
                "price": s.price_at_time,
            }
            for s in appointment.services
        ],
    }


async def send_appointment_event(
    webhook_url: Optional[str], event: str, appointment_data: dict
) -> bool:
    """
    POST {event, appointment, occurredAt} to webhook_url.

    Returns:
        bool: True when the endpoint answered 2xx
    """
    if not webhook_url:
        return False
    if event not in APPOINTMENT_EVENTS:
        raise ValueError(f"Unknown appointment event: {event}")

    payload = {
        "event": event,
        "appointment": appointment_data,
        "occurredAt": datetime.now(timezone.utc).isoformat(),
    }

    try:
        logger.info(f"🚀 Sending {event} webhook for appointment {appointment_data.get('id')}")
        async with httpx.AsyncClient(timeout=WEBHOOK_TIMEOUT_SECONDS) as client:
            response = await client.post(webhook_url, json=payload)

        if response.is_success:
            logger.info(f"✅ Webhook {event} delivered ({response.status_code})")
            return True

        logger.error(f"❌ Webhook {event} rejected: HTTP {response.status_code}")
        return False
    except httpx.HTTPError as e:
        logger.error(f"❌ Webhook {event} delivery failed: {e}")
        return False
