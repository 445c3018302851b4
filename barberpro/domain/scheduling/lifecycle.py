"""
Appointment status transitions and their timestamp side effects

Appointment statuses: scheduled, confirmed, completed, cancelled

Every status is reachable from every other one. Moving back to "scheduled"
is the correction workflow: it wipes the terminal-state stamps. Only the most
recent cancel/complete stamp is kept (no audit trail).
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from ...models import APPOINTMENT_STATUSES
from ...shared.errors import ValidationFailed

logger = logging.getLogger(__name__)


def validate_status(status: str) -> str:
    if status not in APPOINTMENT_STATUSES:
        raise ValidationFailed(
            f"Invalid status '{status}'. Expected one of: {', '.join(APPOINTMENT_STATUSES)}"
        )
    return status


def apply_status_transition(
    appointment,
    new_status: str,
    cancel_reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> bool:
    """
    Move an appointment to new_status and stamp the related fields in place.

    Args:
        appointment: Object with status, cancelled_at, cancel_reason and completed_at
        new_status: Target status
        cancel_reason: Free text, only used when cancelling (optional)
        now: Clock override

    Returns:
        bool: False when the appointment already had new_status (nothing touched)
    """
    validate_status(new_status)

    if appointment.status == new_status:
        logger.debug(f"ℹ️ Appointment {appointment.id} already {new_status}, no-op")
        return False

    stamp = now or datetime.now(timezone.utc)
    previous = appointment.status

    if new_status == "cancelled":
        appointment.cancelled_at = stamp
        appointment.cancel_reason = (cancel_reason or "").strip() or None
        appointment.completed_at = None
    elif new_status == "completed":
        # Revenue is recognized from this point on
        appointment.completed_at = stamp
        appointment.cancelled_at = None
        appointment.cancel_reason = None
    elif new_status == "scheduled":
        appointment.cancelled_at = None
        appointment.cancel_reason = None
        appointment.completed_at = None
    # confirmed: status value only

    appointment.status = new_status
    logger.info(f"✅ Appointment {appointment.id} transitioned: {previous} → {new_status}")
    return True


def reenters_schedule(old_status: str, new_status: str) -> bool:
    """A cancelled appointment coming back occupies its interval again"""
    return old_status == "cancelled" and new_status != "cancelled"
