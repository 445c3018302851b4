"""Overlap detection for appointment booking"""

from datetime import date
from typing import Iterable, Optional

from ...shared.errors import SchedulingConflict
from .time_calculator import add_minutes, date_key, end_minutes, to_minutes


def _blocking(existing: Iterable, day: date, exclude_id: Optional[str]):
    for other in existing:
        if other.status == "cancelled":
            continue
        if exclude_id is not None and other.id == exclude_id:
            continue
        if date_key(other.date) != day:
            continue
        yield other


def find_conflicts(
    day,
    start_time: str,
    duration_minutes: int,
    existing: Iterable,
    exclude_id: Optional[str] = None,
) -> list:
    """
    Every non-cancelled appointment on the same day whose [start, end) interval
    overlaps the candidate's.
    """
    day = date_key(day)
    candidate_start = to_minutes(start_time)
    candidate_end = end_minutes(add_minutes(start_time, duration_minutes))

    return [
        other
        for other in _blocking(existing, day, exclude_id)
        if candidate_start < end_minutes(other.end_time)
        and candidate_end > to_minutes(other.start_time)
    ]


def has_conflict(
    day,
    start_time: str,
    duration_minutes: int,
    existing: Iterable,
    exclude_id: Optional[str] = None,
) -> bool:
    day = date_key(day)
    candidate_start = to_minutes(start_time)
    candidate_end = end_minutes(add_minutes(start_time, duration_minutes))

    for other in _blocking(existing, day, exclude_id):
        if candidate_start < end_minutes(other.end_time) and candidate_end > to_minutes(
            other.start_time
        ):
            return True
    return False


def ensure_no_conflict(
    day,
    start_time: str,
    duration_minutes: int,
    existing: Iterable,
    exclude_id: Optional[str] = None,
) -> None:
    conflicts = find_conflicts(day, start_time, duration_minutes, existing, exclude_id)
    if conflicts:
        first = min(conflicts, key=lambda a: a.start_time)
        raise SchedulingConflict(
            f"Time slot unavailable: overlaps the appointment from "
            f"{first.start_time} to {first.end_time} ({first.client_name})",
            conflicting_ids=[a.id for a in conflicts],
        )


def slot_availability(
    day,
    slots: list[str],
    duration_minutes: int,
    existing: Iterable,
    close_time: Optional[str] = None,
    exclude_id: Optional[str] = None,
) -> list[dict]:
    """Mark each slot available when a booking of duration_minutes fits there"""
    day = date_key(day)
    same_day = list(_blocking(existing, day, exclude_id))
    closing = to_minutes(close_time) if close_time else None

    result = []
    for slot in slots:
        start = to_minutes(slot)
        end = start + duration_minutes
        available = closing is None or end <= closing
        if available:
            available = not any(
                start < end_minutes(o.end_time) and end > to_minutes(o.start_time)
                for o in same_day
            )
        result.append({"time": slot, "available": available})
    return result
