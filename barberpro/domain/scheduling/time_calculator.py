"""Time-of-day arithmetic and bookable slot generation.

Times are fixed-width ``HH:MM`` labels, so lexical order equals chronological
order. Appointments never cross midnight.
"""

from datetime import date, datetime
from typing import Iterable
from zoneinfo import ZoneInfo

from ...config import DEFAULT_TIMEZONE
from ...shared.errors import ValidationFailed

MINUTES_PER_DAY = 24 * 60


def to_minutes(label: str) -> int:
    """Convert ``HH:MM`` (or ``HH:MM:SS``) to minutes since midnight"""
    try:
        hours, minutes = label.split(":")[:2]
        value = int(hours) * 60 + int(minutes)
    except (AttributeError, ValueError) as e:
        raise ValidationFailed(f"Invalid time: {label!r}") from e
    if not 0 <= value < MINUTES_PER_DAY:
        raise ValidationFailed(f"Invalid time: {label!r}")
    return value


def from_minutes(total: int) -> str:
    if not 0 <= total <= MINUTES_PER_DAY:
        raise ValidationFailed("Appointments cannot cross midnight")
    if total == MINUTES_PER_DAY:
        return "24:00"
    return f"{total // 60:02d}:{total % 60:02d}"


def add_minutes(start_time: str, minutes: int) -> str:
    return from_minutes(to_minutes(start_time) + minutes)


def total_duration(durations: Iterable[int]) -> int:
    return sum(durations)


def compute_end_time(start_time: str, durations: Iterable[int]) -> str:
    """End time = start + sum of the attached service durations"""
    duration = total_duration(durations)
    if duration <= 0:
        raise ValidationFailed("Select at least one service")
    return add_minutes(start_time, duration)


def generate_slots(open_time: str, close_time: str, step_minutes: int = 10) -> list[str]:
    """
    Ordered HH:MM labels covering [open_time, close_time), one every step_minutes.

    An empty or inverted window yields no slots.
    """
    if step_minutes <= 0:
        raise ValidationFailed("Slot granularity must be positive")

    start = to_minutes(open_time)
    end = to_minutes(close_time)
    return [from_minutes(m) for m in range(start, end, step_minutes)]


def within_business_hours(start_time: str, end_time: str, open_time: str, close_time: str) -> bool:
    return to_minutes(open_time) <= to_minutes(start_time) and (
        end_minutes(end_time) <= to_minutes(close_time)
    )


def end_minutes(label: str) -> int:
    # "24:00" is a valid end of day
    return MINUTES_PER_DAY if label == "24:00" else to_minutes(label)


def today_local(tz_name: str = DEFAULT_TIMEZONE) -> date:
    """Calendar day in the business time zone, the one date key used everywhere"""
    return datetime.now(ZoneInfo(tz_name)).date()


def date_key(value) -> date:
    """Normalize a date, datetime or ISO string to a calendar day"""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(ZoneInfo(DEFAULT_TIMEZONE))
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as e:
        raise ValidationFailed(f"Invalid date: {value!r}") from e
