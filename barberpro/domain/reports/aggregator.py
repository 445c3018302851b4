"""
Derived state over the raw appointment, product and client collections.

Everything here is a pure function over in-memory lists, recomputed on each
request. Revenue only ever counts completed appointments, valued at the price
snapshot taken at booking time.
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional

from ..scheduling.time_calculator import date_key, today_local

STATUS_KEYS = ("scheduled", "confirmed", "completed", "cancelled")

# Days since last completed visit -> bucket, checked from the largest threshold down
ACTIVITY_THRESHOLDS = ((40, "red"), (30, "orange"), (20, "yellow"))


def appointment_total(appointment) -> float:
    """Sum of the snapshot prices on one appointment"""
    return round(sum(s.price_at_time for s in appointment.services), 2)


def completed(appointments: Iterable) -> list:
    return [a for a in appointments if a.status == "completed"]


def in_range(appointments: Iterable, start, end=None) -> list:
    """
    Appointments whose calendar day falls in [start, end], both inclusive.

    start/end may be dates or datetimes; datetimes are normalized to their day
    (start-of-day / end-of-day). Without end, a single day is selected.
    """
    first = date_key(start)
    last = date_key(end) if end is not None else first
    return [a for a in appointments if first <= date_key(a.date) <= last]


def status_counts(appointments: Iterable, start=None, end=None) -> dict:
    selected = in_range(appointments, start, end) if start is not None else list(appointments)
    counts = dict.fromkeys(STATUS_KEYS, 0)
    for a in selected:
        if a.status in counts:
            counts[a.status] += 1
    return counts


def revenue(appointments: Iterable) -> float:
    return round(sum(appointment_total(a) for a in completed(appointments)), 2)


def low_stock(products: Iterable) -> list:
    return [p for p in products if p.stock <= p.min_stock]


def appointments_for_day(appointments: Iterable, day) -> list:
    # Fixed-width HH:MM sorts lexically
    return sorted(in_range(appointments, day), key=lambda a: a.start_time)


def last_completed_date(client_id: str, appointments: Iterable) -> Optional[date]:
    days = [date_key(a.date) for a in completed(appointments) if a.client_id == client_id]
    return max(days) if days else None


def client_activity(client_id: str, appointments: Iterable, today: Optional[date] = None) -> str:
    """
    Recency bucket from days since the client's most recent completed visit.

    new: never completed an appointment (scheduled/cancelled history ignored)
    active: < 20 days, yellow: >= 20, orange: >= 30, red: >= 40
    """
    last_visit = last_completed_date(client_id, appointments)
    if last_visit is None:
        return "new"

    elapsed = ((today or today_local()) - last_visit).days
    for threshold, bucket in ACTIVITY_THRESHOLDS:
        if elapsed >= threshold:
            return bucket
    return "active"


def client_stats(client_id: str, appointments: Iterable, today: Optional[date] = None) -> dict:
    appointments = list(appointments)
    own = [a for a in appointments if a.client_id == client_id]
    last_visit = last_completed_date(client_id, own)
    return {
        "totalAppointments": len(own),
        "completedAppointments": len(completed(own)),
        "totalSpent": revenue(own),
        "lastVisit": last_visit,
        "activity": client_activity(client_id, own, today),
    }


def service_breakdown(appointments: Iterable) -> list[dict]:
    """Per catalog service: how many completed bookings included it and what they billed"""
    rows: dict[str, dict] = {}
    for a in completed(appointments):
        for s in a.services:
            key = s.service_id or f"deleted:{s.service_name}"
            row = rows.setdefault(
                key, {"serviceId": s.service_id, "name": s.service_name, "count": 0, "revenue": 0.0}
            )
            row["count"] += 1
            row["revenue"] = round(row["revenue"] + s.price_at_time, 2)
    return sorted(rows.values(), key=lambda r: (-r["count"], r["name"]))


def top_clients(appointments: Iterable, limit: int = 5) -> list[dict]:
    rows: dict[str, dict] = {}
    for a in completed(appointments):
        key = a.client_id or f"deleted:{a.client_name}"
        row = rows.setdefault(
            key, {"clientId": a.client_id, "name": a.client_name, "visits": 0, "spent": 0.0}
        )
        row["visits"] += 1
        row["spent"] = round(row["spent"] + appointment_total(a), 2)
    return sorted(rows.values(), key=lambda r: (-r["spent"], r["name"]))[:limit]


def monthly_revenue(appointments: Iterable) -> list[dict]:
    months: dict[str, dict] = defaultdict(lambda: {"appointments": 0, "revenue": 0.0})
    for a in completed(appointments):
        month = date_key(a.date).strftime("%Y-%m")
        months[month]["appointments"] += 1
        months[month]["revenue"] = round(months[month]["revenue"] + appointment_total(a), 2)
    return [{"month": m, **months[m]} for m in sorted(months)]


def dashboard(appointments: Iterable, day, now: Optional[datetime] = None) -> dict:
    """Today's agenda numbers; the next appointment is the first still pending"""
    todays = appointments_for_day(appointments, day)
    pending = [a for a in todays if a.status in ("scheduled", "confirmed")]
    if now is not None:
        current = now.strftime("%H:%M")
        upcoming = [a for a in pending if a.end_time > current]
    else:
        upcoming = pending

    return {
        "date": date_key(day),
        "totalAppointments": len(todays),
        "completedAppointments": len(completed(todays)),
        "upcomingAppointments": len(pending),
        "cancelledAppointments": sum(1 for a in todays if a.status == "cancelled"),
        "revenue": revenue(todays),
        "nextAppointment": upcoming[0] if upcoming else None,
        "appointments": todays,
    }


# Products


def product_summary(products: Iterable) -> dict:
    products = list(products)
    total_revenue = round(sum(p.price * p.sold_count for p in products), 2)
    total_cost = round(sum(p.cost * p.sold_count for p in products), 2)
    return {
        "totalRevenue": total_revenue,
        "totalCost": total_cost,
        "totalProfit": round(total_revenue - total_cost, 2),
        "totalSold": sum(p.sold_count for p in products),
        "totalStock": sum(p.stock for p in products),
        "lowStockCount": len(low_stock(products)),
    }


def top_products(products: Iterable, limit: int = 8) -> list:
    return sorted(products, key=lambda p: (-p.sold_count, p.name))[:limit]


def category_breakdown(products: Iterable) -> list[dict]:
    rows: dict[str, dict] = {}
    for p in products:
        category = p.category or ""
        row = rows.setdefault(category, {"category": category, "revenue": 0.0, "sold": 0})
        row["revenue"] = round(row["revenue"] + p.price * p.sold_count, 2)
        row["sold"] += p.sold_count
    return sorted(rows.values(), key=lambda r: -r["revenue"])
