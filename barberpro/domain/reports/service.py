"""Reports service - dashboard and report figures for one business account"""

import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from ...config import DEFAULT_TIMEZONE
from ...models import Profile
from ...shared.errors import ValidationFailed
from ..inventory.repository import ProductRepository
from ..inventory.service import to_response as product_response
from ..scheduling.repository import AppointmentRepository
from ..scheduling.service import to_response as appointment_response
from ..scheduling.time_calculator import today_local
from . import aggregator
from .schemas import DashboardResponse, ProductReportResponse, StatusCounts, SummaryResponse

logger = logging.getLogger(__name__)


class ReportService:
    """Read-only service layer; every figure is derived from stored rows on request"""

    def __init__(self, db: Session):
        self.db = db
        self.appointments = AppointmentRepository()
        self.products = ProductRepository()

    def get_dashboard(self, profile: Profile, day: Optional[date] = None) -> DashboardResponse:
        today = today_local()
        day = day or today
        # Only today's view hides appointments that already ended
        now = datetime.now(ZoneInfo(DEFAULT_TIMEZONE)) if day == today else None

        rows = self.appointments.get_appointments(self.db, profile.id, day=day)
        data = aggregator.dashboard(rows, day, now=now)
        next_appointment = data["nextAppointment"]
        return DashboardResponse(
            **{
                **data,
                "nextAppointment": appointment_response(next_appointment) if next_appointment else None,
                "appointments": [appointment_response(a) for a in data["appointments"]],
            }
        )

    def get_summary(
        self, profile: Profile, start: Optional[date] = None, end: Optional[date] = None
    ) -> SummaryResponse:
        """
        Status counts, revenue and rankings for [start, end].

        Defaults to the current month so far; a missing bound is derived from
        the given one so a lone future start or a lone past end stays valid.
        """
        today = today_local()
        if end is None:
            end = max(start, today) if start else today
        if start is None:
            start = min(end, today.replace(day=1))
        if start > end:
            raise ValidationFailed("Start date must be on or before end date")

        rows = self.appointments.get_appointments(self.db, profile.id, start=start, end=end)
        logger.info(f"📊 Summary for user {profile.id}: {start} to {end}, {len(rows)} appointments")

        done = aggregator.completed(rows)
        total_revenue = aggregator.revenue(rows)
        return SummaryResponse(
            start=start,
            end=end,
            statusCounts=StatusCounts(**aggregator.status_counts(rows)),
            totalAppointments=len(rows),
            revenue=total_revenue,
            averageTicket=round(total_revenue / len(done), 2) if done else 0.0,
            services=aggregator.service_breakdown(rows),
            topClients=aggregator.top_clients(rows),
            monthlyRevenue=aggregator.monthly_revenue(rows),
        )

    def get_product_report(self, profile: Profile) -> ProductReportResponse:
        products = self.products.get_products(self.db, profile.id)
        return ProductReportResponse(
            **aggregator.product_summary(products),
            topProducts=[product_response(p) for p in aggregator.top_products(products)],
            categories=aggregator.category_breakdown(products),
            restock=[product_response(p) for p in aggregator.low_stock(products)],
        )
