"""Reports router - FastAPI endpoints for dashboard and reports"""

from datetime import date as calendar_date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_profile
from ...database import get_db
from ...models import Profile
from .schemas import DashboardResponse, ProductReportResponse, SummaryResponse
from .service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    """Dependency injection for ReportService"""
    return ReportService(db)


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    date: Optional[calendar_date] = Query(None, description="Defaults to today"),
    current_profile: Profile = Depends(get_current_profile),
    service: ReportService = Depends(get_report_service),
):
    return service.get_dashboard(current_profile, date)


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    start: Optional[calendar_date] = Query(None),
    end: Optional[calendar_date] = Query(None),
    current_profile: Profile = Depends(get_current_profile),
    service: ReportService = Depends(get_report_service),
):
    return service.get_summary(current_profile, start, end)


@router.get("/products", response_model=ProductReportResponse)
async def get_product_report(
    current_profile: Profile = Depends(get_current_profile),
    service: ReportService = Depends(get_report_service),
):
    return service.get_product_report(current_profile)
