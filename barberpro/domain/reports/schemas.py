"""Report schemas - Pydantic models for dashboard and report payloads"""

from datetime import date as calendar_date
from typing import Optional

from pydantic import BaseModel

from ..inventory.schemas import ProductResponse
from ..scheduling.schemas import AppointmentResponse


class StatusCounts(BaseModel):
    scheduled: int = 0
    confirmed: int = 0
    completed: int = 0
    cancelled: int = 0


class DashboardResponse(BaseModel):
    date: calendar_date
    totalAppointments: int
    completedAppointments: int
    upcomingAppointments: int
    cancelledAppointments: int
    revenue: float
    nextAppointment: Optional[AppointmentResponse] = None
    appointments: list[AppointmentResponse]


class ServiceBreakdownRow(BaseModel):
    serviceId: Optional[str] = None
    name: str
    count: int
    revenue: float


class TopClientRow(BaseModel):
    clientId: Optional[str] = None
    name: str
    visits: int
    spent: float


class MonthlyRevenueRow(BaseModel):
    month: str
    appointments: int
    revenue: float


class SummaryResponse(BaseModel):
    start: calendar_date
    end: calendar_date
    statusCounts: StatusCounts
    totalAppointments: int
    revenue: float
    averageTicket: float
    services: list[ServiceBreakdownRow]
    topClients: list[TopClientRow]
    monthlyRevenue: list[MonthlyRevenueRow]


class CategoryRow(BaseModel):
    category: str
    revenue: float
    sold: int


class ProductReportResponse(BaseModel):
    totalRevenue: float
    totalCost: float
    totalProfit: float
    totalSold: int
    totalStock: int
    lowStockCount: int
    topProducts: list[ProductResponse]
    categories: list[CategoryRow]
    restock: list[ProductResponse]
