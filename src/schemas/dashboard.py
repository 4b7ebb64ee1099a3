from __future__ import annotations

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import Field

from src.shared.base import BaseSchema

DeltaType = Literal["increase", "decrease", "neutral"]


class DashboardKpi(BaseSchema):
    value: float
    display_value: str
    delta: float
    delta_label: str
    delta_type: DeltaType
    note: str
    sparkline: List[float]


class DashboardKpis(BaseSchema):
    occupancy_today: DashboardKpi
    bookings_this_week: DashboardKpi
    holds_expiring: DashboardKpi
    payments_due: DashboardKpi
    cancellations_30d: DashboardKpi
    revenue_mtd: DashboardKpi


class DashboardStats(BaseSchema):
    kpis: DashboardKpis


class ScheduleItem(BaseSchema):
    time: str
    resource: Optional[str] = None
    title: str
    status: Literal["Tentative", "Confirmed", "Block-out"]
    booking_id: str


class PaymentDueItem(BaseSchema):
    invoice: str
    customer: Optional[str] = None
    type: str = "FINAL"
    amount: float
    due: Optional[date] = None
    status: Literal["Overdue", "Due Today", "Upcoming"]
    booking_id: str


class HoldItem(BaseSchema):
    booking: str
    resource: Optional[str] = None
    start: str
    expires_at: datetime
    expires_in: str
    customer: Optional[str] = None
    booking_id: str


class DashboardFilters(BaseSchema):
    resource_id: Optional[str] = None
    hall_owner_id: Optional[str] = None


class DashboardListFilters(DashboardFilters):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=500)
