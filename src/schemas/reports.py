from __future__ import annotations

from datetime import date
from typing import Dict, List, Literal, Optional

from pydantic import Field

from src.shared.base import BaseSchema
from src.shared.time import DateRange


class KpiResult(BaseSchema):
    value: float
    delta: float
    trend: Literal["up", "down", "neutral"]
    period: str


class ExecutiveKpis(BaseSchema):
    bookings: KpiResult
    revenue: KpiResult
    utilisation: KpiResult
    deposit_conversion: KpiResult
    on_time_payments: KpiResult
    cancellation_rate: KpiResult


class ExecutiveKpisResponse(BaseSchema):
    kpis: ExecutiveKpis
    period: str
    date_range: DateRange
    previous_range: DateRange


class HistoricalPoint(BaseSchema):
    month: str
    period_start: date
    bookings: int
    revenue: float
    is_forecast: bool = False


class HistoricalDataResponse(BaseSchema):
    historical_data: List[HistoricalPoint]


class PipelineDataResponse(BaseSchema):
    pipeline_data: List[HistoricalPoint]


class ForecastScenarios(BaseSchema):
    base: List[HistoricalPoint]
    optimistic: List[HistoricalPoint]
    cautious: List[HistoricalPoint]


class ForecastResponse(BaseSchema):
    historical_data: List[HistoricalPoint]
    forecast_data: List[HistoricalPoint]
    scenarios: ForecastScenarios


class FunnelStage(BaseSchema):
    stage: str
    count: int
    dropoff: int
    reason: Optional[str] = None


class FunnelResponse(BaseSchema):
    funnel_data: List[FunnelStage]
    period: str
    date_range: DateRange


class CancellationReason(BaseSchema):
    reason: str
    count: int
    rate: int


class CancellationResponse(BaseSchema):
    cancellation_data: List[CancellationReason]
    total_cancellations: int
    period: str


class AgingBucket(BaseSchema):
    bucket: str
    amount: float = 0.0
    count: int = 0


class PaymentAnalysis(BaseSchema):
    on_time: int
    overdue: int
    aging: List[AgingBucket]


class SummaryMetrics(BaseSchema):
    total_bookings: int
    total_revenue: float
    average_booking_value: float
    unique_customers: int
    utilization: float
    conversion_rate: float
    total_requests: int


class StatusBreakdown(BaseSchema):
    confirmed: int
    pending: int
    cancelled: int
    completed: int


class SummaryBreakdown(BaseSchema):
    by_status: StatusBreakdown
    by_event_type: Dict[str, int]


class ReportSummary(BaseSchema):
    period: str
    date_range: DateRange
    metrics: SummaryMetrics
    breakdown: SummaryBreakdown


class HourUtilisation(BaseSchema):
    hour: str
    rate: int


class DayUtilisation(BaseSchema):
    day: str
    utilisation: List[HourUtilisation]


class ResourceUtilisation(BaseSchema):
    resource_id: str
    name: Optional[str] = None
    data: List[DayUtilisation]


class PeriodFilters(BaseSchema):
    period: str = "90d"
    hall_owner_id: Optional[str] = None


class MonthsFilters(BaseSchema):
    months: int = Field(default=6, ge=1, le=36)
    hall_owner_id: Optional[str] = None


class ForecastFilters(BaseSchema):
    periods: int = Field(default=6, ge=1, le=24)
    hall_owner_id: Optional[str] = None


class OwnerFilters(BaseSchema):
    hall_owner_id: Optional[str] = None
