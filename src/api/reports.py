from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends

from src.api.dependencies import get_caller_id, get_owner_resolver, get_reports_service
from src.core.config import get_settings
from src.schemas.reports import (
    CancellationResponse,
    ExecutiveKpisResponse,
    ForecastFilters,
    ForecastResponse,
    FunnelResponse,
    HistoricalDataResponse,
    MonthsFilters,
    OwnerFilters,
    PaymentAnalysis,
    PeriodFilters,
    PipelineDataResponse,
    ReportSummary,
    ResourceUtilisation,
)
from src.services.owner_resolver import OwnerResolver
from src.services.reports_service import ReportsService
from src.shared.response import Meta, ResponseEnvelope


router = APIRouter(prefix="/reports", tags=["reports"])

REPORTS_CALCULATION_VERSION = "v1"


def _build_meta(now: datetime, source: str, time_window: str) -> Meta:
    return Meta(
        as_of_date=now.date().isoformat(),
        source=source,
        time_window=time_window,
        calculation_version=REPORTS_CALCULATION_VERSION,
        currency=get_settings().report_currency_symbol,
        generated_at=now.isoformat(),
    )


@router.get("/executive-kpis")
def executive_kpis(
    filters: PeriodFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[ExecutiveKpisResponse]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_executive_kpis(owner_id, filters.period, now)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "bookings,invoices", data.period))


@router.get("/historical-data")
def historical_data(
    filters: MonthsFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[HistoricalDataResponse]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_historical_data(owner_id, filters.months, now)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "bookings,invoices", f"{filters.months}m"))


@router.get("/pipeline-data")
def pipeline_data(
    filters: MonthsFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[PipelineDataResponse]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_pipeline_data(owner_id, filters.months, now)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "bookings", f"next {filters.months}m"))


@router.get("/funnel-data")
def funnel_data(
    filters: PeriodFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[FunnelResponse]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_funnel(owner_id, filters.period, now)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "bookings", data.period))


@router.get("/payment-analysis")
def payment_analysis(
    filters: OwnerFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[PaymentAnalysis]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_payment_analysis(owner_id, now)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "bookings", "all"))


@router.get("/resource-utilisation")
def resource_utilisation(
    filters: OwnerFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[List[ResourceUtilisation]]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_resource_utilisation(owner_id)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "resources,bookings", "all"))


@router.get("/cancellation-reasons")
def cancellation_reasons(
    filters: PeriodFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[CancellationResponse]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_cancellation_reasons(owner_id, filters.period, now)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "bookings", data.period))


@router.get("/forecast")
def booking_forecast(
    filters: ForecastFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[ForecastResponse]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_forecast(owner_id, filters.periods, now)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "bookings,invoices", f"next {filters.periods}m"))


@router.get("/summary")
def report_summary(
    filters: PeriodFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: ReportsService = Depends(get_reports_service),
) -> ResponseEnvelope[ReportSummary]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_summary(owner_id, filters.period, now)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "bookings", data.period))
