from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from src.analytics.breakdowns import build_summary, payment_aging, resource_utilisation
from src.analytics.funnel import build_funnel, cancellation_breakdown
from src.analytics.kpis import compute_kpis
from src.analytics.records import bookings_in_range, is_cancelled, is_confirmed
from src.analytics.trends import build_history, build_pipeline, build_scenarios, forecast
from src.core.config import get_settings
from src.repositories.reports_repository import ReportsRepository
from src.schemas.reports import (
    CancellationResponse,
    ExecutiveKpisResponse,
    ForecastResponse,
    FunnelResponse,
    HistoricalDataResponse,
    PaymentAnalysis,
    PipelineDataResponse,
    ReportSummary,
    ResourceUtilisation,
)
from src.shared.time import canonical_period, previous_range, resolve_period

logger = logging.getLogger(__name__)

FORECAST_HISTORY_MONTHS = 6


class ReportsService:
    def __init__(self, repository: ReportsRepository) -> None:
        self.repository = repository
        self.settings = get_settings()

    def get_executive_kpis(self, owner_id: str, period: str, now: datetime) -> ExecutiveKpisResponse:
        period = canonical_period(period)
        current = resolve_period(period, now)
        previous = previous_range(current)
        bookings = self.repository.list_bookings(owner_id)
        invoices = self.repository.list_invoices(owner_id)
        logger.info(
            "Computing executive KPIs owner_id=%s period=%s bookings=%d invoices=%d",
            owner_id,
            period,
            len(bookings),
            len(invoices),
        )
        kpis = compute_kpis(
            current,
            previous,
            bookings,
            invoices,
            period=period,
            bookable_hours=self.settings.report_bookable_hours,
        )
        return ExecutiveKpisResponse(
            kpis=kpis, period=period, date_range=current, previous_range=previous
        )

    def get_historical_data(self, owner_id: str, months: int, now: datetime) -> HistoricalDataResponse:
        bookings = self.repository.list_bookings(owner_id)
        invoices = self.repository.list_invoices(owner_id)
        history = build_history(bookings, invoices, now, months=months)
        return HistoricalDataResponse(historical_data=history)

    def get_pipeline_data(self, owner_id: str, months: int, now: datetime) -> PipelineDataResponse:
        bookings = self.repository.list_bookings(owner_id)
        return PipelineDataResponse(pipeline_data=build_pipeline(bookings, now, months=months))

    def get_funnel(self, owner_id: str, period: str, now: datetime) -> FunnelResponse:
        period = canonical_period(period)
        window = resolve_period(period, now)
        period_bookings = bookings_in_range(self.repository.list_bookings(owner_id), window)
        return FunnelResponse(
            funnel_data=build_funnel(period_bookings, now), period=period, date_range=window
        )

    def get_payment_analysis(self, owner_id: str, now: datetime) -> PaymentAnalysis:
        # Confirmed covers completed, matched case-insensitively.
        bookings = self.repository.list_bookings(owner_id)
        confirmed = [booking for booking in bookings if is_confirmed(booking)]
        return payment_aging(confirmed, now)

    def get_resource_utilisation(self, owner_id: str) -> List[ResourceUtilisation]:
        resources = self.repository.list_resources(owner_id)
        bookings = self.repository.list_bookings(owner_id)
        return resource_utilisation(resources, bookings)

    def get_cancellation_reasons(self, owner_id: str, period: str, now: datetime) -> CancellationResponse:
        period = canonical_period(period)
        window = resolve_period(period, now)
        cancelled = [
            booking
            for booking in bookings_in_range(self.repository.list_bookings(owner_id), window)
            if is_cancelled(booking)
        ]
        return CancellationResponse(
            cancellation_data=cancellation_breakdown(cancelled),
            total_cancellations=len(cancelled),
            period=period,
        )

    def get_forecast(self, owner_id: str, periods: int, now: datetime) -> ForecastResponse:
        bookings = self.repository.list_bookings(owner_id)
        invoices = self.repository.list_invoices(owner_id)
        history = build_history(bookings, invoices, now, months=FORECAST_HISTORY_MONTHS)
        base = forecast(history, periods=periods)
        if not base:
            logger.debug("Forecast skipped owner_id=%s history_points=%d", owner_id, len(history))
        scenarios = build_scenarios(
            base,
            optimistic=self.settings.report_forecast_optimistic,
            cautious=self.settings.report_forecast_cautious,
        )
        return ForecastResponse(historical_data=history, forecast_data=base, scenarios=scenarios)

    def get_summary(self, owner_id: str, period: str, now: datetime) -> ReportSummary:
        period = canonical_period(period)
        window = resolve_period(period, now)
        period_bookings = bookings_in_range(self.repository.list_bookings(owner_id), window)
        return build_summary(
            period_bookings,
            period,
            window,
            bookable_hours=self.settings.report_bookable_hours,
        )
