from __future__ import annotations

from typing import Iterable, List

from src.analytics.metrics import (
    DEFAULT_BOOKABLE_HOURS,
    conversion_rate,
    occupancy,
    percent_delta,
    point_delta,
    reconciled_revenue,
    trend_direction,
)
from src.analytics.records import (
    bookings_in_range,
    invoices_in_range,
    is_cancelled,
    is_confirmed,
    is_pending,
)
from src.models.reports import BookingRecord, InvoiceRecord
from src.schemas.reports import ExecutiveKpis, KpiResult
from src.shared.time import DateRange

QUARTER_PERIOD = "90d"


class PeriodMetrics:
    """Raw metric values for one window; deltas are derived by comparing two of these."""

    def __init__(
        self,
        bookings: Iterable[BookingRecord],
        invoices: Iterable[InvoiceRecord],
        window: DateRange,
        bookable_hours: float = DEFAULT_BOOKABLE_HOURS,
    ) -> None:
        period_bookings = bookings_in_range(bookings, window)
        confirmed = [booking for booking in period_bookings if is_confirmed(booking)]
        confirmed_count = len(confirmed)
        pending_count = sum(1 for booking in period_bookings if is_pending(booking))
        cancelled_count = sum(1 for booking in period_bookings if is_cancelled(booking))
        decided = confirmed_count + pending_count

        self.bookings = confirmed_count
        self.revenue = reconciled_revenue(invoices_in_range(invoices, window), confirmed)
        self.utilisation = occupancy(confirmed, bookable_hours)
        self.deposit_conversion = conversion_rate(confirmed_count, decided)
        # Same formula as deposit conversion until payment timeliness is captured upstream.
        self.on_time_payments = self.deposit_conversion
        self.cancellation_rate = conversion_rate(cancelled_count, decided)


def compute_kpis(
    current: DateRange,
    previous: DateRange,
    bookings: Iterable[BookingRecord],
    invoices: Iterable[InvoiceRecord],
    period: str = QUARTER_PERIOD,
    bookable_hours: float = DEFAULT_BOOKABLE_HOURS,
) -> ExecutiveKpis:
    booking_list: List[BookingRecord] = list(bookings)
    invoice_list: List[InvoiceRecord] = list(invoices)
    now_metrics = PeriodMetrics(booking_list, invoice_list, current, bookable_hours)
    prior_metrics = PeriodMetrics(booking_list, invoice_list, previous, bookable_hours)
    volume_label = "QoQ" if period == QUARTER_PERIOD else "MoM"

    return ExecutiveKpis(
        bookings=_growth_kpi(now_metrics.bookings, prior_metrics.bookings, volume_label),
        revenue=_growth_kpi(now_metrics.revenue, prior_metrics.revenue, volume_label),
        utilisation=_points_kpi(now_metrics.utilisation, prior_metrics.utilisation, "pp"),
        deposit_conversion=_points_kpi(
            now_metrics.deposit_conversion, prior_metrics.deposit_conversion, "MoM"
        ),
        on_time_payments=_points_kpi(
            now_metrics.on_time_payments, prior_metrics.on_time_payments, "MoM"
        ),
        cancellation_rate=_points_kpi(
            now_metrics.cancellation_rate, prior_metrics.cancellation_rate, "MoM"
        ),
    )


def _growth_kpi(current: float, previous: float, label: str) -> KpiResult:
    delta = percent_delta(current, previous)
    return KpiResult(value=current, delta=delta, trend=trend_direction(delta), period=label)


def _points_kpi(current: float, previous: float, label: str) -> KpiResult:
    delta = point_delta(current, previous)
    return KpiResult(value=current, delta=delta, trend=trend_direction(delta), period=label)
