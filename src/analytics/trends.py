"""Monthly booking history, a linear booking-count forecast and its scenarios.

The forecast fits ordinary least squares to booking counts only; revenue for a
forecast month is the forecast count times the mean historical revenue per
month. It is a planning aid, not a statistical model.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Sequence

from src.analytics.metrics import reconciled_revenue, round_half_up, total_booking_revenue
from src.analytics.records import (
    bookings_in_range,
    invoices_in_range,
    is_confirmed,
    is_pending,
)
from src.models.reports import BookingRecord, InvoiceRecord
from src.schemas.reports import ForecastScenarios, HistoricalPoint
from src.shared.time import month_label, month_range, shift_month

DEFAULT_HISTORY_MONTHS = 6
DEFAULT_FORECAST_PERIODS = 6
OPTIMISTIC_MULTIPLIER = 1.15
CAUTIOUS_MULTIPLIER = 0.85


def build_history(
    bookings: Iterable[BookingRecord],
    invoices: Iterable[InvoiceRecord],
    now: datetime,
    months: int = DEFAULT_HISTORY_MONTHS,
) -> List[HistoricalPoint]:
    """One point per calendar month for the trailing ``months``, oldest first.

    The current month is the last point.
    """
    booking_list = list(bookings)
    invoice_list = list(invoices)
    current_month = date(now.year, now.month, 1)

    points: List[HistoricalPoint] = []
    for offset in range(months - 1, -1, -1):
        month_start = shift_month(current_month, -offset)
        window = month_range(month_start.year, month_start.month)
        month_bookings = bookings_in_range(booking_list, window)
        confirmed = [booking for booking in month_bookings if is_confirmed(booking)]
        active = [booking for booking in month_bookings if is_confirmed(booking) or is_pending(booking)]
        points.append(
            HistoricalPoint(
                month=month_label(month_start),
                period_start=month_start,
                bookings=len(active),
                revenue=reconciled_revenue(invoices_in_range(invoice_list, window), confirmed),
            )
        )
    return points


def forecast(
    history: Sequence[HistoricalPoint], periods: int = DEFAULT_FORECAST_PERIODS
) -> List[HistoricalPoint]:
    n = len(history)
    if n < 2:
        return []

    sum_x = sum(range(n))
    sum_y = sum(point.bookings for point in history)
    sum_xy = sum(index * point.bookings for index, point in enumerate(history))
    sum_xx = sum(index * index for index in range(n))
    # n >= 2 keeps the denominator positive.
    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    mean_revenue = sum(point.revenue for point in history) / n

    last_month = history[-1].period_start
    projected: List[HistoricalPoint] = []
    for step in range(1, periods + 1):
        bookings = max(0, round_half_up(intercept + slope * (n + step - 1)))
        month_start = shift_month(last_month, step)
        projected.append(
            HistoricalPoint(
                month=month_label(month_start),
                period_start=month_start,
                bookings=bookings,
                revenue=round_half_up(bookings * mean_revenue),
                is_forecast=True,
            )
        )
    return projected


def build_scenarios(
    base: Sequence[HistoricalPoint],
    optimistic: float = OPTIMISTIC_MULTIPLIER,
    cautious: float = CAUTIOUS_MULTIPLIER,
) -> ForecastScenarios:
    return ForecastScenarios(
        base=list(base),
        optimistic=_scale(base, optimistic),
        cautious=_scale(base, cautious),
    )


def build_pipeline(
    bookings: Iterable[BookingRecord],
    now: datetime,
    months: int = DEFAULT_HISTORY_MONTHS,
) -> List[HistoricalPoint]:
    """Confirmed and pending bookings already on the books for the next ``months``."""
    active = [booking for booking in bookings if is_confirmed(booking) or is_pending(booking)]
    current_month = date(now.year, now.month, 1)

    points: List[HistoricalPoint] = []
    for step in range(1, months + 1):
        month_start = shift_month(current_month, step)
        window = month_range(month_start.year, month_start.month)
        month_bookings = bookings_in_range(active, window)
        points.append(
            HistoricalPoint(
                month=month_label(month_start),
                period_start=month_start,
                bookings=len(month_bookings),
                revenue=total_booking_revenue(month_bookings),
            )
        )
    return points


def _scale(points: Sequence[HistoricalPoint], multiplier: float) -> List[HistoricalPoint]:
    # Bookings and revenue are rounded independently.
    return [
        point.model_copy(
            update={
                "bookings": round_half_up(point.bookings * multiplier),
                "revenue": round_half_up(point.revenue * multiplier),
            }
        )
        for point in points
    ]
