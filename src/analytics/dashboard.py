"""Today/this-week quick metrics for the operational dashboard.

Every card carries a seven point sparkline: one value per trailing calendar
day, oldest first, recomputed from that day's bookings only.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Sequence

from src.analytics.metrics import (
    DEFAULT_BOOKABLE_HOURS,
    format_currency,
    format_signed,
    format_signed_currency,
    occupancy,
    percent_delta,
    total_booking_revenue,
)
from src.analytics.records import (
    booking_revenue,
    bookings_in_range,
    is_cancelled,
    is_confirmed,
    is_pending,
)
from src.models.reports import BookingRecord
from src.schemas.dashboard import DashboardKpi, DashboardKpis, DashboardStats
from src.shared.time import DateRange, previous_range, week_and_month_ranges

SPARKLINE_DAYS = 7
DEFAULT_HOLD_AGE_HOURS = 48
DAY_OVER_DAY = timedelta(hours=24)

SparklineMetric = Callable[[List[BookingRecord]], float]


def _sparkline_metrics(bookable_hours: float) -> Dict[str, SparklineMetric]:
    return {
        "occupancy": lambda day: occupancy(day, bookable_hours),
        "bookings": lambda day: len(day),
        "holds": lambda day: sum(1 for booking in day if is_pending(booking)),
        "payments": total_booking_revenue,
        "cancellations": lambda day: sum(1 for booking in day if is_cancelled(booking)),
        "revenue": total_booking_revenue,
    }


def build_sparkline(
    bookings: Sequence[BookingRecord], today: date, metric: SparklineMetric
) -> List[float]:
    points: List[float] = []
    for offset in range(SPARKLINE_DAYS - 1, -1, -1):
        day = today - timedelta(days=offset)
        day_bookings = [booking for booking in bookings if booking.booking_date == day]
        points.append(metric(day_bookings))
    return points


def build_dashboard_snapshot(
    bookings: Sequence[BookingRecord],
    now: datetime,
    bookable_hours: float = DEFAULT_BOOKABLE_HOURS,
    hold_age_hours: int = DEFAULT_HOLD_AGE_HOURS,
    currency_symbol: str = "$",
) -> DashboardStats:
    ranges = week_and_month_ranges(now)
    today = ranges.today.date()
    records = list(bookings)

    todays_active = [
        booking
        for booking in records
        if booking.booking_date == today and (is_confirmed(booking) or is_pending(booking))
    ]
    confirmed = [booking for booking in records if is_confirmed(booking)]
    this_week = bookings_in_range(confirmed, ranges.week)
    last_week = bookings_in_range(confirmed, ranges.last_week)
    month_to_date = bookings_in_range(confirmed, ranges.month)

    cancellation_window = DateRange(start=ranges.last_30_days.start, end=now)
    cancelled = [booking for booking in records if is_cancelled(booking)]
    cancellations_30d = len(bookings_in_range(cancelled, cancellation_window))
    cancellations_prior = len(bookings_in_range(cancelled, previous_range(cancellation_window)))

    occupancy_today = occupancy(todays_active, bookable_hours)
    occupancy_delta = percent_delta(occupancy_today, occupancy(last_week, bookable_hours))

    bookings_this_week = len(this_week)
    bookings_last_week = len(last_week)
    bookings_delta = bookings_this_week - bookings_last_week if bookings_last_week > 0 else 0

    pending = [booking for booking in records if is_pending(booking)]
    holds_expiring = _count_created_before(pending, now - timedelta(hours=hold_age_hours))
    holds_yesterday = _count_created_before(pending, now - DAY_OVER_DAY)
    holds_delta = holds_expiring - holds_yesterday

    payable = [booking for booking in confirmed if booking_revenue(booking) > 0]
    payments_due = total_booking_revenue(payable)
    payments_yesterday = total_booking_revenue(
        booking for booking in payable if _updated_before(booking, now - DAY_OVER_DAY)
    )
    payments_delta = payments_due - payments_yesterday

    revenue_mtd = total_booking_revenue(month_to_date)
    revenue_delta = revenue_mtd - total_booking_revenue(last_week)

    metrics = _sparkline_metrics(bookable_hours)

    def sparkline(name: str) -> List[float]:
        return build_sparkline(records, today, metrics[name])

    kpis = DashboardKpis(
        occupancy_today=_card(
            value=occupancy_today,
            display_value=f"{occupancy_today}%",
            delta=occupancy_delta,
            delta_label=format_signed(occupancy_delta, "% WoW"),
            note="% of bookable hours filled",
            sparkline=sparkline("occupancy"),
        ),
        bookings_this_week=_card(
            value=bookings_this_week,
            display_value=str(bookings_this_week),
            delta=bookings_delta,
            delta_label=format_signed(bookings_delta, " WoW"),
            note="Confirmed in current week",
            sparkline=sparkline("bookings"),
        ),
        holds_expiring=_card(
            value=holds_expiring,
            display_value=str(holds_expiring),
            delta=holds_delta,
            delta_label=format_signed(holds_delta, " DoD"),
            note=f"Tentative holds <{hold_age_hours}h left",
            sparkline=sparkline("holds"),
        ),
        payments_due=_card(
            value=payments_due,
            display_value=format_currency(payments_due, currency_symbol),
            delta=payments_delta,
            delta_label=f"{format_signed_currency(payments_delta, currency_symbol)} DoD",
            note="Due today + overdue",
            sparkline=sparkline("payments"),
        ),
        cancellations_30d=_card(
            value=cancellations_30d,
            display_value=str(cancellations_30d),
            delta=cancellations_30d - cancellations_prior,
            delta_label=format_signed(cancellations_30d - cancellations_prior, " MoM"),
            note="Count",
            sparkline=sparkline("cancellations"),
            neutral_when_flat=True,
        ),
        revenue_mtd=_card(
            value=revenue_mtd,
            display_value=format_currency(revenue_mtd, currency_symbol),
            delta=revenue_delta,
            delta_label=f"{format_signed_currency(revenue_delta, currency_symbol)} WTD",
            note="Incl. GST line item",
            sparkline=sparkline("revenue"),
        ),
    )
    return DashboardStats(kpis=kpis)


def _card(
    value: float,
    display_value: str,
    delta: float,
    delta_label: str,
    note: str,
    sparkline: List[float],
    neutral_when_flat: bool = False,
) -> DashboardKpi:
    if neutral_when_flat and delta == 0:
        delta_type = "neutral"
    else:
        delta_type = "increase" if delta >= 0 else "decrease"
    return DashboardKpi(
        value=value,
        display_value=display_value,
        delta=delta,
        delta_label=delta_label,
        delta_type=delta_type,
        note=note,
        sparkline=sparkline,
    )


def _count_created_before(bookings: Sequence[BookingRecord], cutoff: datetime) -> int:
    return sum(1 for booking in bookings if booking.created_at and booking.created_at < cutoff)


def _updated_before(booking: BookingRecord, cutoff: datetime) -> bool:
    return booking.updated_at is not None and booking.updated_at < cutoff
