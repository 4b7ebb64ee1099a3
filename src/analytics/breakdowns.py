from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Sequence

from src.analytics.metrics import (
    DEFAULT_BOOKABLE_HOURS,
    booking_hours,
    conversion_rate,
    round_half_up,
    total_booking_revenue,
)
from src.analytics.records import booking_revenue, booking_timestamp, has_status
from src.models.reports import BookingRecord, ResourceRecord
from src.schemas.reports import (
    AgingBucket,
    DayUtilisation,
    HourUtilisation,
    PaymentAnalysis,
    ReportSummary,
    ResourceUtilisation,
    StatusBreakdown,
    SummaryBreakdown,
    SummaryMetrics,
)
from src.shared.time import DateRange, start_of_day

AGING_BUCKETS = (("0-30 days", 30), ("31-60 days", 60), ("61-90 days", 90), ("90+ days", None))
SUMMARY_BUDGET_DAYS = 30
UNSPECIFIED_EVENT_TYPE = "Unspecified"
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
FIRST_HOUR = 6
LAST_HOUR = 22
FULLY_BOOKED = 100
ONE_DAY = timedelta(days=1)


def payment_aging(confirmed_bookings: Iterable[BookingRecord], now: datetime) -> PaymentAnalysis:
    """On-time share and aging buckets for confirmed bookings.

    A booking dated today or later counts as on time. Age is whole days since
    the booking date, rounded up, so bookings still ahead land in the first
    bucket.
    """
    today = start_of_day(now)
    buckets = [AgingBucket(bucket=label) for label, _ in AGING_BUCKETS]
    records = [booking for booking in confirmed_bookings if booking.booking_date is not None]

    on_time_count = 0
    for booking in records:
        booked_on = booking_timestamp(booking)
        if booked_on >= today:
            on_time_count += 1
        age_days = math.ceil((now - booked_on) / ONE_DAY)
        bucket = buckets[_aging_index(age_days)]
        bucket.amount += booking_revenue(booking)
        bucket.count += 1

    on_time = conversion_rate(on_time_count, len(records))
    return PaymentAnalysis(on_time=on_time, overdue=100 - on_time, aging=buckets)


def build_summary(
    period_bookings: Sequence[BookingRecord],
    period: str,
    date_range: DateRange,
    bookable_hours: float = DEFAULT_BOOKABLE_HOURS,
) -> ReportSummary:
    confirmed = [booking for booking in period_bookings if has_status(booking, "confirmed")]
    total_revenue = total_booking_revenue(confirmed)
    average_value = total_revenue / len(confirmed) if confirmed else 0.0
    booked_hours = sum(booking_hours(booking) for booking in confirmed)
    available_hours = bookable_hours * SUMMARY_BUDGET_DAYS
    utilisation = booked_hours / available_hours * 100 if available_hours > 0 else 0.0
    total_requests = len(period_bookings)
    conversion = len(confirmed) / total_requests * 100 if total_requests else 0.0

    emails = {
        booking.customer_email.strip().lower()
        for booking in period_bookings
        if booking.customer_email
    }
    by_event_type: Dict[str, int] = {}
    for booking in period_bookings:
        key = booking.event_type or UNSPECIFIED_EVENT_TYPE
        by_event_type[key] = by_event_type.get(key, 0) + 1

    return ReportSummary(
        period=period,
        date_range=date_range,
        metrics=SummaryMetrics(
            total_bookings=len(confirmed),
            total_revenue=total_revenue,
            average_booking_value=_round_cents(average_value),
            unique_customers=len(emails),
            utilization=_round_cents(utilisation),
            conversion_rate=_round_cents(conversion),
            total_requests=total_requests,
        ),
        breakdown=SummaryBreakdown(
            by_status=StatusBreakdown(
                confirmed=len(confirmed),
                pending=_count_status(period_bookings, "pending"),
                cancelled=_count_status(period_bookings, "cancelled"),
                completed=_count_status(period_bookings, "completed"),
            ),
            by_event_type=by_event_type,
        ),
    )


def resource_utilisation(
    resources: Iterable[ResourceRecord], bookings: Iterable[BookingRecord]
) -> List[ResourceUtilisation]:
    """Weekday by hour occupancy grid per resource.

    An hour is fully booked when any confirmed booking for the resource on that
    weekday starts at or before it and ends after it.
    """
    confirmed = [booking for booking in bookings if has_status(booking, "confirmed")]
    results: List[ResourceUtilisation] = []
    for resource in resources:
        resource_bookings = [
            booking
            for booking in confirmed
            if booking.resource_id == resource.id and booking.booking_date is not None
        ]
        days: List[DayUtilisation] = []
        for weekday, day_name in enumerate(WEEKDAYS):
            spans = [
                _hour_span(booking)
                for booking in resource_bookings
                if booking.booking_date.weekday() == weekday
            ]
            days.append(
                DayUtilisation(
                    day=day_name,
                    utilisation=[
                        HourUtilisation(
                            hour=f"{hour:02d}:00",
                            rate=FULLY_BOOKED if any(start <= hour < end for start, end in spans) else 0,
                        )
                        for hour in range(FIRST_HOUR, LAST_HOUR + 1)
                    ],
                )
            )
        results.append(ResourceUtilisation(resource_id=resource.id, name=resource.name, data=days))
    return results


def _aging_index(age_days: int) -> int:
    for index, (_, limit) in enumerate(AGING_BUCKETS):
        if limit is None or age_days <= limit:
            return index
    return len(AGING_BUCKETS) - 1


def _count_status(bookings: Iterable[BookingRecord], status: str) -> int:
    return sum(1 for booking in bookings if has_status(booking, status))


def _round_cents(value: float) -> float:
    return round_half_up(value * 100) / 100


def _hour_span(booking: BookingRecord) -> tuple[int, int]:
    start = _leading_hour(booking.start_time)
    end = _leading_hour(booking.end_time)
    if start is None or end is None:
        return 0, 0
    return start, end


def _leading_hour(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value.strip().split(":")[0])
    except ValueError:
        return None
