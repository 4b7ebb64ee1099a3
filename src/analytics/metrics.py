from __future__ import annotations

import math
from typing import Iterable, Literal

from src.analytics.records import booking_revenue, invoice_total, is_confirmed, minutes_since_midnight
from src.models.reports import BookingRecord, InvoiceRecord

DEFAULT_BOOKABLE_HOURS = 12.0

TrendDirection = Literal["up", "down", "neutral"]


def round_half_up(value: float) -> int:
    """Round halves towards positive infinity, so 2.5 -> 3 and -2.5 -> -2."""
    return int(math.floor(value + 0.5))


def booking_hours(record: BookingRecord) -> float:
    start = minutes_since_midnight(record.start_time)
    end = minutes_since_midnight(record.end_time)
    if start is None or end is None:
        return 0.0
    return (end - start) / 60


def occupancy(bookings: Iterable[BookingRecord], total_hours: float = DEFAULT_BOOKABLE_HOURS) -> int:
    """Percent of a daily bookable-hours budget consumed by ``bookings``.

    Overlaps are not detected, so the result can exceed 100.
    """
    records = list(bookings)
    if not records or total_hours <= 0:
        return 0
    booked_hours = sum(booking_hours(record) for record in records)
    return round_half_up((booked_hours / total_hours) * 100)


def percent_delta(current: float, previous: float) -> int:
    # No baseline reports no change.
    if previous == 0:
        return 0
    return round_half_up(((current - previous) / previous) * 100)


def point_delta(current: float, previous: float) -> float:
    if previous == 0:
        return 0
    return current - previous


def conversion_rate(numerator: float, denominator: float) -> int:
    if denominator == 0:
        return 0
    return round_half_up((numerator / denominator) * 100)


def trend_direction(delta: float) -> TrendDirection:
    if delta > 0:
        return "up"
    if delta < 0:
        return "down"
    return "neutral"


def total_booking_revenue(bookings: Iterable[BookingRecord]) -> float:
    return sum((booking_revenue(booking) for booking in bookings), 0.0)


def reconciled_revenue(
    invoices: Iterable[InvoiceRecord], confirmed_bookings: Iterable[BookingRecord]
) -> float:
    """Invoice revenue, floored by confirmed booking revenue when invoicing lags."""
    invoiced = sum((invoice_total(invoice) for invoice in invoices), 0.0)
    booked = total_booking_revenue(booking for booking in confirmed_bookings if is_confirmed(booking))
    return max(invoiced, booked)


def format_currency(amount: float, symbol: str = "$") -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_signed(value: float, suffix: str = "") -> str:
    prefix = "+" if value >= 0 else ""
    text = f"{prefix}{_format_number(value)}"
    return f"{text}{suffix}"


def format_signed_currency(amount: float, symbol: str = "$") -> str:
    prefix = "+" if amount >= 0 else ""
    return f"{prefix}{format_currency(amount, symbol)}"


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"

