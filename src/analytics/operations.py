from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, List, Tuple

from src.analytics.records import booking_revenue, has_status, is_confirmed, is_pending, minutes_since_midnight
from src.models.reports import BookingRecord
from src.schemas.dashboard import HoldItem, PaymentDueItem, ScheduleItem

BLOCK_OUT_STATUS = "block-out"
STATUS_ORDER = {"Overdue": 0, "Due Today": 1, "Upcoming": 1}
MINUTES_PER_DAY = 24 * 60


def build_schedule(bookings: Iterable[BookingRecord], today: date) -> List[ScheduleItem]:
    slots: List[Tuple[int, ScheduleItem]] = []
    for booking in bookings:
        if booking.booking_date != today:
            continue
        if has_status(booking, BLOCK_OUT_STATUS):
            status, title = "Block-out", "Block-out"
        elif is_pending(booking):
            status, title = "Tentative", _booking_title(booking)
        elif is_confirmed(booking):
            status, title = "Confirmed", _booking_title(booking)
        else:
            continue
        start = minutes_since_midnight(booking.start_time)
        item = ScheduleItem(
            time=f"{booking.start_time or ''}-{booking.end_time or ''}",
            resource=booking.resource_name or booking.resource_id,
            title=title,
            status=status,
            booking_id=booking.id,
        )
        slots.append((start if start is not None else MINUTES_PER_DAY, item))
    slots.sort(key=lambda slot: slot[0])
    return [item for _, item in slots]


def build_payments_due(bookings: Iterable[BookingRecord], today: date) -> List[PaymentDueItem]:
    items: List[PaymentDueItem] = []
    for booking in bookings:
        amount = booking_revenue(booking)
        if not is_confirmed(booking) or amount <= 0:
            continue
        items.append(
            PaymentDueItem(
                invoice=f"INV-{booking.id[:8].upper()}",
                customer=booking.customer_name,
                amount=amount,
                due=booking.booking_date,
                status=_payment_status(booking.booking_date, today),
                booking_id=booking.id,
            )
        )
    items.sort(key=lambda item: (STATUS_ORDER[item.status], item.due or date.max))
    return items


def build_expiring_holds(
    bookings: Iterable[BookingRecord], now: datetime, hold_age_hours: int = 48
) -> List[HoldItem]:
    """Pending bookings whose hold window has not lapsed yet, soonest expiry first."""
    hold_window = timedelta(hours=hold_age_hours)
    items: List[HoldItem] = []
    for booking in bookings:
        if not is_pending(booking):
            continue
        created_at = booking.created_at or now
        expires_at = created_at + hold_window
        time_left = expires_at - now
        if time_left <= timedelta(0):
            continue
        total_minutes = int(time_left.total_seconds() // 60)
        items.append(
            HoldItem(
                booking=f"BKG-{booking.id[:6].upper()}",
                resource=booking.resource_name or booking.resource_id,
                start=_slot_start(booking),
                expires_at=expires_at,
                expires_in=f"{total_minutes // 60}h {total_minutes % 60}m",
                customer=booking.customer_name,
                booking_id=booking.id,
            )
        )
    items.sort(key=lambda item: item.expires_at)
    return items


def _booking_title(booking: BookingRecord) -> str:
    parts = [part for part in (booking.customer_name, booking.event_type) if part]
    return " - ".join(parts) or "Booking"


def _payment_status(due: date | None, today: date) -> str:
    if due is None or due == today:
        return "Due Today"
    return "Overdue" if due < today else "Upcoming"


def _slot_start(booking: BookingRecord) -> str:
    day = booking.booking_date.isoformat() if booking.booking_date else ""
    return f"{day} {booking.start_time or ''}".strip()
