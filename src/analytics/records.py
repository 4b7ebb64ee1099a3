from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional

from src.models.reports import BookingRecord, InvoiceRecord
from src.shared.time import DateRange, start_of_day

CONFIRMED_STATUSES = frozenset({"confirmed", "completed"})
PENDING_STATUSES = frozenset({"pending", "tentative"})
CANCELLED_STATUS = "cancelled"

# Epoch values above this are milliseconds.
_EPOCH_MILLIS_THRESHOLD = 1e11


def parse_timestamp(value: object) -> Optional[datetime]:
    """Resolve a stored timestamp to a naive datetime, or None.

    Accepts datetimes, dates, ISO strings, epoch seconds or milliseconds and
    Firestore-style ``{"seconds": ..}`` maps. Values carrying an offset are
    converted to the local wall clock, the same clock epoch values and
    ``datetime.now()`` use. Naive values are kept as written. Never raises.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _to_local_naive(value)
    if isinstance(value, date):
        return start_of_day(value)
    if isinstance(value, Mapping):
        seconds = value.get("seconds", value.get("_seconds"))
        if seconds is None:
            return None
        nanos = value.get("nanoseconds", value.get("_nanoseconds")) or 0
        return _from_epoch(_to_optional_float(seconds), _to_optional_float(nanos) or 0.0)
    if isinstance(value, (int, float)):
        seconds = float(value)
        if abs(seconds) >= _EPOCH_MILLIS_THRESHOLD:
            seconds = seconds / 1000
        return _from_epoch(seconds, 0.0)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _to_local_naive(datetime.fromisoformat(text))
    except ValueError:
        return None


def parse_calendar_date(value: object) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            pass
    parsed = parse_timestamp(value)
    return parsed.date() if parsed else None


def normalize_booking(row: Mapping[str, Any]) -> BookingRecord:
    return BookingRecord(
        id=str(row.get("id") or ""),
        hall_owner_id=_pick_text(row, "hall_owner_id", "hallOwnerId"),
        resource_id=_pick_text(row, "selected_hall", "selectedHall", "resource_id", "resourceId"),
        resource_name=_pick_text(row, "hall_name", "hallName"),
        booking_date=parse_calendar_date(_pick(row, "booking_date", "bookingDate")),
        start_time=_pick_text(row, "start_time", "startTime"),
        end_time=_pick_text(row, "end_time", "endTime"),
        status=_normalize_status(row.get("status")),
        calculated_price=_to_optional_float(_pick(row, "calculated_price", "calculatedPrice")),
        estimated_price=_to_optional_float(_pick(row, "estimated_price", "estimatedPrice")),
        created_at=parse_timestamp(_pick(row, "created_at", "createdAt")),
        updated_at=parse_timestamp(_pick(row, "updated_at", "updatedAt")),
        customer_name=_pick_text(row, "customer_name", "customerName"),
        customer_email=_pick_text(row, "customer_email", "customerEmail"),
        event_type=_pick_text(row, "event_type", "eventType"),
    )


def normalize_bookings(rows: Iterable[Mapping[str, Any]]) -> List[BookingRecord]:
    records = [normalize_booking(row) for row in rows]
    records.sort(key=lambda record: (record.booking_date or date.min, _start_minutes(record), record.id))
    return records


def normalize_invoice(row: Mapping[str, Any]) -> InvoiceRecord:
    status = row.get("status")
    return InvoiceRecord(
        id=str(row.get("id") or ""),
        hall_owner_id=_pick_text(row, "hall_owner_id", "hallOwnerId"),
        booking_id=_pick_text(row, "booking_id", "bookingId"),
        issue_date=parse_timestamp(_pick(row, "issue_date", "issueDate")),
        created_at=parse_timestamp(_pick(row, "created_at", "createdAt")),
        total=_to_optional_float(row.get("total")),
        final_total=_to_optional_float(_pick(row, "final_total", "finalTotal")),
        paid_amount=_to_optional_float(_pick(row, "paid_amount", "paidAmount")),
        status=str(status).strip().upper() if status else None,
    )


def normalize_invoices(rows: Iterable[Mapping[str, Any]]) -> List[InvoiceRecord]:
    records = [normalize_invoice(row) for row in rows]
    records.sort(key=lambda record: (invoice_timestamp(record) or datetime.min, record.id))
    return records


def has_status(record: BookingRecord, status: str) -> bool:
    return _status_of(record) == status.lower()


def is_confirmed(record: BookingRecord) -> bool:
    return _status_of(record) in CONFIRMED_STATUSES


def is_pending(record: BookingRecord) -> bool:
    return _status_of(record) in PENDING_STATUSES


def is_cancelled(record: BookingRecord) -> bool:
    return _status_of(record) == CANCELLED_STATUS


def booking_revenue(record: BookingRecord) -> float:
    for candidate in (record.calculated_price, record.estimated_price):
        if candidate is not None and math.isfinite(candidate) and candidate > 0:
            return candidate
    return 0.0


def invoice_total(record: InvoiceRecord) -> float:
    for candidate in (record.final_total, record.total):
        if candidate is not None and math.isfinite(candidate) and candidate >= 0:
            return candidate
    return 0.0


def minutes_since_midnight(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    parts = value.strip().split(":")
    try:
        hours = int(parts[0])
        minutes = int(parts[1]) if len(parts) > 1 else 0
    except ValueError:
        return None
    return hours * 60 + minutes


def booking_timestamp(record: BookingRecord) -> Optional[datetime]:
    return start_of_day(record.booking_date) if record.booking_date else None


def invoice_timestamp(record: InvoiceRecord) -> Optional[datetime]:
    return record.issue_date or record.created_at


def in_range(value: Optional[datetime], window: DateRange) -> bool:
    return value is not None and window.contains(value)


def bookings_in_range(bookings: Iterable[BookingRecord], window: DateRange) -> List[BookingRecord]:
    return [booking for booking in bookings if in_range(booking_timestamp(booking), window)]


def invoices_in_range(invoices: Iterable[InvoiceRecord], window: DateRange) -> List[InvoiceRecord]:
    # Invoices are bucketed by calendar day, like bookings.
    selected: List[InvoiceRecord] = []
    for invoice in invoices:
        issued = invoice_timestamp(invoice)
        if issued is not None and window.contains(start_of_day(issued)):
            selected.append(invoice)
    return selected


def _start_minutes(record: BookingRecord) -> int:
    minutes = minutes_since_midnight(record.start_time)
    return minutes if minutes is not None else 24 * 60


def _status_of(record: BookingRecord) -> str:
    return (record.status or "").strip().lower()


def _normalize_status(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip().lower()
    return text or None


def _pick(row: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _pick_text(row: Mapping[str, Any], *keys: str) -> Optional[str]:
    value = _pick(row, *keys)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_optional_float(value: object) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _to_local_naive(value: datetime) -> Optional[datetime]:
    if value.tzinfo is None:
        return value
    try:
        return value.astimezone().replace(tzinfo=None)
    except (OverflowError, OSError, ValueError):
        return None


def _from_epoch(seconds: Optional[float], nanos: float) -> Optional[datetime]:
    if seconds is None:
        return None
    try:
        return datetime.fromtimestamp(seconds + nanos / 1e9)
    except (OverflowError, OSError, ValueError):
        return None
