from __future__ import annotations

from datetime import date, datetime

from src.analytics.operations import build_expiring_holds, build_payments_due, build_schedule
from tests.factories import NOW, make_booking

TODAY = NOW.date()


def test_schedule_lists_todays_slots_by_start_time() -> None:
    bookings = [
        make_booking(TODAY, start_time="14:00", end_time="16:00", customer_name="Ana", event_type="Wedding"),
        make_booking(TODAY, status="pending", start_time="09:00", end_time="11:00"),
        make_booking(TODAY, status="block-out", start_time="12:00", end_time="13:00"),
        make_booking(TODAY, status="cancelled", start_time="08:00", end_time="09:00"),
        make_booking(date(2024, 3, 16), start_time="07:00", end_time="08:00"),
    ]
    schedule = build_schedule(bookings, TODAY)
    assert [item.time for item in schedule] == ["09:00-11:00", "12:00-13:00", "14:00-16:00"]
    assert [item.status for item in schedule] == ["Tentative", "Block-out", "Confirmed"]
    assert schedule[0].title == "Booking"
    assert schedule[2].title == "Ana - Wedding"
    assert schedule[2].resource == "Main Hall"


def test_schedule_orders_unpadded_times_numerically() -> None:
    bookings = [
        make_booking(TODAY, start_time="10:00", end_time="11:00"),
        make_booking(TODAY, start_time="9:00", end_time="9:30"),
        make_booking(TODAY, start_time=None, end_time=None),
    ]
    schedule = build_schedule(bookings, TODAY)
    assert [item.time for item in schedule] == ["9:00-9:30", "10:00-11:00", "-"]


def test_payments_due_lists_overdue_first() -> None:
    overdue = make_booking(date(2024, 3, 1), id="abcdefgh1234", calculated_price=250.0)
    upcoming = make_booking(date(2024, 3, 20), calculated_price=400.0)
    due_today = make_booking(TODAY, estimated_price=150.0, customer_name="Ben")
    skipped = [
        make_booking(TODAY, status="pending", calculated_price=90.0),
        make_booking(TODAY, calculated_price=0.0),
    ]
    items = build_payments_due([upcoming, due_today, overdue, *skipped], TODAY)
    assert [item.status for item in items] == ["Overdue", "Due Today", "Upcoming"]
    assert items[0].invoice == "INV-ABCDEFGH"
    assert items[0].amount == 250.0
    assert items[0].type == "FINAL"
    assert items[1].customer == "Ben"
    assert items[2].due == date(2024, 3, 20)


def test_expiring_holds_skip_lapsed_and_sort_by_expiry() -> None:
    fresh = make_booking(TODAY, status="pending", id="hold01xx", created_at=datetime(2024, 3, 14, 10, 0))
    nearly_lapsed = make_booking(
        date(2024, 3, 20), status="tentative", id="hold02xx", created_at=datetime(2024, 3, 13, 12, 30)
    )
    lapsed = make_booking(TODAY, status="pending", created_at=datetime(2024, 3, 12, 9, 0))
    confirmed = make_booking(TODAY, created_at=datetime(2024, 3, 14, 10, 0))
    holds = build_expiring_holds([fresh, nearly_lapsed, lapsed, confirmed], NOW)
    assert [hold.booking for hold in holds] == ["BKG-HOLD02", "BKG-HOLD01"]
    assert holds[0].expires_in == "2h 30m"
    assert holds[0].expires_at == datetime(2024, 3, 15, 12, 30)
    assert holds[0].start == "2024-03-20 10:00"
    assert holds[1].expires_in == "24h 0m"


def test_expiring_holds_respect_custom_window() -> None:
    hold = make_booking(TODAY, status="pending", created_at=datetime(2024, 3, 15, 9, 0))
    assert build_expiring_holds([hold], NOW, hold_age_hours=1) == []
    assert build_expiring_holds([hold], NOW, hold_age_hours=2)[0].expires_in == "1h 0m"
