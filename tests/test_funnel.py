from __future__ import annotations

from datetime import date, datetime, timedelta

from src.analytics.funnel import (
    CANCELLATION_REASON_SHARES,
    build_funnel,
    cancellation_breakdown,
)
from tests.factories import NOW, make_booking

DAY = date(2024, 3, 1)


def _funnel_bookings():
    old = NOW - timedelta(days=3)
    recent = NOW - timedelta(hours=12)
    bookings = [make_booking(DAY, status="pending", created_at=old) for _ in range(3)]
    bookings += [make_booking(DAY, status="pending", created_at=recent) for _ in range(5)]
    bookings += [make_booking(DAY, status="confirmed") for _ in range(4)]
    bookings += [make_booking(DAY, status="completed") for _ in range(6)]
    bookings += [make_booking(DAY, status="cancelled") for _ in range(2)]
    return bookings


def test_funnel_stage_counts_and_raw_dropoffs() -> None:
    funnel = build_funnel(_funnel_bookings(), NOW)
    assert [stage.stage for stage in funnel] == ["Requests", "Pending", "Hold", "Confirmed", "Completed"]
    assert [stage.count for stage in funnel] == [20, 8, 3, 10, 6]
    assert [stage.dropoff for stage in funnel] == [0, 12, 5, -7, 4]


def test_funnel_dropoff_law_holds_for_every_stage() -> None:
    funnel = build_funnel(_funnel_bookings()[5:], NOW)
    for previous, current in zip(funnel, funnel[1:]):
        assert current.dropoff == previous.count - current.count


def test_funnel_reasons_are_fixed_labels() -> None:
    funnel = build_funnel([], NOW)
    assert funnel[0].reason is None
    assert [stage.reason for stage in funnel[1:]] == [
        "Incomplete info",
        "Conflicts detected",
        "Deposit not paid",
        "Last-minute cancellations",
    ]
    assert all(stage.count == 0 for stage in funnel)


def test_hold_requires_pending_older_than_two_days() -> None:
    exactly_two_days = make_booking(DAY, status="pending", created_at=NOW - timedelta(days=2))
    no_created_at = make_booking(DAY, status="pending")
    funnel = build_funnel([exactly_two_days, no_created_at], NOW)
    assert funnel[2].count == 0
    assert funnel[1].count == 2


def test_cancellation_breakdown_allocates_fixed_shares() -> None:
    cancelled = [make_booking(DAY, status="cancelled") for _ in range(7)]
    breakdown = cancellation_breakdown(cancelled)
    assert [item.reason for item in breakdown] == [reason for reason, _ in CANCELLATION_REASON_SHARES]
    assert [item.count for item in breakdown] == [3, 2, 1, 1]
    assert [item.rate for item in breakdown] == [40, 30, 20, 10]


def test_cancellation_breakdown_of_nothing() -> None:
    assert [item.count for item in cancellation_breakdown([])] == [0, 0, 0, 0]


def test_funnel_serializes_reason_in_camel_case_payload() -> None:
    payload = build_funnel([make_booking(DAY, created_at=datetime(2024, 3, 1))], NOW)[3].model_dump(by_alias=True)
    assert payload == {"stage": "Confirmed", "count": 1, "dropoff": -1, "reason": "Deposit not paid"}
