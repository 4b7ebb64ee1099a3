from __future__ import annotations

from datetime import date

from src.analytics.metrics import (
    booking_hours,
    conversion_rate,
    format_currency,
    format_signed,
    format_signed_currency,
    occupancy,
    percent_delta,
    point_delta,
    reconciled_revenue,
    round_half_up,
    trend_direction,
)
from tests.factories import make_booking, make_invoice

DAY = date(2024, 3, 15)


def test_round_half_up_matches_browser_rounding() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(-2.5) == -2
    assert round_half_up(-66.67) == -67


def test_occupancy_of_empty_set_is_zero() -> None:
    assert occupancy([]) == 0
    assert occupancy([make_booking(DAY)], total_hours=0) == 0


def test_occupancy_sums_booked_hours_against_budget() -> None:
    assert occupancy([make_booking(DAY, start_time="10:00", end_time="16:00")]) == 50
    assert occupancy([make_booking(DAY, start_time="10:00", end_time="11:30")]) == 13


def test_occupancy_is_not_capped_for_overlaps() -> None:
    full_day = [make_booking(DAY, start_time="08:00", end_time="20:00") for _ in range(2)]
    assert occupancy(full_day) == 200


def test_booking_hours_ignores_unparseable_times() -> None:
    assert booking_hours(make_booking(DAY, start_time="abc", end_time="12:00")) == 0.0
    assert booking_hours(make_booking(DAY, start_time=None)) == 0.0


def test_percent_delta() -> None:
    assert percent_delta(5, 0) == 0
    assert percent_delta(15, 10) == 50
    assert percent_delta(5, 10) == -50
    assert percent_delta(1, 3) == -67


def test_point_delta_and_conversion_rate() -> None:
    assert point_delta(80, 50) == 30
    assert point_delta(80, 0) == 0
    assert conversion_rate(8, 10) == 80
    assert conversion_rate(1, 0) == 0


def test_trend_direction() -> None:
    assert trend_direction(3) == "up"
    assert trend_direction(-0.5) == "down"
    assert trend_direction(0) == "neutral"


def test_reconciled_revenue_takes_the_larger_source() -> None:
    confirmed = make_booking(DAY, calculated_price=500.0)
    pending = make_booking(DAY, status="pending", calculated_price=900.0)
    assert reconciled_revenue([make_invoice(None, 300.0)], [confirmed, pending]) == 500.0
    assert reconciled_revenue([make_invoice(None, 800.0)], [confirmed]) == 800.0
    assert reconciled_revenue([], []) == 0.0


def test_currency_and_signed_formatting() -> None:
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(-12) == "-$12.00"
    assert format_currency(10, "R") == "R10.00"
    assert format_signed(5, "% WoW") == "+5% WoW"
    assert format_signed(-3, " WoW") == "-3 WoW"
    assert format_signed(2.5) == "+2.50"
    assert format_signed_currency(20) == "+$20.00"
    assert format_signed_currency(-20) == "-$20.00"
