from __future__ import annotations

from datetime import date, datetime

from src.analytics.metrics import round_half_up
from src.analytics.trends import build_history, build_pipeline, build_scenarios, forecast
from src.schemas.reports import HistoricalPoint
from tests.factories import NOW, make_booking, make_invoice


def _history(*counts_and_revenue):
    points = []
    for index, (bookings, revenue) in enumerate(counts_and_revenue):
        start = date(2024, 1 + index, 1)
        points.append(
            HistoricalPoint(month=start.strftime("%B %Y"), period_start=start, bookings=bookings, revenue=revenue)
        )
    return points


def test_forecast_projects_least_squares_line() -> None:
    history = _history((10, 1000), (12, 1200), (14, 1400))
    projected = forecast(history, periods=2)
    assert [point.bookings for point in projected] == [16, 18]
    assert projected[0].revenue == 19200
    assert projected[1].revenue == 21600
    assert projected[0].month == "April 2024"
    assert projected[0].period_start == date(2024, 4, 1)
    assert all(point.is_forecast for point in projected)


def test_forecast_needs_two_points() -> None:
    assert forecast(_history((10, 1000))) == []
    assert forecast([]) == []


def test_forecast_never_goes_negative() -> None:
    projected = forecast(_history((10, 500), (5, 250), (0, 0)), periods=3)
    assert [point.bookings for point in projected] == [0, 0, 0]
    assert all(point.revenue == 0 for point in projected)


def test_scenarios_round_bookings_and_revenue_independently() -> None:
    base = forecast(_history((10, 1000), (12, 1200), (14, 1400)), periods=3)
    scenarios = build_scenarios(base)
    assert scenarios.base == base
    assert scenarios.optimistic[0].bookings == 18
    assert scenarios.cautious[0].bookings == 14
    for index, point in enumerate(base):
        assert scenarios.optimistic[index].bookings == round_half_up(point.bookings * 1.15)
        assert scenarios.cautious[index].bookings == round_half_up(point.bookings * 0.85)
        assert scenarios.optimistic[index].revenue == round_half_up(point.revenue * 1.15)


def test_build_history_counts_active_bookings_per_month() -> None:
    bookings = [
        make_booking(date(2024, 1, 10), calculated_price=100.0),
        make_booking(date(2024, 1, 20), status="pending", calculated_price=50.0),
        make_booking(date(2024, 2, 29), calculated_price=200.0),
        make_booking(date(2024, 3, 31), calculated_price=300.0),
        make_booking(date(2024, 3, 5), status="cancelled", calculated_price=999.0),
        make_booking(date(2023, 12, 31), calculated_price=999.0),
    ]
    invoices = [make_invoice(datetime(2024, 2, 29, 15, 0), 500.0)]
    history = build_history(bookings, invoices, NOW, months=3)
    assert [point.month for point in history] == ["January 2024", "February 2024", "March 2024"]
    assert [point.bookings for point in history] == [2, 1, 1]
    assert [point.revenue for point in history] == [100.0, 500.0, 300.0]
    assert build_history(bookings, invoices, NOW, months=3) == history


def test_build_pipeline_covers_following_months() -> None:
    bookings = [
        make_booking(date(2024, 3, 20), calculated_price=999.0),
        make_booking(date(2024, 4, 2), calculated_price=400.0),
        make_booking(date(2024, 4, 9), status="pending", estimated_price=150.0),
        make_booking(date(2024, 4, 20), status="cancelled", calculated_price=999.0),
    ]
    pipeline = build_pipeline(bookings, NOW, months=2)
    assert [point.month for point in pipeline] == ["April 2024", "May 2024"]
    assert [point.bookings for point in pipeline] == [2, 0]
    assert [point.revenue for point in pipeline] == [550.0, 0.0]
