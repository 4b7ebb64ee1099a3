from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Dict

from src.shared.base import BaseSchema, FrozenSchema

DEFAULT_PERIOD = "90d"
YEAR_PERIOD = "1y"
PERIOD_DAYS: Dict[str, int] = {"30d": 30, "90d": 90, "180d": 180}
ONE_MILLISECOND = timedelta(milliseconds=1)


class DateRange(FrozenSchema):
    """Calendar window compared inclusively on both ends."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, value: datetime) -> bool:
        return self.start <= value <= self.end


class CalendarRanges(BaseSchema):
    now: datetime
    today: datetime
    week: DateRange
    last_week: DateRange
    month: DateRange
    last_7_days: DateRange
    last_30_days: DateRange


def start_of_day(value: datetime | date) -> datetime:
    return datetime(value.year, value.month, value.day)


def canonical_period(token: str | None) -> str:
    if token == YEAR_PERIOD or token in PERIOD_DAYS:
        return token
    return DEFAULT_PERIOD


def resolve_period(token: str | None, now: datetime) -> DateRange:
    """Trailing window ending today; unknown tokens fall back to 90 days."""
    today = start_of_day(now)
    period = canonical_period(token)
    if period == YEAR_PERIOD:
        return DateRange(start=_years_before(today, 1), end=today)
    days = PERIOD_DAYS[period]
    return DateRange(start=today - timedelta(days=days), end=today)


def previous_range(current: DateRange) -> DateRange:
    prev_end = current.start - ONE_MILLISECOND
    return DateRange(start=prev_end - current.duration, end=prev_end)


def week_and_month_ranges(now: datetime) -> CalendarRanges:
    today = start_of_day(now)
    week_start = today - timedelta(days=today.weekday())
    week = DateRange(start=week_start, end=week_start + timedelta(days=6))
    last_week = DateRange(
        start=week.start - timedelta(days=7), end=week.end - timedelta(days=7)
    )
    return CalendarRanges(
        now=now,
        today=today,
        week=week,
        last_week=last_week,
        month=month_range(today.year, today.month),
        last_7_days=DateRange(start=today - timedelta(days=7), end=today),
        last_30_days=DateRange(start=today - timedelta(days=30), end=today),
    )


def month_range(year: int, month: int) -> DateRange:
    last_day = calendar.monthrange(year, month)[1]
    return DateRange(start=datetime(year, month, 1), end=datetime(year, month, last_day))


def shift_month(value: date, months: int) -> date:
    """First day of the month ``months`` away from ``value``'s month."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, 1)


def month_label(value: date) -> str:
    return f"{calendar.month_name[value.month]} {value.year}"


def _years_before(value: datetime, years: int) -> datetime:
    try:
        return value.replace(year=value.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year rolls over to Mar 1.
        return value.replace(year=value.year - years, month=3, day=1)
