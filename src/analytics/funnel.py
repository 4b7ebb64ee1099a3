from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Tuple

from src.analytics.metrics import round_half_up
from src.analytics.records import has_status, is_confirmed, is_pending
from src.models.reports import BookingRecord
from src.schemas.reports import CancellationReason, FunnelStage

HOLD_AGE = timedelta(days=2)

# Placeholder labels until drop-off causes are captured with the booking.
FUNNEL_DROPOFF_REASONS: Dict[str, str] = {
    "Pending": "Incomplete info",
    "Hold": "Conflicts detected",
    "Confirmed": "Deposit not paid",
    "Completed": "Last-minute cancellations",
}

# Percent of cancellations attributed to each reason; shares sum to 100.
CANCELLATION_REASON_SHARES: Tuple[Tuple[str, int], ...] = (
    ("Customer request", 40),
    ("Weather", 30),
    ("Policy violation", 20),
    ("Schedule conflict", 10),
)

StagePredicate = Callable[[BookingRecord], bool]


def _funnel_stages(now: datetime) -> List[Tuple[str, StagePredicate]]:
    def on_hold(booking: BookingRecord) -> bool:
        return (
            is_pending(booking)
            and booking.created_at is not None
            and now - booking.created_at > HOLD_AGE
        )

    return [
        ("Requests", lambda booking: True),
        ("Pending", is_pending),
        ("Hold", on_hold),
        ("Confirmed", is_confirmed),
        ("Completed", lambda booking: has_status(booking, "completed")),
    ]


def build_funnel(period_bookings: Iterable[BookingRecord], now: datetime) -> List[FunnelStage]:
    """Stage counts with raw drop-off from the previous stage.

    Stage membership is independent per stage, so a later stage can hold more
    bookings than the one before it and its drop-off goes negative.
    """
    records = list(period_bookings)
    stages: List[FunnelStage] = []
    previous_count = None
    for name, predicate in _funnel_stages(now):
        count = sum(1 for booking in records if predicate(booking))
        stages.append(
            FunnelStage(
                stage=name,
                count=count,
                dropoff=0 if previous_count is None else previous_count - count,
                reason=FUNNEL_DROPOFF_REASONS.get(name),
            )
        )
        previous_count = count
    return stages


def cancellation_breakdown(cancelled: Iterable[BookingRecord]) -> List[CancellationReason]:
    total = sum(1 for _ in cancelled)
    return [
        CancellationReason(reason=reason, count=round_half_up(total * share / 100), rate=share)
        for reason, share in CANCELLATION_REASON_SHARES
    ]
