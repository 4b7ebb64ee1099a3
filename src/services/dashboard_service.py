from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from src.analytics.dashboard import build_dashboard_snapshot
from src.analytics.operations import build_expiring_holds, build_payments_due, build_schedule
from src.core.config import get_settings
from src.repositories.reports_repository import ReportsRepository
from src.schemas.dashboard import DashboardStats, HoldItem, PaymentDueItem, ScheduleItem

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, repository: ReportsRepository) -> None:
        self.repository = repository
        self.settings = get_settings()

    def get_stats(self, owner_id: str, now: datetime, resource_id: Optional[str] = None) -> DashboardStats:
        bookings = self.repository.list_bookings(owner_id, resource_id=resource_id)
        logger.info(
            "Building dashboard snapshot owner_id=%s resource_id=%s bookings=%d",
            owner_id,
            resource_id,
            len(bookings),
        )
        return build_dashboard_snapshot(
            bookings,
            now,
            bookable_hours=self.settings.report_bookable_hours,
            hold_age_hours=self.settings.report_hold_age_hours,
            currency_symbol=self.settings.report_currency_symbol,
        )

    def get_schedule(
        self, owner_id: str, now: datetime, resource_id: Optional[str] = None
    ) -> List[ScheduleItem]:
        bookings = self.repository.list_bookings(owner_id, resource_id=resource_id)
        return build_schedule(bookings, now.date())

    def get_payments_due(
        self, owner_id: str, now: datetime, resource_id: Optional[str] = None
    ) -> List[PaymentDueItem]:
        bookings = self.repository.list_bookings(owner_id, resource_id=resource_id)
        return build_payments_due(bookings, now.date())

    def get_expiring_holds(
        self, owner_id: str, now: datetime, resource_id: Optional[str] = None
    ) -> List[HoldItem]:
        bookings = self.repository.list_bookings(owner_id, resource_id=resource_id)
        return build_expiring_holds(bookings, now, hold_age_hours=self.settings.report_hold_age_hours)
