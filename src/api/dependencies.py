from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Header

from src.core.errors import UnauthorizedError
from src.repositories.reports_repository import ReportsRepository
from src.services.dashboard_service import DashboardService
from src.services.owner_resolver import OwnerResolver
from src.services.reports_service import ReportsService


@lru_cache
def get_reports_repository() -> ReportsRepository:
    return ReportsRepository()


def get_owner_resolver() -> OwnerResolver:
    return OwnerResolver(repository=get_reports_repository())


def get_reports_service() -> ReportsService:
    return ReportsService(repository=get_reports_repository())


def get_dashboard_service() -> DashboardService:
    return DashboardService(repository=get_reports_repository())


def get_caller_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    # Identity is verified upstream; only its presence is checked here.
    if not x_user_id or not x_user_id.strip():
        raise UnauthorizedError("X-User-Id header is required")
    return x_user_id.strip()
