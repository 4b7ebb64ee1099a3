from __future__ import annotations

from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends

from src.api.dependencies import get_caller_id, get_dashboard_service, get_owner_resolver
from src.core.config import get_settings
from src.schemas.dashboard import (
    DashboardFilters,
    DashboardListFilters,
    DashboardStats,
    HoldItem,
    PaymentDueItem,
    ScheduleItem,
)
from src.services.dashboard_service import DashboardService
from src.services.owner_resolver import OwnerResolver
from src.shared.response import Meta, ResponseEnvelope, paginate_list


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def _build_meta(now: datetime, time_window: str) -> Meta:
    return Meta(
        as_of_date=now.date().isoformat(),
        source="bookings",
        time_window=time_window,
        calculation_version="v1",
        currency=get_settings().report_currency_symbol,
        generated_at=now.isoformat(),
    )


@router.get("/stats")
def dashboard_stats(
    filters: DashboardFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: DashboardService = Depends(get_dashboard_service),
) -> ResponseEnvelope[DashboardStats]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_stats(owner_id, now, resource_id=filters.resource_id)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "today"))


@router.get("/schedule")
def dashboard_schedule(
    filters: DashboardFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: DashboardService = Depends(get_dashboard_service),
) -> ResponseEnvelope[List[ScheduleItem]]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_schedule(owner_id, now, resource_id=filters.resource_id)
    return ResponseEnvelope(data=data, meta=_build_meta(now, "today"))


@router.get("/payments-due")
def dashboard_payments_due(
    filters: DashboardListFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: DashboardService = Depends(get_dashboard_service),
) -> ResponseEnvelope[List[PaymentDueItem]]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_payments_due(owner_id, now, resource_id=filters.resource_id)
    paged_data, pagination = paginate_list(data, filters.page, filters.page_size)
    return ResponseEnvelope(data=paged_data, pagination=pagination, meta=_build_meta(now, "all"))


@router.get("/holds-expiring")
def dashboard_holds_expiring(
    filters: DashboardListFilters = Depends(),
    caller_id: str = Depends(get_caller_id),
    resolver: OwnerResolver = Depends(get_owner_resolver),
    service: DashboardService = Depends(get_dashboard_service),
) -> ResponseEnvelope[List[HoldItem]]:
    now = datetime.now()
    owner_id = resolver.resolve(caller_id, filters.hall_owner_id)
    data = service.get_expiring_holds(owner_id, now, resource_id=filters.resource_id)
    paged_data, pagination = paginate_list(data, filters.page, filters.page_size)
    return ResponseEnvelope(data=paged_data, pagination=pagination, meta=_build_meta(now, "48h"))
