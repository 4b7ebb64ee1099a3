from __future__ import annotations

import os
from datetime import date, datetime, timedelta
from typing import Iterator

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_dashboard_service, get_owner_resolver, get_reports_service
from src.main import create_app
from src.models.reports import ResourceRecord, UserRecord
from src.services.dashboard_service import DashboardService
from src.services.owner_resolver import OwnerResolver
from src.services.reports_service import ReportsService
from tests.factories import StubReportsRepository, make_booking, make_invoice

USERS = [
    UserRecord(id="owner-1", role="hall_owner"),
    UserRecord(id="staff-1", role="sub_user", parent_user_id="owner-1"),
    UserRecord(id="orphan-1", role="sub_user"),
    UserRecord(id="admin-1", role="super_admin"),
    UserRecord(id="guest-1", role="customer"),
]


def build_repository() -> StubReportsRepository:
    today = date.today()
    created = datetime.now() - timedelta(days=3)
    return StubReportsRepository(
        bookings=[
            make_booking(today, calculated_price=600.0, customer_email="ana@example.com", event_type="Wedding"),
            make_booking(today, status="pending", start_time="15:00", end_time="17:00", created_at=created),
            make_booking(today - timedelta(days=40), calculated_price=250.0),
            make_booking(today - timedelta(days=5), status="cancelled"),
            make_booking(today + timedelta(days=35), calculated_price=900.0, resource_id="hall-2"),
        ],
        invoices=[make_invoice(datetime.now() - timedelta(days=1), 700.0)],
        resources=[ResourceRecord(id="hall-1", name="Main Hall"), ResourceRecord(id="hall-2", name="Annex")],
        users=USERS,
    )


@pytest.fixture()
def repository() -> StubReportsRepository:
    return build_repository()


@pytest.fixture()
def client(repository: StubReportsRepository) -> Iterator[TestClient]:
    app = create_app()
    app.dependency_overrides[get_reports_service] = lambda: ReportsService(repository=repository)
    app.dependency_overrides[get_dashboard_service] = lambda: DashboardService(repository=repository)
    app.dependency_overrides[get_owner_resolver] = lambda: OwnerResolver(repository=repository)
    yield TestClient(app)
    app.dependency_overrides.clear()
