from __future__ import annotations

from fastapi.testclient import TestClient

OWNER = {"X-User-Id": "owner-1"}


def test_dashboard_stats_cards(client: TestClient) -> None:
    response = client.get("/api/v1/dashboard/stats", headers=OWNER)
    assert response.status_code == 200
    kpis = response.json()["data"]["kpis"]
    assert set(kpis) == {
        "occupancyToday",
        "bookingsThisWeek",
        "holdsExpiring",
        "paymentsDue",
        "cancellations30d",
        "revenueMtd",
    }
    occupancy = kpis["occupancyToday"]
    assert occupancy["value"] == 33
    assert occupancy["displayValue"] == "33%"
    assert len(occupancy["sparkline"]) == 7
    assert kpis["holdsExpiring"]["value"] == 1
    assert kpis["paymentsDue"]["displayValue"] == "$1,750.00"


def test_dashboard_stats_for_one_resource(client: TestClient, repository) -> None:
    response = client.get("/api/v1/dashboard/stats?resourceId=hall-2", headers=OWNER)
    assert response.status_code == 200
    assert repository.booking_queries[-1] == ("owner-1", "hall-2")
    assert response.json()["data"]["kpis"]["occupancyToday"]["value"] == 0


def test_dashboard_schedule(client: TestClient) -> None:
    items = client.get("/api/v1/dashboard/schedule", headers=OWNER).json()["data"]
    assert [item["status"] for item in items] == ["Confirmed", "Tentative"]
    assert set(items[0]) == {"time", "resource", "title", "status", "bookingId"}


def test_dashboard_payments_due_is_paginated(client: TestClient) -> None:
    response = client.get("/api/v1/dashboard/payments-due?pageSize=1", headers=OWNER)
    assert response.status_code == 200
    payload = response.json()
    assert len(payload["data"]) == 1
    assert payload["data"][0]["status"] == "Overdue"
    assert payload["pagination"]["totalItems"] == 3
    assert payload["pagination"]["totalPages"] == 3
    assert payload["meta"]["currency"] == "$"


def test_dashboard_holds_skip_lapsed_holds(client: TestClient) -> None:
    payload = client.get("/api/v1/dashboard/holds-expiring", headers=OWNER).json()
    assert payload["data"] == []
    assert payload["pagination"]["totalItems"] == 0


def test_dashboard_requires_caller(client: TestClient) -> None:
    response = client.get("/api/v1/dashboard/stats")
    assert response.status_code == 401
