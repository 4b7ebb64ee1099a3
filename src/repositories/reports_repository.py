from __future__ import annotations

from typing import List, Optional, Tuple

from src.analytics.records import normalize_bookings, normalize_invoices
from src.core.supabase import SupabaseClient
from src.models.reports import BookingRecord, InvoiceRecord, ResourceRecord, UserRecord

BOOKING_COLUMNS = (
    "id,hall_owner_id,selected_hall,hall_name,booking_date,start_time,end_time,status,"
    "calculated_price,estimated_price,created_at,updated_at,customer_name,customer_email,event_type"
)
INVOICE_COLUMNS = "id,hall_owner_id,booking_id,issue_date,created_at,total,final_total,paid_amount,status"
RESOURCE_COLUMNS = "id,name,capacity,status"
USER_COLUMNS = "id,role,parent_user_id"


class ReportsRepository:
    """Owner-scoped snapshots of the booking store, normalized for analytics."""

    def __init__(self, client: Optional[SupabaseClient] = None) -> None:
        self.client = client or SupabaseClient()

    def list_bookings(self, owner_id: str, resource_id: Optional[str] = None) -> List[BookingRecord]:
        filters: List[Tuple[str, str]] = [("hall_owner_id", f"eq.{owner_id}")]
        if resource_id:
            filters.append(("selected_hall", f"eq.{resource_id}"))
        rows = self.client.select_all(
            table="bookings",
            select=BOOKING_COLUMNS,
            filters=filters,
            order="booking_date.asc,id.asc",
        )
        return normalize_bookings(rows)

    def list_invoices(self, owner_id: str) -> List[InvoiceRecord]:
        rows = self.client.select_all(
            table="invoices",
            select=INVOICE_COLUMNS,
            filters=[("hall_owner_id", f"eq.{owner_id}")],
            order="issue_date.asc,id.asc",
        )
        return normalize_invoices(rows)

    def list_resources(self, owner_id: str) -> List[ResourceRecord]:
        rows = self.client.select_all(
            table="resources",
            select=RESOURCE_COLUMNS,
            filters=[("hall_owner_id", f"eq.{owner_id}")],
            order="name.asc",
        )
        return [ResourceRecord.model_validate(row) for row in rows]

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        rows = self.client.select(
            table="users",
            select=USER_COLUMNS,
            filters=[("id", f"eq.{user_id}")],
            limit=1,
        )
        if not rows:
            return None
        return UserRecord.model_validate(rows[0])
