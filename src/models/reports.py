from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel


class BookingRecord(BaseModel):
    id: str
    hall_owner_id: Optional[str] = None
    resource_id: Optional[str] = None
    resource_name: Optional[str] = None
    booking_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    status: Optional[str] = None
    calculated_price: Optional[float] = None
    estimated_price: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    event_type: Optional[str] = None


class InvoiceRecord(BaseModel):
    id: str
    hall_owner_id: Optional[str] = None
    booking_id: Optional[str] = None
    issue_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    total: Optional[float] = None
    final_total: Optional[float] = None
    paid_amount: Optional[float] = None
    status: Optional[str] = None


class ResourceRecord(BaseModel):
    id: str
    name: Optional[str] = None
    capacity: Optional[int] = None
    status: Optional[str] = None


class UserRecord(BaseModel):
    id: str
    role: Optional[str] = None
    parent_user_id: Optional[str] = None
