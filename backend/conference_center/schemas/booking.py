"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from conference_center.models.status import BookingStatus


class BookingCreate(BaseModel):
    customer_id: int
    facility_id: int
    start_date: datetime
    end_date: datetime
    number_of_participants: int
    notes: Optional[str] = Field(None, max_length=2000)


class BookingReschedule(BaseModel):
    start_date: datetime
    end_date: datetime


class BookingCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class BookingResponse(BaseModel):
    id: int
    customer_id: int
    facility_id: int
    start_date: datetime
    end_date: datetime
    number_of_participants: int
    notes: str
    status: BookingStatus
    total_price: Decimal
    created_at: datetime
    confirmed_at: Optional[datetime]
    cancelled_at: Optional[datetime]

    # Flattened for convenience
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    facility_name: Optional[str] = None
    contract_id: Optional[int] = None

    model_config = {"from_attributes": True}
