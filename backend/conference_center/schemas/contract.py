"""
Pydantic schemas for booking contracts.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from conference_center.models.status import ContractStatus


class ContractCreate(BaseModel):
    terms: Optional[str] = None
    payment_due_date: Optional[datetime] = None


class ContractPatch(BaseModel):
    terms: Optional[str] = None
    total_amount: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
    payment_due_date: Optional[datetime] = None


class ContractSign(BaseModel):
    signed_at: Optional[datetime] = None


class ContractCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=1000)


class ContractResponse(BaseModel):
    id: int
    booking_id: int
    contract_number: str
    version: int
    status: ContractStatus
    terms: str
    total_amount: Decimal
    currency: str
    payment_due_date: Optional[datetime]
    customer_name: str
    customer_email: str
    facility_name: str
    created_at: datetime
    last_updated: Optional[datetime]
    signed_at: Optional[datetime]
    cancelled_at: Optional[datetime]
    cancel_reason: Optional[str]

    model_config = {"from_attributes": True}
