"""
Pydantic schemas for customer request/response validation.

Name and email rules live in the service layer so that they surface as
400 validation errors in the same shape as every other business rule.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class CustomerCreate(BaseModel):
    first_name: str = Field(..., max_length=100)
    last_name: str = Field("", max_length=100)
    email: str = Field(..., max_length=320)
    phone: Optional[str] = Field(None, max_length=50)
    company_name: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=255)
    postal_code: Optional[str] = Field(None, max_length=20)
    city: Optional[str] = Field(None, max_length=100)


class CustomerUpdate(CustomerCreate):
    pass


class CustomerResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: str
    company_name: str
    address: str
    postal_code: str
    city: str
    created_at: datetime
    total_bookings: int
    active_bookings: int

    model_config = {"from_attributes": True}
