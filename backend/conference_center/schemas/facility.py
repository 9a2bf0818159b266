"""
Pydantic schemas for facility request/response validation.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class FacilityCreate(BaseModel):
    name: str = Field(..., max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    address: str = Field(..., max_length=255)
    postal_code: str = Field(..., max_length=20)
    city: str = Field(..., max_length=100)
    max_capacity: int
    price_per_day: Decimal = Field(..., max_digits=12, decimal_places=2)
    is_active: bool = True


class FacilityUpdate(FacilityCreate):
    pass


class FacilitySetActive(BaseModel):
    is_active: bool


class FacilityResponse(BaseModel):
    id: int
    name: str
    description: str
    address: str
    postal_code: str
    city: str
    max_capacity: int
    price_per_day: Decimal
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
