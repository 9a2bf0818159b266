"""
Booking endpoints: creation with availability checking, lifecycle
transitions and discovery queries.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from conference_center.core.exceptions import ValidationError
from conference_center.core.metrics import booking_latency
from conference_center.db.session import get_db
from conference_center.schemas.booking import (
    BookingCancel,
    BookingCreate,
    BookingReschedule,
    BookingResponse,
)
from conference_center.services import booking_service

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("/", response_model=list[BookingResponse])
async def list_bookings_endpoint(
    customer_id: Optional[int] = Query(None),
    facility_id: Optional[int] = Query(None),
    date_from: Optional[datetime] = Query(None, alias="from"),
    date_to: Optional[datetime] = Query(None, alias="to"),
    db: AsyncSession = Depends(get_db),
):
    """
    List bookings. Filters are applied by precedence: customer, facility,
    then the inclusive date range (both `from` and `to` required).
    """
    if customer_id is not None:
        return await booking_service.list_by_customer(db, customer_id)
    if facility_id is not None:
        return await booking_service.list_by_facility(db, facility_id)
    if date_from is not None or date_to is not None:
        if date_from is None or date_to is None:
            raise ValidationError("Both 'from' and 'to' are required for a date range query.")
        return await booking_service.list_by_date_range(db, date_from, date_to)
    return await booking_service.list_bookings(db)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking_endpoint(booking_id: int, db: AsyncSession = Depends(get_db)):
    return await booking_service.get_booking(db, booking_id)


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(data: BookingCreate, db: AsyncSession = Depends(get_db)):
    """
    Book a facility. The facility row is locked for the duration of the
    request so overlapping requests are decided one at a time; the loser
    gets a 409. A draft contract is created alongside; `contract_id` is null
    if that step failed.
    """
    with booking_latency.time():
        return await booking_service.create_booking(
            db,
            customer_id=data.customer_id,
            facility_id=data.facility_id,
            start_date=data.start_date,
            end_date=data.end_date,
            number_of_participants=data.number_of_participants,
            notes=data.notes,
        )


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking_endpoint(booking_id: int, db: AsyncSession = Depends(get_db)):
    return await booking_service.confirm_booking(db, booking_id)


@router.post("/{booking_id}/reschedule", response_model=BookingResponse)
async def reschedule_booking_endpoint(
    booking_id: int,
    data: BookingReschedule,
    db: AsyncSession = Depends(get_db),
):
    """Move a booking to new dates with availability check and repricing."""
    return await booking_service.reschedule_booking(db, booking_id, data.start_date, data.end_date)


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_booking_endpoint(
    booking_id: int,
    data: Optional[BookingCancel] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """Cancel a booking. Idempotent: repeating the call is a no-op."""
    await booking_service.cancel_booking(db, booking_id, data.reason if data else None)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
