"""
Availability & booking engine.

CONCURRENCY STRATEGY: Per-facility row lock
============================================

Problem:
  Two customers request overlapping dates for the same facility at the same
  moment. Both run the overlap check, both see a free slot, both insert.
  Result: a double-booked hall.

Solution:
  The facility row is read with SELECT ... FOR UPDATE inside the request
  transaction before the overlap check. A second create/reschedule for the
  same facility blocks on that lock until the first transaction commits,
  then re-runs its overlap check against the committed booking.

  - Conference facilities see low write contention, so serializing per
    facility costs nothing noticeable and bookings for other facilities
    proceed in parallel
  - No retry loops: a request that loses the race gets a clean 409
  - On PostgreSQL an EXCLUDE constraint over active (facility, range) pairs
    is the final safety net; a violation surfaces as ConflictError too

OVERLAP SEMANTICS
=================

Conflict gate (strict, half-open):   existing.start < new_end AND existing.end > new_start
Discovery query (inclusive):         existing.start <= query_end AND existing.end >= query_start

A booking ending on the 3rd and another starting on the 3rd do not conflict,
but a listing for "the 3rd onwards" returns both.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from conference_center.core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from conference_center.core.logging import get_logger
from conference_center.core.metrics import record_booking_attempt, record_contract_auto_create_failure
from conference_center.db.base import utcnow
from conference_center.models import Booking, Facility
from conference_center.models.status import ACTIVE_BOOKING_STATUSES, BookingStatus, ensure_transition
from conference_center.services import contract_service, customer_service, facility_service
from conference_center.services.validators import ensure_valid_range, is_date_in_past, strip_timezone

logger = get_logger(__name__)

_WITH_RELATIONS = (
    selectinload(Booking.customer),
    selectinload(Booking.facility),
    selectinload(Booking.contract),
)


def calculate_total_price(facility: Facility, start: datetime, end: datetime) -> Decimal:
    """Daily rate times calendar days spanned, billing at least one day."""
    days = max(1, (end.date() - start.date()).days)
    return Decimal(facility.price_per_day) * days


async def has_overlap(
    db: AsyncSession,
    facility_id: int,
    start: datetime,
    end: datetime,
    exclude_booking_id: Optional[int] = None,
    statuses=ACTIVE_BOOKING_STATUSES,
) -> bool:
    conditions = [
        Booking.facility_id == facility_id,
        Booking.status.in_(list(statuses)),
        Booking.start_date < end,
        Booking.end_date > start,
    ]
    if exclude_booking_id is not None:
        conditions.append(Booking.id != exclude_booking_id)
    return bool(await db.scalar(select(exists().where(*conditions))))


def _conflict(facility_id: int, start: datetime, end: datetime) -> ConflictError:
    return ConflictError(
        f"Booking conflict for facility {facility_id} between "
        f"{start:%Y-%m-%d %H:%M} and {end:%Y-%m-%d %H:%M}.",
        facility_id=facility_id,
        start=start.isoformat(),
        end=end.isoformat(),
    )


async def _fetch_booking(db: AsyncSession, booking_id: int) -> Optional[Booking]:
    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id)
        .options(*_WITH_RELATIONS)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
    booking = await _fetch_booking(db, booking_id)
    if not booking:
        raise NotFoundError("Booking", booking_id)
    return booking


async def _write_booking(db: AsyncSession, booking: Booking) -> None:
    try:
        await db.flush()
    except IntegrityError:
        # PostgreSQL exclusion constraint caught an overlap the lock did not
        raise _conflict(booking.facility_id, booking.start_date, booking.end_date)


async def create_booking(
    db: AsyncSession,
    customer_id: int,
    facility_id: int,
    start_date: datetime,
    end_date: datetime,
    number_of_participants: int,
    notes: Optional[str] = None,
) -> Booking:
    """
    Create a pending booking after ordered, fail-fast checks, then create
    its draft contract as a separate best-effort step.

    The returned booking has `contract_id` set when the contract was
    created and None when that step failed.
    """
    try:
        booking = await _create_booking(
            db, customer_id, facility_id, start_date, end_date, number_of_participants, notes
        )
    except ConflictError:
        record_booking_attempt("conflict")
        raise
    except DomainError:
        record_booking_attempt("rejected")
        raise
    record_booking_attempt("success")

    try:
        await contract_service.create_basic_for_booking(db, booking.id)
    except DomainError as e:
        record_contract_auto_create_failure()
        logger.warning(
            "contract_auto_create_failed",
            booking_id=booking.id,
            error=e.message,
            kind=e.kind,
        )

    return await get_booking(db, booking.id)


async def _create_booking(
    db: AsyncSession,
    customer_id: int,
    facility_id: int,
    start_date: datetime,
    end_date: datetime,
    number_of_participants: int,
    notes: Optional[str],
) -> Booking:
    start = strip_timezone(start_date)
    end = strip_timezone(end_date)

    if number_of_participants <= 0:
        raise ValidationError("Number of participants must be greater than zero.")

    ensure_valid_range(start, end)

    if not await customer_service.customer_exists(db, customer_id):
        raise NotFoundError("Customer", customer_id)

    facility = await facility_service.get_facility(db, facility_id, for_update=True)
    facility_service.ensure_bookable(facility, number_of_participants)

    if await has_overlap(db, facility.id, start, end):
        logger.warning("booking_conflict", facility_id=facility.id, start=start.isoformat(), end=end.isoformat())
        raise _conflict(facility.id, start, end)

    booking = Booking(
        customer_id=customer_id,
        facility_id=facility.id,
        start_date=start,
        end_date=end,
        number_of_participants=number_of_participants,
        notes=notes.strip() if notes else "",
        status=BookingStatus.PENDING,
        total_price=calculate_total_price(facility, start, end),
    )
    db.add(booking)
    await _write_booking(db, booking)

    logger.info(
        "booking_created",
        booking_id=booking.id,
        facility_id=facility.id,
        customer_id=customer_id,
        total_price=str(booking.total_price),
    )
    return booking


async def confirm_booking(db: AsyncSession, booking_id: int) -> Booking:
    booking = await get_booking(db, booking_id)

    if booking.status == BookingStatus.CANCELLED:
        raise ValidationError("Cannot confirm a cancelled booking.", booking_id=booking_id)
    ensure_transition(booking.status, BookingStatus.CONFIRMED, "booking")

    if is_date_in_past(booking.start_date):
        raise ValidationError("Cannot confirm a booking that starts in the past.", booking_id=booking_id)

    booking.status = BookingStatus.CONFIRMED
    booking.confirmed_at = utcnow()
    await db.flush()

    logger.info("booking_confirmed", booking_id=booking.id)
    return await get_booking(db, booking.id)


async def reschedule_booking(
    db: AsyncSession,
    booking_id: int,
    new_start: datetime,
    new_end: datetime,
) -> Booking:
    """
    Move a pending or confirmed booking to a new window, re-checking
    availability (ignoring the booking itself) and repricing at the
    facility's current rate.
    """
    start = strip_timezone(new_start)
    end = strip_timezone(new_end)
    ensure_valid_range(start, end)

    booking = await get_booking(db, booking_id)
    if booking.status == BookingStatus.CANCELLED:
        raise ValidationError("Cannot reschedule a cancelled booking.", booking_id=booking_id)

    facility = await facility_service.get_facility(db, booking.facility_id, for_update=True)
    facility_service.ensure_bookable(facility)

    if await has_overlap(db, facility.id, start, end, exclude_booking_id=booking.id):
        logger.warning("reschedule_conflict", booking_id=booking.id, facility_id=facility.id)
        raise _conflict(facility.id, start, end)

    booking.start_date = start
    booking.end_date = end
    booking.total_price = calculate_total_price(facility, start, end)
    await _write_booking(db, booking)

    logger.info("booking_rescheduled", booking_id=booking.id, start=start.isoformat(), end=end.isoformat())
    return await get_booking(db, booking.id)


async def cancel_booking(db: AsyncSession, booking_id: int, reason: Optional[str] = None) -> None:
    """
    Cancel a booking. Idempotent: cancelling an already cancelled booking
    succeeds without touching it.
    """
    booking = await get_booking(db, booking_id)

    if booking.status == BookingStatus.CANCELLED:
        logger.info("booking_already_cancelled", booking_id=booking.id)
        return
    ensure_transition(booking.status, BookingStatus.CANCELLED, "booking")

    note = f"Cancellation reason: {reason.strip()}" if reason and reason.strip() else "Booking cancelled."
    booking.status = BookingStatus.CANCELLED
    booking.cancelled_at = utcnow()
    booking.notes = f"{booking.notes} {note}".strip() if booking.notes else note
    await db.flush()

    logger.info("booking_cancelled", booking_id=booking.id)


async def list_bookings(db: AsyncSession) -> list[Booking]:
    result = await db.execute(
        select(Booking).options(*_WITH_RELATIONS).order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.scalars().all())


async def list_by_customer(db: AsyncSession, customer_id: int) -> list[Booking]:
    result = await db.execute(
        select(Booking)
        .where(Booking.customer_id == customer_id)
        .options(*_WITH_RELATIONS)
        .order_by(Booking.start_date.desc())
    )
    return list(result.scalars().all())


async def list_by_facility(db: AsyncSession, facility_id: int) -> list[Booking]:
    result = await db.execute(
        select(Booking)
        .where(Booking.facility_id == facility_id)
        .options(*_WITH_RELATIONS)
        .order_by(Booking.start_date.asc())
    )
    return list(result.scalars().all())


async def list_by_date_range(db: AsyncSession, start: datetime, end: datetime) -> list[Booking]:
    """Bookings touching [start, end], boundaries included. All statuses."""
    start = strip_timezone(start)
    end = strip_timezone(end)
    if end < start:
        raise ValidationError("Invalid date range: 'to' must not be before 'from'.")

    result = await db.execute(
        select(Booking)
        .where(Booking.start_date <= end, Booking.end_date >= start)
        .options(*_WITH_RELATIONS)
        .order_by(Booking.start_date.asc())
    )
    return list(result.scalars().all())
