"""
Facility directory: CRUD plus the active/inactive lifecycle.

Facilities referenced by bookings are never hard-deleted; deactivate them
instead so historical bookings and contracts stay intact.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from conference_center.core.exceptions import ConflictError, NotFoundError, ValidationError
from conference_center.core.logging import get_logger
from conference_center.models import Booking, Facility
from conference_center.services.validators import (
    clean_optional,
    ensure_non_negative,
    ensure_positive,
    ensure_required,
)

logger = get_logger(__name__)


def _ensure_facility_fields(
    name: Optional[str],
    address: Optional[str],
    postal_code: Optional[str],
    city: Optional[str],
    max_capacity: int,
    price_per_day: Decimal,
) -> None:
    ensure_required(name, "Facility name")
    ensure_required(address, "Address")
    ensure_required(postal_code, "Postal code")
    ensure_required(city, "City")
    ensure_positive(max_capacity, "Max capacity")
    ensure_non_negative(price_per_day, "Price per day")


async def list_facilities(db: AsyncSession, active_only: bool = False) -> list[Facility]:
    query = select(Facility)
    if active_only:
        query = query.where(Facility.is_active.is_(True))
    result = await db.execute(query.order_by(Facility.name.asc()))
    return list(result.scalars().all())


async def get_facility(db: AsyncSession, facility_id: int, for_update: bool = False) -> Facility:
    """
    Get a single facility by ID.

    With `for_update=True` the row is locked until the transaction ends;
    the booking engine uses this to serialize writes per facility.
    """
    query = select(Facility).where(Facility.id == facility_id)
    if for_update:
        query = query.with_for_update()
    result = await db.execute(query)
    facility = result.scalar_one_or_none()

    if not facility:
        raise NotFoundError("Facility", facility_id)
    return facility


async def create_facility(
    db: AsyncSession,
    name: str,
    address: str,
    postal_code: str,
    city: str,
    max_capacity: int,
    price_per_day: Decimal,
    description: Optional[str] = None,
    is_active: bool = True,
) -> Facility:
    _ensure_facility_fields(name, address, postal_code, city, max_capacity, price_per_day)

    facility = Facility(
        name=name.strip(),
        description=clean_optional(description),
        address=address.strip(),
        postal_code=postal_code.strip(),
        city=city.strip(),
        max_capacity=max_capacity,
        price_per_day=price_per_day,
        is_active=is_active,
    )
    db.add(facility)
    await db.flush()
    await db.refresh(facility)

    logger.info("facility_created", facility_id=facility.id, name=facility.name)
    return facility


async def update_facility(
    db: AsyncSession,
    facility_id: int,
    name: str,
    address: str,
    postal_code: str,
    city: str,
    max_capacity: int,
    price_per_day: Decimal,
    description: Optional[str] = None,
    is_active: bool = True,
) -> Facility:
    _ensure_facility_fields(name, address, postal_code, city, max_capacity, price_per_day)
    facility = await get_facility(db, facility_id)

    facility.name = name.strip()
    facility.description = clean_optional(description)
    facility.address = address.strip()
    facility.postal_code = postal_code.strip()
    facility.city = city.strip()
    facility.max_capacity = max_capacity
    facility.price_per_day = price_per_day
    facility.is_active = is_active

    await db.flush()
    await db.refresh(facility)

    logger.info("facility_updated", facility_id=facility.id)
    return facility


async def set_active(db: AsyncSession, facility_id: int, is_active: bool) -> Facility:
    """Toggle the soft-delete flag. Inactive facilities cannot be booked."""
    facility = await get_facility(db, facility_id)
    facility.is_active = is_active
    await db.flush()
    await db.refresh(facility)

    logger.info("facility_active_changed", facility_id=facility.id, is_active=is_active)
    return facility


async def delete_facility(db: AsyncSession, facility_id: int) -> bool:
    """
    Delete a facility that no booking references.
    Idempotent: returns False when there was nothing to delete.
    """
    facility = await db.get(Facility, facility_id)
    if facility is None:
        return False

    referenced = await db.scalar(
        select(func.count()).select_from(Booking).where(Booking.facility_id == facility_id)
    )
    if referenced:
        raise ConflictError(
            "Facility is referenced by bookings and cannot be deleted. Deactivate it instead.",
            facility_id=facility_id,
            bookings=referenced,
        )

    await db.delete(facility)
    await db.flush()

    logger.info("facility_deleted", facility_id=facility_id)
    return True


def ensure_bookable(facility: Facility, participants: Optional[int] = None) -> None:
    if not facility.is_active:
        raise ValidationError(
            "Facility is not active and cannot be booked.", facility_id=facility.id
        )
    if participants is not None and participants > facility.max_capacity:
        raise ValidationError(
            f"Participants exceed facility capacity ({facility.max_capacity}).",
            facility_id=facility.id,
            max_capacity=facility.max_capacity,
            requested=participants,
        )
