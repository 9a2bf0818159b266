"""
Contract engine: derives a versioned legal contract from a booking and
drives it through draft -> sent -> signed, with cancelled reachable from
any state.

LEGAL SNAPSHOT
==============

customer_name, customer_email and facility_name are copied from the live
records once, when the contract is created, and never refreshed. A contract
must show the parties as they were when it was drawn up, even if the
customer later changes name or the facility is renamed.

Frozen states:
  Signed and cancelled contracts reject edits to terms, amount and payment
  due date. Sending and signing additionally require the booking to be
  confirmed.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from conference_center.core.config import get_settings
from conference_center.core.exceptions import ConflictError, NotFoundError, ValidationError
from conference_center.core.logging import get_logger
from conference_center.core.metrics import record_contract_transition
from conference_center.db.base import utcnow
from conference_center.models import Booking, BookingContract, Customer, Facility
from conference_center.models.status import BookingStatus, ContractStatus, ensure_transition
from conference_center.services.validators import ensure_non_negative, strip_timezone

logger = get_logger(__name__)
settings = get_settings()


def generate_contract_number(booking_id: int, year: Optional[int] = None) -> str:
    """KCV-<year>-<booking id, 6 digits>."""
    year = year or utcnow().year
    return f"{settings.CONTRACT_NUMBER_PREFIX}-{year:04d}-{booking_id:06d}"


def format_amount(amount: Decimal) -> str:
    text = f"{Decimal(amount).quantize(Decimal('0.01')):f}"
    return text.rstrip("0").rstrip(".") if "." in text else text


def build_default_terms(booking: Booking, facility: Facility) -> str:
    return (
        f"Booking Contract for {facility.name}\n"
        f"Dates: {booking.start_date:%Y-%m-%d} to {booking.end_date:%Y-%m-%d}\n"
        f"Participants: {booking.number_of_participants}\n"
        f"Total Amount: {format_amount(booking.total_price)} {settings.CONTRACT_CURRENCY}\n"
        "\n"
        "General terms:\n"
        f"- Payment due {settings.PAYMENT_DUE_DAYS_BEFORE_START} days before start.\n"
        "- Cancellation policy: 50% within 7 days, 100% within 48 hours.\n"
        "- Damages and extra services will be invoiced separately."
    )


async def list_contracts(db: AsyncSession) -> list[BookingContract]:
    result = await db.execute(
        select(BookingContract).order_by(BookingContract.created_at.desc(), BookingContract.id.desc())
    )
    return list(result.scalars().all())


async def get_contract(db: AsyncSession, contract_id: int) -> BookingContract:
    contract = await db.get(BookingContract, contract_id)
    if not contract:
        raise NotFoundError("Contract", contract_id)
    return contract


async def find_by_booking_id(db: AsyncSession, booking_id: int) -> Optional[BookingContract]:
    result = await db.execute(
        select(BookingContract).where(BookingContract.booking_id == booking_id)
    )
    return result.scalar_one_or_none()


async def get_by_booking_id(db: AsyncSession, booking_id: int) -> BookingContract:
    contract = await find_by_booking_id(db, booking_id)
    if not contract:
        raise NotFoundError("Contract", message=f"Contract for booking id={booking_id} was not found.")
    return contract


async def create_basic_for_booking(
    db: AsyncSession,
    booking_id: int,
    terms: Optional[str] = None,
    payment_due: Optional[datetime] = None,
) -> BookingContract:
    """
    Create a draft contract for an existing booking.

    Called automatically right after a booking is created, and available
    manually for bookings whose automatic contract could not be created.
    """
    booking = await db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking", booking_id)

    if booking.status == BookingStatus.CANCELLED:
        raise ValidationError("Cannot create a contract for a cancelled booking.", booking_id=booking_id)

    existing = await find_by_booking_id(db, booking_id)
    if existing is not None:
        raise ConflictError(
            f"A contract already exists for booking id={booking_id} (id={existing.id}).",
            booking_id=booking_id,
            existing_id=existing.id,
        )

    facility = await db.get(Facility, booking.facility_id)
    if not facility:
        raise NotFoundError("Facility", booking.facility_id)

    customer = await db.get(Customer, booking.customer_id)
    if not customer:
        raise NotFoundError("Customer", booking.customer_id)

    if payment_due is None:
        payment_due = booking.start_date - timedelta(days=settings.PAYMENT_DUE_DAYS_BEFORE_START)

    contract = BookingContract(
        booking_id=booking.id,
        contract_number=generate_contract_number(booking.id),
        version=1,
        status=ContractStatus.DRAFT,
        terms=terms.strip() if terms and terms.strip() else build_default_terms(booking, facility),
        total_amount=booking.total_price,
        currency=settings.CONTRACT_CURRENCY,
        payment_due_date=strip_timezone(payment_due),
        customer_name=customer.full_name,
        customer_email=customer.email,
        facility_name=facility.name,
    )
    db.add(contract)
    try:
        await db.flush()
    except IntegrityError:
        raise ConflictError(
            f"A contract already exists for booking id={booking_id}.", booking_id=booking_id
        )
    await db.refresh(contract)

    record_contract_transition(ContractStatus.DRAFT.value)
    logger.info(
        "contract_created",
        contract_id=contract.id,
        booking_id=booking.id,
        contract_number=contract.contract_number,
    )
    return contract


async def patch_contract(
    db: AsyncSession,
    contract_id: int,
    terms: Optional[str] = None,
    total_amount: Optional[Decimal] = None,
    payment_due_date: Optional[datetime] = None,
) -> BookingContract:
    """
    Edit a draft or sent contract. Every successful patch bumps the version,
    even when only one field changed.
    """
    contract = await get_contract(db, contract_id)

    if ContractStatus(contract.status).is_frozen:
        raise ValidationError(
            "Cannot modify a signed or cancelled contract.",
            contract_id=contract_id,
            status=contract.status.value,
        )

    if total_amount is not None:
        ensure_non_negative(total_amount, "Total amount")
        contract.total_amount = total_amount

    if terms is not None and terms.strip():
        contract.terms = terms.strip()

    if payment_due_date is not None:
        contract.payment_due_date = strip_timezone(payment_due_date)

    contract.version += 1
    contract.last_updated = utcnow()
    await db.flush()
    await db.refresh(contract)

    logger.info("contract_patched", contract_id=contract.id, version=contract.version)
    return contract


async def _load_for_transition(db: AsyncSession, contract_id: int, action: str) -> BookingContract:
    contract = await get_contract(db, contract_id)

    booking = await db.get(Booking, contract.booking_id)
    if not booking:
        raise NotFoundError("Booking", contract.booking_id)

    if booking.status != BookingStatus.CONFIRMED:
        raise ValidationError(
            f"Cannot {action} contract for unconfirmed booking. Confirm the booking first.",
            booking_id=booking.id,
            booking_status=booking.status.value,
        )

    if contract.status == ContractStatus.CANCELLED:
        raise ValidationError(f"Cannot {action} a cancelled contract.", contract_id=contract.id)

    return contract


async def mark_sent(db: AsyncSession, contract_id: int) -> BookingContract:
    contract = await _load_for_transition(db, contract_id, "send")
    ensure_transition(contract.status, ContractStatus.SENT, "contract")

    contract.status = ContractStatus.SENT
    contract.last_updated = utcnow()
    await db.flush()
    await db.refresh(contract)

    record_contract_transition(ContractStatus.SENT.value)
    logger.info("contract_sent", contract_id=contract.id)
    return contract


async def mark_signed(
    db: AsyncSession,
    contract_id: int,
    signed_at: Optional[datetime] = None,
) -> BookingContract:
    """Sign a draft or sent contract; a sent step is not required."""
    contract = await _load_for_transition(db, contract_id, "sign")
    ensure_transition(contract.status, ContractStatus.SIGNED, "contract")

    now = utcnow()
    contract.status = ContractStatus.SIGNED
    contract.signed_at = signed_at or now
    contract.last_updated = now
    await db.flush()
    await db.refresh(contract)

    record_contract_transition(ContractStatus.SIGNED.value)
    logger.info("contract_signed", contract_id=contract.id)
    return contract


async def cancel_contract(db: AsyncSession, contract_id: int, reason: Optional[str] = None) -> BookingContract:
    """
    Cancel from any state. Unlike booking cancellation this is not a no-op
    on an already cancelled contract: the timestamp and reason are restamped.
    """
    contract = await get_contract(db, contract_id)
    ensure_transition(contract.status, ContractStatus.CANCELLED, "contract")

    now = utcnow()
    contract.status = ContractStatus.CANCELLED
    contract.cancelled_at = now
    contract.cancel_reason = reason.strip() if reason and reason.strip() else None
    contract.last_updated = now
    await db.flush()
    await db.refresh(contract)

    record_contract_transition(ContractStatus.CANCELLED.value)
    logger.info("contract_cancelled", contract_id=contract.id)
    return contract


async def delete_contract(db: AsyncSession, contract_id: int) -> bool:
    """Idempotent: returns False when there was nothing to delete."""
    contract = await db.get(BookingContract, contract_id)
    if contract is None:
        return False

    await db.delete(contract)
    await db.flush()

    logger.info("contract_deleted", contract_id=contract_id)
    return True
