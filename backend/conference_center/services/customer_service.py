"""
Customer directory with case-insensitive email uniqueness.

Emails are normalized (trimmed, lower-cased) before they are stored or
compared; the unique index on customers.email backs the service-level check.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from conference_center.core.exceptions import ConflictError, NotFoundError
from conference_center.core.logging import get_logger
from conference_center.models import Customer
from conference_center.services.validators import clean_optional, ensure_customer, normalize_email

logger = get_logger(__name__)


async def _fetch_customer(db: AsyncSession, customer_id: int) -> Optional[Customer]:
    result = await db.execute(
        select(Customer)
        .where(Customer.id == customer_id)
        .options(selectinload(Customer.bookings))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def list_customers(db: AsyncSession) -> list[Customer]:
    result = await db.execute(
        select(Customer).order_by(Customer.last_name.asc(), Customer.first_name.asc())
    )
    return list(result.scalars().all())


async def get_customer(db: AsyncSession, customer_id: int) -> Customer:
    customer = await _fetch_customer(db, customer_id)
    if not customer:
        raise NotFoundError("Customer", customer_id)
    return customer


async def customer_exists(db: AsyncSession, customer_id: int) -> bool:
    return await db.scalar(select(Customer.id).where(Customer.id == customer_id)) is not None


async def get_customer_by_email(db: AsyncSession, email: Optional[str]) -> Optional[Customer]:
    """Case-insensitive lookup. Returns None for a blank email."""
    if not email or not email.strip():
        return None
    result = await db.execute(
        select(Customer).where(Customer.email == normalize_email(email))
    )
    return result.scalar_one_or_none()


async def _ensure_email_free(db: AsyncSession, email: str, customer_id: Optional[int] = None) -> None:
    duplicate = await get_customer_by_email(db, email)
    if duplicate is not None and duplicate.id != customer_id:
        logger.warning("customer_email_conflict", email=email, existing_id=duplicate.id)
        raise ConflictError(
            f"A customer with email '{email}' already exists (id={duplicate.id}).",
            email=email,
            existing_id=duplicate.id,
        )


async def create_customer(
    db: AsyncSession,
    first_name: str,
    last_name: str,
    email: str,
    phone: Optional[str] = None,
    company_name: Optional[str] = None,
    address: Optional[str] = None,
    postal_code: Optional[str] = None,
    city: Optional[str] = None,
) -> Customer:
    """
    Create a customer. Raises ValidationError for a missing name or invalid
    email and ConflictError if the normalized email is already taken.
    """
    ensure_customer(first_name, last_name, email)
    normalized = normalize_email(email)
    await _ensure_email_free(db, normalized)

    customer = Customer(
        first_name=clean_optional(first_name),
        last_name=clean_optional(last_name),
        email=normalized,
        phone=clean_optional(phone),
        company_name=clean_optional(company_name),
        address=clean_optional(address),
        postal_code=clean_optional(postal_code),
        city=clean_optional(city),
    )
    db.add(customer)
    try:
        await db.flush()
    except IntegrityError:
        # Lost a race against a concurrent insert of the same email
        raise ConflictError(f"A customer with email '{normalized}' already exists.", email=normalized)

    logger.info("customer_created", customer_id=customer.id, email=customer.email)
    return await get_customer(db, customer.id)


async def update_customer(
    db: AsyncSession,
    customer_id: int,
    first_name: str,
    last_name: str,
    email: str,
    phone: Optional[str] = None,
    company_name: Optional[str] = None,
    address: Optional[str] = None,
    postal_code: Optional[str] = None,
    city: Optional[str] = None,
) -> Customer:
    customer = await get_customer(db, customer_id)
    ensure_customer(first_name, last_name, email)

    normalized = normalize_email(email)
    if customer.email != normalized:
        await _ensure_email_free(db, normalized, customer_id=customer.id)

    customer.first_name = clean_optional(first_name)
    customer.last_name = clean_optional(last_name)
    customer.email = normalized
    customer.phone = clean_optional(phone)
    customer.company_name = clean_optional(company_name)
    customer.address = clean_optional(address)
    customer.postal_code = clean_optional(postal_code)
    customer.city = clean_optional(city)
    await db.flush()

    logger.info("customer_updated", customer_id=customer.id, email=customer.email)
    return await get_customer(db, customer.id)


async def delete_customer(db: AsyncSession, customer_id: int) -> bool:
    """
    Delete a customer without active bookings.
    Idempotent: returns False when there was nothing to delete.
    """
    customer = await _fetch_customer(db, customer_id)
    if customer is None:
        return False

    if customer.active_bookings:
        raise ConflictError(
            "Customer has active bookings and cannot be deleted.",
            customer_id=customer_id,
            active_bookings=customer.active_bookings,
        )
    if customer.total_bookings:
        raise ConflictError(
            "Customer has booking history and cannot be deleted.",
            customer_id=customer_id,
            total_bookings=customer.total_bookings,
        )

    await db.delete(customer)
    await db.flush()

    logger.info("customer_deleted", customer_id=customer_id)
    return True
