"""
Customer directory endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from conference_center.core.exceptions import NotFoundError, ValidationError
from conference_center.db.session import get_db
from conference_center.schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse
from conference_center.services import customer_service

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("/", response_model=list[CustomerResponse])
async def list_customers_endpoint(db: AsyncSession = Depends(get_db)):
    return await customer_service.list_customers(db)


@router.get("/by-email", response_model=CustomerResponse)
async def get_customer_by_email_endpoint(
    email: str = Query(""),
    db: AsyncSession = Depends(get_db),
):
    """Case-insensitive lookup by email."""
    if not email.strip():
        raise ValidationError("Email is required.")
    customer = await customer_service.get_customer_by_email(db, email)
    if customer is None:
        raise NotFoundError("Customer", message=f"Customer with email '{email.strip()}' was not found.")
    return await customer_service.get_customer(db, customer.id)


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer_endpoint(customer_id: int, db: AsyncSession = Depends(get_db)):
    return await customer_service.get_customer(db, customer_id)


@router.post("/", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer_endpoint(data: CustomerCreate, db: AsyncSession = Depends(get_db)):
    """Create a customer. Returns 409 if the email is already registered."""
    return await customer_service.create_customer(db, **data.model_dump())


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer_endpoint(
    customer_id: int,
    data: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await customer_service.update_customer(db, customer_id, **data.model_dump())


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer_endpoint(customer_id: int, db: AsyncSession = Depends(get_db)):
    """Delete a customer without bookings. Deleting a missing customer is a no-op."""
    await customer_service.delete_customer(db, customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
