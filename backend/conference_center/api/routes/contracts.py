"""
Booking contract endpoints: reads, manual creation, edits and the
send / sign / cancel transitions.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from conference_center.db.session import get_db
from conference_center.schemas.contract import (
    ContractCancel,
    ContractCreate,
    ContractPatch,
    ContractResponse,
    ContractSign,
)
from conference_center.services import contract_service

router = APIRouter(prefix="/contracts", tags=["Contracts"])


@router.get("/", response_model=list[ContractResponse])
async def list_contracts_endpoint(db: AsyncSession = Depends(get_db)):
    return await contract_service.list_contracts(db)


@router.get("/booking/{booking_id}", response_model=ContractResponse)
async def get_contract_for_booking_endpoint(booking_id: int, db: AsyncSession = Depends(get_db)):
    return await contract_service.get_by_booking_id(db, booking_id)


@router.post("/booking/{booking_id}", response_model=ContractResponse, status_code=status.HTTP_201_CREATED)
async def create_contract_endpoint(
    booking_id: int,
    data: Optional[ContractCreate] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """Create the contract manually when automatic creation did not happen."""
    data = data or ContractCreate()
    return await contract_service.create_basic_for_booking(
        db, booking_id, terms=data.terms, payment_due=data.payment_due_date
    )


@router.get("/{contract_id}", response_model=ContractResponse)
async def get_contract_endpoint(contract_id: int, db: AsyncSession = Depends(get_db)):
    return await contract_service.get_contract(db, contract_id)


@router.patch("/{contract_id}", response_model=ContractResponse)
async def patch_contract_endpoint(
    contract_id: int,
    data: ContractPatch,
    db: AsyncSession = Depends(get_db),
):
    """Edit terms, amount or payment due date of a draft or sent contract."""
    return await contract_service.patch_contract(
        db,
        contract_id,
        terms=data.terms,
        total_amount=data.total_amount,
        payment_due_date=data.payment_due_date,
    )


@router.post("/{contract_id}/send", response_model=ContractResponse)
async def send_contract_endpoint(contract_id: int, db: AsyncSession = Depends(get_db)):
    return await contract_service.mark_sent(db, contract_id)


@router.post("/{contract_id}/sign", response_model=ContractResponse)
async def sign_contract_endpoint(
    contract_id: int,
    data: Optional[ContractSign] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    return await contract_service.mark_signed(db, contract_id, data.signed_at if data else None)


@router.post("/{contract_id}/cancel", response_model=ContractResponse)
async def cancel_contract_endpoint(
    contract_id: int,
    data: Optional[ContractCancel] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    return await contract_service.cancel_contract(db, contract_id, data.reason if data else None)


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contract_endpoint(contract_id: int, db: AsyncSession = Depends(get_db)):
    await contract_service.delete_contract(db, contract_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
