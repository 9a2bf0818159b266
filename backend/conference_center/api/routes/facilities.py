"""
Facility endpoints with Redis caching on list operations.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from conference_center.core.logging import get_logger
from conference_center.db.session import get_db
from conference_center.schemas.facility import (
    FacilityCreate,
    FacilityResponse,
    FacilitySetActive,
    FacilityUpdate,
)
from conference_center.services import facility_service
from conference_center.services.cache_service import (
    get_cached_facilities,
    invalidate_facility_cache,
    set_cached_facilities,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/facilities", tags=["Facilities"])


async def _commit_and_invalidate(db: AsyncSession) -> None:
    # Listings are dropped only after the write is committed
    await db.commit()
    await invalidate_facility_cache()


async def _list_with_cache(db: AsyncSession, active_only: bool) -> list[FacilityResponse]:
    cached = await get_cached_facilities(active_only)
    if cached is not None:
        logger.info("facilities_list_cache_hit", active_only=active_only)
        return [FacilityResponse(**item) for item in cached]

    facilities = await facility_service.list_facilities(db, active_only=active_only)
    response = [FacilityResponse.model_validate(f) for f in facilities]
    await set_cached_facilities(active_only, [f.model_dump(mode="json") for f in response])
    return response


@router.get("/", response_model=list[FacilityResponse])
async def list_facilities_endpoint(db: AsyncSession = Depends(get_db)):
    """All facilities, including inactive ones."""
    return await _list_with_cache(db, active_only=False)


@router.get("/active", response_model=list[FacilityResponse])
async def list_active_facilities_endpoint(db: AsyncSession = Depends(get_db)):
    """Facilities that can currently be booked."""
    return await _list_with_cache(db, active_only=True)


@router.get("/{facility_id}", response_model=FacilityResponse)
async def get_facility_endpoint(facility_id: int, db: AsyncSession = Depends(get_db)):
    """Single facility. Not cached."""
    return await facility_service.get_facility(db, facility_id)


@router.post("/", response_model=FacilityResponse, status_code=status.HTTP_201_CREATED)
async def create_facility_endpoint(data: FacilityCreate, db: AsyncSession = Depends(get_db)):
    facility = await facility_service.create_facility(db, **data.model_dump())
    await _commit_and_invalidate(db)
    return facility


@router.put("/{facility_id}", response_model=FacilityResponse)
async def update_facility_endpoint(
    facility_id: int,
    data: FacilityUpdate,
    db: AsyncSession = Depends(get_db),
):
    facility = await facility_service.update_facility(db, facility_id, **data.model_dump())
    await _commit_and_invalidate(db)
    return facility


@router.patch("/{facility_id}/active", response_model=FacilityResponse)
async def set_facility_active_endpoint(
    facility_id: int,
    data: FacilitySetActive,
    db: AsyncSession = Depends(get_db),
):
    """
    Activate or deactivate a facility. Prefer this over DELETE:
    inactive facilities cannot be booked but keep their history.
    """
    facility = await facility_service.set_active(db, facility_id, data.is_active)
    await _commit_and_invalidate(db)
    return facility


@router.delete("/{facility_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_facility_endpoint(facility_id: int, db: AsyncSession = Depends(get_db)):
    """Delete an unreferenced facility. 409 if bookings reference it."""
    if await facility_service.delete_facility(db, facility_id):
        await _commit_and_invalidate(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
