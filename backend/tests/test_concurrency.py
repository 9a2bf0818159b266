"""
Concurrency tests for the double-booking gate.

SQLite ignores SELECT ... FOR UPDATE, so these only run when
TEST_DATABASE_URL points at PostgreSQL.
"""

import asyncio

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from conference_center.db.session import get_db
from conference_center.main import app
from tests.conftest import TEST_DATABASE_URL

requires_postgres = pytest.mark.skipif(
    not TEST_DATABASE_URL.startswith("postgresql"),
    reason="row locks need PostgreSQL",
)


@requires_postgres
@pytest.mark.asyncio
async def test_concurrent_overlapping_bookings(client: AsyncClient, db_session, booking_payload):
    """Two overlapping requests on separate sessions: one wins, one gets 409."""
    session_factory = async_sessionmaker(db_session.bind, class_=AsyncSession, expire_on_commit=False)

    async def session_per_request():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = session_per_request

    responses = await asyncio.gather(
        client.post("/api/v1/bookings/", json=booking_payload(10, 13)),
        client.post("/api/v1/bookings/", json=booking_payload(11, 14)),
    )

    assert sorted(r.status_code for r in responses) == [201, 409]

    listing = await client.get("/api/v1/bookings/", params={"facility_id": booking_payload()["facility_id"]})
    assert len(listing.json()) == 1
