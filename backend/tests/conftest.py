"""
Pytest fixtures for test database, client, and seed data.

Each test gets a fresh in-memory SQLite database (tables created from the
ORM metadata), so tests are isolated without a running PostgreSQL.
Point TEST_DATABASE_URL at a real database to run the suite against it.
"""

import os

os.environ.setdefault("REDIS_ENABLED", "false")

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from conference_center.main import app
from conference_center.db.base import Base
from conference_center.db.session import get_db
from conference_center.models import Customer, Facility

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def future(days: int, hour: int = 9) -> datetime:
    """A naive wall-clock datetime `days` from today at `hour`:00."""
    return datetime.combine(date.today() + timedelta(days=days), time(hour))


def iso(days: int, hour: int = 9) -> str:
    return future(days, hour).isoformat()


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables, yield session, then drop tables for isolation."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_customer(db_session: AsyncSession) -> Customer:
    customer = Customer(
        first_name="Anna",
        last_name="Svensson",
        email="anna@acme.se",
        phone="070-1234567",
        company_name="Acme AB",
        address="Storgatan 1",
        postal_code="11122",
        city="Stockholm",
    )
    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)
    return customer


@pytest_asyncio.fixture
async def other_customer(db_session: AsyncSession) -> Customer:
    customer = Customer(
        first_name="Erik",
        last_name="Lind",
        email="erik@lind.se",
        phone="",
        company_name="",
        address="",
        postal_code="",
        city="",
    )
    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)
    return customer


@pytest_asyncio.fixture
async def test_facility(db_session: AsyncSession) -> Facility:
    """An active hall for 50 people at 1000/day."""
    facility = Facility(
        name="Main Hall",
        description="Large hall with stage",
        address="Konferensvägen 5",
        postal_code="41103",
        city="Göteborg",
        max_capacity=50,
        price_per_day=Decimal("1000.00"),
        is_active=True,
    )
    db_session.add(facility)
    await db_session.commit()
    await db_session.refresh(facility)
    return facility


@pytest_asyncio.fixture
async def inactive_facility(db_session: AsyncSession) -> Facility:
    facility = Facility(
        name="Old Annex",
        description="",
        address="Bakgatan 2",
        postal_code="41104",
        city="Göteborg",
        max_capacity=20,
        price_per_day=Decimal("500.00"),
        is_active=False,
    )
    db_session.add(facility)
    await db_session.commit()
    await db_session.refresh(facility)
    return facility


@pytest.fixture
def booking_payload(test_customer: Customer, test_facility: Facility):
    """Factory for booking request bodies against the default fixtures."""

    def make(start_days: int = 10, end_days: int = 12, participants: int = 10, **overrides) -> dict:
        payload = {
            "customer_id": test_customer.id,
            "facility_id": test_facility.id,
            "start_date": iso(start_days),
            "end_date": iso(end_days),
            "number_of_participants": participants,
        }
        payload.update(overrides)
        return payload

    return make
