"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh schema. By default that is a throwaway SQLite file;
set TEST_DATABASE_URL to a PostgreSQL database to run the suite (including
the `postgres`-marked concurrent booking tests) against the production engine.
"""

import os
from datetime import date, timedelta
from decimal import Decimal
from typing import AsyncGenerator

# The listing cache is exercised separately; the app must not reach for Redis
os.environ["REDIS_ENABLED"] = "false"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.main import app
from app.db.base import Base
from app.db.session import build_engine, build_sessionmaker, get_db
from app.core.security import create_access_token, hash_password
from app.models import (
    ApprovalStatus,
    Booking,
    BookingStatus,
    Provider,
    Trip,
    TripStatus,
    User,
    UserRole,
)
from app.services.mailer import Mailer, get_mailer

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")
DEFAULT_PASSWORD = "testpassword123"


def is_postgres() -> bool:
    return bool(TEST_DATABASE_URL) and TEST_DATABASE_URL.startswith("postgresql")


def pytest_collection_modifyitems(config, items):
    if is_postgres():
        return
    skip = pytest.mark.skip(reason="needs row locks; set TEST_DATABASE_URL to PostgreSQL")
    for item in items:
        if item.get_closest_marker("postgres"):
            item.add_marker(skip)


@pytest.fixture
def database_url(tmp_path) -> str:
    return TEST_DATABASE_URL or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"


@pytest_asyncio.fixture
async def session_factory(database_url: str) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Create tables, hand out a session factory, then drop tables for isolation."""
    engine = build_engine(database_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield build_sessionmaker(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting state; requests use their own."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get a fresh session on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def mailer():
    """Fresh mailer whose outbox the test can read."""
    test_mailer = Mailer(sender="test@tripbooking.local")
    app.dependency_overrides[get_mailer] = lambda: test_mailer
    yield test_mailer
    app.dependency_overrides.pop(get_mailer, None)


def auth_headers_for(user: User) -> dict:
    token = create_access_token(data={"sub": user.public_id, "role": UserRole(user.role).value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db_session: AsyncSession):
    async def _make_user(
        email: str = "customer@example.com",
        name: str = "Test Customer",
        role: UserRole = UserRole.CUSTOMER,
        password: str = DEFAULT_PASSWORD,
        **fields,
    ) -> User:
        user = User(
            name=name,
            email=email,
            hashed_password=hash_password(password),
            role=role,
            **fields,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_trip(db_session: AsyncSession, provider: Provider):
    async def _make_trip(**overrides) -> Trip:
        fields = dict(
            provider_id=provider.id,
            title="Mount Bromo Sunrise",
            description="Jeep tour to the Bromo crater rim",
            duration="2D1N",
            location="Malang",
            gathering_point_name="Malang Station",
            gathering_point_url="https://maps.example.com/malang-station",
            price=Decimal("100.00"),
            discount_price=Decimal("30.00"),
            max_participants=10,
            booked_participants=0,
            start_date=date.today() + timedelta(days=30),
            end_date=date.today() + timedelta(days=31),
            status=TripStatus.PUBLISHED,
            approval_status=ApprovalStatus.APPROVED,
        )
        fields.update(overrides)
        trip = Trip(**fields)
        db_session.add(trip)
        await db_session.commit()
        await db_session.refresh(trip)
        return trip

    return _make_trip


@pytest.fixture
def make_booking(db_session: AsyncSession):
    """Insert a booking row directly, bypassing the seat counter."""

    async def _make_booking(user: User, trip: Trip, status: BookingStatus, num_of_people: int = 1) -> Booking:
        booking = Booking(
            user_id=user.id,
            trip_id=trip.id,
            num_of_people=num_of_people,
            total_price=Decimal("70.00") * num_of_people,
            status=status,
        )
        db_session.add(booking)
        await db_session.commit()
        await db_session.refresh(booking)
        return booking

    return _make_booking


@pytest_asyncio.fixture
async def customer(make_user) -> User:
    return await make_user()


@pytest_asyncio.fixture
async def other_customer(make_user) -> User:
    return await make_user(email="other@example.com", name="Other Customer")


@pytest_asyncio.fixture
async def customer_headers(customer: User) -> dict:
    return auth_headers_for(customer)


@pytest_asyncio.fixture
async def provider_user(make_user) -> User:
    return await make_user(email="provider@example.com", name="Trip Provider", role=UserRole.PROVIDER)


@pytest_asyncio.fixture
async def provider(db_session: AsyncSession, provider_user: User) -> Provider:
    provider = Provider(
        user_id=provider_user.id,
        company_name="Java Trails",
        phone_number="+62 812 0000 0000",
        bank_name="Bank Central",
        bank_account_number="1234567890",
        bank_account_name="PT Java Trails",
    )
    db_session.add(provider)
    await db_session.commit()
    await db_session.refresh(provider)
    return provider


@pytest_asyncio.fixture
async def trip(make_trip) -> Trip:
    """Published, approved trip: 10 seats at 100.00 with 30.00 off."""
    return await make_trip()
