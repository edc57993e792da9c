"""
Pytest configuration for RentDesk tests
"""
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

# Ensure rentdesk is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from rentdesk.database import Base  # noqa: E402
from rentdesk.domain.lifecycle import ReminderLifecycleManager  # noqa: E402
from rentdesk.models import Property, User  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_lifecycle(monkeypatch):
    """Every test starts with no tracked reminder state; ids repeat across in-memory DBs."""
    manager = ReminderLifecycleManager()
    monkeypatch.setattr("rentdesk.services.booking_service.reminder_lifecycle", manager)
    monkeypatch.setattr("rentdesk.services.notification_service.reminder_lifecycle", manager)
    monkeypatch.setattr("rentdesk.services.property_service.reminder_lifecycle", manager)
    return manager


@pytest.fixture(autouse=True)
def fresh_property_locks(monkeypatch):
    """Locks bind to the event loop they first wait on; each test has its own loop."""
    from rentdesk.services.booking_service import BookingService

    monkeypatch.setattr(BookingService, "_property_locks", {})
    monkeypatch.setattr(BookingService, "_lock_users", {})


@pytest_asyncio.fixture
async def session():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    Session = async_sessionmaker(engine, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with Session() as db:
        yield db

    await engine.dispose()


@pytest_asyncio.fixture
async def owner(session):
    user = User(email="owner@example.com", full_name="Olivia Owner")
    session.add(user)
    await session.commit()
    return user


@pytest_asyncio.fixture
async def rental(session, owner):
    prop = Property(owner_id=owner.id, name="Lakeside Cabin")
    session.add(prop)
    await session.commit()
    return prop


@pytest.fixture
def sample_booking_data():
    """Sample data for booking creation (property_id filled in by the test)"""
    return {
        "customer_name": "Jane Guest",
        "customer_email": "jane@example.com",
        "customer_phone": "+15550001111",
        "check_in": date(2024, 6, 10),
        "check_out": date(2024, 6, 15),
        "check_in_time": "14:00",
        "check_out_time": "11:00",
        "total_amount": Decimal("500.00"),
        "advance_payment": Decimal("100.00"),
        "is_paid": False,
    }
