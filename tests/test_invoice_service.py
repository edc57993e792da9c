"""
Invoices stored per booking
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest
import pytest_asyncio

from rentdesk.core.errors import NotFoundError
from rentdesk.domain.invoice import AdjustmentKind
from rentdesk.models import InvoiceStatus, User
from rentdesk.schemas.booking import BookingCreate
from rentdesk.schemas.invoice import AdjustmentIn, InvoiceCreate, InvoiceOut, InvoiceUpdate
from rentdesk.services.booking_service import BookingService
from rentdesk.services.invoice_service import InvoiceService

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def booking(session, owner, rental, sample_booking_data):
    return await BookingService.create_booking(
        session, owner.id, BookingCreate(**sample_booking_data, property_id=rental.id), now=NOW
    )


@pytest.mark.asyncio
async def test_amount_defaults_to_booking_total(session, owner, booking):
    invoice = await InvoiceService.create_invoice(
        session,
        owner.id,
        InvoiceCreate(
            booking_id=booking.id,
            adjustments=[AdjustmentIn(name="Cleaning fee", amount=Decimal("50"), kind=AdjustmentKind.ADD)],
        ),
        now=NOW,
    )

    assert invoice.amount == Decimal("500.00")
    assert invoice.total == Decimal("550.00")
    assert invoice.status == InvoiceStatus.DRAFT
    assert invoice.invoice_number.startswith("INV-")
    assert [a.name for a in invoice.adjustments] == ["Cleaning fee"]


@pytest.mark.asyncio
async def test_create_twice_returns_existing(session, owner, booking):
    first = await InvoiceService.create_invoice(session, owner.id, InvoiceCreate(booking_id=booking.id))
    second = await InvoiceService.create_invoice(session, owner.id, InvoiceCreate(booking_id=booking.id))
    assert first.id == second.id


@pytest.mark.asyncio
async def test_update_recomputes_clamped_total(session, owner, booking):
    invoice = await InvoiceService.create_invoice(
        session, owner.id, InvoiceCreate(booking_id=booking.id, amount=Decimal("100"))
    )

    updated = await InvoiceService.update_invoice(
        session,
        owner.id,
        invoice.id,
        InvoiceUpdate(
            adjustments=[
                AdjustmentIn(name="Late checkout", amount=Decimal("20"), kind=AdjustmentKind.ADD),
                AdjustmentIn(name="Goodwill credit", amount=Decimal("150"), kind=AdjustmentKind.SUBTRACT),
            ],
            status=InvoiceStatus.SENT,
        ),
    )

    assert updated.total == Decimal("0.00")
    assert updated.status == InvoiceStatus.SENT
    assert [a.name for a in updated.adjustments] == ["Late checkout", "Goodwill credit"]

    fetched = await InvoiceService.get_for_booking(session, owner.id, booking.id)
    assert fetched.id == invoice.id


@pytest.mark.asyncio
async def test_no_invoice_yet(session, owner, booking):
    assert await InvoiceService.get_for_booking(session, owner.id, booking.id) is None


@pytest.mark.asyncio
async def test_other_owner_cannot_see_invoice(session, owner, booking):
    invoice = await InvoiceService.create_invoice(session, owner.id, InvoiceCreate(booking_id=booking.id))
    stranger = User(email="stranger@example.com", full_name="Stranger")
    session.add(stranger)
    await session.commit()

    with pytest.raises(NotFoundError):
        await InvoiceService.get_invoice(session, stranger.id, invoice.id)


def test_adjustment_amount_must_be_positive():
    with pytest.raises(ValueError):
        AdjustmentIn(name="Nothing", amount=Decimal("0"), kind=AdjustmentKind.ADD)


@pytest.mark.asyncio
async def test_balance_due_subtracts_advance_then_adjustments(session, owner, booking):
    invoice = await InvoiceService.create_invoice(
        session,
        owner.id,
        InvoiceCreate(
            booking_id=booking.id,
            adjustments=[AdjustmentIn(name="Pet fee", amount=Decimal("25"), kind=AdjustmentKind.ADD)],
        ),
        now=NOW,
    )
    assert InvoiceOut.model_validate(invoice).balance_due == Decimal("425.00")

    fetched = await InvoiceService.get_invoice(session, owner.id, invoice.id)
    assert fetched.balance_due == Decimal("425.00")
    assert fetched.total == Decimal("525.00")
