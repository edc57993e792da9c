import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.core.errors import NotFoundError
from rentdesk.domain.invoice import InvoiceAdjustment, compute_total, new_invoice_number
from rentdesk.models import Booking, Invoice, InvoiceAdjustmentRow, Property
from rentdesk.schemas.invoice import AdjustmentIn, InvoiceCreate, InvoiceUpdate

logger = logging.getLogger(__name__)


def _to_domain(rows: Iterable[InvoiceAdjustmentRow]) -> list[InvoiceAdjustment]:
    return [row.as_adjustment() for row in rows]


def _rows(adjustments: Iterable[AdjustmentIn]) -> list[InvoiceAdjustmentRow]:
    return [
        InvoiceAdjustmentRow(position=i, name=a.name, amount=a.amount, kind=a.kind)
        for i, a in enumerate(adjustments)
    ]


class InvoiceService:
    """Invoices per booking. ``total`` is always recomputed from amount + adjustments."""

    @staticmethod
    async def _owned_booking(db: AsyncSession, owner_id: int, booking_id: int) -> Booking:
        result = await db.execute(
            select(Booking)
            .join(Property, Booking.property_id == Property.id)
            .where(Booking.id == booking_id, Property.owner_id == owner_id)
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", booking_id)
        return booking

    @classmethod
    async def get_for_booking(
        cls, db: AsyncSession, owner_id: int, booking_id: int
    ) -> Optional[Invoice]:
        await cls._owned_booking(db, owner_id, booking_id)
        result = await db.execute(select(Invoice).where(Invoice.booking_id == booking_id))
        return result.scalar_one_or_none()

    @classmethod
    async def get_invoice(cls, db: AsyncSession, owner_id: int, invoice_id: int) -> Invoice:
        invoice = await db.get(Invoice, invoice_id)
        if not invoice:
            raise NotFoundError("Invoice", invoice_id)
        try:
            await cls._owned_booking(db, owner_id, invoice.booking_id)
        except NotFoundError:
            raise NotFoundError("Invoice", invoice_id) from None
        return invoice

    @classmethod
    async def create_invoice(
        cls,
        db: AsyncSession,
        owner_id: int,
        data: InvoiceCreate,
        now: Optional[datetime] = None,
    ) -> Invoice:
        """Create (or return the existing) invoice of a booking."""
        booking = await cls._owned_booking(db, owner_id, data.booking_id)

        existing = await db.execute(select(Invoice).where(Invoice.booking_id == booking.id))
        invoice = existing.scalar_one_or_none()
        if invoice:
            return invoice

        amount = data.amount if data.amount is not None else (booking.total_amount or 0)
        rows = _rows(data.adjustments)
        invoice = Invoice(
            booking=booking,
            invoice_number=new_invoice_number(now or datetime.now(timezone.utc)),
            amount=amount,
            total=compute_total(amount, _to_domain(rows)),
            adjustments=rows,
        )
        db.add(invoice)
        await db.commit()

        logger.info(
            f"Invoice {invoice.invoice_number} created for booking #{booking.id}: "
            f"total {invoice.total}"
        )
        return invoice

    @classmethod
    async def update_invoice(
        cls, db: AsyncSession, owner_id: int, invoice_id: int, data: InvoiceUpdate
    ) -> Invoice:
        invoice = await cls.get_invoice(db, owner_id, invoice_id)

        if data.amount is not None:
            invoice.amount = data.amount
        if data.adjustments is not None:
            invoice.adjustments = _rows(data.adjustments)
        if data.status is not None:
            invoice.status = data.status

        invoice.total = compute_total(invoice.amount, _to_domain(invoice.adjustments))
        await db.commit()
        return invoice
