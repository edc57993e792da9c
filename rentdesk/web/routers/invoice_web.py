from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.database import get_db
from rentdesk.schemas.invoice import InvoiceCreate, InvoiceOut, InvoiceUpdate
from rentdesk.services.invoice_service import InvoiceService
from rentdesk.web.deps import get_current_user_id

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.get("/booking/{booking_id}")
async def get_booking_invoice(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    invoice = await InvoiceService.get_for_booking(db, user_id, booking_id)
    return {"data": InvoiceOut.model_validate(invoice) if invoice else None}


@router.get("/{invoice_id}")
async def get_invoice(
    invoice_id: int,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    invoice = await InvoiceService.get_invoice(db, user_id, invoice_id)
    return {"data": InvoiceOut.model_validate(invoice)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_in: InvoiceCreate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    invoice = await InvoiceService.create_invoice(db, user_id, invoice_in)
    return {"data": InvoiceOut.model_validate(invoice)}


@router.patch("/{invoice_id}")
async def update_invoice(
    invoice_id: int,
    invoice_in: InvoiceUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    invoice = await InvoiceService.update_invoice(db, user_id, invoice_id, invoice_in)
    return {"data": InvoiceOut.model_validate(invoice)}
