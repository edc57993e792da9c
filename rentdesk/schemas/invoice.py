from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from rentdesk.domain.invoice import AdjustmentKind
from rentdesk.models import InvoiceStatus


class AdjustmentIn(BaseModel):
    name: str = Field(min_length=1)
    # Magnitude only; the kind decides the sign
    amount: Decimal = Field(gt=0)
    kind: AdjustmentKind


class AdjustmentOut(AdjustmentIn):
    id: int

    model_config = ConfigDict(from_attributes=True)


class InvoiceCreate(BaseModel):
    booking_id: int
    amount: Optional[Decimal] = Field(default=None, ge=0)  # defaults to the booking total
    adjustments: List[AdjustmentIn] = []


class InvoiceUpdate(BaseModel):
    amount: Optional[Decimal] = Field(default=None, ge=0)
    adjustments: Optional[List[AdjustmentIn]] = None
    status: Optional[InvoiceStatus] = None


class InvoiceOut(BaseModel):
    id: int
    booking_id: int
    invoice_number: str
    amount: Decimal
    total: Decimal
    balance_due: Decimal
    status: InvoiceStatus
    adjustments: List[AdjustmentOut]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
