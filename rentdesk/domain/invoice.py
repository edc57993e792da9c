"""
Invoice totals.

The same functions feed the in-app totals and the stored invoice, so both
always show an identical amount.
"""
import datetime
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Optional

CENT = Decimal("0.01")


class AdjustmentKind(str, Enum):
    ADD = "add"
    SUBTRACT = "subtract"


@dataclass(frozen=True)
class InvoiceAdjustment:
    name: str
    amount: Decimal  # positive magnitude, validated by the caller
    kind: AdjustmentKind
    id: Optional[int] = None

    @property
    def signed_amount(self) -> Decimal:
        if self.kind == AdjustmentKind.SUBTRACT:
            return -Decimal(self.amount)
        return Decimal(self.amount)


def _money(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def compute_total(base_amount, adjustments: Iterable[InvoiceAdjustment]) -> Decimal:
    """max(0, base + adds - subtracts), rounded to cents."""
    total = _money(base_amount)
    for adjustment in adjustments:
        total += adjustment.signed_amount
    return max(Decimal("0"), total).quantize(CENT, rounding=ROUND_HALF_UP)


def balance_due(
    total_amount,
    advance_payment=None,
    adjustments: Iterable[InvoiceAdjustment] = (),
) -> Decimal:
    """Amount still owed: the advance payment is subtracted before any custom adjustment."""
    ordered: list[InvoiceAdjustment] = []
    advance = _money(advance_payment)
    if advance > 0:
        ordered.append(
            InvoiceAdjustment(name="Advance payment", amount=advance, kind=AdjustmentKind.SUBTRACT)
        )
    ordered.extend(adjustments)
    return compute_total(total_amount, ordered)


def new_invoice_number(now: datetime.datetime) -> str:
    """INV- followed by the last 8 digits of the epoch milliseconds."""
    millis = int(now.timestamp() * 1000)
    return f"INV-{str(millis)[-8:]}"
