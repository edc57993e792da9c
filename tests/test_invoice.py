"""
Unit tests for invoice totals
"""
from datetime import datetime, timezone
from decimal import Decimal

from rentdesk.domain.invoice import (
    AdjustmentKind,
    InvoiceAdjustment,
    balance_due,
    compute_total,
    new_invoice_number,
)


def add(name, amount):
    return InvoiceAdjustment(name=name, amount=Decimal(amount), kind=AdjustmentKind.ADD)


def subtract(name, amount):
    return InvoiceAdjustment(name=name, amount=Decimal(amount), kind=AdjustmentKind.SUBTRACT)


class TestComputeTotal:
    def test_no_adjustments(self):
        assert compute_total(Decimal("100"), []) == Decimal("100.00")

    def test_adds_and_subtracts(self):
        total = compute_total(Decimal("100"), [add("Cleaning fee", "20"), subtract("Discount", "15.50")])
        assert total == Decimal("104.50")

    def test_clamped_at_zero(self):
        total = compute_total(Decimal("100"), [add("Cleaning fee", "20"), subtract("Damage deposit refund", "150")])
        assert total == Decimal("0.00")

    def test_missing_base_counts_as_zero(self):
        assert compute_total(None, [add("Late checkout", "30")]) == Decimal("30.00")

    def test_never_negative(self):
        for base in ["0", "10", "99.99"]:
            assert compute_total(Decimal(base), [subtract("Refund", "100")]) >= 0

    def test_rounds_half_up_to_cents(self):
        assert compute_total(Decimal("10.005"), []) == Decimal("10.01")


class TestBalanceDue:
    def test_advance_subtracted(self):
        assert balance_due(Decimal("500"), Decimal("100")) == Decimal("400.00")

    def test_no_advance(self):
        assert balance_due(Decimal("500")) == Decimal("500.00")

    def test_advance_applied_before_adjustments(self):
        assert balance_due(Decimal("500"), Decimal("100"), [add("Pet fee", "25")]) == Decimal("425.00")

    def test_no_total(self):
        assert balance_due(None, None) == Decimal("0.00")


def test_invoice_number_uses_last_eight_millisecond_digits():
    now = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)
    millis = str(int(now.timestamp() * 1000))
    assert new_invoice_number(now) == f"INV-{millis[-8:]}"
    assert len(new_invoice_number(now)) == 12
