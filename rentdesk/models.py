from datetime import date, datetime
from enum import Enum
from typing import Optional
from decimal import Decimal

from sqlalchemy import (
    String,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentdesk.database import Base
from rentdesk.domain.colors import color_of
from rentdesk.domain.interval import Interval
from rentdesk.domain.invoice import (
    AdjustmentKind,
    InvoiceAdjustment,
    balance_due as compute_balance_due,
)
from rentdesk.domain.reminders import BookingSnapshot, ReminderKind


class UserRole(str, Enum):
    OWNER = "owner"
    CLEANER = "cleaner"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    CANCELLED = "cancelled"


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String, unique=True, index=True)
    full_name: Mapped[str] = mapped_column(String)
    role: Mapped[UserRole] = mapped_column(SQLEnum(UserRole), default=UserRole.OWNER)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class UserSetting(Base):
    """Per-user key/value preferences (reminder lead times etc.)."""

    __tablename__ = "user_settings"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), primary_key=True)
    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[Optional[str]] = mapped_column(String, nullable=True)


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    name: Mapped[str] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    bookings: Mapped[list["Booking"]] = relationship(back_populates="rental_property")


class Booking(Base):
    __tablename__ = "bookings"
    # Ids are never reused: reminder state is keyed by booking id
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(primary_key=True)

    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)
    rental_property: Mapped["Property"] = relationship(back_populates="bookings")

    # Guest
    customer_name: Mapped[str] = mapped_column(String)
    customer_email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    customer_phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    # Stay (both days inclusive)
    check_in: Mapped[date] = mapped_column(Date, index=True)
    check_out: Mapped[date] = mapped_column(Date)
    check_in_time: Mapped[Optional[str]] = mapped_column(String, nullable=True)  # "HH:MM"
    check_out_time: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    # Money
    total_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    advance_payment: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False)

    notes: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    @property
    def interval(self) -> Interval:
        return Interval(self.check_in, self.check_out)

    @property
    def color(self) -> str:
        return color_of(self.customer_name)

    @property
    def balance_due(self) -> Decimal:
        return compute_balance_due(self.total_amount, self.advance_payment)

    def snapshot(self, property_name: str) -> BookingSnapshot:
        return BookingSnapshot(
            id=self.id,
            property_id=self.property_id,
            property_name=property_name,
            customer_name=self.customer_name,
            check_in=self.check_in,
            check_out=self.check_out,
            check_in_time=self.check_in_time,
            check_out_time=self.check_out_time,
        )


class Housekeeping(Base):
    __tablename__ = "housekeeping"

    id: Mapped[int] = mapped_column(primary_key=True)
    property_id: Mapped[int] = mapped_column(ForeignKey("properties.id"), index=True)
    booking_id: Mapped[int] = mapped_column(ForeignKey("bookings.id"), unique=True, index=True)
    is_clean: Mapped[bool] = mapped_column(Boolean, default=False)
    cleaned_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    cleaned_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    verified_by_owner: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Notification(Base):
    """A scheduled check-in / check-out reminder."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), index=True)
    booking_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("bookings.id"), nullable=True, index=True
    )
    kind: Mapped[ReminderKind] = mapped_column(SQLEnum(ReminderKind))
    title: Mapped[str] = mapped_column(String)
    message: Mapped[str] = mapped_column(String)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    # Naive UTC
    scheduled_for: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)
    dispatched_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Invoice(Base):
    __tablename__ = "invoices"

    id: Mapped[int] = mapped_column(primary_key=True)
    booking_id: Mapped[int] = mapped_column(ForeignKey("bookings.id"), unique=True, index=True)
    invoice_number: Mapped[str] = mapped_column(String, unique=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    total: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=0)
    status: Mapped[InvoiceStatus] = mapped_column(
        SQLEnum(InvoiceStatus), default=InvoiceStatus.DRAFT
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    adjustments: Mapped[list["InvoiceAdjustmentRow"]] = relationship(
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceAdjustmentRow.position",
        lazy="selectin",
    )
    booking: Mapped["Booking"] = relationship(lazy="selectin")

    @property
    def balance_due(self) -> Decimal:
        """Invoice amount less the booking's advance payment, then the adjustments."""
        return compute_balance_due(
            self.amount,
            self.booking.advance_payment,
            [row.as_adjustment() for row in self.adjustments],
        )


class InvoiceAdjustmentRow(Base):
    __tablename__ = "invoice_adjustments"

    id: Mapped[int] = mapped_column(primary_key=True)
    invoice_id: Mapped[int] = mapped_column(ForeignKey("invoices.id"), index=True)
    invoice: Mapped["Invoice"] = relationship(back_populates="adjustments")
    position: Mapped[int] = mapped_column()
    name: Mapped[str] = mapped_column(String)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    kind: Mapped[AdjustmentKind] = mapped_column(SQLEnum(AdjustmentKind))

    def as_adjustment(self) -> InvoiceAdjustment:
        return InvoiceAdjustment(id=self.id, name=self.name, amount=self.amount, kind=self.kind)
