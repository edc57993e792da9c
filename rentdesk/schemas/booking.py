from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class BookingBase(BaseModel):
    property_id: int
    customer_name: str = Field(min_length=1)
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    check_in: date
    check_out: date
    check_in_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    check_out_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    total_amount: Optional[Decimal] = Field(default=None, ge=0)
    advance_payment: Optional[Decimal] = Field(default=None, gt=0)
    is_paid: bool = False
    notes: Optional[str] = None

    @model_validator(mode="after")
    def advance_within_total(self):
        if (
            self.advance_payment is not None
            and self.total_amount is not None
            and self.advance_payment > self.total_amount
        ):
            raise ValueError("Advance payment cannot be greater than the total amount")
        return self


class BookingCreate(BookingBase):
    pass


class BookingUpdate(BaseModel):
    property_id: Optional[int] = None
    customer_name: Optional[str] = Field(default=None, min_length=1)
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    check_in_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    check_out_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    total_amount: Optional[Decimal] = Field(default=None, ge=0)
    advance_payment: Optional[Decimal] = Field(default=None, gt=0)
    is_paid: Optional[bool] = None
    notes: Optional[str] = None

    @field_validator("property_id", "customer_name", "check_in", "check_out", "is_paid")
    @classmethod
    def not_null(cls, value):
        # Omit the field to keep the current value; null is not a valid value
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class AvailabilityQuery(BaseModel):
    property_id: int
    check_in: date
    check_out: date
    exclude_booking_id: Optional[int] = None


class BookingOut(BookingBase):
    id: int
    color: str
    balance_due: Decimal
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConflictOut(BaseModel):
    message: str
    booking: BookingOut
