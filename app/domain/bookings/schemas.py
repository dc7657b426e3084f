"""Booking domain schemas - table reservations"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...constants import PaymentType
from ...shared.datetime_utils import to_naive_utc
from ...shared.validators import validate_customer_name, validate_email, validate_phone


class BookingCreate(BaseModel):
    """Guest table booking"""

    startTime: datetime
    duration: int = Field(..., ge=1, le=12)  # hours
    guests: int = Field(..., ge=1)
    notes: Optional[str] = Field(None, max_length=500)
    tableId: list[int] = Field(..., min_length=1)
    customerName: str
    customerPhone: str
    customerEmail: Optional[str] = None

    @field_validator("startTime")
    @classmethod
    def normalize_start(cls, v):
        return to_naive_utc(v)

    @field_validator("customerName")
    @classmethod
    def check_name(cls, v):
        return validate_customer_name(v)

    @field_validator("customerPhone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("customerEmail")
    @classmethod
    def check_email(cls, v):
        return validate_email(v) or None

    @field_validator("tableId")
    @classmethod
    def unique_tables(cls, v):
        return list(dict.fromkeys(v))


class AdminBookingCreate(BookingCreate):
    """Booking entered by staff, cash deposits are taken on the spot"""

    paymentType: PaymentType = PaymentType.BANKING


class BookedTableResponse(BaseModel):
    tableId: int
    tableName: Optional[str] = None
    tableType: Optional[str] = None
    floorName: Optional[str] = None
    capacity: Optional[int] = None
    deposit: float


class BookingResponse(BaseModel):
    id: int
    branchId: int
    branchName: Optional[str] = None
    timeStart: datetime
    timeEnd: datetime
    guestCount: int
    note: Optional[str] = None
    customerName: str
    customerPhone: str
    customerEmail: Optional[str] = None
    totalDeposit: float
    expireTime: Optional[datetime] = None
    bookingStatus: str
    paymentType: Optional[str] = None
    depositPaidAt: Optional[datetime] = None
    bookedTables: list[BookedTableResponse] = []
    waitlistId: Optional[int] = None
    status: str
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_model(cls, booking) -> "BookingResponse":
        tables = []
        for booked in booking.booked_tables:
            table = booked.table
            tables.append(
                BookedTableResponse(
                    tableId=booked.table_id,
                    tableName=table.name if table else None,
                    tableType=table.table_type.name if table and table.table_type else None,
                    floorName=table.floor_name if table else None,
                    capacity=table.capacity if table else None,
                    deposit=booked.deposit,
                )
            )
        return cls(
            id=booking.id,
            branchId=booking.branch_id,
            branchName=booking.branch.name if booking.branch else None,
            timeStart=booking.time_start,
            timeEnd=booking.time_end,
            guestCount=booking.guest_count,
            note=booking.note,
            customerName=booking.customer_name,
            customerPhone=booking.customer_phone,
            customerEmail=booking.customer_email,
            totalDeposit=booking.total_deposit,
            expireTime=booking.expire_time,
            bookingStatus=booking.booking_status,
            paymentType=booking.payment_type,
            depositPaidAt=booking.deposit_paid_at,
            bookedTables=tables,
            waitlistId=booking.waitlist_entry.id if booking.waitlist_entry else None,
            status=booking.status,
            createdAt=booking.created_at,
            updatedAt=booking.updated_at,
        )


class PaymentStatusResponse(BaseModel):
    bookingId: int
    customerName: str
    customerPhone: str
    bookingStatus: str
    totalDeposit: float
    expireTime: Optional[datetime] = None
    timeStart: datetime
    timeEnd: datetime
    expired: bool
    paymentRequired: bool
    statusMessage: str
    minutesUntilExpiry: int
