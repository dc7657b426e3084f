"""Booking service - table reservations and their payment lifecycle"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import BOOKING_PAYMENT_WINDOW_MINUTES
from ...constants import BookingStatus, PaymentType, RecordStatus, WaitlistStatus
from ...models import DiningTable, User
from ...models_booking import BookedTable, Booking
from ...services.status_automation import (
    BOOKING_TRANSITIONS,
    WAITLIST_TRANSITIONS,
    change_status,
)
from ...shared.datetime_utils import utcnow
from ..branches.repository import BranchRepository
from .repository import BookingRepository
from .schemas import AdminBookingCreate, BookingCreate, PaymentStatusResponse

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    BookingStatus.BOOKED.value: "Waiting for deposit payment",
    BookingStatus.DEPOSIT_PAID.value: "Deposit received, your table is confirmed",
    BookingStatus.COMPLETED.value: "Booking completed",
    BookingStatus.CANCELLED.value: "Booking was cancelled",
}


class BookingService:
    """Service layer for table booking business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = BookingRepository()
        self.branch_repo = BranchRepository()

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def reserve_tables(
        self,
        tables: list[DiningTable],
        time_start: datetime,
        time_end: datetime,
        guest_count: int,
        customer_name: str,
        customer_phone: str,
        customer_email: Optional[str] = None,
        note: Optional[str] = None,
        payment_type: Optional[PaymentType] = None,
        created_by: Optional[int] = None,
    ) -> Booking:
        """
        Validate tables for the interval and add the booking to the session.

        Cash bookings are DEPOSIT_PAID straight away, every other booking waits
        BOOKED for its deposit until the payment window closes. The caller commits.
        """
        if not tables:
            raise HTTPException(status_code=400, detail="At least one table is required")

        branch_ids = {t.branch_id for t in tables}
        if len(branch_ids) > 1:
            raise HTTPException(status_code=400, detail="All tables must belong to the same branch")

        inactive = [t.name for t in tables if t.status != RecordStatus.ACTIVE.value]
        if inactive:
            raise HTTPException(
                status_code=400, detail=f"Table {', '.join(inactive)} is not available for booking"
            )

        busy = self.branch_repo.get_busy_table_ids(
            self.db, time_start, time_end, table_ids=[t.id for t in tables]
        )
        if busy:
            names = ", ".join(t.name for t in tables if t.id in busy)
            raise HTTPException(
                status_code=409, detail=f"Table {names} is already booked for the selected time"
            )

        capacity = sum(t.capacity for t in tables)
        if capacity < guest_count:
            raise HTTPException(
                status_code=400,
                detail=f"Selected tables seat {capacity} guests but {guest_count} were requested",
            )

        now = utcnow()
        paid_in_cash = payment_type == PaymentType.CASH
        booked_tables = [
            BookedTable(table_id=t.id, deposit=t.table_type.deposit if t.table_type else 0)
            for t in tables
        ]
        booking = Booking(
            branch_id=branch_ids.pop(),
            time_start=time_start,
            time_end=time_end,
            guest_count=guest_count,
            note=note,
            customer_name=customer_name,
            customer_phone=customer_phone,
            customer_email=customer_email,
            total_deposit=sum(bt.deposit for bt in booked_tables),
            booking_status=(
                BookingStatus.DEPOSIT_PAID.value if paid_in_cash else BookingStatus.BOOKED.value
            ),
            payment_type=payment_type.value if payment_type else None,
            expire_time=None if paid_in_cash else now + timedelta(minutes=BOOKING_PAYMENT_WINDOW_MINUTES),
            deposit_paid_at=now if paid_in_cash else None,
            booked_tables=booked_tables,
            created_by=created_by,
        )
        return self.repo.add_booking(self.db, booking)

    def _create(self, data: BookingCreate, payment_type: Optional[PaymentType], user: Optional[User]) -> Booking:
        if data.startTime <= utcnow():
            raise HTTPException(status_code=400, detail="Booking time must be in the future")

        tables = self.branch_repo.get_tables_by_ids(self.db, data.tableId)
        missing = set(data.tableId) - {t.id for t in tables}
        if missing:
            raise HTTPException(
                status_code=404, detail=f"Table not found: {', '.join(str(i) for i in sorted(missing))}"
            )

        booking = self.reserve_tables(
            tables=tables,
            time_start=data.startTime,
            time_end=data.startTime + timedelta(hours=data.duration),
            guest_count=data.guests,
            customer_name=data.customerName,
            customer_phone=data.customerPhone,
            customer_email=data.customerEmail,
            note=data.notes,
            payment_type=payment_type,
            created_by=user.id if user else None,
        )
        self.db.commit()
        logger.info(
            f"✅ Booking {booking.id} created for {booking.customer_name} "
            f"({booking.booking_status}, deposit {booking.total_deposit})"
        )
        return self.get_booking(booking.id)

    def create_guest_booking(self, data: BookingCreate) -> Booking:
        logger.info(f"📥 Guest booking request for tables {data.tableId} at {data.startTime}")
        return self._create(data, PaymentType.BANKING, None)

    def create_admin_booking(self, data: AdminBookingCreate, user: User) -> Booking:
        logger.info(f"📥 Staff booking by {user.username} ({data.paymentType.value})")
        return self._create(data, data.paymentType, user)

    # ------------------------------------------------------------------
    # Payment and lifecycle
    # ------------------------------------------------------------------

    def check_payment_status(self, booking_id: int) -> PaymentStatusResponse:
        booking = self.get_booking(booking_id)
        now = utcnow()
        awaiting_payment = booking.booking_status == BookingStatus.BOOKED.value
        expired = bool(awaiting_payment and booking.expire_time and booking.expire_time <= now)

        minutes_left = 0
        if awaiting_payment and booking.expire_time and not expired:
            minutes_left = int((booking.expire_time - now).total_seconds() // 60)

        return PaymentStatusResponse(
            bookingId=booking.id,
            customerName=booking.customer_name,
            customerPhone=booking.customer_phone,
            bookingStatus=booking.booking_status,
            totalDeposit=booking.total_deposit,
            expireTime=booking.expire_time,
            timeStart=booking.time_start,
            timeEnd=booking.time_end,
            expired=expired,
            paymentRequired=awaiting_payment and not expired,
            statusMessage=(
                "Payment window has expired"
                if expired
                else STATUS_MESSAGES.get(booking.booking_status, booking.booking_status)
            ),
            minutesUntilExpiry=minutes_left,
        )

    def confirm_deposit(self, booking_id: int, user: Optional[User] = None) -> Booking:
        booking = self.get_booking(booking_id)
        now = utcnow()
        if (
            booking.booking_status == BookingStatus.BOOKED.value
            and booking.expire_time
            and booking.expire_time <= now
        ):
            raise HTTPException(status_code=400, detail="Payment window has expired")

        change_status(booking, "booking_status", BOOKING_TRANSITIONS, BookingStatus.DEPOSIT_PAID, "booking")
        booking.deposit_paid_at = now
        booking.updated_by = user.id if user else None

        entry = booking.waitlist_entry
        if entry and entry.waitlist_status == WaitlistStatus.NOTIFIED.value:
            change_status(entry, "waitlist_status", WAITLIST_TRANSITIONS, WaitlistStatus.CONVERTED, "waitlist entry")

        self.db.commit()
        return self.get_booking(booking_id)

    def _move(self, booking_id: int, new_status: BookingStatus, user: User) -> Booking:
        booking = self.get_booking(booking_id)
        change_status(booking, "booking_status", BOOKING_TRANSITIONS, new_status, "booking")
        booking.updated_by = user.id
        self.db.commit()
        return self.get_booking(booking_id)

    def complete_booking(self, booking_id: int, user: User) -> Booking:
        return self._move(booking_id, BookingStatus.COMPLETED, user)

    def cancel_booking(self, booking_id: int, user: User) -> Booking:
        return self._move(booking_id, BookingStatus.CANCELLED, user)

    def list_bookings(self, page: int, size: int, **filters) -> tuple[list[Booking], int]:
        return self.repo.list_bookings(self.db, page, size, **filters)
