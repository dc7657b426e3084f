"""Booking repository - database operations for table reservations"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload

from ...constants import RecordStatus
from ...models import DiningTable
from ...models_booking import BookedTable, Booking
from ...shared.query_utils import apply_keyword, apply_sort, paginate

BOOKING_SORT_COLUMNS = {
    "timeStart": Booking.time_start,
    "timeEnd": Booking.time_end,
    "createdAt": Booking.created_at,
    "customerName": Booking.customer_name,
    "totalDeposit": Booking.total_deposit,
    "bookingStatus": Booking.booking_status,
    "guestCount": Booking.guest_count,
}


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def _with_details(query):
        return query.options(
            joinedload(Booking.branch),
            selectinload(Booking.booked_tables)
            .joinedload(BookedTable.table)
            .joinedload(DiningTable.table_type),
            joinedload(Booking.waitlist_entry),
        )

    @classmethod
    def get_booking(cls, db: Session, booking_id: int) -> Optional[Booking]:
        return (
            cls._with_details(db.query(Booking))
            .filter(Booking.id == booking_id, Booking.status != RecordStatus.DELETED.value)
            .first()
        )

    @staticmethod
    def add_booking(db: Session, booking: Booking) -> Booking:
        db.add(booking)
        db.flush()
        return booking

    @classmethod
    def list_bookings(
        cls,
        db: Session,
        page: int,
        size: int,
        keyword: Optional[str] = None,
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
        booking_status: Optional[str] = None,
        time_start: Optional[datetime] = None,
        time_end: Optional[datetime] = None,
        branch_id: Optional[int] = None,
        sort_by: Optional[str] = None,
    ) -> tuple[list[Booking], int]:
        query = cls._with_details(db.query(Booking)).filter(
            Booking.status != RecordStatus.DELETED.value
        )

        query = apply_keyword(query, keyword, Booking.customer_name, Booking.customer_phone)
        if customer_name:
            query = query.filter(Booking.customer_name.ilike(f"%{customer_name.strip()}%"))
        if customer_phone:
            query = query.filter(Booking.customer_phone.contains(customer_phone.replace(" ", "")))
        if booking_status:
            query = query.filter(Booking.booking_status == booking_status)
        if time_start:
            query = query.filter(Booking.time_start >= time_start)
        if time_end:
            query = query.filter(Booking.time_start <= time_end)
        if branch_id:
            query = query.filter(Booking.branch_id == branch_id)

        query = apply_sort(query, sort_by, BOOKING_SORT_COLUMNS, default="timeStart,desc")
        return paginate(query, page, size)
