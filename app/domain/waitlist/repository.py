"""Waitlist repository - queue queries"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...constants import BookingStatus, RecordStatus, WaitlistStatus
from ...models_booking import Booking, WaitlistEntry
from ...shared.query_utils import apply_keyword, paginate


class WaitlistRepository:
    """Repository for waitlist database operations"""

    @staticmethod
    def _base(db: Session):
        return (
            db.query(WaitlistEntry)
            .options(joinedload(WaitlistEntry.branch), joinedload(WaitlistEntry.booking))
            .filter(WaitlistEntry.status != RecordStatus.DELETED.value)
        )

    @classmethod
    def get_entry(cls, db: Session, entry_id: int) -> Optional[WaitlistEntry]:
        return cls._base(db).filter(WaitlistEntry.id == entry_id).first()

    @staticmethod
    def count_active_ahead(db: Session, branch_id: int) -> int:
        """ACTIVE entries of the branch queued before a new one"""
        return db.query(WaitlistEntry).filter(
            WaitlistEntry.branch_id == branch_id,
            WaitlistEntry.waitlist_status == WaitlistStatus.ACTIVE.value,
            WaitlistEntry.status == RecordStatus.ACTIVE.value,
        ).count()

    @classmethod
    def list_entries(
        cls,
        db: Session,
        page: int,
        size: int,
        keyword: Optional[str] = None,
        customer_name: Optional[str] = None,
        customer_phone: Optional[str] = None,
        customer_email: Optional[str] = None,
        waitlist_status: Optional[str] = None,
        guest_count: Optional[int] = None,
        duration: Optional[int] = None,
        branch_id: Optional[int] = None,
    ) -> tuple[list[WaitlistEntry], int]:
        query = apply_keyword(
            cls._base(db),
            keyword,
            WaitlistEntry.customer_name,
            WaitlistEntry.customer_phone,
            WaitlistEntry.customer_email,
        )
        if customer_name:
            query = query.filter(WaitlistEntry.customer_name.ilike(f"%{customer_name.strip()}%"))
        if customer_phone:
            query = query.filter(WaitlistEntry.customer_phone.contains(customer_phone.replace(" ", "")))
        if customer_email:
            query = query.filter(WaitlistEntry.customer_email.ilike(f"%{customer_email.strip()}%"))
        if waitlist_status:
            query = query.filter(WaitlistEntry.waitlist_status == waitlist_status)
        if guest_count:
            query = query.filter(WaitlistEntry.guest_count == guest_count)
        if duration:
            query = query.filter(WaitlistEntry.duration == duration)
        if branch_id:
            query = query.filter(WaitlistEntry.branch_id == branch_id)

        query = query.order_by(WaitlistEntry.created_at.asc(), WaitlistEntry.id.asc())
        return paginate(query, page, size)

    @classmethod
    def get_waiting_entries(cls, db: Session, now: datetime) -> list[WaitlistEntry]:
        """ACTIVE, unexpired entries in queue order"""
        return (
            cls._base(db)
            .filter(
                WaitlistEntry.waitlist_status == WaitlistStatus.ACTIVE.value,
                WaitlistEntry.expires_at > now,
            )
            .order_by(WaitlistEntry.created_at.asc(), WaitlistEntry.id.asc())
            .all()
        )

    @classmethod
    def get_timed_out_entries(cls, db: Session, now: datetime) -> list[WaitlistEntry]:
        return (
            cls._base(db)
            .filter(
                WaitlistEntry.waitlist_status == WaitlistStatus.ACTIVE.value,
                WaitlistEntry.expires_at <= now,
            )
            .all()
        )

    @classmethod
    def get_notified_with_cancelled_booking(cls, db: Session) -> list[WaitlistEntry]:
        return (
            cls._base(db)
            .join(Booking, Booking.id == WaitlistEntry.booking_created_id)
            .filter(
                WaitlistEntry.waitlist_status == WaitlistStatus.NOTIFIED.value,
                Booking.booking_status == BookingStatus.CANCELLED.value,
            )
            .all()
        )
